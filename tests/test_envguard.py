"""
Tests for devsnap.envguard module.
"""

from devsnap.envguard import NOISE_VARS, find_env_vars, scan_for_env_vars


class TestFindEnvVars:
    """Test find_env_vars"""

    def test_node_forms(self):
        source = "const a = process.env.API_KEY;\nconst b = process.env['DB_HOST'];\n"
        assert find_env_vars(source) == ["API_KEY", "DB_HOST"]

    def test_go_forms(self):
        source = 'a := os.Getenv("PORT")\nb, ok := os.LookupEnv("TOKEN")\n'
        assert find_env_vars(source) == ["PORT", "TOKEN"]

    def test_python_forms(self):
        source = (
            'a = os.environ.get("SECRET_KEY")\n'
            "b = os.getenv('REDIS_URL')\n"
            'c = os.environ["STRIPE_KEY"]\n'
        )
        assert find_env_vars(source) == ["SECRET_KEY", "REDIS_URL", "STRIPE_KEY"]

    def test_order_follows_position(self):
        """Test that mixed forms are reported in source order"""
        source = 'os.environ["B"]\nprocess.env.A\nos.Getenv("C")\n'
        assert find_env_vars(source) == ["B", "A", "C"]

    def test_lowercase_names_ignored(self):
        assert find_env_vars("process.env.apiKey") == []


class TestScanForEnvVars:
    """Test scan_for_env_vars"""

    def test_dedupes_and_drops_noise(self, project, make_files):
        make_files(project, {
            "a.js": "process.env.NODE_ENV; process.env.PATH; process.env.API_KEY;",
            "b.py": 'os.getenv("API_KEY"); os.getenv("OTHER")',
        })

        result = scan_for_env_vars([project / "a.js", project / "b.py"])

        assert result == ["API_KEY", "OTHER"]
        assert not NOISE_VARS & set(result)

    def test_unreadable_file_skipped(self, project):
        assert scan_for_env_vars([project / "missing.js"]) == []
