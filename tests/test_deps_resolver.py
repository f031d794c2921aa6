"""
Tests for devsnap.deps.resolver and devsnap.deps.devpack modules.

Toolchain queries are replaced with a fake so no npm, go or pip is needed;
run_query itself is exercised against the running interpreter.
"""

import json
import sys

import pytest

from devsnap.deps import (
    UNCONSTRAINED,
    DependencyResolver,
    Ecosystem,
    devpack_filename,
    load_devpack,
    summarize_deps,
    write_devpack,
)
from devsnap.deps.resolver import resolve_go_version, resolve_node_version, resolve_python_version, run_query
from devsnap.errors import DevpackError


class TestVersionLookups:
    """Test per-ecosystem version lookups"""

    def test_node_prefers_installed_package_json(self, project, make_files, fake_query):
        """Test that node_modules wins over npm list"""
        make_files(project, {"node_modules/express/package.json": json.dumps({"version": "4.18.2"})})

        assert resolve_node_version(project, "express", fake_query) == "4.18.2"
        assert fake_query.calls == []

    def test_node_falls_back_to_npm_list(self, project, fake_query):
        fake_query.answers["npm list axios --json --depth=0"] = json.dumps(
            {"dependencies": {"axios": {"version": "1.6.0"}}}
        )
        assert resolve_node_version(project, "axios", fake_query) == "1.6.0"

    def test_node_unresolved_is_latest(self, project, fake_query):
        fake_query.answers["npm list axios --json --depth=0"] = "not json"
        assert resolve_node_version(project, "axios", fake_query) == UNCONSTRAINED

    def test_go_version(self, fake_query):
        fake_query.answers["go list -m -f {{.Version}} github.com/foo/bar"] = "v1.2.3\n"
        assert resolve_go_version("github.com/foo/bar", fake_query) == "v1.2.3"
        assert resolve_go_version("github.com/other/mod", fake_query) == UNCONSTRAINED

    def test_python_version(self, fake_query):
        fake_query.answers["pip show requests"] = "Name: requests\nVersion: 2.31.0\nSummary: HTTP\n"
        assert resolve_python_version("requests", fake_query) == "2.31.0"
        assert resolve_python_version("flask", fake_query) == UNCONSTRAINED


class TestRunQuery:
    """Test run_query against real processes"""

    def test_returns_stdout(self):
        assert run_query([sys.executable, "-c", "print('v1')"]).strip() == "v1"

    def test_undecodable_output_is_replaced(self):
        """Test that non UTF-8 toolchain output never raises"""
        output = run_query([sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'Version: \\xff')"])
        assert output.startswith("Version: ")

    def test_nonzero_exit(self):
        assert run_query([sys.executable, "-c", "raise SystemExit(3)"]) is None

    def test_missing_tool(self):
        assert run_query(["devsnap-no-such-tool-xyz"]) is None


class TestDependencyResolver:
    """Test DependencyResolver"""

    def test_extract_only_reads_matching_files(self, project, make_files, fake_query):
        """Test that each ecosystem scans its own file types"""
        make_files(project, {
            "main.go": 'import "github.com/foo/bar"\n',
            "notes.py": 'import "github.com/not/python"\nimport requests\n',
        })
        files = sorted(project.iterdir())
        resolver = DependencyResolver(project, query=fake_query)

        assert resolver.extract(files, Ecosystem.GO) == ["github.com/foo/bar"]
        assert resolver.extract(files, Ecosystem.PYTHON) == ["requests"]

    def test_python_local_modules_excluded(self, project, make_files, fake_query):
        """Test that imports of the project's own modules are dropped"""
        make_files(project, {
            "app.py": "import helpers\nfrom models import User\nimport flask\n",
            "helpers.py": "",
            "models/__init__.py": "",
        })
        files = [project / "app.py", project / "helpers.py", project / "models" / "__init__.py"]

        assert DependencyResolver(project, query=fake_query).extract(files, "python") == ["flask"]

    def test_project_directory_name_is_not_local(self, tmp_path, make_files, fake_query):
        """Test that a root folder named like a package keeps that import"""
        root = tmp_path / "flask"
        make_files(root, {"app.py": "import flask\nimport models\n", "models/user.py": ""})
        files = [root / "app.py", root / "models" / "user.py"]

        assert DependencyResolver(root, query=fake_query).extract(files, "python") == ["flask"]

    def test_generate_devpack_writes_file(self, project, make_files, fake_query):
        make_files(project, {"main.go": 'import (\n    "fmt"\n    "github.com/foo/bar"\n)\n'})
        fake_query.answers["go list -m -f {{.Version}} github.com/foo/bar"] = "v0.9.0"
        resolver = DependencyResolver(project, query=fake_query)

        filename = resolver.generate_devpack([project / "main.go"], Ecosystem.GO)

        assert filename == "go.devpack"
        data = json.loads((project / "go.devpack").read_text())
        assert data == {"type": "go", "dependencies": {"github.com/foo/bar": "v0.9.0"}}

    def test_generate_devpack_nothing_found(self, project, make_files, fake_query):
        """Test that no file is written without external imports"""
        make_files(project, {"main.go": 'import "fmt"\n'})

        result = DependencyResolver(project, query=fake_query).generate_devpack([project / "main.go"], "go")

        assert result is None
        assert not (project / "go.devpack").exists()


class TestDevpackFiles:
    """Test devpack read/write helpers"""

    def test_write_sorts_dependencies(self, project):
        path = write_devpack(project, "node", {"zod": "latest", "axios": "1.0.0"}, "node.devpack")
        assert list(json.loads(path.read_text())["dependencies"]) == ["axios", "zod"]

    def test_load_devpack(self, project, devpack_file):
        path = devpack_file(project, "python.devpack", "python", {"flask": "3.0.0"})
        pack = load_devpack(path)
        assert pack.type == "python"
        assert pack.dependencies == {"flask": "3.0.0"}

    def test_load_missing_devpack(self, project):
        with pytest.raises(FileNotFoundError):
            load_devpack(project / "missing.devpack")

    def test_load_malformed_devpack(self, project):
        path = project / "bad.devpack"
        path.write_text("{not json")
        with pytest.raises(DevpackError):
            load_devpack(path)

    def test_load_undecodable_devpack(self, project):
        """Test that invalid UTF-8 is reported as a devpack error"""
        path = project / "go.devpack"
        path.write_bytes(b'{"type": "go", "dependencies": {"\xff": "latest"}}')
        with pytest.raises(DevpackError):
            load_devpack(path)

    def test_filenames(self):
        assert devpack_filename(Ecosystem.NODE) == "node.devpack"
        assert devpack_filename("python") == "python.devpack"

    def test_summarize_deps(self):
        assert summarize_deps([]) == ""
        assert summarize_deps(["a", "b"]) == "a, b"
        assert summarize_deps(["a", "b", "c", "d"]) == "a, b, c, ..."
