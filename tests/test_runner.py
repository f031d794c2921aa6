"""
Tests for devsnap.runner.runner module.

Commands are recorded by a fake executor; nothing is actually run.
"""

import pytest

from devsnap.errors import CommandFailedError
from devsnap.metadata import EnvironmentConfig, LifecycleCommands, SnapshotMetadata
from devsnap.runner import Runner, StaticPrompter, run_snapshot
from devsnap.runner.preflight import probe_for


def _meta(*environments, commands=None, required_vars=None):
    return SnapshotMetadata.new(
        "demo",
        environments=list(environments),
        commands=commands,
        required_vars=required_vars,
    )


def _runner(sandbox, meta, executor, prompter=None, **options):
    return Runner(
        sandbox,
        meta,
        executor=executor,
        prompter=prompter or StaticPrompter(),
        environ={},
        **options,
    )


class TestPreflight:
    """Test runtime probes"""

    def test_probe_by_family(self):
        assert probe_for(EnvironmentConfig(type="node (TypeScript)")) == ("node", "-v")
        assert probe_for(EnvironmentConfig(type="angular")) == ("node", "-v")
        assert probe_for(EnvironmentConfig(type="generic")) is None

    def test_missing_runtime_skips_environment(self, project, make_executor):
        """Test that a failed probe skips only that environment"""
        executor = make_executor(statuses={"go version": 127})
        meta = _meta(
            EnvironmentConfig(type="go", setup=["go mod download"], run="go run ."),
            EnvironmentConfig(type="python", run="python main.py"),
        )

        report = _runner(project, meta, executor).run()

        assert executor.calls == ["go version", "python --version", "python main.py"]
        assert report.environments[0].runtime_available is False
        assert report.environments[1].ran is True

    def test_probes_are_captured(self, project, executor):
        captured = []

        def run(argv, cwd, *, capture=False, env=None):
            captured.append((" ".join(argv), capture))
            return 0

        executor.run = run
        _runner(project, _meta(EnvironmentConfig(type="rust", run="cargo run")), executor).run()

        assert captured == [("cargo --version", True), ("cargo run", False)]


class TestSetupAndRun:
    """Test setup and run phases"""

    def test_environments_run_in_order(self, project, executor):
        meta = _meta(
            EnvironmentConfig(type="go", setup=["go mod download"], run="go run ."),
            EnvironmentConfig(type="node", setup=["npm install"], run="npm start"),
        )

        _runner(project, meta, executor).run()

        assert executor.non_probe_calls == ["go mod download", "go run .", "npm install", "npm start"]

    def test_setup_failure_continues(self, project, make_executor):
        """Test that a failing setup step is soft"""
        executor = make_executor(statuses={"npm install": 1})
        meta = _meta(EnvironmentConfig(type="node", setup=["npm install", "npm run build"], run="npm start"))

        report = _runner(project, meta, executor).run()

        assert executor.non_probe_calls == ["npm install", "npm run build", "npm start"]
        assert report.environments[0].setup_failures == ["npm install"]
        assert report.environments[0].ran is True

    def test_devpack_setup_step(self, project, devpack_file, executor):
        devpack_file(project, "node.devpack", "node", {"express": "4.18.2", "axios": "latest"})
        meta = _meta(EnvironmentConfig(type="node", setup=["#DEVPACK:node.devpack"], run="node index.js"))

        _runner(project, meta, executor).run()

        assert executor.non_probe_calls == ["npm install express@4.18.2 axios", "node index.js"]

    def test_missing_devpack_is_soft(self, project, executor):
        meta = _meta(EnvironmentConfig(type="go", setup=["#DEVPACK:go.devpack"], run="go run ."))

        report = _runner(project, meta, executor).run()

        assert executor.non_probe_calls == ["go run ."]
        assert report.environments[0].setup_failures == []

    def test_malformed_devpack_is_soft(self, project, executor):
        (project / "go.devpack").write_text("{")
        meta = _meta(EnvironmentConfig(type="go", setup=["#DEVPACK:go.devpack"], run="go run ."))

        report = _runner(project, meta, executor).run()

        assert report.environments[0].setup_failures == ["#DEVPACK:go.devpack"]
        assert executor.non_probe_calls == ["go run ."]

    def test_undecodable_devpack_is_soft(self, project, executor):
        """Test that later setup steps still run after an unreadable devpack"""
        (project / "go.devpack").write_bytes(b"\xff\xfe")
        meta = _meta(EnvironmentConfig(type="go", setup=["#DEVPACK:go.devpack", "echo after"], run="go run ."))

        report = _runner(project, meta, executor).run()

        assert report.environments[0].setup_failures == ["#DEVPACK:go.devpack"]
        assert executor.non_probe_calls == ["echo after", "go run ."]

    def test_declined_run(self, project, executor):
        """Test that declining a run step skips it without failing"""
        meta = _meta(EnvironmentConfig(type="python", setup=["pip install flask"], run="python app.py"))

        report = _runner(project, meta, executor, prompter=StaticPrompter(answer=False)).run()

        assert executor.non_probe_calls == ["pip install flask"]
        assert report.environments[0].declined is True
        assert report.environments[0].ran is False

    def test_run_failure_is_fatal(self, project, make_executor):
        executor = make_executor(statuses={"go run .": 2})
        meta = _meta(
            EnvironmentConfig(type="go", run="go run ."),
            EnvironmentConfig(type="python", run="python main.py"),
        )

        with pytest.raises(CommandFailedError) as exc_info:
            _runner(project, meta, executor).run()

        assert exc_info.value.returncode == 2
        assert exc_info.value.phase == "run"
        assert "python main.py" not in executor.calls

    def test_generic_environment_runs_nothing(self, project, executor):
        report = _runner(project, _meta(), executor).run()

        assert executor.calls == []
        assert report.environments[0].type == "generic"


class TestManualMode:
    """Test confirmation of setup steps"""

    def test_setup_steps_not_confirmed_by_default(self, project, executor):
        prompter = StaticPrompter()
        meta = _meta(EnvironmentConfig(type="go", setup=["go mod download"], run="go run ."))

        _runner(project, meta, executor, prompter=prompter).run()

        assert prompter.questions == ["Run 'go run .' for go?"]

    def test_manual_confirms_each_step(self, project, executor):
        prompter = StaticPrompter()
        meta = _meta(EnvironmentConfig(type="go", setup=["go mod download"], run="go run ."))

        _runner(project, meta, executor, prompter=prompter, manual=True).run()

        assert prompter.questions == [
            "Setup step: 'go mod download'. Continue?",
            "Run 'go run .' for go?",
        ]

    def test_manual_decline_skips_step(self, project, executor):
        meta = _meta(EnvironmentConfig(type="go", setup=["go mod download"], run="go run ."))

        report = _runner(project, meta, executor, prompter=StaticPrompter(answer=False), manual=True).run()

        assert executor.non_probe_calls == []
        assert report.environments[0].skipped_steps == ["go mod download"]


class TestSecretsPhase:
    """Test that secrets are prepared before any command"""

    def test_secrets_exported_to_commands(self, project, executor):
        (project / ".env").write_text("API_KEY=abc\n")
        seen = []
        original = executor.run

        def run(argv, cwd, *, capture=False, env=None):
            seen.append(dict(env or {}))
            return original(argv, cwd, capture=capture, env=env)

        executor.run = run
        meta = _meta(EnvironmentConfig(type="go", run="go run ."), required_vars=["API_KEY", "TOKEN"])

        report = _runner(project, meta, executor).run()

        assert all(env.get("API_KEY") == "abc" for env in seen)
        assert report.blank_secrets == ["TOKEN"]
        assert "TOKEN=" in (project / ".env").read_text()


class TestLegacyCommands:
    """Test global commands from older snapshots"""

    def test_legacy_commands_run_last(self, project, executor):
        meta = _meta(
            EnvironmentConfig(type="go", run="go run ."),
            commands=LifecycleCommands(setup=["make deps"], run="./server"),
        )

        report = _runner(project, meta, executor).run()

        assert executor.non_probe_calls == ["go run .", "make deps", "./server"]
        assert report.legacy_ran is True

    def test_legacy_setup_failure_aborts(self, project, make_executor):
        executor = make_executor(statuses={"make deps": 1})
        meta = _meta(commands=LifecycleCommands(setup=["make deps"], run="./server"))

        with pytest.raises(CommandFailedError):
            _runner(project, meta, executor).run()

        assert "./server" not in executor.calls

    def test_legacy_devpack_sentinel(self, project, devpack_file, executor):
        devpack_file(project, "dependencies.devpack", "", {"express": "latest"})
        meta = _meta(commands=LifecycleCommands(setup=["#DEVPACK_INSTALL"], run="npm start"))

        run_snapshot(project, meta, executor=executor, prompter=StaticPrompter(), environ={})

        assert executor.non_probe_calls == ["npm install express", "npm start"]
