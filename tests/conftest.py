import json
from pathlib import Path

import pytest

from devsnap.runner import CommandExecutor


class RecordingExecutor(CommandExecutor):
    """Executor that records every invocation instead of running it."""

    def __init__(self, statuses=None, default=0):
        # Maps a command string (space joined argv) to the status it returns.
        self.statuses = dict(statuses or {})
        self.default = default
        self.calls = []

    def run(self, argv, cwd, *, capture=False, env=None):
        command = " ".join(argv)
        self.calls.append(command)
        return self.statuses.get(command, self.default)

    @property
    def non_probe_calls(self):
        probes = {"go version", "node -v", "python --version", "cargo --version", "mvn -version", "php -v"}
        return [call for call in self.calls if call not in probes]


class FakeQuery:
    """Stands in for toolchain queries; answers from a dict keyed by argv."""

    def __init__(self, answers=None):
        self.answers = dict(answers or {})
        self.calls = []

    def __call__(self, argv, cwd=None):
        command = " ".join(argv)
        self.calls.append(command)
        return self.answers.get(command)


def write_files(root: Path, files: dict) -> Path:
    """Create *files* (relative path -> text) under *root*."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def fake_query():
    return FakeQuery()


@pytest.fixture
def project(tmp_path):
    """Directory for building a throwaway project tree."""
    root = tmp_path / "demo"
    root.mkdir()
    return root


@pytest.fixture
def devpack_file():
    def _write(directory: Path, filename: str, type_: str, dependencies: dict) -> Path:
        path = directory / filename
        path.write_text(json.dumps({"type": type_, "dependencies": dependencies}), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def make_files():
    return write_files


@pytest.fixture
def make_executor():
    return RecordingExecutor
