"""Runtime configuration and fixed tables for DevSnapshot."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

SCHEMA_VERSION = "1.0"
SNAPSHOT_EXTENSION = ".devsnap"
METADATA_FILENAME = "metadata.json"

DEVPACK_SENTINEL_PREFIX = "#DEVPACK:"
LEGACY_DEVPACK_SENTINEL = "#DEVPACK_INSTALL"
LEGACY_DEVPACK_FILENAME = "dependencies.devpack"

DEFAULT_SANDBOX_DIR = ".devsnap_sandbox"
DEFAULT_SECRETS_FILE = ".env"

# Directory (or file) names never archived. ".devsnap" covers the
# housekeeping directory and DEFAULT_SANDBOX_DIR the replay sandbox; ".env"
# keeps local secrets out of snapshots.
IGNORED_NAMES = frozenset({
    ".git",
    "node_modules",
    "__pycache__",
    ".devsnap",
    DEFAULT_SANDBOX_DIR,
    ".env",
    "dist",
    "build",
})

# The detection walk also prunes vendored Go/PHP dependencies.
DETECTION_IGNORED_NAMES = IGNORED_NAMES | {"vendor"}

CODE_EXTENSIONS = frozenset({".js", ".ts", ".jsx", ".tsx", ".go", ".py"})

_TRUE_VALUES = {"1", "true", "yes", "on"}
_LOG_LEVELS = {"debug", "info", "warn", "warning", "error"}


def env_flag(name: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return ``True`` when environment variable *name* holds a truthy value."""
    source = os.environ if environ is None else environ
    value = source.get(name)
    if value is None:
        return False
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class DevsnapConfig:
    """Settings shared by the ``create``, ``start`` and ``inspect`` commands."""

    sandbox_dir: Path = Path(DEFAULT_SANDBOX_DIR)
    secrets_file: str = DEFAULT_SECRETS_FILE
    log_level: str = "info"
    manual: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DevsnapConfig":
        """Build a config from defaults overridden by ``DEVSNAP_*`` variables."""
        source = os.environ if environ is None else environ
        config = cls()

        sandbox = source.get("DEVSNAP_SANDBOX_DIR")
        if sandbox:
            config = replace(config, sandbox_dir=Path(sandbox))

        secrets = source.get("DEVSNAP_SECRETS_FILE")
        if secrets:
            config = replace(config, secrets_file=secrets)

        level = (source.get("DEVSNAP_LOG_LEVEL") or "").strip().lower()
        if level in _LOG_LEVELS:
            config = replace(config, log_level=level)

        return config

    def with_overrides(self, **overrides) -> "DevsnapConfig":
        """Return a copy with every non-``None`` override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if "sandbox_dir" in values:
            values["sandbox_dir"] = Path(values["sandbox_dir"])
        return replace(self, **values)


__all__ = [
    "SCHEMA_VERSION",
    "SNAPSHOT_EXTENSION",
    "METADATA_FILENAME",
    "DEVPACK_SENTINEL_PREFIX",
    "LEGACY_DEVPACK_SENTINEL",
    "LEGACY_DEVPACK_FILENAME",
    "DEFAULT_SANDBOX_DIR",
    "DEFAULT_SECRETS_FILE",
    "IGNORED_NAMES",
    "DETECTION_IGNORED_NAMES",
    "CODE_EXTENSIONS",
    "DevsnapConfig",
    "env_flag",
]
