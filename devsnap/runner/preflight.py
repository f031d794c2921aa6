"""Runtime availability checks run before an environment is set up."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from ..errors import PreflightError
from ..metadata import EnvironmentConfig
from .execution import CommandExecutor

logger = logging.getLogger(__name__)

PROBES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "go": ("go", "version"),
    "node": ("node", "-v"),
    "angular": ("node", "-v"),
    "python": ("python", "--version"),
    "rust": ("cargo", "--version"),
    "java": ("mvn", "-version"),
    "php": ("php", "-v"),
})


def probe_for(env: EnvironmentConfig) -> Optional[Tuple[str, ...]]:
    """Return the probe command for *env*, or ``None`` for unknown types."""
    return PROBES.get(env.family)


def check_runtime(
    env: EnvironmentConfig,
    executor: CommandExecutor,
    cwd: Path,
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """Return ``True`` if the runtime for *env* answers its probe."""
    probe = probe_for(env)
    if probe is None:
        return True
    status = executor.run(probe, cwd, capture=True, env=environ)
    if status != 0:
        logger.debug("%s exited %d", " ".join(probe), status)
        return False
    return True


def require_runtime(
    env: EnvironmentConfig,
    executor: CommandExecutor,
    cwd: Path,
    environ: Optional[Mapping[str, str]] = None,
) -> None:
    """
    Raise ``PreflightError`` unless the runtime for *env* is available.

    Raises:
        PreflightError: If the probe command exits nonzero
    """
    if not check_runtime(env, executor, cwd, environ):
        raise PreflightError(env.type, probe_for(env) or ())


__all__ = ["PROBES", "probe_for", "check_runtime", "require_runtime"]
