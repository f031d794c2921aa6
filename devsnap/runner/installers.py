"""
Devpack installers.

A setup step ``#DEVPACK:<file>`` (or the legacy ``#DEVPACK_INSTALL``, which
means ``dependencies.devpack``) installs the dependencies listed in a devpack
with the ecosystem's own package manager:

- node / angular: one ``npm install a b@1.2.3`` invocation
- go: one ``go get <module>@<version>`` invocation per module
- python: one ``pip install a b==1.2.3`` invocation
- rust / java / php: nothing; their build tools read manifests themselves
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Optional

from ..config import DEVPACK_SENTINEL_PREFIX, LEGACY_DEVPACK_FILENAME, LEGACY_DEVPACK_SENTINEL
from ..deps import UNCONSTRAINED, load_devpack, summarize_deps
from ..errors import CommandFailedError
from ..metadata import Devpack
from .execution import CommandExecutor

logger = logging.getLogger(__name__)

DECLARATIVE_ECOSYSTEMS = frozenset({"rust", "java", "php"})


def devpack_target(command: str) -> Optional[str]:
    """Return the devpack file a setup step refers to, or ``None``."""
    command = command.strip()
    if command == LEGACY_DEVPACK_SENTINEL:
        return LEGACY_DEVPACK_FILENAME
    if command.startswith(DEVPACK_SENTINEL_PREFIX):
        return command[len(DEVPACK_SENTINEL_PREFIX):].strip() or LEGACY_DEVPACK_FILENAME
    return None


def _ecosystem(pack: Devpack, env_type: str) -> str:
    kind = pack.type or env_type or "node"
    return kind.split(" ", 1)[0].lower()


def install_commands(pack: Devpack, env_type: str = "") -> List[List[str]]:
    """Build the installer invocations for *pack*; empty if nothing to run."""
    deps = pack.dependencies
    if not deps:
        return []

    ecosystem = _ecosystem(pack, env_type)
    if ecosystem in ("node", "angular"):
        return [["npm", "install"] + [
            name if version == UNCONSTRAINED else f"{name}@{version}"
            for name, version in deps.items()
        ]]
    if ecosystem == "go":
        return [
            ["go", "get", f"{name}@{version or UNCONSTRAINED}"]
            for name, version in deps.items()
        ]
    if ecosystem == "python":
        return [["pip", "install"] + [
            name if version == UNCONSTRAINED else f"{name}=={version}"
            for name, version in deps.items()
        ]]
    if ecosystem in DECLARATIVE_ECOSYSTEMS:
        logger.info("%s dependencies are installed by its build tool; nothing to do", ecosystem)
        return []

    logger.warning("No devpack installer for '%s'", ecosystem)
    return []


def install_from_devpack(
    sandbox: Path,
    filename: str,
    executor: CommandExecutor,
    *,
    env_type: str = "",
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """
    Install the dependencies listed in ``sandbox/filename``.

    Returns:
        ``False`` if the devpack file is missing, ``True`` otherwise

    Raises:
        DevpackError: If the devpack cannot be read or parsed
        CommandFailedError: If an installer exits nonzero
    """
    path = Path(sandbox) / filename
    if not path.exists():
        logger.warning("Could not find %s", filename)
        return False

    pack = load_devpack(path)
    commands = install_commands(pack, env_type)
    if commands:
        logger.info("Installing imports from %s: %s", filename, summarize_deps(list(pack.dependencies)))
    for argv in commands:
        status = executor.run(argv, sandbox, env=environ)
        if status != 0:
            raise CommandFailedError(" ".join(argv), status, phase="devpack install")
    return True


__all__ = ["devpack_target", "install_commands", "install_from_devpack"]
