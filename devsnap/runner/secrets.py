"""
Secrets handling for a sandbox.

Snapshots never contain ``.env`` files, so required variables are gathered
again on the target machine:

1. The sandbox secrets file is created if needed and receives an empty
   ``NAME=`` placeholder for each required variable it does not mention.
2. Every non-empty ``NAME=value`` entry is exported to the process
   environment (quotes stripped, comments and blank lines skipped).
3. Required variables still unset are asked for interactively; answers live
   for this session only and are not written back.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, MutableMapping, Sequence

from dotenv import dotenv_values

from .prompts import Prompter

logger = logging.getLogger(__name__)

_HEADER = "# Secrets required by this snapshot. Fill in the values below.\n"


def read_secrets(path: Path) -> Dict[str, str]:
    """Parse a ``.env`` style file; keys without a value map to ``""``."""
    if not path.exists():
        return {}
    return {key: value or "" for key, value in dotenv_values(path, interpolate=False).items()}


def ensure_secrets_file(path: Path, required: Sequence[str]) -> List[str]:
    """
    Create *path* if missing and append placeholders for absent names.

    Returns:
        Names for which a placeholder line was added
    """
    if not path.exists():
        path.write_text(_HEADER if required else "", encoding="utf-8")

    present = read_secrets(path)
    missing = [name for name in required if name not in present]
    if not missing:
        return []

    existing = path.read_text(encoding="utf-8")
    with path.open("a", encoding="utf-8") as handle:
        if existing and not existing.endswith("\n"):
            handle.write("\n")
        for name in missing:
            handle.write(f"{name}=\n")
    logger.info("Added %d placeholder(s) to %s", len(missing), path.name)
    return missing


def load_secrets(path: Path, environ: MutableMapping[str, str]) -> List[str]:
    """Export every non-empty entry of *path* into *environ*; return the names."""
    loaded = []
    for key, value in read_secrets(path).items():
        if value:
            environ[key] = value
            loaded.append(key)
    return loaded


def prompt_for_missing(
    required: Sequence[str],
    prompter: Prompter,
    environ: MutableMapping[str, str],
) -> List[str]:
    """
    Ask for each required variable that is still unset.

    Returns:
        Names left blank by the user
    """
    blank = []
    for name in required:
        if environ.get(name):
            continue
        value = prompter.ask(f"Enter value for {name}").strip()
        if value:
            environ[name] = value
        else:
            logger.warning("%s left blank; the project may fail to start", name)
            blank.append(name)
    return blank


def prepare_secrets(
    sandbox: Path,
    required: Sequence[str],
    prompter: Prompter,
    environ: MutableMapping[str, str],
    filename: str = ".env",
) -> List[str]:
    """Run the whole secrets phase; returns names still blank afterwards."""
    path = Path(sandbox) / filename
    ensure_secrets_file(path, required)
    loaded = load_secrets(path, environ)
    if loaded:
        logger.info("Loaded %d secret(s) from %s", len(loaded), filename)
    return prompt_for_missing(required, prompter, environ)


__all__ = [
    "read_secrets",
    "ensure_secrets_file",
    "load_secrets",
    "prompt_for_missing",
    "prepare_secrets",
]
