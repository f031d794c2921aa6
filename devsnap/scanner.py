"""File discovery for snapshot creation."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import AbstractSet, List, Optional

from .config import IGNORED_NAMES, SNAPSHOT_EXTENSION

logger = logging.getLogger(__name__)


def is_ignored(name: str, ignored: AbstractSet[str] = IGNORED_NAMES) -> bool:
    """Return ``True`` when a single path component must not be archived."""
    return name in ignored or name.endswith(SNAPSHOT_EXTENSION)


def _raise(error: OSError) -> None:
    raise error


def scan_directory(root: Path | str, ignored: Optional[AbstractSet[str]] = None) -> List[Path]:
    """
    Return every file under *root* that belongs in a snapshot.

    Ignored directories are pruned before descending, so large dependency
    trees such as ``node_modules`` are never visited. Files and directories
    ending in ``.devsnap`` are skipped so earlier snapshots are not archived
    into new ones. Results are sorted per directory, making the order stable
    across runs.

    Args:
        root: Directory to scan
        ignored: Component names to exclude (defaults to ``IGNORED_NAMES``)

    Returns:
        Absolute file paths in walk order

    Raises:
        OSError: On unreadable directories; nothing is recovered here
    """
    root_path = Path(root).resolve()
    ignore_set = IGNORED_NAMES if ignored is None else ignored
    files: List[Path] = []

    for dirpath, dirnames, filenames in os.walk(root_path, onerror=_raise):
        dirnames[:] = sorted(name for name in dirnames if not is_ignored(name, ignore_set))
        for filename in sorted(filenames):
            if is_ignored(filename, ignore_set):
                continue
            files.append(Path(dirpath) / filename)

    logger.debug("Scanned %s: %d files", root_path, len(files))
    return files


__all__ = ["scan_directory", "is_ignored"]
