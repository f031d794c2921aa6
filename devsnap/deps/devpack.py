"""Reading and writing devpack descriptor files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Sequence

from pydantic import ValidationError

from ..errors import DevpackError
from ..metadata import Devpack

logger = logging.getLogger(__name__)


def write_devpack(root: Path, ecosystem: str, dependencies: Dict[str, str], filename: str) -> Path:
    """
    Write ``{"type": ..., "dependencies": {...}}`` to ``root/filename``.

    Dependencies are written in sorted order so repeated runs over the same
    tree produce identical files.
    """
    pack = Devpack(type=str(ecosystem), dependencies=dict(sorted(dependencies.items())))
    path = Path(root) / filename
    path.write_text(pack.to_json(), encoding="utf-8")
    logger.info("Generated %s", filename)
    return path


def load_devpack(path: Path) -> Devpack:
    """
    Load a devpack file.

    Raises:
        FileNotFoundError: If *path* does not exist
        DevpackError: If the file cannot be read or is not a valid devpack
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise DevpackError(f"failed to read devpack {Path(path).name}: {exc}") from exc
    try:
        return Devpack.model_validate_json(raw)
    except ValidationError as exc:
        raise DevpackError(f"failed to parse devpack {Path(path).name}: {exc}") from exc


def summarize_deps(names: Sequence[str], limit: int = 3) -> str:
    """Return a short, comma separated preview of dependency names."""
    if not names:
        return ""
    if len(names) <= limit:
        return ", ".join(names)
    return ", ".join(names[:limit]) + ", ..."


__all__ = ["write_devpack", "load_devpack", "summarize_deps"]
