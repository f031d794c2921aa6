"""Snapshot container creation."""

from __future__ import annotations

import io
import logging
import os
import tarfile
import time
from pathlib import Path
from typing import Sequence

from ..config import METADATA_FILENAME
from ..errors import ArchiveError
from ..metadata import SnapshotMetadata

logger = logging.getLogger(__name__)


def _archive_name(root: Path, path: Path) -> str:
    try:
        relative = os.path.relpath(path, root)
    except ValueError:
        # Different drive on Windows; keep just the file name.
        relative = path.name
    return relative.replace(os.sep, "/")


def _add_metadata(tar: tarfile.TarFile, meta: SnapshotMetadata) -> None:
    payload = meta.to_json().encode("utf-8")
    info = tarfile.TarInfo(METADATA_FILENAME)
    info.size = len(payload)
    info.mode = 0o644
    info.mtime = int(time.time())
    tar.addfile(info, io.BytesIO(payload))


def _add_file(tar: tarfile.TarFile, root: Path, path: Path) -> None:
    info = tar.gettarinfo(str(path), arcname=_archive_name(root, path))
    if info.isreg():
        with open(path, "rb") as handle:
            tar.addfile(info, handle)
    else:
        tar.addfile(info)


def create_archive(
    root: Path | str,
    files: Sequence[Path],
    meta: SnapshotMetadata,
    output_path: Path | str,
) -> Path:
    """
    Pack *meta* and *files* into a gzip-compressed tar at *output_path*.

    ``metadata.json`` is always the first entry. Every file follows under its
    path relative to *root*, with forward slashes and its original mode bits.

    Args:
        root: Directory the file paths are made relative to
        files: Files to include (typically from ``scan_directory``)
        meta: Snapshot metadata to embed
        output_path: Container file to create

    Returns:
        Path of the written container

    Raises:
        ArchiveError: If the container or any member cannot be written. A
            partially written output file is left in place.
    """
    root_path = Path(root).resolve()
    output = Path(output_path)

    try:
        tar = tarfile.open(output, "w:gz", format=tarfile.PAX_FORMAT)
    except OSError as exc:
        raise ArchiveError(f"failed to create output file {output}: {exc}") from exc

    with tar:
        try:
            _add_metadata(tar, meta)
        except (OSError, tarfile.TarError) as exc:
            raise ArchiveError(f"failed to write metadata: {exc}") from exc

        for path in files:
            try:
                _add_file(tar, root_path, Path(path))
            except (OSError, tarfile.TarError) as exc:
                raise ArchiveError(f"failed to archive file {path}: {exc}") from exc

    logger.info("Wrote %s (%d files)", output, len(files))
    return output


__all__ = ["create_archive"]
