"""
Snapshot extraction.

Entry names are untrusted: an archive may have been crafted or corrupted.
Every name is normalized and any absolute path or name escaping the
destination through ``..`` is skipped before it is joined to the sandbox.
Only directories and regular files are materialized; links and device
entries are ignored.
"""

from __future__ import annotations

import logging
import ntpath
import os
import posixpath
import shutil
import tarfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..config import METADATA_FILENAME
from ..errors import ArchiveError, InvalidSnapshotError
from ..metadata import SnapshotMetadata

logger = logging.getLogger(__name__)


def safe_member_name(name: str) -> Optional[str]:
    """
    Return the cleaned relative name for an archive entry, or ``None``.

    ``None`` means the entry would land outside the destination directory
    (absolute path, drive-qualified path or leading ``..`` segment).
    """
    unified = name.replace("\\", "/")
    if unified.startswith("/") or ntpath.splitdrive(unified)[0]:
        return None
    cleaned = posixpath.normpath(unified)
    if cleaned == ".." or cleaned.startswith("../"):
        return None
    return cleaned


def _parse_metadata(payload: bytes) -> SnapshotMetadata:
    try:
        return SnapshotMetadata.from_json(payload)
    except ValidationError as exc:
        raise InvalidSnapshotError(f"metadata.json could not be parsed ({exc.error_count()} errors)") from exc


def _is_metadata(member: tarfile.TarInfo) -> bool:
    return member.isreg() and posixpath.basename(member.name.replace("\\", "/")) == METADATA_FILENAME


def _open(snapshot_path: Path) -> tarfile.TarFile:
    try:
        return tarfile.open(snapshot_path, "r:gz")
    except (OSError, tarfile.TarError) as exc:
        raise ArchiveError(f"failed to open snapshot {snapshot_path}: {exc}") from exc


def unpack_archive(snapshot_path: Path | str, dest_dir: Path | str) -> SnapshotMetadata:
    """
    Extract a snapshot into *dest_dir* and return its metadata.

    Args:
        snapshot_path: ``.devsnap`` container to read
        dest_dir: Sandbox directory (created if missing)

    Returns:
        Metadata parsed from the first valid ``metadata.json`` entry

    Raises:
        ArchiveError: If the container is unreadable or a file cannot be written
        InvalidSnapshotError: If no valid ``metadata.json`` entry exists
    """
    dest = Path(dest_dir)
    dest.mkdir(parents=True, exist_ok=True)

    meta: Optional[SnapshotMetadata] = None
    last_problem = "metadata.json not found"

    with _open(Path(snapshot_path)) as tar:
        try:
            for member in tar:
                cleaned = safe_member_name(member.name)
                if cleaned is None:
                    logger.warning("Skipping unsafe file path: %s", member.name)
                    continue

                target = dest / cleaned
                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                if not member.isreg():
                    logger.debug("Skipping non-regular entry: %s", member.name)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                source = tar.extractfile(member)
                wanted = meta is None and _is_metadata(member)
                fd = os.open(target, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, member.mode & 0o7777)
                with source, os.fdopen(fd, "wb") as out:
                    if wanted:
                        # Parsed from the entry itself; its mode may forbid reading it back.
                        payload = source.read()
                        out.write(payload)
                    else:
                        shutil.copyfileobj(source, out)

                if wanted:
                    try:
                        meta = _parse_metadata(payload)
                    except InvalidSnapshotError as exc:
                        last_problem = exc.reason
                        logger.warning("Ignoring %s: %s", member.name, exc.reason)
        except (OSError, tarfile.TarError) as exc:
            raise ArchiveError(f"failed to extract snapshot: {exc}") from exc

    if meta is None:
        raise InvalidSnapshotError(last_problem)
    return meta


def read_metadata(snapshot_path: Path | str) -> SnapshotMetadata:
    """
    Return a snapshot's metadata without extracting any project files.

    Raises:
        ArchiveError: If the container cannot be read
        InvalidSnapshotError: If no ``metadata.json`` entry exists or it is
            malformed
    """
    with _open(Path(snapshot_path)) as tar:
        try:
            for member in tar:
                if not _is_metadata(member):
                    continue
                source = tar.extractfile(member)
                with source:
                    return _parse_metadata(source.read())
        except (OSError, tarfile.TarError) as exc:
            raise ArchiveError(f"failed to read snapshot: {exc}") from exc
    raise InvalidSnapshotError("metadata.json not found")


__all__ = ["safe_member_name", "unpack_archive", "read_metadata"]
