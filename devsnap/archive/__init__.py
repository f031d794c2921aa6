"""Snapshot container format: a gzip-compressed tar led by ``metadata.json``."""

from .writer import create_archive
from .reader import read_metadata, safe_member_name, unpack_archive

__all__ = ["create_archive", "read_metadata", "safe_member_name", "unpack_archive"]
