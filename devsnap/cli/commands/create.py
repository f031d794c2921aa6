"""
Create command implementation.

Handles the 'create' subcommand: detect the project in a directory, scan
its files and pack both into a ``.devsnap`` archive.
"""

import argparse
import logging
from pathlib import Path

from devsnap.archive import create_archive
from devsnap.config import SNAPSHOT_EXTENSION
from devsnap.detector import ProjectDetector
from devsnap.metadata import SnapshotMetadata
from devsnap.scanner import scan_directory

from ..errors import CLIFileNotFoundError, handle_cli_exception
from ..output import print_info, print_success

logger = logging.getLogger(__name__)


def cmd_create(args: argparse.Namespace) -> None:
    """
    Handle the 'create' subcommand.

    Detection runs before scanning so devpack files generated by the
    heuristics are picked up and archived with the sources.

    Args:
        args: Parsed command-line arguments with ``path`` and ``output``

    Examples:
        >>> cmd_create(argparse.Namespace(path=".", output=None))  # doctest: +SKIP
        📸 Snapping /home/me/api...
        ℹ Detected api (go)
        ℹ Found 42 files
        ✓ Snapshot ready: api.devsnap
    """
    try:
        root = Path(args.path or ".").resolve()
        if not root.is_dir():
            raise CLIFileNotFoundError(f"Project directory not found: {root}")

        print(f"📸 Snapping {root}...")

        detection = ProjectDetector(root).detect()
        print_info(f"Detected {detection.name} ({', '.join(detection.types)})")
        if detection.required_vars:
            print_info(
                f"Detected {len(detection.required_vars)} required secrets "
                f"(e.g. {detection.required_vars[0]})"
            )

        files = scan_directory(root)
        print_info(f"Found {len(files)} files")

        meta = SnapshotMetadata.new(
            detection.name,
            environments=detection.environments,
            commands=detection.commands,
            required_vars=detection.required_vars,
        )

        output = Path(args.output) if args.output else Path(f"{detection.name}{SNAPSHOT_EXTENSION}")
        create_archive(root, files, meta, output)
        print_success(f"Snapshot ready: {output}")

    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
