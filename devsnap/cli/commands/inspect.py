"""
Inspect command implementation.

Handles the 'inspect' subcommand: print a snapshot's embedded metadata
without extracting any project files.
"""

import argparse
from pathlib import Path

from devsnap.archive import read_metadata

from ..errors import CLIFileNotFoundError, handle_cli_exception
from ..output import print_metadata


def cmd_inspect(args: argparse.Namespace) -> None:
    """
    Handle the 'inspect' subcommand.

    Args:
        args: Parsed command-line arguments with ``file`` and ``json``
    """
    try:
        snapshot = Path(args.file)
        if not snapshot.is_file():
            raise CLIFileNotFoundError(f"Snapshot not found: {snapshot}")

        meta = read_metadata(snapshot)
        if getattr(args, "json", False):
            print(meta.to_json())
        else:
            print_metadata(meta)

    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
