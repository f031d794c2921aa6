"""
Command-line interface for DevSnapshot.

Subcommands:
    create   Snapshot a project directory into a ``.devsnap`` archive
    start    Unpack a snapshot into a sandbox and replay it
    inspect  Show the metadata embedded in a snapshot
    help     Show usage
"""

import argparse
import logging
import os
import sys
from typing import Optional

from devsnap import __version__
from devsnap.config import DEFAULT_SANDBOX_DIR

from .commands import cmd_create, cmd_inspect, cmd_start


def _configure_logging(args) -> None:
    """Configure the ``devsnap`` logger from ``--log-level`` or DEVSNAP_LOG_LEVEL."""
    log_level = (
        getattr(args, 'log_level', None) or
        os.getenv('DEVSNAP_LOG_LEVEL', 'info')
    ).lower()

    level_map = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warn': logging.WARNING,
        'warning': logging.WARNING,
        'error': logging.ERROR,
    }
    numeric_level = level_map.get(log_level, logging.INFO)

    devsnap_logger = logging.getLogger('devsnap')
    devsnap_logger.setLevel(numeric_level)

    if not devsnap_logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        devsnap_logger.addHandler(handler)
        # Prevent propagation to root logger to avoid duplicate messages
        devsnap_logger.propagate = False


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with every subcommand registered."""
    parser = argparse.ArgumentParser(
        description="DevSnapshot: pack a project into a portable snapshot and replay it anywhere",
        prog="devsnap"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Print full tracebacks and detailed CLI errors (or set DEVSNAP_VERBOSE=1)'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default=None,
        help='Set logging level (or set DEVSNAP_LOG_LEVEL)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    create_parser = subparsers.add_parser(
        'create',
        help='Snapshot a project directory'
    )
    create_parser.add_argument(
        'path', nargs='?', default=None,
        help='Project directory (defaults to the current directory)'
    )
    create_parser.add_argument(
        '--output', '-o', default=None,
        help='Snapshot file to write (defaults to <name>.devsnap)'
    )
    create_parser.set_defaults(func=cmd_create)

    start_parser = subparsers.add_parser(
        'start',
        help='Unpack a snapshot into a sandbox and run it'
    )
    start_parser.add_argument('file', help='Path to the .devsnap file')
    start_parser.add_argument(
        '--manual', '-m', action='store_true',
        help='Confirm every setup step before executing it'
    )
    start_parser.add_argument(
        '--yes', '-y', action='store_true',
        help='Answer yes to every confirmation (secrets are left blank)'
    )
    start_parser.add_argument(
        '--sandbox', default=None,
        help=f'Sandbox directory (default: {DEFAULT_SANDBOX_DIR}, or set DEVSNAP_SANDBOX_DIR)'
    )
    start_parser.set_defaults(func=cmd_start)

    inspect_parser = subparsers.add_parser(
        'inspect',
        help='Show snapshot metadata without extracting it'
    )
    inspect_parser.add_argument('file', help='Path to the .devsnap file')
    inspect_parser.add_argument(
        '--json', action='store_true',
        help='Print the raw metadata document'
    )
    inspect_parser.set_defaults(func=cmd_inspect)

    help_parser = subparsers.add_parser('help', help='Show this help message')
    help_parser.set_defaults(func=lambda args: parser.print_help())

    return parser


def main(argv: Optional[list] = None) -> None:
    """
    Main CLI entrypoint with subcommand support.

    Args:
        argv: Command-line arguments (None uses sys.argv[1:])

    Examples:
        Snapshot the current directory:
        >>> main(['create'])  # doctest: +SKIP

        Replay a snapshot, confirming each setup step:
        >>> main(['start', 'api.devsnap', '--manual'])  # doctest: +SKIP
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    # If no command specified, print help
    if not hasattr(args, 'func'):
        parser.print_help()
        sys.exit(1)

    args.verbose = getattr(args, "verbose", False)

    _configure_logging(args)

    args.func(args)


__all__ = ["main", "build_parser"]
