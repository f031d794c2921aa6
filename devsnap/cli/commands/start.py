"""
Start command implementation.

Handles the 'start' subcommand: unpack a snapshot into a fresh sandbox and
replay its environments.
"""

import argparse
import logging
import shutil
from pathlib import Path

from devsnap.archive import unpack_archive
from devsnap.config import DevsnapConfig
from devsnap.errors import CommandFailedError
from devsnap.runner import ConsolePrompter, Runner, StaticPrompter

from ..errors import (
    CLIFileNotFoundError,
    CLIRuntimeError,
    CLIValidationError,
    handle_cli_exception,
)
from ..output import print_error, print_info, print_success, print_warning

logger = logging.getLogger(__name__)


def _wipe_sandbox(sandbox: Path) -> None:
    if not sandbox.exists():
        return
    if not sandbox.is_dir():
        raise CLIValidationError(
            f"Sandbox path {sandbox} exists and is not a directory",
            hint="Remove it or set DEVSNAP_SANDBOX_DIR",
        )
    shutil.rmtree(sandbox)


def cmd_start(args: argparse.Namespace) -> None:
    """
    Handle the 'start' subcommand.

    The sandbox directory is removed and recreated on every start so a
    previous, possibly half-extracted, run never leaks into this one.

    Args:
        args: Parsed command-line arguments with ``file``, ``manual``,
            ``yes`` and ``sandbox``
    """
    try:
        config = DevsnapConfig.from_env().with_overrides(
            manual=bool(args.manual) or None,
            sandbox_dir=getattr(args, "sandbox", None),
        )
        snapshot = Path(args.file)
        if not snapshot.is_file():
            raise CLIFileNotFoundError(f"Snapshot not found: {snapshot}")

        sandbox = config.sandbox_dir
        print(f"📂 Opening snapshot {snapshot} to {sandbox}...")
        _wipe_sandbox(sandbox)
        meta = unpack_archive(snapshot, sandbox)

        prompter = StaticPrompter(answer=True) if getattr(args, "yes", False) else ConsolePrompter()
        runner = Runner(
            sandbox,
            meta,
            prompter=prompter,
            manual=config.manual,
            secrets_file=config.secrets_file,
        )
        try:
            report = runner.run()
        except CommandFailedError as exc:
            print_error(f"Snapshot '{meta.name}' stopped")
            raise CLIRuntimeError(
                str(exc),
                hint="Run with --manual to confirm each setup step",
                context={"command": exc.command, "status": exc.returncode},
            ) from exc

        for env in report.environments:
            if not env.runtime_available:
                print_warning(f"{env.type}: runtime not installed, skipped")
            elif env.setup_failures:
                print_warning(f"{env.type}: {len(env.setup_failures)} setup step(s) failed")
            elif env.declined:
                print_info(f"{env.type}: run step skipped")
        print_success(f"Snapshot '{meta.name}' finished")

    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
