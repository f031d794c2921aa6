"""
Error handling for the DevSnapshot CLI.

Every command funnels failures through ``handle_cli_exception``, which
prints ``Error [CODE]: message`` (plus an optional hint) to stderr and exits
with status 1. Domain errors from the library are mapped to CLI codes here.
"""

import sys
import traceback
from typing import Any, Dict, Optional

from devsnap.config import env_flag
from devsnap.errors import (
    ArchiveError,
    CommandFailedError,
    DevpackError,
    DevsnapError,
    InvalidSnapshotError,
)


# Maximum length for traceback output in CLI
_CLI_TRACE_LIMIT = 4000


class CLIError(Exception):
    """
    Base exception for all CLI operations.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code
        hint: Optional suggestion for resolving the error
        context: Additional metadata about the error
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        hint: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class CLIValidationError(CLIError):
    """Invalid command arguments or options."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_VALIDATION_ERROR')
        super().__init__(message, **kwargs)


class CLIFileNotFoundError(CLIError):
    """Snapshot file or project directory not found."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_FILE_NOT_FOUND')
        super().__init__(message, **kwargs)


class CLIRuntimeError(CLIError):
    """Errors during command execution."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_RUNTIME_ERROR')
        super().__init__(message, **kwargs)


def _domain_code(exc: DevsnapError) -> str:
    if isinstance(exc, InvalidSnapshotError):
        return "INVALID_SNAPSHOT"
    if isinstance(exc, ArchiveError):
        return "ARCHIVE_ERROR"
    if isinstance(exc, DevpackError):
        return "DEVPACK_ERROR"
    if isinstance(exc, CommandFailedError):
        return "COMMAND_FAILED"
    return "DEVSNAP_ERROR"


def format_cli_error(
    exc: BaseException,
    *,
    verbose: bool = False,
    include_traceback: bool = False
) -> str:
    """
    Format exception for CLI display with context and hints.

    Examples:
        >>> print(format_cli_error(CLIValidationError("Missing file", hint="Pass a .devsnap path")))
        Error [CLI_VALIDATION_ERROR]: Missing file
        Hint: Pass a .devsnap path
    """
    lines = []

    if isinstance(exc, CLIError):
        lines.append(f"Error [{exc.code}]: {exc.message}")
        if exc.hint:
            lines.append(f"Hint: {exc.hint}")
        if verbose and exc.context:
            lines.append("\nContext:")
            for key, value in exc.context.items():
                lines.append(f"  {key}: {value}")
    elif isinstance(exc, DevsnapError):
        lines.append(f"Error [{_domain_code(exc)}]: {exc}")
    else:
        lines.append(f"Error: {exc.__class__.__name__}: {exc}")

    if include_traceback:
        lines.append("\nTraceback:")
        lines.append(format_traceback_excerpt())

    return "\n".join(lines)


def format_traceback_excerpt() -> str:
    """
    Format current exception traceback with size limit.

    Note:
        Should only be called within an exception handler context.
    """
    trace = traceback.format_exc().strip()
    if len(trace) <= _CLI_TRACE_LIMIT:
        return trace
    return f"{trace[:_CLI_TRACE_LIMIT - 3]}..."


def cli_verbose_enabled(verbose_flag: bool = False) -> bool:
    """Honour ``--verbose`` and the DEVSNAP_VERBOSE/DEVSNAP_DEBUG variables."""
    return verbose_flag or env_flag("DEVSNAP_VERBOSE") or env_flag("DEVSNAP_DEBUG")


def cli_reraise_enabled() -> bool:
    """Re-raise instead of exiting when DEVSNAP_RERAISE or DEVSNAP_DEBUG is set."""
    return env_flag("DEVSNAP_RERAISE") or env_flag("DEVSNAP_DEBUG")


def handle_cli_exception(
    exc: BaseException,
    *,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """
    Handle exception at CLI top-level with proper formatting and exit.

    Note:
        This function calls sys.exit() and does not return.
    """
    verbose_effective = cli_verbose_enabled(verbose)
    if cli_reraise_enabled():
        raise exc

    error_message = format_cli_error(
        exc,
        verbose=verbose_effective,
        include_traceback=verbose_effective
    )
    print(error_message, file=sys.stderr)
    sys.exit(exit_code)


__all__ = [
    "CLIError",
    "CLIValidationError",
    "CLIFileNotFoundError",
    "CLIRuntimeError",
    "format_cli_error",
    "format_traceback_excerpt",
    "cli_verbose_enabled",
    "cli_reraise_enabled",
    "handle_cli_exception",
]
