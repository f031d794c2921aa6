"""
Output formatting for CLI operations.

Status lines use the same one-character prefixes across commands; snapshot
metadata is rendered as a rich table by ``inspect``.
"""

from typing import Optional

from rich.console import Console
from rich.table import Table

from devsnap.metadata import SnapshotMetadata


def print_success(message: str) -> None:
    """
    Print success message with checkmark prefix.

    Examples:
        >>> print_success("Snapshot ready: api.devsnap")
        ✓ Snapshot ready: api.devsnap
    """
    print(f"✓ {message}")


def print_error(message: str) -> None:
    """Print error message with cross prefix."""
    print(f"✗ {message}")


def print_warning(message: str) -> None:
    """Print warning message with warning prefix."""
    print(f"⚠ {message}")


def print_info(message: str) -> None:
    """
    Print informational message with info prefix.

    Examples:
        >>> print_info("Scanning...")
        ℹ Scanning...
    """
    print(f"ℹ {message}")


def print_metadata(meta: SnapshotMetadata, console: Optional[Console] = None) -> None:
    """
    Pretty-print snapshot metadata.

    Shows identity fields, one row per environment and, when present, the
    legacy global commands and the required secret names.
    """
    console = console or Console()

    console.print("\n[bold]🔍 Snapshot Metadata[/bold]")
    console.print(f"Name:        {meta.name}")
    console.print(f"Created:     {meta.created_at or 'n/a'}")
    console.print(f"Schema:      {meta.schema_version}")
    if meta.description:
        console.print(f"Description: {meta.description}")
    if meta.author:
        console.print(f"Author:      {meta.author}")
    if meta.tags:
        console.print(f"Tags:        {', '.join(meta.tags)}")

    table = Table(title="Environments")
    table.add_column("Type", style="cyan")
    table.add_column("Version")
    table.add_column("Setup")
    table.add_column("Run", style="green")
    for env in meta.environments:
        table.add_row(env.type, env.version or "-", "\n".join(env.setup) or "-", env.run or "-")
    console.print(table)

    commands = meta.commands
    if not commands.is_empty():
        console.print(f"Setup Cmd:   {commands.setup}")
        console.print(f"Run Cmd:     {commands.run}")
        if commands.test:
            console.print(f"Test Cmd:    {commands.test}")

    if meta.required_vars:
        console.print(f"Secrets:     {', '.join(meta.required_vars)}")


__all__ = [
    "print_success",
    "print_error",
    "print_warning",
    "print_info",
    "print_metadata",
]
