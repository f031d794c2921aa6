"""
CLI command modules.

Each module implements one DevSnapshot subcommand.
"""

from .create import cmd_create
from .inspect import cmd_inspect
from .start import cmd_start

__all__ = ["cmd_create", "cmd_inspect", "cmd_start"]
