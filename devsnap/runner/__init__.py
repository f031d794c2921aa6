"""Replaying unpacked snapshots: secrets, preflight, setup and run."""

from .execution import CommandExecutor, SubprocessExecutor, split_command
from .prompts import ConsolePrompter, Prompter, StaticPrompter
from .runner import EnvironmentReport, Runner, RunReport, run_snapshot

__all__ = [
    "CommandExecutor",
    "SubprocessExecutor",
    "split_command",
    "Prompter",
    "ConsolePrompter",
    "StaticPrompter",
    "EnvironmentReport",
    "Runner",
    "RunReport",
    "run_snapshot",
]
