"""Command execution for the runner."""

from __future__ import annotations

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

# Exit status reported when the program cannot be started, as in POSIX shells.
COMMAND_NOT_FOUND = 127


def split_command(command: str) -> List[str]:
    """
    Split a recorded command on whitespace.

    No shell quoting is interpreted, so arguments containing spaces cannot be
    expressed and shell metacharacters are passed through literally.
    """
    return command.split()


class CommandExecutor(ABC):
    """Runs one program with arguments in a working directory."""

    @abstractmethod
    def run(
        self,
        argv: Sequence[str],
        cwd: Path,
        *,
        capture: bool = False,
        env: Optional[Mapping[str, str]] = None,
    ) -> int:
        """
        Execute *argv* and return its exit status.

        Args:
            argv: Program followed by its arguments
            cwd: Working directory
            capture: Discard output instead of attaching the terminal
            env: Environment for the child (``None`` inherits the current one)
        """


class SubprocessExecutor(CommandExecutor):
    """Runs commands synchronously with ``subprocess``; blocks until exit."""

    def run(self, argv, cwd, *, capture=False, env=None) -> int:
        if not argv:
            return 0
        # Resolve .cmd/.bat shims (npm on Windows) the way a shell would.
        program = shutil.which(argv[0]) or argv[0]
        output = subprocess.DEVNULL if capture else None
        try:
            completed = subprocess.run(
                [program, *argv[1:]],
                cwd=str(cwd),
                stdin=subprocess.DEVNULL if capture else None,
                stdout=output,
                stderr=output,
                env=dict(env) if env is not None else None,
                check=False,
            )
        except OSError as exc:
            logger.debug("Could not start %s: %s", argv[0], exc)
            return COMMAND_NOT_FOUND
        return completed.returncode


__all__ = ["COMMAND_NOT_FOUND", "split_command", "CommandExecutor", "SubprocessExecutor"]
