"""Exception hierarchy for snapshot creation and replay."""

from typing import Optional, Sequence


class DevsnapError(Exception):
    """Base exception for all DevSnapshot failures."""
    pass


class ArchiveError(DevsnapError):
    """Raised when a snapshot container cannot be written or read."""
    pass


class InvalidSnapshotError(ArchiveError):
    """Raised when a container has no usable ``metadata.json`` entry."""

    def __init__(self, reason: str):
        super().__init__(f"invalid snapshot: {reason}")
        self.reason = reason


class DevpackError(DevsnapError):
    """Raised when a devpack descriptor exists but cannot be parsed."""
    pass


class PreflightError(DevsnapError):
    """Raised when a required runtime is not available on this machine."""

    def __init__(self, env_type: str, probe: Sequence[str]):
        super().__init__(f"runtime for '{env_type}' not found ({' '.join(probe)} failed)")
        self.env_type = env_type
        self.probe = list(probe)


class CommandFailedError(DevsnapError):
    """
    Raised when a command exits with a nonzero status.

    Attributes:
        command: The command string as recorded in the metadata
        returncode: Exit status reported by the executor
    """

    def __init__(self, command: str, returncode: int, *, phase: Optional[str] = None):
        label = f"{phase} failed" if phase else "command failed"
        super().__init__(f"{label}: '{command}' exited with status {returncode}")
        self.command = command
        self.returncode = returncode
        self.phase = phase


__all__ = [
    "DevsnapError",
    "ArchiveError",
    "InvalidSnapshotError",
    "DevpackError",
    "PreflightError",
    "CommandFailedError",
]
