"""
DevSnapshot - portable, runnable snapshots of local development projects.

A snapshot is a gzip-compressed tar archive holding a ``metadata.json``
manifest followed by the project's source files. ``devsnap create`` scans a
directory, detects which runtimes the project needs and archives it;
``devsnap start`` unpacks the archive into a sandbox and replays the setup and
run commands recorded in the manifest.

Usage:
    from devsnap import ProjectDetector, scan_directory, create_archive

    root = Path(".")
    detection = ProjectDetector(root).detect()
    files = scan_directory(root)
"""

__version__ = "0.3.0"

from .metadata import (
    Devpack,
    EnvironmentConfig,
    LifecycleCommands,
    SnapshotMetadata,
)
from .scanner import scan_directory
from .detector import DetectionResult, ProjectDetector
from .archive import create_archive, read_metadata, unpack_archive

__all__ = [
    "__version__",
    "Devpack",
    "EnvironmentConfig",
    "LifecycleCommands",
    "SnapshotMetadata",
    "scan_directory",
    "DetectionResult",
    "ProjectDetector",
    "create_archive",
    "read_metadata",
    "unpack_archive",
]
