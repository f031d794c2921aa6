"""
Static dependency tables.

Single source of truth for which import names are treated as built-in (and
therefore never written to a devpack) and where each ecosystem's devpack
lives. Nothing here is mutated at runtime.
"""

from enum import Enum
from types import MappingProxyType


class Ecosystem(str, Enum):
    """Ecosystems for which dependencies can be inferred from source text"""
    NODE = "node"
    GO = "go"
    PYTHON = "python"


# Node core modules skipped by the import scanner.
NODE_BUILTINS = frozenset({
    "fs", "path", "os", "http", "https",
    "crypto", "util", "events", "child_process",
})

# Python modules treated as standard library by the import scanner.
PYTHON_STDLIB = frozenset({
    "__future__", "os", "sys", "math", "json", "time", "random",
    "datetime", "re", "subprocess", "pathlib", "typing",
    "collections", "itertools", "functools", "logging",
    "threading", "multiprocessing", "socket", "email",
    "argparse", "shutil", "glob", "pickle", "copy",
    "hashlib", "base64", "uuid", "csv", "io",
})

# Import prefixes that always refer to files inside the project.
NODE_LOCAL_PREFIXES = ("./", "../", "/", "~/", "@/")

DEVPACK_FILENAMES = MappingProxyType({
    Ecosystem.NODE: "node.devpack",
    Ecosystem.GO: "go.devpack",
    Ecosystem.PYTHON: "python.devpack",
})

UNCONSTRAINED = "latest"


def devpack_filename(ecosystem: Ecosystem) -> str:
    """Return the devpack file name written for *ecosystem*."""
    return DEVPACK_FILENAMES[Ecosystem(ecosystem)]


__all__ = [
    "Ecosystem",
    "NODE_BUILTINS",
    "PYTHON_STDLIB",
    "NODE_LOCAL_PREFIXES",
    "DEVPACK_FILENAMES",
    "UNCONSTRAINED",
    "devpack_filename",
]
