"""
Lexical import extraction.

Import names are recovered with regular expressions rather than a parser:
the source may not build, may be partially checked out, or may belong to a
language for which no Python parser is installed. Each ecosystem implements
``ImportExtractor.extract_imports(text)`` so a real parser can be swapped in
later without touching the detector.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, Set

from .spec import (
    NODE_BUILTINS,
    NODE_LOCAL_PREFIXES,
    PYTHON_STDLIB,
    Ecosystem,
)


class ImportExtractor(ABC):
    """Extracts external package names from one source file's text."""

    ecosystem: Ecosystem
    extensions: FrozenSet[str] = frozenset()

    def handles(self, filename: str) -> bool:
        """Return ``True`` if files with this name should be scanned."""
        lowered = filename.lower()
        return any(lowered.endswith(ext) for ext in self.extensions)

    @abstractmethod
    def extract_imports(self, text: str) -> Set[str]:
        """Return external package names imported by *text*."""


# --- Node.js / TypeScript ---

_NODE_PATTERNS = (
    re.compile(r"""require\(['"]([^'"]+)['"]\)"""),
    re.compile(r"""from ['"]([^'"]+)['"]"""),
    re.compile(r"""import\(['"]([^'"]+)['"]\)"""),
)


def is_local_import(path: str) -> bool:
    return path.startswith(NODE_LOCAL_PREFIXES)


def is_node_builtin(name: str) -> bool:
    return name.startswith("node:") or name in NODE_BUILTINS


def root_package_name(path: str) -> str:
    """
    Collapse an import path to the installable package name.

    ``@scope/name/sub`` becomes ``@scope/name``; ``pkg/sub`` becomes ``pkg``.
    """
    parts = path.split("/")
    if path.startswith("@") and len(parts) >= 2:
        return f"{parts[0]}/{parts[1]}"
    return parts[0]


class NodeImportExtractor(ImportExtractor):
    ecosystem = Ecosystem.NODE
    extensions = frozenset({".js", ".ts", ".jsx", ".tsx"})

    def extract_imports(self, text: str) -> Set[str]:
        found: Set[str] = set()
        for pattern in _NODE_PATTERNS:
            for name in pattern.findall(text):
                if is_local_import(name) or is_node_builtin(name):
                    continue
                # Subpath imports of a built-in ("fs/promises") are built-in too.
                root = root_package_name(name)
                if is_node_builtin(root):
                    continue
                found.add(root)
        return found


# --- Go ---

_GO_IMPORT = re.compile(
    r'^\s*import\s*\(([^)]*)\)|^\s*import\s+(?:[\w.]+\s+)?"([^"]+)"',
    re.MULTILINE,
)


def is_go_stdlib(path: str) -> bool:
    """Standard library paths have no dot in their first segment."""
    return "." not in path.split("/", 1)[0]


class GoImportExtractor(ImportExtractor):
    ecosystem = Ecosystem.GO
    extensions = frozenset({".go"})

    def extract_imports(self, text: str) -> Set[str]:
        found: Set[str] = set()
        for block, single in _GO_IMPORT.findall(text):
            if single:
                candidates = [single]
            else:
                candidates = []
                for line in block.splitlines():
                    line = line.strip()
                    start = line.find('"')
                    end = line.rfind('"')
                    if start != -1 and end > start:
                        candidates.append(line[start + 1:end])
            for path in candidates:
                if path and not is_go_stdlib(path):
                    found.add(path)
        return found


# --- Python ---

_PY_IMPORT = re.compile(
    r"^(?:import\s+([A-Za-z0-9_]+)|from\s+([A-Za-z0-9_]+)\s+import)",
    re.MULTILINE,
)


class PythonImportExtractor(ImportExtractor):
    ecosystem = Ecosystem.PYTHON
    extensions = frozenset({".py"})

    def extract_imports(self, text: str) -> Set[str]:
        found: Set[str] = set()
        for plain, from_import in _PY_IMPORT.findall(text):
            name = plain or from_import
            if name and name not in PYTHON_STDLIB:
                found.add(name)
        return found


EXTRACTORS: Dict[Ecosystem, ImportExtractor] = {
    Ecosystem.NODE: NodeImportExtractor(),
    Ecosystem.GO: GoImportExtractor(),
    Ecosystem.PYTHON: PythonImportExtractor(),
}


def get_extractor(ecosystem: Ecosystem | str) -> ImportExtractor:
    return EXTRACTORS[Ecosystem(ecosystem)]


__all__ = [
    "ImportExtractor",
    "NodeImportExtractor",
    "GoImportExtractor",
    "PythonImportExtractor",
    "EXTRACTORS",
    "get_extractor",
    "is_local_import",
    "is_node_builtin",
    "is_go_stdlib",
    "root_package_name",
]
