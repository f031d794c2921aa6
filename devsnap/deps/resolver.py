"""
Dependency resolution for heuristically detected projects.

Given the source files found during detection, the resolver extracts the
external imports of one ecosystem, looks up a version for each name on the
local machine and persists the result as a devpack file.

Resolution Order:
----------------
- Node: ``node_modules/<pkg>/package.json``, then ``npm list <pkg> --json``
- Go: ``go list -m -f {{.Version}} <module>``
- Python: ``pip show <pkg>``

Each lookup is best effort. A missing tool, a nonzero exit or unparsable
output all degrade to ``"latest"``; nothing is raised.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set

from .devpack import summarize_deps, write_devpack
from .imports import get_extractor
from .spec import UNCONSTRAINED, Ecosystem, devpack_filename

logger = logging.getLogger(__name__)

# Runs argv in a directory and returns stdout, or None on any failure.
QueryFunc = Callable[[Sequence[str], Optional[Path]], Optional[str]]


def run_query(argv: Sequence[str], cwd: Optional[Path] = None) -> Optional[str]:
    """Run a read-only toolchain query and return its stdout on success."""
    try:
        completed = subprocess.run(
            list(argv),
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Query %s unavailable: %s", " ".join(argv), exc)
        return None
    if completed.returncode != 0:
        logger.debug("Query %s exited with %d", " ".join(argv), completed.returncode)
        return None
    return completed.stdout


def resolve_node_version(root: Path, package: str, query: QueryFunc = run_query) -> str:
    installed = Path(root) / "node_modules" / package / "package.json"
    try:
        version = json.loads(installed.read_text(encoding="utf-8")).get("version")
    except (OSError, ValueError, AttributeError):
        version = None
    if version:
        return str(version)

    output = query(["npm", "list", package, "--json", "--depth=0"], Path(root))
    if output:
        try:
            listed = json.loads(output).get("dependencies", {}).get(package, {})
            if listed.get("version"):
                return str(listed["version"])
        except (ValueError, AttributeError):
            logger.debug("Unparsable npm list output for %s", package)

    return UNCONSTRAINED


def resolve_go_version(module: str, query: QueryFunc = run_query, cwd: Optional[Path] = None) -> str:
    output = query(["go", "list", "-m", "-f", "{{.Version}}", module], cwd)
    version = (output or "").strip()
    return version or UNCONSTRAINED


def resolve_python_version(package: str, query: QueryFunc = run_query, cwd: Optional[Path] = None) -> str:
    output = query(["pip", "show", package], cwd)
    for line in (output or "").splitlines():
        if line.startswith("Version: "):
            version = line[len("Version: "):].strip()
            if version:
                return version
    return UNCONSTRAINED


def _relative_parts(path: Path, root: Path) -> Optional[Sequence[str]]:
    for base in (root, root.resolve()):
        try:
            return Path(path).relative_to(base).parts
        except ValueError:
            continue
    return None


def _local_python_modules(files: Iterable[Path], root: Path) -> Set[str]:
    """Names importable from inside the project itself (modules and packages)."""
    names: Set[str] = set()
    for path in files:
        if path.suffix != ".py":
            continue
        names.add(path.stem)
        # Directories below the root only; the root's own name is not a package.
        parts = _relative_parts(path, root)
        if parts:
            names.update(parts[:-1])
    return names


class DependencyResolver:
    """
    Turns a project's source files into a devpack for one ecosystem.

    Usage:
        resolver = DependencyResolver(Path("."))
        filename = resolver.generate_devpack(code_files, Ecosystem.GO)
        # "go.devpack", or None when no external imports were found
    """

    def __init__(self, root: Path, query: QueryFunc = run_query):
        self.root = Path(root)
        self.query = query

    def extract(self, files: Sequence[Path], ecosystem: Ecosystem | str) -> List[str]:
        """Return sorted external import names for *ecosystem* found in *files*."""
        extractor = get_extractor(ecosystem)
        found: Set[str] = set()
        for path in files:
            if not extractor.handles(path.name):
                continue
            try:
                text = Path(path).read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                logger.debug("Skipping unreadable %s: %s", path, exc)
                continue
            found.update(extractor.extract_imports(text))

        if extractor.ecosystem is Ecosystem.PYTHON:
            found -= _local_python_modules(files, self.root)
        return sorted(found)

    def resolve_version(self, name: str, ecosystem: Ecosystem | str) -> str:
        ecosystem = Ecosystem(ecosystem)
        if ecosystem is Ecosystem.NODE:
            return resolve_node_version(self.root, name, self.query)
        if ecosystem is Ecosystem.GO:
            return resolve_go_version(name, self.query, self.root)
        return resolve_python_version(name, self.query, self.root)

    def resolve(self, files: Sequence[Path], ecosystem: Ecosystem | str) -> Dict[str, str]:
        """Map each external import name to a best-effort version string."""
        return {name: self.resolve_version(name, ecosystem) for name in self.extract(files, ecosystem)}

    def generate_devpack(self, files: Sequence[Path], ecosystem: Ecosystem | str) -> Optional[str]:
        """
        Resolve dependencies and write ``<ecosystem>.devpack`` at the root.

        Returns:
            The devpack file name, or ``None`` when nothing was found (in
            which case no file is written)
        """
        ecosystem = Ecosystem(ecosystem)
        names = self.extract(files, ecosystem)
        if not names:
            return None

        logger.info(
            "Heuristic (%s): found %d dependencies (%s). Generating devpack...",
            ecosystem.value,
            len(names),
            summarize_deps(names),
        )
        dependencies = {name: self.resolve_version(name, ecosystem) for name in names}
        filename = devpack_filename(ecosystem)
        write_devpack(self.root, ecosystem.value, dependencies, filename)
        return filename


__all__ = [
    "QueryFunc",
    "run_query",
    "resolve_node_version",
    "resolve_go_version",
    "resolve_python_version",
    "DependencyResolver",
]
