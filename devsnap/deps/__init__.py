"""
DevSnapshot dependency inference.

Used when a project has source files but no manifest for a language: the
imports in those files are extracted lexically, versions are looked up on
the local machine and the result is written as a ``<ecosystem>.devpack``
file that the runner installs from later.

Core Components:
---------------
- spec.py: built-in module tables and devpack file names
- imports.py: per-ecosystem lexical import extractors
- resolver.py: version lookup and devpack generation
- devpack.py: devpack file I/O
"""

from .spec import Ecosystem, UNCONSTRAINED, devpack_filename
from .imports import ImportExtractor, get_extractor
from .resolver import DependencyResolver, run_query
from .devpack import load_devpack, summarize_deps, write_devpack

__all__ = [
    "Ecosystem",
    "UNCONSTRAINED",
    "devpack_filename",
    "ImportExtractor",
    "get_extractor",
    "DependencyResolver",
    "run_query",
    "load_devpack",
    "summarize_deps",
    "write_devpack",
]
