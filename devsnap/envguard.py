"""Discovery of environment variables a project expects to be set."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)

_ENV_PATTERNS = (
    # Node: process.env.API_KEY / process.env['API_KEY']
    re.compile(r"""process\.env\.([A-Z_0-9]+)|process\.env\[['"]([A-Z_0-9]+)['"]\]"""),
    # Go: os.Getenv("API_KEY") / os.LookupEnv("API_KEY")
    re.compile(r"""os\.(?:Getenv|LookupEnv)\("([A-Z_0-9]+)"\)"""),
    # Python: os.environ.get("API_KEY") / os.getenv("API_KEY") / os.environ["API_KEY"]
    re.compile(r"""os\.(?:environ\.get|getenv)\(\s*['"]([A-Z_0-9]+)['"]|os\.environ\[\s*['"]([A-Z_0-9]+)['"]\s*\]"""),
)

# Always present on the target machine, never worth prompting for.
NOISE_VARS = frozenset({"NODE_ENV", "PATH"})


def find_env_vars(text: str) -> List[str]:
    """Return variable names read by *text*, in order of appearance."""
    hits = []
    for pattern in _ENV_PATTERNS:
        for match in pattern.finditer(text):
            name = next(group for group in match.groups() if group)
            hits.append((match.start(), name))
    return [name for _, name in sorted(hits)]


def scan_for_env_vars(files: Iterable[Path]) -> List[str]:
    """
    Collect required variable names across *files*.

    Returns names in discovery order with duplicates and ``NOISE_VARS``
    removed.
    """
    seen = set()
    result: List[str] = []
    for path in files:
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.debug("Skipping unreadable %s: %s", path, exc)
            continue
        for name in find_env_vars(text):
            if name in NOISE_VARS or name in seen:
                continue
            seen.add(name)
            result.append(name)
    return result


__all__ = ["NOISE_VARS", "find_env_vars", "scan_for_env_vars"]
