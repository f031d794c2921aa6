"""
Snapshot metadata schema.

The manifest stored as ``metadata.json`` at the head of every snapshot, plus
the devpack descriptor written beside heuristically detected projects.

Serialization:
    Optional fields that are empty are omitted from the JSON output rather
    than written as ``null``/``""``/``[]``, so the manifest stays stable and
    readable. Unknown keys are ignored when loading, which lets newer
    snapshots be inspected by older tools.

Example:
    >>> meta = SnapshotMetadata.new("api", environments=[EnvironmentConfig(type="go")])
    >>> SnapshotMetadata.from_json(meta.to_json()) == meta
    True
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

from .config import SCHEMA_VERSION

GENERIC_TYPE = "generic"


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def _unique(items: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class _ManifestModel(BaseModel):
    """Base model that drops empty optional keys when serialized."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # Keys written even when empty.
    always_keys: ClassVar[FrozenSet[str]] = frozenset()

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler):
        data = handler(self)
        return {
            key: value
            for key, value in data.items()
            if key in self.always_keys or not _is_empty(value)
        }

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class EnvironmentConfig(_ManifestModel):
    """One inferred runtime with its own setup and run commands."""

    always_keys: ClassVar[FrozenSet[str]] = frozenset({"type"})

    type: str
    version: str = ""
    image: str = ""
    setup: List[str] = Field(default_factory=list)
    run: str = ""

    @property
    def family(self) -> str:
        """Base ecosystem name, e.g. ``node`` for ``node (TypeScript)``."""
        return self.type.split(" ", 1)[0].lower() if self.type else ""


class LifecycleCommands(_ManifestModel):
    """Global lifecycle commands kept for snapshots made by older releases."""

    setup: List[str] = Field(default_factory=list)
    run: str = ""
    test: str = ""

    def is_empty(self) -> bool:
        return not (self.setup or self.run or self.test)


class SnapshotMetadata(_ManifestModel):
    """Full manifest describing one snapshot."""

    always_keys: ClassVar[FrozenSet[str]] = frozenset(
        {"schema_version", "name", "created_at", "environments", "commands"}
    )

    schema_version: str = SCHEMA_VERSION
    name: str
    description: str = ""
    author: str = ""
    tags: List[str] = Field(default_factory=list)
    created_at: str = ""
    environments: List[EnvironmentConfig] = Field(default_factory=list, validate_default=True)
    commands: LifecycleCommands = Field(default_factory=LifecycleCommands)
    required_vars: List[str] = Field(default_factory=list)
    manifest: List[str] = Field(default_factory=list)

    @field_validator("tags", "required_vars")
    @classmethod
    def _dedupe(cls, value: List[str]) -> List[str]:
        return _unique(value)

    @field_validator("environments")
    @classmethod
    def _never_empty(cls, value: List[EnvironmentConfig]) -> List[EnvironmentConfig]:
        if not value:
            return [EnvironmentConfig(type=GENERIC_TYPE)]
        return value

    @classmethod
    def new(
        cls,
        name: str,
        *,
        environments: Optional[List[EnvironmentConfig]] = None,
        commands: Optional[LifecycleCommands] = None,
        required_vars: Optional[List[str]] = None,
        **fields: Any,
    ) -> "SnapshotMetadata":
        """Create metadata stamped with the current local time (RFC 3339)."""
        fields.setdefault("created_at", datetime.now().astimezone().isoformat(timespec="seconds"))
        return cls(
            name=name,
            environments=environments or [],
            commands=commands or LifecycleCommands(),
            required_vars=required_vars or [],
            **fields,
        )

    def to_json(self) -> str:
        """Serialize as UTF-8 friendly, 2-space indented JSON."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str | bytes) -> "SnapshotMetadata":
        return cls.model_validate_json(text)


class Devpack(_ManifestModel):
    """
    Portable dependency descriptor for one ecosystem.

    ``dependencies`` maps a package name to a resolved version or the
    literal ``"latest"`` meaning unconstrained.
    """

    always_keys: ClassVar[FrozenSet[str]] = frozenset({"type", "dependencies"})

    type: str = ""
    dependencies: Dict[str, str] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


__all__ = [
    "GENERIC_TYPE",
    "EnvironmentConfig",
    "LifecycleCommands",
    "SnapshotMetadata",
    "Devpack",
]
