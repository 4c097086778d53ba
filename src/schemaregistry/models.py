"""Data model for Schema Registry requests and responses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Mapping, Union

# Version sentinel accepted by get_subject_version() and test_compatibility().
# The registry addresses it as the literal path segment "latest"; 0 is never a
# real version since registered versions start at 1.
LATEST_VERSION = 0


def _normalise_token(token: str) -> str:
    return "".join(ch for ch in token.upper() if ch.isalnum())


def version_segment(version: int) -> str:
    """Render a version number as a path segment."""
    if version == LATEST_VERSION:
        return "latest"
    return str(version)


class Compatibility(IntEnum):
    """Compatibility levels enforced by the registry when schemas are registered."""
    NONE = 0        # Any schema is accepted
    FULL = 1        # Both backward and forward compatible with the latest schema
    FORWARD = 2     # The latest schema can read data written with the new one
    BACKWARD = 3    # The new schema can read data written with the latest one (default)

    @classmethod
    def from_wire(cls, value: Union[str, int]) -> "Compatibility":
        """Parse a level from its wire name (case-insensitive) or its ordinal.

        Raises:
            ValueError: If ``value`` names no known level
        """
        if isinstance(value, bool):
            raise ValueError(f"Unsupported compatibility level: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            normalised = _normalise_token(value)
            for member in cls:
                if normalised == member.name:
                    return member
        raise ValueError(f"Unsupported compatibility level: {value!r}")

    def to_wire(self) -> str:
        return self.name


@dataclass(frozen=True)
class SubjectSchema:
    """A schema string with its registry id and its version under a subject."""
    subject: str
    id: int
    version: int
    schema: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SubjectSchema":
        """Build a record from a decoded response body.

        Raises:
            KeyError: If a field is missing
            TypeError: If a field has the wrong JSON type
        """
        subject = data["subject"]
        schema = data["schema"]
        schema_id = data["id"]
        version = data["version"]
        if not isinstance(subject, str) or not isinstance(schema, str):
            raise TypeError("subject and schema must be strings")
        if not _is_int(schema_id) or not _is_int(version):
            raise TypeError("id and version must be integers")
        return cls(subject=subject, id=schema_id, version=version, schema=schema)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "id": self.id,
            "version": self.version,
            "schema": self.schema,
        }


@dataclass(frozen=True)
class Config:
    """Compatibility configuration, either global or for a single subject."""
    compatibility: Compatibility = Compatibility.BACKWARD

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        """Build a config from a response body.

        GET responses carry ``compatibilityLevel`` while PUT responses echo the
        request's ``compatibility`` key; both are accepted.
        """
        if "compatibilityLevel" in data:
            raw = data["compatibilityLevel"]
        else:
            raw = data["compatibility"]
        return cls(compatibility=Compatibility.from_wire(raw))

    def to_dict(self) -> Dict[str, Any]:
        return {"compatibility": self.compatibility.to_wire()}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
