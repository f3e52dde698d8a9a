"""Canonical, tool-agnostic response types produced by the normalizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class EntityType(str, Enum):
    """Kinds of facts extracted from a tool response."""

    PERSON = "person"
    ORGANIZATION = "organization"
    LOCATION = "location"
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    USERNAME = "username"
    SOCIAL_PROFILE = "social_profile"
    DATE = "date"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Data containers
# ---------------------------------------------------------------------------


@dataclass
class Entity:
    """A typed fact found in a tool response."""

    type: EntityType = EntityType.OTHER
    value: str = ""
    confidence: float = 0.0  # 0.0–1.0
    metadata: dict[str, Any] | None = None

    @property
    def key(self) -> tuple[EntityType, str]:
        """Identity used when diffing two responses (confidence is ignored)."""
        return self.type, self.value

    def to_dict(self) -> dict:
        data = {
            "type": self.type.value,
            "value": self.value,
            "confidence": self.confidence,
        }
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data


@dataclass
class Link:
    """Relationship between two entities."""

    source: str = ""
    target: str = ""
    type: str = ""
    confidence: float = 0.0

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "confidence": self.confidence,
        }


@dataclass
class Source:
    """Provenance record reported by a tool."""

    name: str = "Unknown"
    url: str | None = None
    date: datetime | None = None
    reliability: float | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "url": self.url,
            "date": self.date.isoformat() if self.date else None,
            "reliability": self.reliability,
        }


# ---------------------------------------------------------------------------
# Main output DTO
# ---------------------------------------------------------------------------


@dataclass
class StandardizedResponse:
    """Canonical response shape every raw tool output is normalized into.

    The same structure regardless of which tool produced it or whether the
    tool spoke JSON or XML.
    """

    summary: str = "No summary available"
    entities: list[Entity] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    confidence: float = 0.5  # 0.0–1.0
    sources: list[Source] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_degraded(self) -> bool:
        return "error" in self.metadata

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict for storage/API."""
        return {
            "summary": self.summary,
            "entities": [e.to_dict() for e in self.entities],
            "links": [link.to_dict() for link in self.links],
            "confidence": self.confidence,
            "sources": [s.to_dict() for s in self.sources],
            "metadata": self.metadata,
        }
