"""Core types and DTOs for scoring and comparing tool results."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from osint_compare.normalizer.types import Entity, StandardizedResponse


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ResultStatus(str, Enum):
    """Lifecycle of one tool's result within an investigation."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMEOUT = "timeout"


# ---------------------------------------------------------------------------
# Tool Result
# ---------------------------------------------------------------------------


@dataclass
class ToolResult:
    """One tool's outcome within an investigation.

    ``raw_response`` holds the response body, or the error message when the
    call failed or timed out. ``standardized_response`` is only set for
    completed results.
    """

    tool_id: str = ""
    status: ResultStatus = ResultStatus.PENDING
    raw_response: str = ""
    standardized_response: StandardizedResponse | None = None
    processed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    execution_time_ms: int = 0

    # Manual rating, set independently of automated scoring
    score: int | None = None  # 1–5
    notes: str | None = None

    @property
    def entities(self) -> list[Entity]:
        if self.standardized_response is None:
            return []
        return self.standardized_response.entities

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict for storage/API."""
        return {
            "tool_id": self.tool_id,
            "status": self.status.value,
            "raw_response": self.raw_response,
            "standardized_response": (
                self.standardized_response.to_dict() if self.standardized_response else None
            ),
            "processed_at": self.processed_at.isoformat() if self.processed_at else None,
            "execution_time_ms": self.execution_time_ms,
            "score": self.score,
            "notes": self.notes,
        }


# ---------------------------------------------------------------------------
# Comparison Metric
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ComparisonMetric:
    """A named, weighted scoring function over a single ToolResult.

    Evaluators return a value on a soft 1–10 scale.
    """

    name: str
    description: str
    evaluator: Callable[[ToolResult], float]
    weight: float = 1.0

    def __post_init__(self):
        if self.weight <= 0:
            raise ValueError(f"Metric weight must be positive, got {self.weight}")


@dataclass
class MetricScore:
    """Output of one metric for one result."""

    name: str = ""
    value: float = 0.0
    weight: float = 0.0

    def to_dict(self) -> dict:
        return {"name": self.name, "value": round(self.value, 4), "weight": self.weight}


# ---------------------------------------------------------------------------
# Diff Report
# ---------------------------------------------------------------------------


@dataclass
class FieldDiff:
    """Values of one field on both sides plus their difference."""

    tool1: Any = None
    tool2: Any = None
    difference: Any = None

    def to_dict(self) -> dict:
        return {"tool1": self.tool1, "tool2": self.tool2, "difference": self.difference}


@dataclass
class UniqueEntities:
    """Entities present on one side only."""

    tool1: list[Entity] = field(default_factory=list)
    tool2: list[Entity] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "tool1": [e.to_dict() for e in self.tool1],
            "tool2": [e.to_dict() for e in self.tool2],
        }


@dataclass
class DiffReport:
    """Structured differences between two tool results.

    When either input could not be compared, only ``error`` is set.
    """

    summary: FieldDiff | None = None
    entity_count: FieldDiff | None = None
    confidence: FieldDiff | None = None
    unique_entities: UniqueEntities | None = None
    execution_time: FieldDiff | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict for the API."""
        if self.error:
            return {"error": self.error}
        return {
            "summary": self.summary.to_dict(),
            "entity_count": self.entity_count.to_dict(),
            "confidence": self.confidence.to_dict(),
            "unique_entities": self.unique_entities.to_dict(),
            "execution_time": self.execution_time.to_dict(),
        }
