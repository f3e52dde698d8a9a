"""Result Comparator — structural differences between two tool results."""

from __future__ import annotations

import logging

from osint_compare.analysis.types import DiffReport, FieldDiff, ToolResult, UniqueEntities
from osint_compare.normalizer.types import Entity, StandardizedResponse

logger = logging.getLogger(__name__)

MISSING_INPUT_ERROR = "One or both results don't have standardized responses"
SUMMARY_ANNOTATION = "Qualitative difference in summaries"


def compare_results(result1: ToolResult, result2: ToolResult) -> DiffReport:
    """Compare two tool results field by field.

    Comparing a result that has no standardized response (pending, failed,
    timed out) is an expected condition and yields an error-shaped report
    rather than an exception.
    """
    r1 = result1.standardized_response
    r2 = result2.standardized_response
    if r1 is None or r2 is None:
        logger.debug(
            "Cannot compare %s with %s: missing standardized response",
            result1.tool_id,
            result2.tool_id,
        )
        return DiffReport(error=MISSING_INPUT_ERROR)

    return DiffReport(
        summary=FieldDiff(
            tool1=r1.summary,
            tool2=r2.summary,
            difference=SUMMARY_ANNOTATION,
        ),
        entity_count=FieldDiff(
            tool1=len(r1.entities),
            tool2=len(r2.entities),
            difference=len(r1.entities) - len(r2.entities),
        ),
        confidence=FieldDiff(
            tool1=r1.confidence,
            tool2=r2.confidence,
            difference=r1.confidence - r2.confidence,
        ),
        unique_entities=UniqueEntities(
            tool1=unique_entities(r1, r2),
            tool2=unique_entities(r2, r1),
        ),
        execution_time=FieldDiff(
            tool1=result1.execution_time_ms,
            tool2=result2.execution_time_ms,
            difference=result1.execution_time_ms - result2.execution_time_ms,
        ),
    )


def unique_entities(response1: StandardizedResponse, response2: StandardizedResponse) -> list[Entity]:
    """Entities of ``response1`` with no (type, value) match in ``response2``.

    Matching is exact: no case folding or URL canonicalization.
    """
    return [e1 for e1 in response1.entities if not any(e2.key == e1.key for e2 in response2.entities)]
