"""Metric Evaluator — weighted quality score for a single tool result.

Overall score = Σ(metric(result) × weight) / Σ(weight)

Default metrics (soft 1–10 scale):
  - Execution Time      (×1)    faster is better, linear between 500 ms and 5 s
  - Entity Count        (×1.5)  more is better, saturates at 20 entities
  - Average Confidence  (×2)    mean entity confidence scaled to 0–10
  - Completeness        (×2)    summary, entity variety, sources, links
  - User Rating         (×3)    manual 1–5 rating, neutral 5 when unrated

The manual rating carries the largest weight: the automated metrics only
approximate human judgment.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from osint_compare.analysis.types import ComparisonMetric, MetricScore, ToolResult

logger = logging.getLogger(__name__)

FAST_RESPONSE_MS = 500
SLOW_RESPONSE_MS = 5000
ENTITY_COUNT_CAP = 20
NEUTRAL_USER_RATING = 5


# ---------------------------------------------------------------------------
# Evaluators
# ---------------------------------------------------------------------------


def execution_time_score(result: ToolResult) -> float:
    """10 at or below 500 ms, 1 at or above 5000 ms, linear in between."""
    time_ms = result.execution_time_ms
    if time_ms <= FAST_RESPONSE_MS:
        return 10.0
    if time_ms >= SLOW_RESPONSE_MS:
        return 1.0
    return 10 - ((time_ms - FAST_RESPONSE_MS) / (SLOW_RESPONSE_MS - FAST_RESPONSE_MS)) * 9


def entity_count_score(result: ToolResult) -> float:
    count = len(result.entities)
    if count >= ENTITY_COUNT_CAP:
        return 10.0
    if count == 0:
        return 1.0
    return 1 + (count / ENTITY_COUNT_CAP) * 9


def average_confidence_score(result: ToolResult) -> float:
    entities = result.entities
    if not entities:
        return 0.0
    return sum(e.confidence for e in entities) / len(entities) * 10


def completeness_score(result: ToolResult) -> float:
    response = result.standardized_response
    if response is None:
        return 1.0

    score = 0.0
    if response.summary and len(response.summary) > 10:
        score += 2
    score += min(5, len({e.type for e in response.entities}))
    if response.sources:
        score += 2
    if response.links:
        score += 1
    return score


def user_rating_score(result: ToolResult) -> float:
    return float(result.score or NEUTRAL_USER_RATING)


STANDARD_METRICS: tuple[ComparisonMetric, ...] = (
    ComparisonMetric(
        name="Execution Time",
        description="How quickly the tool returned results",
        evaluator=execution_time_score,
        weight=1,
    ),
    ComparisonMetric(
        name="Entity Count",
        description="Number of entities identified",
        evaluator=entity_count_score,
        weight=1.5,
    ),
    ComparisonMetric(
        name="Average Confidence",
        description="Average confidence level of identified entities",
        evaluator=average_confidence_score,
        weight=2,
    ),
    ComparisonMetric(
        name="Completeness",
        description="How complete the response is (has all expected data types)",
        evaluator=completeness_score,
        weight=2,
    ),
    ComparisonMetric(
        name="User Rating",
        description="Manual user rating of result quality",
        evaluator=user_rating_score,
        weight=3,
    ),
)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def evaluate_metrics(
    result: ToolResult,
    metrics: Sequence[ComparisonMetric] = STANDARD_METRICS,
) -> list[MetricScore]:
    """Per-metric breakdown, in metric order."""
    return [MetricScore(name=m.name, value=m.evaluator(result), weight=m.weight) for m in metrics]


def calculate_overall_score(
    result: ToolResult,
    metrics: Sequence[ComparisonMetric] = STANDARD_METRICS,
) -> float:
    """Weighted mean of all metric values.

    Returns:
        0.0 for an empty metric set, otherwise a value on the metrics' scale.
    """
    if not metrics:
        return 0.0

    total_score = 0.0
    total_weight = 0.0
    for metric in metrics:
        total_score += metric.evaluator(result) * metric.weight
        total_weight += metric.weight

    overall = total_score / total_weight
    logger.debug("Scoring: tool=%s, status=%s → %.4f", result.tool_id, result.status.value, overall)
    return overall


def rank_results(
    results: Sequence[ToolResult],
    metrics: Sequence[ComparisonMetric] = STANDARD_METRICS,
) -> list[tuple[ToolResult, float]]:
    """Pair each result with its overall score, highest first.

    Ties keep their original order.
    """
    scored = [(r, calculate_overall_score(r, metrics)) for r in results]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)
