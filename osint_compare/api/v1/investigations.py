"""Investigations API — launch, browse, rate, score and compare."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from osint_compare.analysis.scoring import evaluate_metrics
from osint_compare.core.dependencies import get_investigation_service
from osint_compare.core.exceptions import BadRequestError, NotFoundError
from osint_compare.gateway.types import Investigation, InvestigationType
from osint_compare.schemas.investigation import (
    InvestigationCreate,
    InvestigationStatsResponse,
    RankedResultResponse,
    RatingRequest,
    ScoresResponse,
    ToolResultUpdate,
)
from osint_compare.services.investigation_service import InvestigationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/investigations", tags=["investigations"])


def _get_investigation(service: InvestigationService, investigation_id: str) -> Investigation:
    investigation = service.get(investigation_id)
    if investigation is None:
        raise NotFoundError("Investigation not found")
    return investigation


# ── History ────────────────────────────────────────────────────────


@router.get("/")
async def list_investigations(
    search: str | None = Query(None, max_length=500),
    type: InvestigationType | None = None,
    service: InvestigationService = Depends(get_investigation_service),
):
    """Investigation history, newest first."""
    return [inv.to_dict() for inv in service.list(search=search, type=type)]


@router.get("/stats", response_model=InvestigationStatsResponse)
async def investigation_stats(service: InvestigationService = Depends(get_investigation_service)):
    """Totals for the dashboard: investigations, distinct tools used, average tools per query."""
    return service.stats().to_dict()


@router.get("/{investigation_id}")
async def get_investigation(
    investigation_id: str,
    service: InvestigationService = Depends(get_investigation_service),
):
    return _get_investigation(service, investigation_id).to_dict()


@router.delete("/{investigation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_investigation(
    investigation_id: str,
    service: InvestigationService = Depends(get_investigation_service),
):
    if not service.delete(investigation_id):
        raise NotFoundError("Investigation not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Launch / run ───────────────────────────────────────────────────


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_investigation(
    data: InvestigationCreate,
    service: InvestigationService = Depends(get_investigation_service),
):
    """Create an investigation and, unless ``run`` is false, dispatch it."""
    investigation = service.create(data.query, data.type, data.tool_ids)
    if data.run:
        investigation = await service.run(investigation.id)
    return investigation.to_dict()


@router.post("/{investigation_id}/run")
async def run_investigation(
    investigation_id: str,
    service: InvestigationService = Depends(get_investigation_service),
):
    investigation = await service.run(investigation_id)
    if investigation is None:
        raise NotFoundError("Investigation not found")
    return investigation.to_dict()


# ── Results ────────────────────────────────────────────────────────


@router.put("/{investigation_id}/results/{tool_id}")
async def update_tool_result(
    investigation_id: str,
    tool_id: str,
    data: ToolResultUpdate,
    service: InvestigationService = Depends(get_investigation_service),
):
    """Record a tool response received out of band."""
    investigation = service.update_tool_result(
        investigation_id, tool_id, data.raw_response, data.execution_time_ms
    )
    if investigation is None:
        raise NotFoundError("Investigation or tool result not found")
    return investigation.to_dict()


@router.put("/{investigation_id}/results/{tool_id}/rating")
async def rate_tool_result(
    investigation_id: str,
    tool_id: str,
    data: RatingRequest,
    service: InvestigationService = Depends(get_investigation_service),
):
    investigation = service.rate_tool_result(investigation_id, tool_id, data.score, data.notes)
    if investigation is None:
        raise NotFoundError("Investigation or tool result not found")
    return investigation.to_dict()


# ── Analysis ───────────────────────────────────────────────────────


@router.get("/{investigation_id}/scores", response_model=ScoresResponse)
async def get_scores(
    investigation_id: str,
    service: InvestigationService = Depends(get_investigation_service),
):
    """Results ranked by overall score, with the per-metric breakdown."""
    ranked = service.ranked_results(investigation_id)
    if ranked is None:
        raise NotFoundError("Investigation not found")
    return ScoresResponse(
        investigation_id=investigation_id,
        results=[
            RankedResultResponse(
                tool_id=result.tool_id,
                status=result.status.value,
                overall_score=round(score, 4),
                metrics=[m.to_dict() for m in evaluate_metrics(result)],
            )
            for result, score in ranked
        ],
    )


@router.get("/{investigation_id}/compare")
async def compare_tool_results(
    investigation_id: str,
    tool1: str = Query(..., min_length=1),
    tool2: str = Query(..., min_length=1),
    service: InvestigationService = Depends(get_investigation_service),
):
    """Diff two tools' results. A result that cannot be compared yields ``{"error": ...}``."""
    if tool1 == tool2:
        raise BadRequestError("Select two different tools to compare")
    _get_investigation(service, investigation_id)
    report = service.compare(investigation_id, tool1, tool2)
    if report is None:
        raise NotFoundError("Tool result not found in this investigation")
    return report.to_dict()
