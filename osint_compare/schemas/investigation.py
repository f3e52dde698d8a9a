"""Pydantic schemas for Investigation API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from osint_compare.gateway.types import InvestigationType


class InvestigationCreate(BaseModel):
    query: str = Field(min_length=1, max_length=500)
    type: InvestigationType = InvestigationType.GENERIC
    tool_ids: list[str] = Field(min_length=1, max_length=50)
    run: bool = True  # dispatch immediately; False leaves every result pending


class RatingRequest(BaseModel):
    score: int = Field(ge=1, le=5)
    notes: str | None = Field(None, max_length=5000)


class ToolResultUpdate(BaseModel):
    raw_response: str
    execution_time_ms: int = Field(0, ge=0)


class MetricScoreResponse(BaseModel):
    name: str
    value: float
    weight: float


class RankedResultResponse(BaseModel):
    tool_id: str
    status: str
    overall_score: float
    metrics: list[MetricScoreResponse] = []


class ScoresResponse(BaseModel):
    investigation_id: str
    results: list[RankedResultResponse]


class NormalizeRequest(BaseModel):
    raw_response: str
    format: str = Field("json", min_length=1, max_length=20)


class InvestigationStatsResponse(BaseModel):
    total_investigations: int
    tools_used: int
    active_tools: int
    avg_tools_per_query: float
