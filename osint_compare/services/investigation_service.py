"""Investigation service — lifecycle of investigations and their tool results.

Running an investigation:
  1. One asyncio task per selected tool, gathered concurrently
  2. Each call bounded by ``tool_timeout_seconds`` → TIMEOUT on expiry
  3. Client errors → FAILED, with the error text as the raw response
  4. Completed bodies normalized with the tool's declared format
  5. Results stored in the investigation's tool order

Usage:
    service = InvestigationService(tools=ToolRegistry.with_defaults())
    investigation = service.create("Jane Doe", InvestigationType.PERSON, ["1", "3"])
    investigation = await service.run(investigation.id)
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

from osint_compare.analysis.comparator import compare_results
from osint_compare.analysis.scoring import rank_results
from osint_compare.analysis.types import DiffReport, ResultStatus, ToolResult
from osint_compare.core.config import settings
from osint_compare.core.metrics import TOOL_CALL_DURATION, TOOL_CALLS
from osint_compare.gateway.simulator import BaseToolClient, SimulatedToolClient
from osint_compare.gateway.types import Investigation, InvestigationType, OsintTool
from osint_compare.normalizer import StandardizedResponse, UnsupportedFormatError, degraded_response, normalize
from osint_compare.services.repository import InMemoryRepository, Repository
from osint_compare.services.tool_service import ToolRegistry

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class InvestigationStats:
    total_investigations: int = 0
    tools_used: int = 0  # distinct tool ids across all investigations
    active_tools: int = 0
    avg_tools_per_query: float = 0.0  # one decimal

    def to_dict(self) -> dict:
        return asdict(self)


def standardize_for_tool(tool: OsintTool, raw_response: str) -> StandardizedResponse:
    """Normalize a body with the tool's declared format.

    An unsupported format degrades exactly like a parse failure.
    """
    try:
        return normalize(raw_response, tool.response_format)
    except UnsupportedFormatError as e:
        logger.warning("Tool %s declares an unsupported format: %s", tool.name, e)
        return degraded_response(e)


class InvestigationService:
    """Creates, runs, rates and compares investigations."""

    def __init__(
        self,
        tools: ToolRegistry,
        repository: Repository[Investigation] | None = None,
        client: BaseToolClient | None = None,
        timeout_seconds: float | None = None,
    ):
        """
        Args:
            tools: Registry used to resolve tool ids
            repository: Investigation store (fresh in-memory store by default)
            client: Tool client (simulated by default)
            timeout_seconds: Per-tool call budget (default from settings)
        """
        self.tools = tools
        self.repository = repository if repository is not None else InMemoryRepository()
        self.client = client or SimulatedToolClient()
        self.timeout_seconds = settings.tool_timeout_seconds if timeout_seconds is None else timeout_seconds

    # -- CRUD -------------------------------------------------------------

    def create(self, query: str, type: InvestigationType, tool_ids: list[str]) -> Investigation:
        investigation = Investigation.start(query, type, tool_ids)
        self.repository.upsert(investigation)
        logger.info(
            "Created investigation %s: query=%r, type=%s, tools=%s",
            investigation.id,
            query,
            type.value,
            tool_ids,
        )
        return investigation

    def get(self, investigation_id: str) -> Investigation | None:
        return self.repository.get(investigation_id)

    def list(
        self,
        search: str | None = None,
        type: InvestigationType | None = None,
    ) -> list[Investigation]:
        """History, newest first, optionally filtered by type and query text."""
        items = sorted(self.repository.list(), key=lambda inv: inv.date, reverse=True)
        if type is not None:
            items = [inv for inv in items if inv.type == type]
        if search:
            needle = search.lower()
            items = [inv for inv in items if needle in inv.query.lower()]
        return items

    def delete(self, investigation_id: str) -> bool:
        return self.repository.delete(investigation_id)

    def stats(self) -> InvestigationStats:
        """Dashboard counters over the whole history."""
        investigations = self.repository.list()
        selections = sum(len(inv.tool_ids) for inv in investigations)
        return InvestigationStats(
            total_investigations=len(investigations),
            tools_used=len({tid for inv in investigations for tid in inv.tool_ids}),
            active_tools=len(self.tools.list_active()),
            avg_tools_per_query=_round_half_up(selections / len(investigations)) if investigations else 0.0,
        )

    # -- Running ----------------------------------------------------------

    async def run(self, investigation_id: str) -> Investigation | None:
        """Dispatch the query to every selected tool concurrently."""
        investigation = self.repository.get(investigation_id)
        if investigation is None:
            return None

        results = await asyncio.gather(
            *(self._run_tool(investigation.id, tool_id, investigation.query) for tool_id in investigation.tool_ids)
        )
        investigation.results = list(results)
        self.repository.upsert(investigation)

        counts: dict[str, int] = {}
        for r in investigation.results:
            counts[r.status.value] = counts.get(r.status.value, 0) + 1
        logger.info(
            "Investigation %s finished: %s", investigation.id, counts, extra={"investigation_id": investigation.id}
        )
        return investigation

    async def _run_tool(self, investigation_id: str, tool_id: str, query: str) -> ToolResult:
        log_extra = {"investigation_id": investigation_id, "tool_id": tool_id}
        tool = self.tools.get(tool_id)
        if tool is None:
            logger.warning("Tool %s not found", tool_id, extra=log_extra)
            return ToolResult(tool_id=tool_id, status=ResultStatus.FAILED, raw_response="Tool not found")

        start = time.perf_counter()
        try:
            raw_response = await asyncio.wait_for(self.client.call(tool, query), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            elapsed_ms = _elapsed_ms(start)
            logger.warning("Tool %s timed out after %dms", tool.name, elapsed_ms, extra=log_extra)
            self._record_call(tool, ResultStatus.TIMEOUT, elapsed_ms)
            return ToolResult(
                tool_id=tool_id,
                status=ResultStatus.TIMEOUT,
                raw_response=f"Tool call timed out after {self.timeout_seconds:g}s",
                execution_time_ms=elapsed_ms,
            )
        except Exception as e:
            elapsed_ms = _elapsed_ms(start)
            logger.warning("Tool %s failed: %s", tool.name, e, extra=log_extra)
            self._record_call(tool, ResultStatus.FAILED, elapsed_ms)
            return ToolResult(
                tool_id=tool_id,
                status=ResultStatus.FAILED,
                raw_response=str(e),
                execution_time_ms=elapsed_ms,
            )

        elapsed_ms = _elapsed_ms(start)
        logger.debug("Tool %s answered in %dms", tool.name, elapsed_ms, extra=log_extra)
        self._record_call(tool, ResultStatus.COMPLETED, elapsed_ms)
        return ToolResult(
            tool_id=tool_id,
            status=ResultStatus.COMPLETED,
            raw_response=raw_response,
            standardized_response=standardize_for_tool(tool, raw_response),
            execution_time_ms=elapsed_ms,
        )

    @staticmethod
    def _record_call(tool: OsintTool, status: ResultStatus, elapsed_ms: int) -> None:
        TOOL_CALLS.labels(tool=tool.name, status=status.value).inc()
        TOOL_CALL_DURATION.labels(tool=tool.name).observe(elapsed_ms / 1000)

    # -- Result updates ---------------------------------------------------

    def update_tool_result(
        self,
        investigation_id: str,
        tool_id: str,
        raw_response: str,
        execution_time_ms: int,
    ) -> Investigation | None:
        """Record a response received outside ``run`` and normalize it."""
        investigation = self.repository.get(investigation_id)
        if investigation is None:
            return None
        result = investigation.get_result(tool_id)
        if result is None:
            return None

        result.raw_response = raw_response
        result.status = ResultStatus.COMPLETED
        result.processed_at = datetime.now(timezone.utc)
        result.execution_time_ms = max(0, execution_time_ms)

        tool = self.tools.get(tool_id)
        result.standardized_response = standardize_for_tool(tool, raw_response) if tool else None

        return self.repository.upsert(investigation)

    def rate_tool_result(
        self,
        investigation_id: str,
        tool_id: str,
        score: int,
        notes: str | None = None,
    ) -> Investigation | None:
        if not MIN_RATING <= score <= MAX_RATING:
            raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {score}")

        investigation = self.repository.get(investigation_id)
        if investigation is None:
            return None
        result = investigation.get_result(tool_id)
        if result is None:
            return None

        result.score = score
        result.notes = notes
        return self.repository.upsert(investigation)

    # -- Analysis ---------------------------------------------------------

    def ranked_results(self, investigation_id: str) -> list[tuple[ToolResult, float]] | None:
        investigation = self.repository.get(investigation_id)
        if investigation is None:
            return None
        return rank_results(investigation.results)

    def compare(self, investigation_id: str, tool_id1: str, tool_id2: str) -> DiffReport | None:
        """Diff two tools' results. None if the investigation or a result is missing."""
        investigation = self.repository.get(investigation_id)
        if investigation is None:
            return None
        result1 = investigation.get_result(tool_id1)
        result2 = investigation.get_result(tool_id2)
        if result1 is None or result2 is None:
            return None
        return compare_results(result1, result2)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _round_half_up(value: float) -> float:
    """One decimal, halves rounded up (2.25 -> 2.3)."""
    return math.floor(value * 10 + 0.5) / 10
