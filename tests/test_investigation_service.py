"""Tests for the investigation service: runs, timeouts, ratings, ranking and comparison."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from osint_compare.analysis.types import ResultStatus
from osint_compare.gateway.simulator import ToolCallError
from osint_compare.gateway.types import InvestigationType, OsintTool
from osint_compare.normalizer.standardizer import FAILED_SUMMARY
from osint_compare.services.investigation_service import standardize_for_tool


# ==========================================================================
# Test: CRUD
# ==========================================================================


class TestInvestigationCrud:
    def test_create_is_pending(self, investigation_service):
        inv = investigation_service.create("Jane Doe", InvestigationType.PERSON, ["1", "3"])
        assert investigation_service.get(inv.id) is inv
        assert [r.status for r in inv.results] == [ResultStatus.PENDING, ResultStatus.PENDING]

    def test_get_missing(self, investigation_service):
        assert investigation_service.get("nope") is None

    def test_delete(self, investigation_service):
        inv = investigation_service.create("q", InvestigationType.GENERIC, ["1"])
        assert investigation_service.delete(inv.id) is True
        assert investigation_service.get(inv.id) is None
        assert investigation_service.delete(inv.id) is False

    def test_list_newest_first(self, investigation_service):
        now = datetime.now(timezone.utc)
        old = investigation_service.create("old", InvestigationType.GENERIC, ["1"])
        new = investigation_service.create("new", InvestigationType.GENERIC, ["1"])
        old.date = now - timedelta(days=1)
        new.date = now
        assert [inv.query for inv in investigation_service.list()] == ["new", "old"]

    def test_list_search_is_case_insensitive(self, investigation_service):
        investigation_service.create("Jane Doe", InvestigationType.PERSON, ["1"])
        investigation_service.create("example.com", InvestigationType.DOMAIN, ["2"])
        assert [inv.query for inv in investigation_service.list(search="jane")] == ["Jane Doe"]

    def test_list_filter_by_type(self, investigation_service):
        investigation_service.create("Jane Doe", InvestigationType.PERSON, ["1"])
        investigation_service.create("example.com", InvestigationType.DOMAIN, ["2"])
        assert [inv.query for inv in investigation_service.list(type=InvestigationType.DOMAIN)] == ["example.com"]
        assert investigation_service.list(search="jane", type=InvestigationType.DOMAIN) == []


# ==========================================================================
# Test: Running
# ==========================================================================


class TestRun:
    @pytest.mark.asyncio
    async def test_run_missing_investigation(self, investigation_service):
        assert await investigation_service.run("nope") is None

    @pytest.mark.asyncio
    async def test_all_tools_complete(self, investigation_service, tool_client):
        inv = investigation_service.create("Jane Doe", InvestigationType.PERSON, ["1", "2", "3", "4", "5"])
        inv = await investigation_service.run(inv.id)

        assert [r.tool_id for r in inv.results] == ["1", "2", "3", "4", "5"]
        assert all(r.status == ResultStatus.COMPLETED for r in inv.results)
        assert all(r.standardized_response is not None for r in inv.results)
        assert sorted(name for name, _ in tool_client.calls) == sorted(
            ["SocialNetsQuery", "DomainIntelligence", "PersonFinder", "EmailVerify", "CyberEye"]
        )

    @pytest.mark.asyncio
    async def test_xml_tool_is_parsed_as_xml(self, investigation_service):
        inv = investigation_service.create("john@example.com", InvestigationType.EMAIL, ["4"])
        inv = await investigation_service.run(inv.id)
        response = inv.results[0].standardized_response
        assert response.summary == "Email verification for john@example.com."
        assert not response.is_degraded

    @pytest.mark.asyncio
    async def test_failure_is_recorded(self, make_service):
        service = make_service({"PersonFinder": ToolCallError("API call to PersonFinder failed")})
        inv = service.create("Jane Doe", InvestigationType.PERSON, ["1", "3"])
        inv = await service.run(inv.id)

        ok, failed = inv.results
        assert ok.status == ResultStatus.COMPLETED
        assert failed.status == ResultStatus.FAILED
        assert failed.raw_response == "API call to PersonFinder failed"
        assert failed.standardized_response is None

    @pytest.mark.asyncio
    async def test_timeout(self, make_service):
        service = make_service(delay=0.5, timeout_seconds=0.05)
        inv = service.create("Jane Doe", InvestigationType.PERSON, ["1"])
        inv = await service.run(inv.id)

        result = inv.results[0]
        assert result.status == ResultStatus.TIMEOUT
        assert result.raw_response == "Tool call timed out after 0.05s"
        assert result.standardized_response is None
        assert result.execution_time_ms >= 40

    @pytest.mark.asyncio
    async def test_unknown_tool(self, investigation_service, tool_client):
        inv = investigation_service.create("q", InvestigationType.GENERIC, ["99"])
        inv = await investigation_service.run(inv.id)
        assert inv.results[0].status == ResultStatus.FAILED
        assert inv.results[0].raw_response == "Tool not found"
        assert tool_client.calls == []

    @pytest.mark.asyncio
    async def test_unparseable_body_degrades(self, make_service):
        service = make_service({"CyberEye": "not json"})
        inv = service.create("q", InvestigationType.GENERIC, ["5"])
        inv = await service.run(inv.id)
        result = inv.results[0]
        assert result.status == ResultStatus.COMPLETED
        assert result.standardized_response.summary == FAILED_SUMMARY
        assert result.standardized_response.is_degraded

    @pytest.mark.asyncio
    async def test_rerun_replaces_results(self, investigation_service):
        inv = investigation_service.create("Jane Doe", InvestigationType.PERSON, ["1"])
        await investigation_service.run(inv.id)
        investigation_service.rate_tool_result(inv.id, "1", 2)
        inv = await investigation_service.run(inv.id)
        assert inv.results[0].score is None


class TestStandardizeForTool:
    def test_unsupported_format_degrades(self):
        tool = OsintTool(name="Odd", response_format="YAML")
        response = standardize_for_tool(tool, "a: 1")
        assert response.is_degraded
        assert response.summary == FAILED_SUMMARY

    def test_format_is_case_insensitive(self):
        tool = OsintTool(name="X", response_format="json")
        assert standardize_for_tool(tool, '{"name": "A"}').summary == "Person information for A."


# ==========================================================================
# Test: Result updates
# ==========================================================================


class TestResultUpdates:
    def test_update_tool_result(self, investigation_service):
        inv = investigation_service.create("q", InvestigationType.GENERIC, ["2"])
        inv = investigation_service.update_tool_result(inv.id, "2", '{"domain": "x.com"}', 1200)
        result = inv.get_result("2")
        assert result.status == ResultStatus.COMPLETED
        assert result.execution_time_ms == 1200
        assert result.standardized_response.summary == "Domain information for x.com."

    def test_update_clamps_negative_time(self, investigation_service):
        inv = investigation_service.create("q", InvestigationType.GENERIC, ["2"])
        inv = investigation_service.update_tool_result(inv.id, "2", "{}", -5)
        assert inv.get_result("2").execution_time_ms == 0

    def test_update_missing(self, investigation_service):
        inv = investigation_service.create("q", InvestigationType.GENERIC, ["2"])
        assert investigation_service.update_tool_result("nope", "2", "{}", 0) is None
        assert investigation_service.update_tool_result(inv.id, "3", "{}", 0) is None

    def test_rate(self, investigation_service):
        inv = investigation_service.create("q", InvestigationType.GENERIC, ["1"])
        inv = investigation_service.rate_tool_result(inv.id, "1", 4, "solid")
        assert inv.get_result("1").score == 4
        assert inv.get_result("1").notes == "solid"

    @pytest.mark.parametrize("score", [0, 6])
    def test_rate_out_of_range(self, investigation_service, score):
        inv = investigation_service.create("q", InvestigationType.GENERIC, ["1"])
        with pytest.raises(ValueError):
            investigation_service.rate_tool_result(inv.id, "1", score)

    def test_rate_missing_result(self, investigation_service):
        inv = investigation_service.create("q", InvestigationType.GENERIC, ["1"])
        assert investigation_service.rate_tool_result(inv.id, "2", 3) is None


# ==========================================================================
# Test: Analysis
# ==========================================================================


class TestAnalysis:
    @pytest.mark.asyncio
    async def test_ranked_results(self, investigation_service):
        inv = investigation_service.create("Jane Doe", InvestigationType.PERSON, ["2", "3"])
        await investigation_service.run(inv.id)
        investigation_service.rate_tool_result(inv.id, "3", 5)
        investigation_service.rate_tool_result(inv.id, "2", 1)

        ranked = investigation_service.ranked_results(inv.id)
        assert [r.tool_id for r, _ in ranked] == ["3", "2"]
        assert ranked[0][1] > ranked[1][1]

    def test_ranked_results_missing(self, investigation_service):
        assert investigation_service.ranked_results("nope") is None

    @pytest.mark.asyncio
    async def test_compare(self, investigation_service):
        inv = investigation_service.create("Jane Doe", InvestigationType.PERSON, ["3", "5"])
        await investigation_service.run(inv.id)

        report = investigation_service.compare(inv.id, "3", "5")
        assert report.ok
        assert report.entity_count.difference == 3
        assert {e.value for e in report.unique_entities.tool2} == {
            "https://twitter.com/janedoe",
            "https://linkedin.com/in/jane-doe",
        }
        assert ("person", "Jane Doe") in {(e.type.value, e.value) for e in report.unique_entities.tool1}

    def test_compare_pending_results(self, investigation_service):
        inv = investigation_service.create("q", InvestigationType.GENERIC, ["1", "2"])
        report = investigation_service.compare(inv.id, "1", "2")
        assert report.error == "One or both results don't have standardized responses"

    def test_compare_missing(self, investigation_service):
        inv = investigation_service.create("q", InvestigationType.GENERIC, ["1"])
        assert investigation_service.compare("nope", "1", "1") is None
        assert investigation_service.compare(inv.id, "1", "9") is None


# ==========================================================================
# Test: Stats
# ==========================================================================


class TestStats:
    def test_empty_history(self, investigation_service):
        stats = investigation_service.stats()
        assert stats.to_dict() == {
            "total_investigations": 0,
            "tools_used": 0,
            "active_tools": 5,
            "avg_tools_per_query": 0.0,
        }

    def test_counts(self, investigation_service, tool_registry):
        investigation_service.create("a", InvestigationType.GENERIC, ["1", "3"])
        investigation_service.create("b", InvestigationType.GENERIC, ["3"])
        investigation_service.create("c", InvestigationType.GENERIC, ["1", "2", "5"])
        tool_registry.toggle_active("4")

        stats = investigation_service.stats()
        assert stats.total_investigations == 3
        assert stats.tools_used == 4
        assert stats.active_tools == 4
        assert stats.avg_tools_per_query == 2.0

    def test_average_rounds_half_up(self, investigation_service):
        for tool_ids in (["1", "2"], ["1", "2"], ["1", "2"], ["1", "2", "3"]):
            investigation_service.create("q", InvestigationType.GENERIC, tool_ids)
        # 9 selections over 4 investigations = 2.25
        assert investigation_service.stats().avg_tools_per_query == 2.3

        for tool_ids in (["1", "2"], ["1", "2"], ["1", "2", "3"], ["1", "2", "3", "4"]):
            investigation_service.create("q", InvestigationType.GENERIC, tool_ids)
        # 20 selections over 8 investigations
        assert investigation_service.stats().avg_tools_per_query == 2.5
