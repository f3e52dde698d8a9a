"""Tests for the tool gateway: types, canned responses and the simulated client."""

from __future__ import annotations

import json
import random

import pytest

from osint_compare.analysis.types import ResultStatus
from osint_compare.gateway.simulator import (
    MOCK_RESPONSES,
    SimulatedToolClient,
    ToolCallError,
    generate_mock_response,
)
from osint_compare.gateway.types import Investigation, InvestigationType, OsintTool
from osint_compare.normalizer.xml_parser import parse_flat_xml


def _tool(name: str = "PersonFinder", **kwargs) -> OsintTool:
    return OsintTool(id="t1", name=name, **kwargs)


# ==========================================================================
# Test: Gateway Types
# ==========================================================================


class TestGatewayTypes:
    """Test tool and investigation DTOs."""

    def test_tool_to_dict_hides_api_key(self):
        data = _tool(api_key="secret").to_dict()
        assert "api_key" not in data
        assert data["has_api_key"] is True
        assert "secret" not in json.dumps(data)

    def test_tool_defaults(self):
        tool = OsintTool(name="X")
        assert tool.is_active is True
        assert tool.response_format == "JSON"
        assert len(tool.id) == 16

    def test_investigation_start_creates_pending_results(self):
        inv = Investigation.start("Jane Doe", InvestigationType.PERSON, ["1", "3"])
        assert [r.tool_id for r in inv.results] == ["1", "3"]
        assert all(r.status == ResultStatus.PENDING for r in inv.results)
        assert inv.completed_results() == []

    def test_investigation_get_result(self):
        inv = Investigation.start("q", InvestigationType.GENERIC, ["1"])
        assert inv.get_result("1") is inv.results[0]
        assert inv.get_result("9") is None

    def test_investigation_to_dict(self):
        inv = Investigation.start("q", InvestigationType.DOMAIN, ["2"])
        data = inv.to_dict()
        assert data["type"] == "Domain"
        assert data["results"][0]["status"] == "pending"
        assert data["results"][0]["standardized_response"] is None


# ==========================================================================
# Test: Canned responses
# ==========================================================================


class TestMockResponses:
    """Every demo tool answers in its documented shape."""

    @pytest.mark.parametrize("name", ["SocialNetsQuery", "DomainIntelligence", "PersonFinder", "CyberEye"])
    def test_json_tools_return_json(self, name):
        data = json.loads(generate_mock_response("John Doe", name))
        assert isinstance(data, dict)

    def test_email_verify_returns_xml(self):
        body = generate_mock_response("john@example.com", "EmailVerify")
        assert body.startswith("<?xml")
        fields = parse_flat_xml(body)["email_verification"]
        assert fields["email"] == "john@example.com"
        assert fields["valid"] == "true"

    def test_unknown_tool(self):
        assert json.loads(generate_mock_response("q", "Nope")) == {"error": "No mock data available for this tool"}

    def test_query_is_embedded(self):
        data = json.loads(generate_mock_response("John Doe", "PersonFinder"))
        assert data["name"] == "John Doe"
        assert data["emails"] == ["john.doe@gmail.com"]
        assert data["social_profiles"]["linkedin"] == "linkedin.com/in/john-doe"

    def test_domain_gets_tld(self):
        assert json.loads(generate_mock_response("example", "DomainIntelligence"))["domain"] == "example.com"
        assert json.loads(generate_mock_response("x.org", "DomainIntelligence"))["domain"] == "x.org"

    @pytest.mark.parametrize(
        "query,subject_type",
        [("a@b.com", "email"), ("b.com", "domain"), ("John Doe", "person")],
    )
    def test_cyber_eye_subject_type(self, query, subject_type):
        data = json.loads(generate_mock_response(query, "CyberEye"))
        assert data["analysis"]["type"] == subject_type

    def test_registry_covers_demo_tools(self):
        assert set(MOCK_RESPONSES) == {"SocialNetsQuery", "DomainIntelligence", "PersonFinder", "EmailVerify", "CyberEye"}


# ==========================================================================
# Test: Simulated client
# ==========================================================================


class TestSimulatedToolClient:
    """Random latency and failures, reproducible with a seeded RNG."""

    @pytest.mark.asyncio
    async def test_success_returns_canned_body(self):
        client = SimulatedToolClient(min_delay_ms=0, max_delay_ms=0, failure_rate=0.0)
        body = await client.call(_tool(), "John Doe")
        assert body == generate_mock_response("John Doe", "PersonFinder")

    @pytest.mark.asyncio
    async def test_always_fails(self):
        client = SimulatedToolClient(min_delay_ms=0, max_delay_ms=0, failure_rate=1.0)
        with pytest.raises(ToolCallError, match="API call to PersonFinder failed") as exc_info:
            await client.call(_tool(), "John Doe")
        assert exc_info.value.tool_name == "PersonFinder"

    @pytest.mark.asyncio
    async def test_seeded_runs_are_reproducible(self):
        async def outcomes(seed: int) -> list[bool]:
            client = SimulatedToolClient(min_delay_ms=0, max_delay_ms=1, failure_rate=0.5, rng=random.Random(seed))
            ok = []
            for _ in range(10):
                try:
                    await client.call(_tool(), "q")
                    ok.append(True)
                except ToolCallError:
                    ok.append(False)
            return ok

        assert await outcomes(42) == await outcomes(42)

    def test_defaults_from_settings(self):
        from osint_compare.core.config import settings

        client = SimulatedToolClient()
        assert client.min_delay_ms == settings.simulated_min_delay_ms
        assert client.max_delay_ms == settings.simulated_max_delay_ms
        assert client.failure_rate == settings.simulated_failure_rate
