import asyncio
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from osint_compare.core.config import settings

# Override settings for tests
settings.app_env = "development"
settings.simulated_min_delay_ms = 0
settings.simulated_max_delay_ms = 0
settings.simulated_failure_rate = 0.0

from osint_compare.core.dependencies import get_investigation_service, get_tool_registry  # noqa: E402
from osint_compare.gateway.simulator import BaseToolClient, generate_mock_response  # noqa: E402
from osint_compare.gateway.types import OsintTool  # noqa: E402
from osint_compare.main import app  # noqa: E402
from osint_compare.services.investigation_service import InvestigationService  # noqa: E402
from osint_compare.services.tool_service import ToolRegistry  # noqa: E402


class ScriptedToolClient(BaseToolClient):
    """Deterministic tool client.

    Answers with the canned body for the tool unless ``outcomes`` maps the
    tool name to a body or to an exception to raise.
    """

    def __init__(self, outcomes: dict[str, str | Exception] | None = None, delay: float = 0.0):
        self.outcomes = outcomes or {}
        self.delay = delay
        self.calls: list[tuple[str, str]] = []

    async def call(self, tool: OsintTool, query: str) -> str:
        self.calls.append((tool.name, query))
        if self.delay:
            await asyncio.sleep(self.delay)
        outcome = self.outcomes.get(tool.name)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is not None:
            return outcome
        return generate_mock_response(query, tool.name)


@pytest.fixture
def tool_registry() -> ToolRegistry:
    return ToolRegistry.with_defaults()


@pytest.fixture
def tool_client() -> ScriptedToolClient:
    return ScriptedToolClient()


@pytest.fixture
def investigation_service(tool_registry: ToolRegistry, tool_client: ScriptedToolClient) -> InvestigationService:
    return InvestigationService(tools=tool_registry, client=tool_client, timeout_seconds=5.0)


@pytest.fixture
def make_service(tool_registry: ToolRegistry):
    """Build a service around a scripted client with custom outcomes, delay and timeout."""

    def _make(
        outcomes: dict[str, str | Exception] | None = None,
        delay: float = 0.0,
        timeout_seconds: float = 5.0,
    ) -> InvestigationService:
        client = ScriptedToolClient(outcomes, delay=delay)
        return InvestigationService(tools=tool_registry, client=client, timeout_seconds=timeout_seconds)

    return _make


@pytest.fixture
async def client(
    tool_registry: ToolRegistry,
    investigation_service: InvestigationService,
) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_tool_registry] = lambda: tool_registry
    app.dependency_overrides[get_investigation_service] = lambda: investigation_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
