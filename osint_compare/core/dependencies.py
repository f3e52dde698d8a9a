"""FastAPI dependencies for the process-wide services.

Tests replace these through ``app.dependency_overrides`` with fresh
registries and a deterministic tool client.
"""

from functools import lru_cache

from osint_compare.services.investigation_service import InvestigationService
from osint_compare.services.tool_service import ToolRegistry


@lru_cache
def get_tool_registry() -> ToolRegistry:
    return ToolRegistry.with_defaults()


@lru_cache
def get_investigation_service() -> InvestigationService:
    return InvestigationService(tools=get_tool_registry())
