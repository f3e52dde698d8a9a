"""Tool registry — CRUD over OSINT tool definitions."""

from __future__ import annotations

import logging
from dataclasses import replace

from osint_compare.gateway.types import OsintTool, ToolCapability, ToolCategory
from osint_compare.services.repository import InMemoryRepository, Repository

logger = logging.getLogger(__name__)

# Fields a caller may change; the id is fixed at registration.
_UPDATABLE_FIELDS = frozenset(
    {"name", "description", "url", "api_key", "is_active", "category", "capabilities", "response_format"}
)
# null clears the key; every other field must keep a value.
_NULLABLE_FIELDS = frozenset({"api_key"})


def default_tools() -> list[OsintTool]:
    """The demo tools every fresh registry starts with."""
    return [
        OsintTool(
            id="1",
            name="SocialNetsQuery",
            description="AI-powered social media analysis tool",
            url="https://api.socialsleuth.example",
            category=ToolCategory.SOCIAL_MEDIA,
            capabilities=[ToolCapability.SOCIAL_PROFILES, ToolCapability.PERSON_SEARCH],
            response_format="JSON",
        ),
        OsintTool(
            id="2",
            name="DomainIntelligence",
            description="WHOIS and domain intelligence platform",
            url="https://api.domainintel.example",
            category=ToolCategory.DOMAIN_INFO,
            capabilities=[ToolCapability.DOMAIN_WHOIS],
            response_format="JSON",
        ),
        OsintTool(
            id="3",
            name="PersonFinder",
            description="Comprehensive person information discovery",
            url="https://api.personfinder.example",
            category=ToolCategory.PERSON_INFO,
            capabilities=[ToolCapability.PERSON_SEARCH, ToolCapability.SOCIAL_PROFILES],
            response_format="JSON",
        ),
        OsintTool(
            id="4",
            name="EmailVerify",
            description="Email verification and intelligence",
            url="https://api.emailverify.example",
            category=ToolCategory.EMAIL_INFO,
            capabilities=[ToolCapability.EMAIL_VERIFICATION],
            response_format="XML",
        ),
        OsintTool(
            id="5",
            name="CyberEye",
            description="All-in-one OSINT platform",
            url="https://api.cybereye.example",
            category=ToolCategory.GENERAL,
            capabilities=[
                ToolCapability.PERSON_SEARCH,
                ToolCapability.SOCIAL_PROFILES,
                ToolCapability.DOMAIN_WHOIS,
                ToolCapability.EMAIL_VERIFICATION,
                ToolCapability.IP_LOOKUP,
            ],
            response_format="JSON",
        ),
    ]


class ToolRegistry:
    """Registered tools, backed by an injected repository."""

    def __init__(self, repository: Repository[OsintTool] | None = None):
        self.repository = repository if repository is not None else InMemoryRepository()

    @classmethod
    def with_defaults(cls) -> ToolRegistry:
        return cls(InMemoryRepository(default_tools()))

    def list_tools(self) -> list[OsintTool]:
        return self.repository.list()

    def list_active(self) -> list[OsintTool]:
        return [t for t in self.repository.list() if t.is_active]

    def get(self, tool_id: str) -> OsintTool | None:
        return self.repository.get(tool_id)

    def add(self, tool: OsintTool) -> OsintTool:
        self.repository.upsert(tool)
        logger.info("Registered tool %s (%s, %s)", tool.name, tool.id, tool.response_format)
        return tool

    def update(self, tool_id: str, **changes) -> OsintTool | None:
        """Apply field changes to a tool. Returns None if it does not exist."""
        tool = self.repository.get(tool_id)
        if tool is None:
            return None

        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update tool fields: {', '.join(sorted(unknown))}")

        nulled = {k for k, v in changes.items() if v is None} - _NULLABLE_FIELDS
        if nulled:
            raise ValueError(f"Tool fields cannot be null: {', '.join(sorted(nulled))}")

        updated = replace(tool, **changes)
        return self.repository.upsert(updated)

    def delete(self, tool_id: str) -> bool:
        deleted = self.repository.delete(tool_id)
        if deleted:
            logger.info("Deleted tool %s", tool_id)
        return deleted

    def toggle_active(self, tool_id: str) -> OsintTool | None:
        tool = self.repository.get(tool_id)
        if tool is None:
            return None
        tool.is_active = not tool.is_active
        return self.repository.upsert(tool)
