"""Core types for tool definitions and investigations."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from osint_compare.analysis.types import ResultStatus, ToolResult


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ToolCategory(str, Enum):
    """What a tool is primarily used for."""

    SOCIAL_MEDIA = "Social Media"
    DOMAIN_INFO = "Domain Information"
    EMAIL_INFO = "Email Information"
    PERSON_INFO = "Person Information"
    COMPANY_INFO = "Company Information"
    GENERAL = "General Purpose"


class ToolCapability(str, Enum):
    SOCIAL_PROFILES = "Social Profiles"
    EMAIL_VERIFICATION = "Email Verification"
    DOMAIN_WHOIS = "Domain WHOIS"
    PERSON_SEARCH = "Person Search"
    COMPANY_RESEARCH = "Company Research"
    IP_LOOKUP = "IP Lookup"
    DARK_WEB = "Dark Web"
    NEWS_SEARCH = "News Search"


class InvestigationType(str, Enum):
    """Kind of subject an investigation query describes."""

    PERSON = "Person"
    DOMAIN = "Domain"
    EMAIL = "Email"
    USERNAME = "Username"
    COMPANY = "Company"
    GENERIC = "Generic"


def _new_id() -> str:
    return uuid.uuid4().hex[:16]


# ---------------------------------------------------------------------------
# Tool definition
# ---------------------------------------------------------------------------


@dataclass
class OsintTool:
    """A registered OSINT tool and the wire format it answers in."""

    id: str = field(default_factory=_new_id)
    name: str = ""
    description: str = ""
    url: str = ""
    api_key: str | None = None
    is_active: bool = True
    category: ToolCategory = ToolCategory.GENERAL
    capabilities: list[ToolCapability] = field(default_factory=list)
    response_format: str = "JSON"  # "JSON" or "XML", case-insensitive

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict. The API key is never exposed."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "has_api_key": bool(self.api_key),
            "is_active": self.is_active,
            "category": self.category.value,
            "capabilities": [c.value for c in self.capabilities],
            "response_format": self.response_format,
        }


# ---------------------------------------------------------------------------
# Investigation
# ---------------------------------------------------------------------------


@dataclass
class Investigation:
    """A query dispatched to a set of tools, with one result per tool."""

    id: str = field(default_factory=_new_id)
    query: str = ""
    type: InvestigationType = InvestigationType.GENERIC
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tool_ids: list[str] = field(default_factory=list)
    results: list[ToolResult] = field(default_factory=list)

    @classmethod
    def start(cls, query: str, type: InvestigationType, tool_ids: list[str]) -> Investigation:
        """New investigation with a pending result for every selected tool."""
        return cls(
            query=query,
            type=type,
            tool_ids=list(tool_ids),
            results=[ToolResult(tool_id=tid, status=ResultStatus.PENDING) for tid in tool_ids],
        )

    def get_result(self, tool_id: str) -> ToolResult | None:
        for result in self.results:
            if result.tool_id == tool_id:
                return result
        return None

    def completed_results(self) -> list[ToolResult]:
        return [r for r in self.results if r.status == ResultStatus.COMPLETED]

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict for storage/API."""
        return {
            "id": self.id,
            "query": self.query,
            "type": self.type.value,
            "date": self.date.isoformat(),
            "tool_ids": self.tool_ids,
            "results": [r.to_dict() for r in self.results],
        }
