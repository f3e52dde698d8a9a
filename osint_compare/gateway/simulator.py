"""Tool clients — the call-dispatch side of an investigation.

No real OSINT service is contacted. ``SimulatedToolClient`` waits a random
delay, fails a configurable share of calls, and otherwise answers with a
canned body in the shape each demo tool is known to produce:

  - SocialNetsQuery: JSON, list of profiles with likelihoods + summary
  - DomainIntelligence: JSON, WHOIS-style record
  - PersonFinder: JSON, person record with a platform → URL mapping
  - EmailVerify: flat XML verification record
  - CyberEye: JSON, nested analysis + findings

Timeouts and retries are not handled here; the investigation service bounds
each call.
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
import re
from abc import ABC, abstractmethod
from collections.abc import Callable

from osint_compare.core.config import settings
from osint_compare.gateway.types import OsintTool

logger = logging.getLogger(__name__)


class ToolCallError(Exception):
    """Raised when a tool call fails before producing a response body."""

    def __init__(self, message: str, tool_name: str = ""):
        super().__init__(message)
        self.tool_name = tool_name


class BaseToolClient(ABC):
    """Base class for anything that can run a query against a tool."""

    @abstractmethod
    async def call(self, tool: OsintTool, query: str) -> str:
        """Run ``query`` against ``tool`` and return the raw response body."""
        ...


# ---------------------------------------------------------------------------
# Canned responses
# ---------------------------------------------------------------------------


def _slug(query: str, sep: str = "") -> str:
    return re.sub(r"\s+", sep, query.lower())


def _social_nets_query(query: str) -> str:
    return json.dumps(
        {
            "query": query,
            "profiles": [
                {"platform": "Twitter", "username": _slug(query), "likelihood": 0.85},
                {"platform": "LinkedIn", "name": query, "position": "Software Engineer", "likelihood": 0.78},
                {"platform": "Instagram", "username": query.lower().split(" ")[0], "likelihood": 0.65},
            ],
            "summary": f"Found 3 potential profiles for {query} with varying confidence levels.",
        },
        indent=2,
    )


def _domain_intelligence(query: str) -> str:
    return json.dumps(
        {
            "domain": query if "." in query else f"{query}.com",
            "registrar": "GoDaddy.com, LLC",
            "created": "2015-03-17T14:32:15Z",
            "expires": "2025-03-17T14:32:15Z",
            "nameservers": ["ns1.example.com", "ns2.example.com"],
            "ip": "192.168.1.1",
            "location": "United States",
        },
        indent=2,
    )


def _person_finder(query: str) -> str:
    return json.dumps(
        {
            "name": query,
            "age": 35,
            "locations": ["New York, NY", "San Francisco, CA"],
            "emails": [f"{_slug(query, '.')}@gmail.com"],
            "phones": ["+1 (555) 123-4567"],
            "relatives": ["Jane Doe", "John Doe Jr."],
            "social_profiles": {
                "facebook": f"facebook.com/{_slug(query)}",
                "twitter": f"twitter.com/{_slug(query)}",
                "linkedin": f"linkedin.com/in/{_slug(query, '-')}",
            },
        },
        indent=2,
    )


def _email_verify(query: str) -> str:
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<email_verification>
  <email>{query}</email>
  <valid>true</valid>
  <disposable>false</disposable>
  <deliverable>true</deliverable>
  <domain_age>2563</domain_age>
  <first_name>John</first_name>
  <last_name>Doe</last_name>
  <company>Example Corp</company>
</email_verification>
"""


def _cyber_eye(query: str) -> str:
    if "@" in query:
        subject_type = "email"
    elif "." in query:
        subject_type = "domain"
    else:
        subject_type = "person"
    return json.dumps(
        {
            "input": query,
            "analysis": {
                "type": subject_type,
                "confidence": 0.89,
                "summary": f"Comprehensive analysis for {query} reveals moderate digital footprint.",
            },
            "findings": {
                "social_profiles": [
                    {"platform": "Twitter", "url": f"https://twitter.com/{_slug(query)}"},
                    {"platform": "LinkedIn", "url": f"https://linkedin.com/in/{_slug(query, '-')}"},
                ],
                "contact_info": {
                    "emails": [f"{_slug(query, '.')}@gmail.com"],
                    "phones": ["+1 (555) 123-4567"],
                },
                "locations": ["New York, NY"],
                "associations": ["Example Corp", "Tech Meetup Group"],
                "related_entities": ["Jane Doe", "Example Corp"],
            },
        },
        indent=2,
    )


MOCK_RESPONSES: dict[str, Callable[[str], str]] = {
    "SocialNetsQuery": _social_nets_query,
    "DomainIntelligence": _domain_intelligence,
    "PersonFinder": _person_finder,
    "EmailVerify": _email_verify,
    "CyberEye": _cyber_eye,
}


def generate_mock_response(query: str, tool_name: str) -> str:
    """Canned response body for a known demo tool."""
    builder = MOCK_RESPONSES.get(tool_name)
    if builder is None:
        return json.dumps({"error": "No mock data available for this tool"}, indent=2)
    return builder(query)


# ---------------------------------------------------------------------------
# Simulated client
# ---------------------------------------------------------------------------


class SimulatedToolClient(BaseToolClient):
    """Answers with canned bodies after a random delay; fails some calls."""

    def __init__(
        self,
        min_delay_ms: int | None = None,
        max_delay_ms: int | None = None,
        failure_rate: float | None = None,
        rng: random.Random | None = None,
    ):
        """
        Args:
            min_delay_ms: Lower bound of the simulated latency (default from settings)
            max_delay_ms: Upper bound of the simulated latency (default from settings)
            failure_rate: Share of calls that fail, 0.0–1.0 (default from settings)
            rng: Random source; pass a seeded instance for reproducible runs
        """
        self.min_delay_ms = settings.simulated_min_delay_ms if min_delay_ms is None else min_delay_ms
        self.max_delay_ms = settings.simulated_max_delay_ms if max_delay_ms is None else max_delay_ms
        self.failure_rate = settings.simulated_failure_rate if failure_rate is None else failure_rate
        self._rng = rng or random.Random()

    async def call(self, tool: OsintTool, query: str) -> str:
        delay_ms = self._rng.uniform(self.min_delay_ms, self.max_delay_ms)
        await asyncio.sleep(delay_ms / 1000)

        if self._rng.random() < self.failure_rate:
            logger.info("Simulated failure for %s after %.0fms", tool.name, delay_ms)
            raise ToolCallError(f"API call to {tool.name} failed", tool_name=tool.name)

        return generate_mock_response(query, tool.name)
