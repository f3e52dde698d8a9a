"""Response Standardizer — raw tool response to StandardizedResponse.

Two stages:
  1. Parse: format-dispatched (strict JSON, or the flat XML micro-parser).
  2. Extract: independent field extractors run over a schema-less Payload,
     each following a fixed lookup precedence.

Every parse or extraction failure is converted into a degraded response, so
callers have a single result channel. The one exception is an unsupported
format, which is raised for the caller to handle (see ``degraded_response``).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from osint_compare.core.metrics import NORMALIZATIONS
from osint_compare.normalizer.errors import (
    ExtractionError,
    ResponseParseError,
    UnsupportedFormatError,
)
from osint_compare.normalizer.payload import Payload
from osint_compare.normalizer.types import (
    Entity,
    EntityType,
    Link,
    Source,
    StandardizedResponse,
)
from osint_compare.normalizer.xml_parser import parse_flat_xml

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("json", "xml")

NO_SUMMARY = "No summary available"
FAILED_SUMMARY = "Failed to standardize response"

DEFAULT_CONFIDENCE = 0.5
DEFAULT_PROFILE_CONFIDENCE = 0.7
DEFAULT_SOURCE_RELIABILITY = 0.5

# Lookup precedence chains. Order matters: only the first present path is used.
_SUMMARY_PATHS = ("summary", "analysis.summary", "result.summary")
_PROFILE_SUMMARY_PATHS = ("profiles", "social_profiles")
_EMAIL_SUMMARY_PATHS = ("email", "email_verification.email")
_PROFILE_PATHS = ("profiles", "social_profiles", "findings.social_profiles")
_CONFIDENCE_PATHS = ("confidence", "analysis.confidence")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(raw_response: str, fmt: str) -> StandardizedResponse:
    """Convert a tool-specific response body into a StandardizedResponse.

    Args:
        raw_response: Unparsed response body.
        fmt: Declared response format, case-insensitive ("json" or "xml").

    Raises:
        UnsupportedFormatError: if ``fmt`` is not a supported format.
    """
    fmt_key = (fmt or "").strip().lower()
    if fmt_key not in SUPPORTED_FORMATS:
        NORMALIZATIONS.labels(format="unsupported", outcome="rejected").inc()
        raise UnsupportedFormatError(fmt)

    try:
        payload = Payload(_parse(raw_response, fmt_key))
        response = StandardizedResponse(
            summary=extract_summary(payload),
            entities=extract_entities(payload),
            links=extract_links(payload),
            confidence=extract_confidence(payload),
            sources=extract_sources(payload),
            metadata={},
        )
    except Exception as e:
        logger.warning("Failed to standardize %s response: %s", fmt_key, e)
        NORMALIZATIONS.labels(format=fmt_key, outcome="degraded").inc()
        return degraded_response(e)

    NORMALIZATIONS.labels(format=fmt_key, outcome="ok").inc()
    return response


def degraded_response(error: BaseException) -> StandardizedResponse:
    """Minimal response describing why normalization failed."""
    return StandardizedResponse(
        summary=FAILED_SUMMARY,
        entities=[],
        links=[],
        confidence=0.0,
        sources=[],
        metadata={"error": f"{type(error).__name__}: {error}"},
    )


# ---------------------------------------------------------------------------
# Parse stage
# ---------------------------------------------------------------------------


def _parse(raw_response: str, fmt: str) -> Any:
    if fmt == "json":
        try:
            parsed = json.loads(raw_response, parse_constant=_reject_constant)
        except (TypeError, ValueError) as e:
            raise ResponseParseError(f"Invalid JSON: {e}") from e
        if parsed is None:
            raise ResponseParseError("JSON document is null")
        return parsed
    return parse_flat_xml(raw_response)


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"Non-standard constant {name}")


# ---------------------------------------------------------------------------
# Field extractors
# ---------------------------------------------------------------------------


def extract_summary(payload: Payload) -> str:
    summary = payload.first(*_SUMMARY_PATHS)
    if summary is not None:
        return str(summary)

    # Tools without a summary get one synthesized from their data
    profiles = payload.first(*_PROFILE_SUMMARY_PATHS)
    if profiles is not None:
        return f"Found {_key_count(profiles)} social profiles."

    domain = payload.get("domain")
    if domain is not None:
        return f"Domain information for {domain}."

    name = payload.get("name")
    if name is not None:
        return f"Person information for {name}."

    email = payload.first(*_EMAIL_SUMMARY_PATHS)
    if email is not None:
        return f"Email verification for {email}."

    return NO_SUMMARY


def extract_entities(payload: Payload) -> list[Entity]:
    entities: list[Entity] = []

    name = payload.get("name")
    if name is not None:
        entities.append(Entity(type=EntityType.PERSON, value=str(name), confidence=0.9))

    entities.extend(_extract_emails(payload))

    domain = payload.get("domain")
    if domain is not None:
        entities.append(Entity(type=EntityType.URL, value=str(domain), confidence=0.9))

    for path in _PROFILE_PATHS:
        profiles = payload.get(path)
        if profiles is not None:
            entities.extend(_extract_profiles(profiles))
            break

    entities.extend(_extract_locations(payload))

    return entities


def _extract_emails(payload: Payload) -> list[Entity]:
    """Emails from the first matching source only."""
    email = payload.first("email", "email_verification.email")
    if email is not None:
        return [Entity(type=EntityType.EMAIL, value=str(email), confidence=0.9)]

    emails = payload.get_list("emails")
    if emails is None:
        emails = payload.get_list("findings.contact_info.emails")
    if emails is None:
        return []
    return [Entity(type=EntityType.EMAIL, value=str(e), confidence=0.8) for e in emails]


def _extract_profiles(profiles: Any) -> list[Entity]:
    """Social profiles given either as a list of records or a platform mapping."""
    entities: list[Entity] = []

    if isinstance(profiles, list):
        for profile in profiles:
            if not isinstance(profile, dict):
                entities.append(
                    Entity(
                        type=EntityType.SOCIAL_PROFILE,
                        value=str(profile),
                        confidence=DEFAULT_PROFILE_CONFIDENCE,
                    )
                )
                continue

            value = profile.get("url") or profile.get("username") or profile.get("name")
            if not value:
                raise ExtractionError(f"Social profile has no url, username or name: {profile!r}")
            value = str(value)

            platform = profile.get("platform")
            if platform and str(platform).lower() not in value:
                value = f"{platform}: {value}"

            confidence = profile.get("likelihood") or profile.get("confidence") or DEFAULT_PROFILE_CONFIDENCE
            entities.append(
                Entity(
                    type=EntityType.SOCIAL_PROFILE,
                    value=value,
                    confidence=_to_unit_interval(confidence),
                )
            )
    elif isinstance(profiles, dict):
        # e.g. {"facebook": "facebook.com/jdoe", "twitter": "twitter.com/jdoe"}
        for platform, url in profiles.items():
            entities.append(
                Entity(
                    type=EntityType.SOCIAL_PROFILE,
                    value=f"{platform}: {url}",
                    confidence=DEFAULT_PROFILE_CONFIDENCE,
                )
            )

    return entities


def _extract_locations(payload: Payload) -> list[Entity]:
    location = payload.get("location")
    if location is not None:
        return [Entity(type=EntityType.LOCATION, value=str(location), confidence=0.8)]

    locations = payload.get_list("locations")
    if locations is None:
        locations = payload.get_list("findings.locations")
    if locations is None:
        return []
    return [Entity(type=EntityType.LOCATION, value=str(loc), confidence=0.7) for loc in locations]


def extract_links(payload: Payload) -> list[Link]:
    # No tool currently reports relationships in a shape we can map.
    return []


def extract_confidence(payload: Payload) -> float:
    confidence = payload.first(*_CONFIDENCE_PATHS)
    if confidence is None:
        return DEFAULT_CONFIDENCE
    return _to_unit_interval(confidence)


def extract_sources(payload: Payload) -> list[Source]:
    sources: list[Source] = []
    for item in payload.get_list("sources") or []:
        record = item if isinstance(item, dict) else {}
        reliability = record.get("reliability") or DEFAULT_SOURCE_RELIABILITY
        sources.append(
            Source(
                name=str(record.get("name") or "Unknown"),
                url=record.get("url"),
                date=_parse_date(record.get("date")),
                reliability=_to_unit_interval(reliability),
            )
        )
    return sources


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _key_count(value: Any) -> int:
    """Number of enumerable keys: items of a list or object, characters of a string, 0 otherwise."""
    if isinstance(value, (list, dict, str)):
        return len(value)
    return 0


def _to_unit_interval(value: Any) -> float:
    """Coerce a reported score to float and clamp it to 0.0–1.0."""
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ExtractionError(f"Expected a numeric score, got {value!r}") from e
    return min(1.0, max(0.0, number))


def _parse_date(value: Any) -> datetime | None:
    """Parse an ISO-8601 date; unparseable values are dropped."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Ignoring unparseable source date: %r", value)
        return None
