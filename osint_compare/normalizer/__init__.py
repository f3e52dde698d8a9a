"""Response Normalizer.

Turns heterogeneous OSINT tool responses into one canonical shape:
  1. Parse (strict JSON, or a flat XML micro-parser)
  2. Field extraction over a schema-less payload (summary, entities,
     links, confidence, sources)

Input:  raw response body + declared format
Output: StandardizedResponse
"""

from osint_compare.normalizer.errors import (
    ExtractionError,
    NormalizationError,
    ResponseParseError,
    UnsupportedFormatError,
)
from osint_compare.normalizer.standardizer import degraded_response, normalize
from osint_compare.normalizer.types import Entity, EntityType, Link, Source, StandardizedResponse

__all__ = [
    "Entity",
    "EntityType",
    "ExtractionError",
    "Link",
    "NormalizationError",
    "ResponseParseError",
    "Source",
    "StandardizedResponse",
    "UnsupportedFormatError",
    "degraded_response",
    "normalize",
]
