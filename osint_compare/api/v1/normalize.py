"""Normalize API — run a raw tool response through the normalizer."""

from fastapi import APIRouter

from osint_compare.core.exceptions import UnprocessableError
from osint_compare.normalizer import UnsupportedFormatError, normalize
from osint_compare.schemas.investigation import NormalizeRequest

router = APIRouter(tags=["normalize"])


@router.post("/normalize")
async def normalize_response(data: NormalizeRequest):
    """Return the canonical form of a raw response.

    Malformed bodies come back as a degraded response with
    ``metadata.error`` set; only an unsupported format is rejected.
    """
    try:
        response = normalize(data.raw_response, data.format)
    except UnsupportedFormatError as e:
        raise UnprocessableError(str(e))
    return response.to_dict()
