"""Normalizer error taxonomy."""


class NormalizationError(Exception):
    """Base class for failures while turning a raw response into canonical form."""


class ResponseParseError(NormalizationError):
    """The raw body is not valid for its declared format."""


class ExtractionError(NormalizationError):
    """The body parsed but a field could not be interpreted."""


class UnsupportedFormatError(NormalizationError, ValueError):
    """The declared response format is neither JSON nor XML."""

    def __init__(self, fmt: str):
        super().__init__(f"Unsupported format: {fmt}")
        self.format = fmt
