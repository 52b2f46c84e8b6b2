"""Domain-specific exceptions for the service and pipeline layers.

Routers never catch these; the handlers registered in `main.py` translate
them to HTTP responses of the form ``{"error": "..."}``.
"""
from __future__ import annotations


class InputValidationError(Exception):
    """Invalid request body (maps to HTTP 400)."""


class MissingInputError(InputValidationError):
    """Neither a single image nor an image list (or no prompt) was provided."""


class TooManyImagesError(InputValidationError):
    """Image list longer than the configured maximum."""


class MalformedImageEntryError(InputValidationError):
    """An entry of the image list has no payload."""


class UpstreamError(Exception):
    """Base class for failures of the hosted model call."""


class UpstreamAuthError(UpstreamError):
    """Missing or rejected API key (maps to HTTP 401)."""


class UpstreamRateLimitError(UpstreamError):
    """Provider rate limit hit (maps to HTTP 429)."""


class UpstreamPayloadTooLargeError(UpstreamError):
    """Provider rejected the request as too large (maps to HTTP 413)."""


class UpstreamBadRequestError(UpstreamError):
    """Provider rejected the request as malformed (maps to HTTP 400)."""


class UpstreamUnavailableError(UpstreamError):
    """Network failure, timeout or 5xx from the provider (maps to HTTP 502)."""


class EmptyUpstreamResponseError(UpstreamError):
    """The provider answered without any completion text (maps to HTTP 500)."""


class UnparsableUpstreamResponseError(UpstreamError):
    """Completion text could not be turned into a JSON object (maps to HTTP 500).

    ``raw_preview`` holds the start of the raw completion for diagnostics.
    """

    def __init__(self, message: str, raw_preview: str = "") -> None:
        super().__init__(message)
        self.raw_preview = raw_preview
