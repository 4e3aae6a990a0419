"""Proxy error taxonomy.

Every error carries the HTTP status it maps to and renders its own JSON body,
so the API layer can turn any of them into a response without branching.
"""

from __future__ import annotations

from typing import Any

UNAVAILABLE_MESSAGE = (
    "Trove API is currently unavailable. This is a temporary issue with their servers. "
    "Please try again in a few minutes."
)
STATUS_SUGGESTION = "You can check Trove's status at https://trove.nla.gov.au"


class TroveProxyError(Exception):
    """Base exception for proxy errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def payload(self) -> dict[str, Any]:
        """JSON body returned to the caller."""
        return {"error": self.message}


class ConfigurationError(TroveProxyError):
    """Raised when the Trove API key is not configured."""

    status_code = 500

    def __init__(self, message: str = "API key not configured") -> None:
        super().__init__(message)


class ValidationError(TroveProxyError):
    """Raised when caller input violates a precondition (e.g. empty query)."""

    status_code = 400

    def __init__(self, message: str = "Search query is required") -> None:
        super().__init__(message)


class UpstreamError(TroveProxyError):
    """Raised when every upstream attempt failed.

    Attributes:
        attempts: Number of attempts actually made.
        last_status: Last HTTP status observed from Trove, if any.
        last_error: Detail of the last failure (status + body, or exception text).
    """

    def __init__(
        self,
        message: str,
        *,
        attempts: int,
        last_status: int | None = None,
        last_error: str | None = None,
    ) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.last_status = last_status
        self.last_error = last_error
        self.status_code = last_status or 500

    def payload(self) -> dict[str, Any]:
        return {"error": self.message, "attempts": self.attempts}


class UpstreamTransientError(UpstreamError):
    """Trove kept answering 503, or the connection kept failing."""

    def payload(self) -> dict[str, Any]:
        if self.last_status == 503:
            return {
                "error": self.message,
                "attempts": self.attempts,
                "suggestion": STATUS_SUGGESTION,
            }
        return super().payload()


class UpstreamPermanentError(UpstreamError):
    """Trove answered with a non-retryable failure status."""
