"""Exception hierarchy for codeassist.

All exceptions inherit from AssistantError, enabling callers to catch broad
(AssistantError) or narrow (e.g. RateLimitError). ``TransportError`` is what a
single attempt raises; ``RequestError`` subclasses are what a logical call
surfaces once retries are exhausted or pointless.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .codes import ErrorClassification

if TYPE_CHECKING:
    from codeassist.core.validation import ValidationResult


class AssistantError(Exception):
    """Base exception for all codeassist errors."""


class ConfigurationInvalidError(AssistantError):
    """Raised when the settings fail validation; no request was sent."""

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        details = "; ".join(f"{e.field}: {e.message}" for e in result.errors)
        super().__init__(f"Configuration is invalid: {details}")


class TransportError(AssistantError):
    """A single network attempt failed.

    Attributes:
        status: HTTP status code, or None when no response was received.
        code: Transport error code (e.g. ``ECONNREFUSED``), if any.
        body: Decoded JSON error body (``{"error": {...}}``), if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        code: str | None = None,
        body: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.body = body

    @property
    def api_message(self) -> str | None:
        """The service's own ``error.message``, when the body carries one."""
        if not isinstance(self.body, dict):
            return None
        error = self.body.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message
        return None


class RequestError(AssistantError):
    """A logical call failed terminally.

    The message is the fixed user-facing text for the classification; the
    originating failure is available as ``__cause__``.
    """

    classification: ErrorClassification = ErrorClassification.UNKNOWN

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class NetworkError(RequestError):
    classification = ErrorClassification.NETWORK


class AuthenticationError(RequestError):
    classification = ErrorClassification.AUTHENTICATION


class RateLimitError(RequestError):
    classification = ErrorClassification.RATE_LIMIT


class ServerError(RequestError):
    classification = ErrorClassification.SERVER_FAULT


class ClientError(RequestError):
    classification = ErrorClassification.CLIENT_FAULT


class UnknownRequestError(RequestError):
    classification = ErrorClassification.UNKNOWN


__all__ = [
    "AssistantError",
    "AuthenticationError",
    "ClientError",
    "ConfigurationInvalidError",
    "NetworkError",
    "RateLimitError",
    "RequestError",
    "ServerError",
    "TransportError",
    "UnknownRequestError",
]
