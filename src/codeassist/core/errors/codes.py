"""Error classification taxonomy.

Contains the classification enum that drives retry eligibility and
user-facing messages.

| Classification | Retried | User message |
|----------------|---------|--------------|
| NETWORK        | Yes     | network error |
| AUTHENTICATION | No      | invalid credential |
| RATE_LIMIT     | Yes     | rate limit exceeded |
| SERVER_FAULT   | Yes     | server error |
| CLIENT_FAULT   | No      | underlying API message |
| UNKNOWN        | No      | underlying API message |

``ConfigurationInvalid`` is a separate category raised by the orchestrator
before any request is made; the classifier never produces it.
"""

from __future__ import annotations

from enum import Enum


class ErrorClassification(str, Enum):
    """Taxonomy bucket assigned to a failed attempt."""

    NETWORK = "network"
    """No response received: refused, unresolvable, unreachable or timed out."""

    AUTHENTICATION = "authentication"
    """HTTP 401/403: the credential was rejected."""

    RATE_LIMIT = "rate_limit"
    """HTTP 429: the service is throttling us."""

    SERVER_FAULT = "server_fault"
    """HTTP 5xx."""

    CLIENT_FAULT = "client_fault"
    """Any other HTTP 4xx: the request itself is wrong."""

    UNKNOWN = "unknown"
    """Nothing recognizable."""

    @property
    def is_retriable(self) -> bool:
        """Whether another attempt could change the outcome."""
        return self in RETRIABLE_CLASSIFICATIONS


RETRIABLE_CLASSIFICATIONS = frozenset({
    ErrorClassification.NETWORK,
    ErrorClassification.SERVER_FAULT,
    ErrorClassification.RATE_LIMIT,
})

NETWORK_ERROR_CODES = frozenset({
    "ECONNREFUSED",
    "ENOTFOUND",
    "ENETUNREACH",
    "ETIMEDOUT",
    "ECONNRESET",
    "ECONNABORTED",
})
"""Transport error codes that mean the request never got a response."""


__all__ = [
    "ErrorClassification",
    "NETWORK_ERROR_CODES",
    "RETRIABLE_CLASSIFICATIONS",
]
