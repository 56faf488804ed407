"""Error classification and handling.

Re-exports all public symbols.
"""

from codeassist.core.errors.classifier import classify_failure, classify_info
from codeassist.core.errors.codes import (
    NETWORK_ERROR_CODES,
    RETRIABLE_CLASSIFICATIONS,
    ErrorClassification,
)
from codeassist.core.errors.exceptions import (
    AssistantError,
    AuthenticationError,
    ClientError,
    ConfigurationInvalidError,
    NetworkError,
    RateLimitError,
    RequestError,
    ServerError,
    TransportError,
    UnknownRequestError,
)
from codeassist.core.errors.models import (
    FailureInfo,
    FailureKind,
    describe_failure,
    extract_message,
)

__all__ = [
    "AssistantError",
    "AuthenticationError",
    "ClientError",
    "ConfigurationInvalidError",
    "ErrorClassification",
    "FailureInfo",
    "FailureKind",
    "NETWORK_ERROR_CODES",
    "NetworkError",
    "RETRIABLE_CLASSIFICATIONS",
    "RateLimitError",
    "RequestError",
    "ServerError",
    "TransportError",
    "UnknownRequestError",
    "classify_failure",
    "classify_info",
    "describe_failure",
    "extract_message",
]
