"""Normalized failure shapes.

Failures reach the classifier and the notification throttle in several
shapes: a plain string, a ``TransportError`` carrying the service's JSON
error body, an arbitrary exception or object (possibly with an attached
``response``), or a mapping. ``describe_failure`` reduces each of them to one
``FailureInfo`` variant so that downstream code never has to probe attributes.

Message extraction precedence:
1. ``str`` failure -> the string itself (TEXT)
2. structured failure with a nested ``error.message`` -> that message (API)
3. failure exposing a message -> that message (EXCEPTION)
4. anything else -> no message (OPAQUE), displayed as a fixed fallback
"""

from __future__ import annotations

import errno
import socket
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from codeassist.core.constants import FALLBACK_ERROR_MESSAGE

from .exceptions import TransportError


class FailureKind(str, Enum):
    """Which variant a failure was normalized to."""

    TEXT = "text"
    API = "api"
    EXCEPTION = "exception"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class FailureInfo:
    """Uniform view of a failure.

    Attributes:
        kind: Variant the failure was recognized as.
        message: Extracted message, None when nothing could be extracted.
        status: HTTP status if a response was received.
        code: Transport error code (``ECONNREFUSED`` ...) if known.
        has_response: A response object was attached, even without a
            readable status.
    """

    kind: FailureKind
    message: str | None = None
    status: int | None = None
    code: str | None = None
    has_response: bool = field(default=False, compare=False)

    @property
    def display_message(self) -> str:
        return self.message or FALLBACK_ERROR_MESSAGE


def _nested_api_message(body: Any) -> str | None:
    if not isinstance(body, Mapping):
        return None
    error = body.get("error")
    if isinstance(error, Mapping):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def _as_status(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


def _os_error_code(exc: OSError) -> str | None:
    if isinstance(exc, socket.gaierror):
        return "ENOTFOUND"
    if isinstance(exc, TimeoutError):
        return "ETIMEDOUT"
    if exc.errno is not None:
        return errno.errorcode.get(exc.errno)
    return None


def _field(source: Any, name: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(name)
    try:
        return getattr(source, name, None)
    except Exception:  # httpx properties raise RuntimeError when unset
        return None


def _status_of(source: Any) -> int | None:
    status = _as_status(_field(source, "status"))
    if status is None:
        status = _as_status(_field(source, "status_code"))
    return status


def _response_status(failure: Any) -> tuple[bool, int | None]:
    """Whether a response is attached, and its status.

    ``error.response.status`` (or httpx's ``response.status_code``) wins over
    a flat ``status`` on the failure itself.
    """
    response = _field(failure, "response")
    if response is not None:
        status = _status_of(response)
        return True, status if status is not None else _status_of(failure)
    status = _status_of(failure)
    return status is not None, status


def _code_of(failure: Any) -> str | None:
    code = _field(failure, "code")
    if isinstance(code, str) and code:
        return code
    if isinstance(failure, OSError):
        return _os_error_code(failure)
    return None


def _describe_mapping(failure: Mapping[str, Any]) -> FailureInfo:
    has_response, status = _response_status(failure)
    code = _code_of(failure)
    api_message = _nested_api_message(failure)
    if api_message is not None:
        return FailureInfo(FailureKind.API, api_message, status, code, has_response)
    message = failure.get("message")
    if isinstance(message, str) and message:
        return FailureInfo(FailureKind.EXCEPTION, message, status, code, has_response)
    return FailureInfo(FailureKind.OPAQUE, None, status, code, has_response)


def describe_failure(failure: object) -> FailureInfo:
    """Normalize any failure into a ``FailureInfo``. Never raises."""
    if isinstance(failure, str):
        return FailureInfo(FailureKind.TEXT, failure)

    if isinstance(failure, TransportError):
        api_message = failure.api_message
        if api_message is not None:
            return FailureInfo(FailureKind.API, api_message, failure.status, failure.code)
        return FailureInfo(
            FailureKind.EXCEPTION,
            failure.message or None,
            failure.status,
            failure.code,
        )

    if isinstance(failure, Mapping):
        return _describe_mapping(failure)

    has_response, status = _response_status(failure)
    code = _code_of(failure)

    if isinstance(failure, BaseException):
        return FailureInfo(
            FailureKind.EXCEPTION,
            str(failure) or None,
            status,
            code,
            has_response,
        )

    message = _field(failure, "message")
    if isinstance(message, str) and message:
        return FailureInfo(FailureKind.EXCEPTION, message, status, code, has_response)
    return FailureInfo(FailureKind.OPAQUE, None, status, code, has_response)


def extract_message(failure: object) -> str:
    """Best human-readable message for a failure, or the fixed fallback."""
    return describe_failure(failure).display_message


__all__ = [
    "FailureInfo",
    "FailureKind",
    "describe_failure",
    "extract_message",
]
