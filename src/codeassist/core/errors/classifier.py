"""Failure classification.

Maps a failed attempt to an ``ErrorClassification``. First match wins:

1. no status and a network error code (or "network" in the message) -> NETWORK
2. status 401/403 -> AUTHENTICATION
3. status 429 -> RATE_LIMIT
4. status >= 500 -> SERVER_FAULT
5. any other 4xx -> CLIENT_FAULT
6. otherwise -> UNKNOWN

The function is total: it accepts any object and never raises.
"""

from __future__ import annotations

from .codes import NETWORK_ERROR_CODES, ErrorClassification
from .models import FailureInfo, describe_failure


def _is_network_failure(info: FailureInfo) -> bool:
    if info.status is not None or info.has_response:
        return False
    if info.code is not None and info.code.upper() in NETWORK_ERROR_CODES:
        return True
    return info.message is not None and "network" in info.message.lower()


def classify_info(info: FailureInfo) -> ErrorClassification:
    """Classify an already-normalized failure."""
    if _is_network_failure(info):
        return ErrorClassification.NETWORK

    status = info.status
    if status is None:
        return ErrorClassification.UNKNOWN
    if status in (401, 403):
        return ErrorClassification.AUTHENTICATION
    if status == 429:
        return ErrorClassification.RATE_LIMIT
    if status >= 500:
        return ErrorClassification.SERVER_FAULT
    if 400 <= status < 500:
        return ErrorClassification.CLIENT_FAULT
    return ErrorClassification.UNKNOWN


def classify_failure(failure: object) -> ErrorClassification:
    """Classify any failure shape (string, exception, mapping, ...)."""
    return classify_info(describe_failure(failure))


__all__ = ["classify_failure", "classify_info"]
