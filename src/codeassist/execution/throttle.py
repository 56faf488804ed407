"""Notification throttle.

Deduplicates user-facing error alerts. Each failure maps to a key built from
the reporting context and the first 50 characters of its message. A key may
raise at most ``threshold`` alerts; its record expires a fixed ``ttl_seconds``
after it was created, whatever happens in between, after which the key starts
over with a fresh allowance.

Expiry is checked lazily against an injected ``Clock`` whenever a record is
touched, so nothing is scheduled in the background.
"""

from __future__ import annotations

from dataclasses import dataclass

from codeassist.core.constants import (
    ERROR_KEY_MESSAGE_CHARS,
    NOTIFY_MAX_PER_KEY,
    NOTIFY_WINDOW_SECONDS,
)
from codeassist.core.errors import extract_message
from codeassist.core.logging import get_logger
from codeassist.utils.time import Clock, MonotonicClock

_logger = get_logger("throttle")


@dataclass
class ErrorRecord:
    """Occurrences of one error key inside its window.

    Attributes:
        key: ``"{context}:{message[:50]}"``.
        count: Occurrences recorded so far.
        first_seen_at: Clock reading when the record was created.
    """

    key: str
    count: int
    first_seen_at: float


def make_error_key(failure: object, context: str) -> str:
    """Key under which ``failure`` is counted."""
    return f"{context}:{extract_message(failure)[:ERROR_KEY_MESSAGE_CHARS]}"


class NotificationThrottle:
    """Per-key alert allowance with a fixed time-to-live."""

    def __init__(
        self,
        clock: Clock | None = None,
        *,
        threshold: int = NOTIFY_MAX_PER_KEY,
        ttl_seconds: float = NOTIFY_WINDOW_SECONDS,
    ) -> None:
        if threshold < 1:
            raise ValueError("threshold must be >= 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._clock = clock or MonotonicClock()
        self.threshold = threshold
        self.ttl_seconds = ttl_seconds
        self._records: dict[str, ErrorRecord] = {}

    def _is_expired(self, record: ErrorRecord, now: float) -> bool:
        return now - record.first_seen_at >= self.ttl_seconds

    def _live_record(self, key: str) -> ErrorRecord | None:
        record = self._records.get(key)
        if record is not None and self._is_expired(record, self._clock.now()):
            del self._records[key]
            _logger.debug("error_record_expired", key=key, count=record.count)
            return None
        return record

    def get(self, key: str) -> ErrorRecord | None:
        """Live record for ``key``, if any."""
        return self._live_record(key)

    def should_notify(self, failure: object, context: str) -> bool:
        """Whether the next occurrence would be allowed. Does not count it."""
        record = self._live_record(make_error_key(failure, context))
        return record is None or record.count < self.threshold

    def record(self, failure: object, context: str) -> bool:
        """Count one occurrence.

        Returns:
            True if the user should be alerted: the pre-increment count was
            below the threshold.
        """
        key = make_error_key(failure, context)
        record = self._live_record(key)
        if record is None:
            record = ErrorRecord(key=key, count=0, first_seen_at=self._clock.now())
            self._records[key] = record
        allowed = record.count < self.threshold
        record.count += 1
        if not allowed:
            _logger.debug("notification_suppressed", key=key, count=record.count)
        return allowed

    def stats(self) -> dict[str, int]:
        """Occurrence counts of all live keys."""
        now = self._clock.now()
        for key in [k for k, r in self._records.items() if self._is_expired(r, now)]:
            del self._records[key]
        return {key: record.count for key, record in self._records.items()}

    def clear(self) -> None:
        self._records.clear()


__all__ = ["ErrorRecord", "NotificationThrottle", "make_error_key"]
