"""Tests for codeassist.execution.throttle."""

from __future__ import annotations

import pytest

from codeassist.core.errors import TransportError
from codeassist.execution.throttle import NotificationThrottle, make_error_key
from tests.helpers import FakeClock


class TestErrorKey:
    """Tests for make_error_key."""

    def test_key_uses_context_and_message(self) -> None:
        assert make_error_key("boom", "complete") == "complete:boom"

    def test_message_truncated_to_50_chars(self) -> None:
        long_message = "x" * 80
        assert make_error_key(long_message, "explain") == f"explain:{'x' * 50}"

    def test_api_message_used(self) -> None:
        failure = TransportError("HTTP 400", status=400, body={"error": {"message": "bad"}})
        assert make_error_key(failure, "refactor") == "refactor:bad"

    def test_opaque_failure_uses_fallback(self) -> None:
        assert make_error_key(None, "ctx") == "ctx:An unexpected error occurred"


class TestNotificationThrottle:
    """Tests for NotificationThrottle."""

    def test_first_five_allowed_then_suppressed(self, fake_clock: FakeClock) -> None:
        throttle = NotificationThrottle(fake_clock)
        results = [throttle.record("E", "ctx") for _ in range(7)]
        assert results == [True] * 5 + [False] * 2
        record = throttle.get("ctx:E")
        assert record is not None
        assert record.count == 7

    def test_should_notify_does_not_count(self, fake_clock: FakeClock) -> None:
        throttle = NotificationThrottle(fake_clock)
        for _ in range(10):
            assert throttle.should_notify("E", "ctx")
        assert throttle.get("ctx:E") is None

    def test_should_notify_after_threshold(self, fake_clock: FakeClock) -> None:
        throttle = NotificationThrottle(fake_clock)
        for _ in range(5):
            throttle.record("E", "ctx")
        assert not throttle.should_notify("E", "ctx")

    def test_keys_are_independent(self, fake_clock: FakeClock) -> None:
        throttle = NotificationThrottle(fake_clock)
        for _ in range(5):
            throttle.record("E", "complete")
        assert throttle.record("E", "explain")
        assert not throttle.record("E", "complete")

    def test_record_expires_after_window(self, fake_clock: FakeClock) -> None:
        """After 5 minutes the key starts over."""
        throttle = NotificationThrottle(fake_clock)
        for _ in range(6):
            throttle.record("E", "ctx")

        fake_clock.advance(300)

        assert throttle.get("ctx:E") is None
        assert throttle.record("E", "ctx")
        assert throttle.get("ctx:E").count == 1  # type: ignore[union-attr]

    def test_window_not_refreshed_by_occurrences(self, fake_clock: FakeClock) -> None:
        throttle = NotificationThrottle(fake_clock)
        throttle.record("E", "ctx")
        fake_clock.advance(299)
        throttle.record("E", "ctx")
        fake_clock.advance(1)
        assert throttle.get("ctx:E") is None

    def test_stats_and_clear(self, fake_clock: FakeClock) -> None:
        throttle = NotificationThrottle(fake_clock)
        throttle.record("A", "ctx")
        throttle.record("A", "ctx")
        fake_clock.advance(200)
        throttle.record("B", "ctx")
        assert throttle.stats() == {"ctx:A": 2, "ctx:B": 1}

        fake_clock.advance(100)
        assert throttle.stats() == {"ctx:B": 1}

        throttle.clear()
        assert throttle.stats() == {}

    def test_instances_are_isolated(self, fake_clock: FakeClock) -> None:
        first = NotificationThrottle(fake_clock)
        second = NotificationThrottle(fake_clock)
        for _ in range(5):
            first.record("E", "ctx")
        assert second.record("E", "ctx")

    def test_invalid_limits(self) -> None:
        with pytest.raises(ValueError):
            NotificationThrottle(threshold=0)
        with pytest.raises(ValueError):
            NotificationThrottle(ttl_seconds=0)
