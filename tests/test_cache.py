"""Tests for codeassist.execution.cache."""

from __future__ import annotations

from codeassist.execution.cache import ResponseCache
from tests.helpers import FakeClock


class TestResponseCache:
    """Tests for the LRU response cache."""

    def test_get_and_set(self, fake_clock: FakeClock) -> None:
        cache = ResponseCache(clock=fake_clock)
        cache.set("k", "v")
        assert cache.get("k") == "v"
        assert cache.get("missing") is None

    def test_entries_expire(self, fake_clock: FakeClock) -> None:
        cache = ResponseCache(ttl_seconds=10, clock=fake_clock)
        cache.set("k", "v")
        fake_clock.advance(9)
        assert cache.get("k") == "v"
        fake_clock.advance(1)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_least_recently_used_evicted(self, fake_clock: FakeClock) -> None:
        cache = ResponseCache(max_entries=2, clock=fake_clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)
        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3

    def test_zero_size_stores_nothing(self, fake_clock: FakeClock) -> None:
        cache = ResponseCache(max_entries=0, clock=fake_clock)
        cache.set("a", 1)
        assert len(cache) == 0

    def test_configure_shrinks(self, fake_clock: FakeClock) -> None:
        cache = ResponseCache(clock=fake_clock)
        for i in range(5):
            cache.set(str(i), i)
        cache.configure(ttl_seconds=60, max_entries=2)
        assert len(cache) == 2
        assert cache.get("4") == 4

    def test_clear(self, fake_clock: FakeClock) -> None:
        cache = ResponseCache(clock=fake_clock)
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0
