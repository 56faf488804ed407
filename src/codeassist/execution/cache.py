"""In-memory response cache.

Least-recently-used cache with a fixed per-entry lifetime. Used by the
orchestrator to avoid repeating identical completion/explain/refactor calls.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Any

from codeassist.utils.time import Clock, MonotonicClock


class ResponseCache:
    """LRU cache whose entries expire ``ttl_seconds`` after insertion."""

    def __init__(
        self,
        ttl_seconds: float = 3600,
        max_entries: int = 1000,
        clock: Clock | None = None,
    ) -> None:
        self._clock = clock or MonotonicClock()
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()

    def get(self, key: str) -> Any | None:
        """Cached value, or None when absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock.now() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def set(self, key: str, value: Any) -> None:
        if self.max_entries <= 0 or self.ttl_seconds <= 0:
            return
        self._entries[key] = (self._clock.now(), value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def configure(self, ttl_seconds: float, max_entries: int) -> None:
        """Apply new limits, evicting entries beyond the new size."""
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        while len(self._entries) > max(max_entries, 0):
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["ResponseCache"]
