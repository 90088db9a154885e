"""In-memory TTL cache with stale fallback.

Entries live for the whole process. ``get`` hides entries older than the TTL
but never deletes them, so ``get_stale`` can still hand out the last good
value when a refresh fails. There is no eviction, no capacity bound and no
invalidation API.

Concurrent writers to the same key are last-write-wins. That is acceptable
because every value is an idempotent re-fetch of the same remote content.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Generic, TypeVar

from mcpadvisor.models.cache import CacheEntry

T = TypeVar("T")

DEFAULT_TTL = timedelta(seconds=3600)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Cache(Generic[T]):
    """Process-lifetime key/value cache implementing CacheProtocol."""

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> T | None:
        """Return the value for *key* if it was written less than ``ttl`` ago."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.written_at >= self.ttl:
            return None
        return entry.value

    def set(self, key: str, value: T) -> None:
        """Store *value* under *key*, overwriting any previous entry."""
        self._entries[key] = CacheEntry(key=key, value=value, written_at=self._clock())

    def get_stale(self, key: str) -> T | None:
        """Return the last value written for *key*, however old."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def __len__(self) -> int:
        return len(self._entries)
