"""Protocol interfaces for swappable components.

The composer and AppState reference these protocols, not the concrete
implementations. This allows:
- Tests to use scripted fetchers and clock-controlled caches
- Future backends (e.g. a persistent cache) to be swapped without changing
  composition code
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from mcpadvisor.models.fetch import FetchResult


class CacheProtocol(Protocol):
    """Interface for the fragment cache backend."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def get_stale(self, key: str) -> str | None: ...


class FetcherProtocol(Protocol):
    """Interface for the remote documentation fetcher."""

    async def fetch(self, url: str) -> FetchResult: ...
