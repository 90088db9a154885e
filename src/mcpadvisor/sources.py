"""Cache-through loading of remote sources.

One policy shared by documentation fragments, schemas and the llms.txt
index:

1. Fresh cache hit: return it without touching the network.
2. Cache miss: fetch; on success populate the cache and return.
3. Fetch failure: return the expired entry if one was ever written,
   otherwise return the failure for the caller to handle.

A caller may pass a validator. A 2xx body it rejects is treated as a fetch
failure in step 3, so the cache only ever holds content that passed it.

No retries are attempted beyond the stale fallback.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from mcpadvisor.models.fetch import FetchInvalidContent, FetchOk

if TYPE_CHECKING:
    from mcpadvisor.models.fetch import FetchResult
    from mcpadvisor.protocols import CacheProtocol, FetcherProtocol

log = structlog.get_logger()

# Raises ValueError for content that must not be cached
Validator = Callable[[str], Any]


class CachedSource:
    """Fetches through the cache, falling back to stale entries on failure."""

    def __init__(self, fetcher: FetcherProtocol, cache: CacheProtocol) -> None:
        self._fetcher = fetcher
        self._cache = cache

    async def load(self, key: str, url: str, validate: Validator | None = None) -> FetchResult:
        cached = self._cache.get(key)
        if cached is not None:
            log.debug("cache_hit", key=key)
            return FetchOk(cached)

        log.debug("cache_miss_fetching", key=key, url=url)
        result = await self._fetcher.fetch(url)
        if isinstance(result, FetchOk) and validate is not None:
            try:
                validate(result.body)
            except ValueError as exc:
                log.warning("fetch_content_rejected", key=key, url=url, error=str(exc))
                result = FetchInvalidContent(str(exc))

        if isinstance(result, FetchOk):
            self._cache.set(key, result.body)
            return result

        stale = self._cache.get_stale(key)
        if stale is not None:
            log.warning("cache_stale_fallback", key=key, reason=result.describe())
            return FetchOk(stale, stale=True)

        return result
