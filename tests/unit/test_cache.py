"""Unit tests for mcpadvisor.cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcpadvisor.cache import DEFAULT_TTL, Cache

if TYPE_CHECKING:
    from tests.fakes import FakeClock


class TestCacheGet:
    def test_set_then_get_returns_value(self, cache: Cache[str]) -> None:
        cache.set("page", "# Lifecycle")
        assert cache.get("page") == "# Lifecycle"

    def test_get_nonexistent_returns_none(self, cache: Cache[str]) -> None:
        assert cache.get("missing") is None

    def test_value_visible_just_before_expiry(self, cache: Cache[str], clock: FakeClock) -> None:
        cache.set("page", "content")
        clock.advance(3599)
        assert cache.get("page") == "content"

    def test_value_hidden_once_ttl_elapsed(self, cache: Cache[str], clock: FakeClock) -> None:
        cache.set("page", "content")
        clock.advance(3600)
        assert cache.get("page") is None

    def test_overwrite_resets_timestamp(self, cache: Cache[str], clock: FakeClock) -> None:
        cache.set("page", "Version 1")
        clock.advance(3000)
        cache.set("page", "Version 2")
        clock.advance(3000)
        assert cache.get("page") == "Version 2"

    def test_default_ttl_is_one_hour(self) -> None:
        assert DEFAULT_TTL.total_seconds() == 3600
        assert Cache().ttl == DEFAULT_TTL


class TestCacheGetStale:
    def test_expired_value_still_available(self, cache: Cache[str], clock: FakeClock) -> None:
        cache.set("schema:2025-03-26", "{}")
        clock.advance(10 * 3600)
        assert cache.get("schema:2025-03-26") is None
        assert cache.get_stale("schema:2025-03-26") == "{}"

    def test_fresh_value_also_returned(self, cache: Cache[str]) -> None:
        cache.set("page", "fresh")
        assert cache.get_stale("page") == "fresh"

    def test_never_written_returns_none(self, cache: Cache[str]) -> None:
        assert cache.get_stale("missing") is None

    def test_expiry_does_not_delete_entry(self, cache: Cache[str], clock: FakeClock) -> None:
        cache.set("page", "content")
        clock.advance(7200)
        cache.get("page")
        assert len(cache) == 1


class TestCacheValues:
    def test_values_are_not_copied_or_transformed(self, clock: FakeClock) -> None:
        generic: Cache[dict] = Cache(clock=clock)
        value = {"a": [1, 2]}
        generic.set("k", value)
        assert generic.get("k") is value
