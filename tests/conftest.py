"""Shared test fixtures for the mcp-advisor test suite."""

from __future__ import annotations

from datetime import timedelta

import pytest

from mcpadvisor.cache import Cache
from mcpadvisor.composer import DocumentComposer
from mcpadvisor.config import SourcesSettings
from mcpadvisor.sources import CachedSource
from mcpadvisor.versions import VersionResolver
from tests.fakes import INDEX_URL, SCHEMA_URL, FakeClock, ScriptedFetcher


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> Cache[str]:
    return Cache(ttl=timedelta(seconds=3600), clock=clock)


@pytest.fixture()
def fetcher() -> ScriptedFetcher:
    return ScriptedFetcher()


@pytest.fixture()
def resolver() -> VersionResolver:
    return VersionResolver()


@pytest.fixture()
def sources_settings() -> SourcesSettings:
    return SourcesSettings(index_url=INDEX_URL, schema_url=SCHEMA_URL)


@pytest.fixture()
def composer(
    fetcher: ScriptedFetcher,
    cache: Cache[str],
    resolver: VersionResolver,
    sources_settings: SourcesSettings,
) -> DocumentComposer:
    return DocumentComposer(CachedSource(fetcher, cache), resolver, sources_settings)
