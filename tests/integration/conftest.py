"""Integration test fixtures.

Provides an AppState wired exactly as the server wires it (real Fetcher,
real httpx client, in-memory cache) with the documentation site mocked by
respx.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import httpx
import pytest
import respx

from mcpadvisor.config import Settings
from mcpadvisor.server import build_state
from tests.fakes import INDEX_URL, SAMPLE_INDEX, SCHEMA_DOC, SCHEMA_URL, SITE, SPEC

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Iterator

    from mcpadvisor.state import AppState

SCHEMA_2025 = SCHEMA_URL.format(version="2025-03-26")

SPEC_PAGES = [
    "index.md",
    "architecture/index.md",
    "basic/index.md",
    "basic/lifecycle.md",
    "basic/transports.md",
    "basic/utilities/ping.md",
    "client/roots.md",
    "server/tools.md",
]

DOCS_PAGES = [
    f"{SITE}/introduction.md",
    f"{SITE}/examples.md",
    f"{SITE}/quickstart/server.md",
    "https://github.com/modelcontextprotocol/python-sdk",
]


@pytest.fixture()
async def app_state() -> AsyncGenerator[AppState, None]:
    """Full AppState pointed at the mocked documentation site."""
    settings = Settings(sources={"index_url": INDEX_URL, "schema_url": SCHEMA_URL})
    state = build_state(settings)
    yield state
    assert state.http_client is not None
    await state.http_client.aclose()


@pytest.fixture()
def site() -> Iterator[respx.MockRouter]:
    """Mock the llms.txt index, every page it lists and the 2025-03-26 schema."""
    with respx.mock(assert_all_called=False) as router:
        router.get(INDEX_URL, name="index").mock(
            return_value=httpx.Response(200, text=SAMPLE_INDEX)
        )
        router.get(SCHEMA_2025).mock(return_value=httpx.Response(200, json=SCHEMA_DOC))
        for page in SPEC_PAGES:
            router.get(f"{SPEC}/2025-03-26/{page}").mock(
                return_value=httpx.Response(200, text=f"content of {page}")
            )
        for url in DOCS_PAGES:
            router.get(url).mock(return_value=httpx.Response(200, text=f"page {url}"))
        for version in ("2024-11-05", "draft"):
            router.get(f"{SPEC}/{version}/basic/lifecycle.md").mock(
                return_value=httpx.Response(200, text=f"lifecycle {version}")
            )
        yield router


@pytest.fixture()
def subprocess_env() -> dict[str, str]:
    """Env for stdio subprocess tests; sources point at unroutable hosts."""
    env = os.environ.copy()
    env["MCPADVISOR__SOURCES__INDEX_URL"] = "http://127.0.0.1:1/llms.txt"
    env["MCPADVISOR__LOGGING__LEVEL"] = "WARNING"
    return env
