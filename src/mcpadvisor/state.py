"""Application state container.

AppState is created once at server startup (inside the FastMCP lifespan context
manager) and reached from every handler via the MCP Context object. There is
exactly one cache, fetcher and composer per process.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from mcpadvisor.composer import DocumentComposer
    from mcpadvisor.config import Settings
    from mcpadvisor.protocols import CacheProtocol, FetcherProtocol
    from mcpadvisor.versions import VersionResolver


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every handler."""

    settings: Settings
    resolver: VersionResolver
    composer: DocumentComposer

    http_client: httpx.AsyncClient | None = None
    cache: CacheProtocol | None = None
    fetcher: FetcherProtocol | None = None
