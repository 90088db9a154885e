"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register resources, the prompt and tools
- Map AdvisorError onto MCP errors
- Start the stdio transport
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import asynccontextmanager, suppress
from datetime import timedelta
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, CallToolResult, ErrorData, TextContent

import mcpadvisor.handlers.docs_section as h_docs_section
import mcpadvisor.handlers.list_sections as h_list_sections
import mcpadvisor.handlers.schema as h_schema
import mcpadvisor.handlers.spec_page as h_spec_page
import mcpadvisor.handlers.spec_section as h_spec_section
from mcpadvisor import __version__
from mcpadvisor.cache import Cache
from mcpadvisor.composer import DocumentComposer
from mcpadvisor.config import Settings
from mcpadvisor.errors import AdvisorError
from mcpadvisor.fetcher import Fetcher, build_allowlist, build_http_client
from mcpadvisor.sections import NAMESPACE_ROOT_PREFIX, SectionCatalog
from mcpadvisor.sources import CachedSource
from mcpadvisor.state import AppState
from mcpadvisor.versions import VersionResolver

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout is reserved for the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


def build_state(settings: Settings) -> AppState:
    """Wire the cache, fetcher and composer for one process."""
    resolver = VersionResolver(default=settings.versions.default)
    catalog = SectionCatalog.with_extra_docs(settings.docs.extra_sections)

    http_client = build_http_client(settings.fetcher)
    allowlist = build_allowlist(
        [settings.sources.index_url, settings.sources.schema_url, NAMESPACE_ROOT_PREFIX]
    )
    fetcher = Fetcher(http_client, allowlist, max_redirects=settings.fetcher.max_redirects)
    cache: Cache[str] = Cache(ttl=timedelta(seconds=settings.cache.ttl_seconds))

    composer = DocumentComposer(
        CachedSource(fetcher, cache),
        resolver,
        settings.sources,
        catalog,
    )
    return AppState(
        settings=settings,
        resolver=resolver,
        composer=composer,
        http_client=http_client,
        cache=cache,
        fetcher=fetcher,
    )


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info("server_starting", version=__version__)

    state = build_state(settings)

    log.info(
        "server_started",
        version=__version__,
        default_spec_version=state.resolver.default,
        index_url=settings.sources.index_url,
        cache_ttl_seconds=settings.cache.ttl_seconds,
    )

    try:
        yield state
    finally:
        if state.http_client is not None:
            await state.http_client.aclose()
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and registration
# ---------------------------------------------------------------------------

mcp = FastMCP("mcp-advisor", lifespan=lifespan)
# FastMCP has no version kwarg. Set it on the underlying Server so the
# initialize handshake reports the package version, not the SDK version.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _current_state() -> AppState:
    return mcp.get_context().request_context.lifespan_context


def _to_mcp_error(error: AdvisorError) -> McpError:
    """Convert an AdvisorError into the JSON-RPC error for resources and prompts."""
    code = INVALID_PARAMS if error.is_caller_error else INTERNAL_ERROR
    return McpError(
        ErrorData(code=code, message=f"{error.code}: {error.message}", data=error.to_dict())
    )


def _serialise_tool_error(error: AdvisorError) -> CallToolResult:
    """Convert an AdvisorError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


def _log_error(kind: str, name: str, exc: AdvisorError) -> None:
    log.warning(
        f"{kind}_error",
        **{kind: name},
        code=exc.code,
        message=exc.message,
        recoverable=exc.recoverable,
    )


# Resources ------------------------------------------------------------------


@mcp.resource(
    "mcp-spec://{version}/{section}",
    name="mcp-spec-section",
    description=(
        "A section of the MCP specification (architecture, base-protocol, utilities, "
        "client, server, server-utilities) or 'complete' for the whole specification. "
        "Unsupported versions fall back to the default version."
    ),
    mime_type="text/markdown",
)
async def spec_section(version: str, section: str) -> str:
    try:
        return await h_spec_section.handle(version, section, _current_state())
    except AdvisorError as exc:
        _log_error("resource", "mcp-spec-section", exc)
        raise _to_mcp_error(exc) from exc
    except Exception:
        log.error("resource_unexpected_error", resource="mcp-spec-section", exc_info=True)
        raise


@mcp.resource(
    "mcp-docs://{section}",
    name="mcp-docs-section",
    description="A section of the general MCP documentation, e.g. quickstart or concepts.",
    mime_type="text/markdown",
)
async def docs_section(section: str) -> str:
    try:
        return await h_docs_section.handle(section, _current_state())
    except AdvisorError as exc:
        _log_error("resource", "mcp-docs-section", exc)
        raise _to_mcp_error(exc) from exc
    except Exception:
        log.error("resource_unexpected_error", resource="mcp-docs-section", exc_info=True)
        raise


@mcp.resource(
    "mcp-schema://{version}",
    name="mcp-schema",
    description="The MCP JSON schema for a supported specification version.",
    mime_type="application/json",
)
async def schema_resource(version: str) -> str:
    try:
        return json.dumps(await h_schema.handle(version, _current_state()))
    except AdvisorError as exc:
        _log_error("resource", "mcp-schema", exc)
        raise _to_mcp_error(exc) from exc
    except Exception:
        log.error("resource_unexpected_error", resource="mcp-schema", exc_info=True)
        raise


# Prompts --------------------------------------------------------------------


@mcp.prompt(
    name="mcp-spec-schema",
    description="Provides the complete MCP JSON schema for a specification version.",
)
async def spec_schema_prompt(version: str | None = None) -> str:
    try:
        schema = await h_schema.handle(version, _current_state())
    except AdvisorError as exc:
        _log_error("prompt", "mcp-spec-schema", exc)
        raise _to_mcp_error(exc) from exc
    except Exception:
        log.error("prompt_unexpected_error", prompt="mcp-spec-schema", exc_info=True)
        raise
    return json.dumps(schema)


# Tools ----------------------------------------------------------------------


@mcp.tool()
async def get_spec_schema(version: str, ctx: Context) -> object:
    """Fetch the MCP JSON schema for a specification version.

    Fails with UNSUPPORTED_VERSION (listing the supported versions) when the
    version is unknown.
    """
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await h_schema.handle(version, state)
    except AdvisorError as exc:
        _log_error("tool", "get_spec_schema", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="get_spec_schema", exc_info=True)
        raise


@mcp.tool()
async def read_spec_page(url: str, ctx: Context) -> object:
    """Read a single page listed in the MCP documentation index."""
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await h_spec_page.handle(url, state)
    except AdvisorError as exc:
        _log_error("tool", "read_spec_page", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="read_spec_page", exc_info=True)
        raise


@mcp.tool()
async def list_sections(ctx: Context) -> object:
    """List the specification and documentation sections with their resource URIs."""
    state: AppState = ctx.request_context.lifespan_context
    return await h_list_sections.handle(state)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    # Ctrl-C is a normal way to stop a stdio server
    with suppress(KeyboardInterrupt):
        mcp.run()


if __name__ == "__main__":
    main()
