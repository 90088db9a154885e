"""Handler shared by the schema resource, prompt and tool.

Version handling is strict: unsupported versions are rejected with the list
of supported versions rather than silently replaced.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from mcpadvisor.state import AppState


async def handle(version: str | None, state: AppState) -> dict[str, Any]:
    """Return the parsed JSON schema for *version* (default when omitted)."""
    log = structlog.get_logger().bind(handler="schema", version=version)
    log.info("handler_called")

    requested = version.strip() if version else ""
    schema = await state.composer.fetch_schema(requested or state.resolver.default)
    log.info("schema_loaded", keys=len(schema))
    return schema
