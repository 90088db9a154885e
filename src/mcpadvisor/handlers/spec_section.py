"""Handler for the ``mcp-spec://{version}/{section}`` resource template.

Version handling is soft: an unsupported version is served as the default
version instead of failing. The special section ``complete`` returns the
whole specification. No MCP or FastMCP imports; server.py handles the MCP
wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from mcpadvisor.composer import render_document
from mcpadvisor.errors import AdvisorError, ErrorCode
from mcpadvisor.models.tools import SectionRequest
from mcpadvisor.sections import COMPLETE_SECTION, filter_locators

if TYPE_CHECKING:
    from mcpadvisor.state import AppState


async def handle(version: str | None, section: str, state: AppState) -> str:
    """Handle a spec section read. Returns a Markdown document."""
    log = structlog.get_logger().bind(handler="spec_section", section=section, version=version)
    log.info("handler_called")

    try:
        validated = SectionRequest(section=section, version=version)
    except ValueError as exc:
        raise AdvisorError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a section name such as 'base-protocol' or 'complete'.",
            recoverable=False,
        ) from exc

    resolved = state.resolver.resolve(validated.version)

    if validated.section == COMPLETE_SECTION:
        document = await state.composer.compose_complete(resolved)
        log.info("compose_complete", sections=len(document.sections))
        return document.render()

    entry = state.composer.catalog.spec_section(validated.section)
    if entry is None:
        known = [s.name for s in state.composer.catalog.spec_sections] + [COMPLETE_SECTION]
        raise AdvisorError(
            code=ErrorCode.UNKNOWN_SECTION,
            message=f"Unknown specification section: {validated.section!r}",
            suggestion=f"Use one of: {', '.join(known)}.",
            recoverable=False,
        )

    locators = filter_locators(await state.composer.load_index(), entry.spec, resolved)
    content = await state.composer.compose_section(locators)
    log.info("compose_complete", locator_count=len(locators))
    return render_document(f"MCP Specification {resolved}: {entry.title}", content)
