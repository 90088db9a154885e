"""Handler for the ``mcp-docs://{section}`` resource template.

Documentation sections are scoped to the default specification version, so
version-specific pages of other releases never leak in.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from mcpadvisor.composer import render_document
from mcpadvisor.errors import AdvisorError, ErrorCode
from mcpadvisor.models.tools import SectionRequest
from mcpadvisor.sections import filter_locators

if TYPE_CHECKING:
    from mcpadvisor.state import AppState


async def handle(section: str, state: AppState) -> str:
    log = structlog.get_logger().bind(handler="docs_section", section=section)
    log.info("handler_called")

    try:
        validated = SectionRequest(section=section)
    except ValueError as exc:
        raise AdvisorError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a documentation section name such as 'quickstart'.",
            recoverable=False,
        ) from exc

    entry = state.composer.catalog.docs_section(validated.section)
    if entry is None:
        known = [s.name for s in state.composer.catalog.docs_sections]
        raise AdvisorError(
            code=ErrorCode.UNKNOWN_SECTION,
            message=f"Unknown documentation section: {validated.section!r}",
            suggestion=f"Use one of: {', '.join(known)}.",
            recoverable=False,
        )

    locators = filter_locators(
        await state.composer.load_index(), entry.spec, state.resolver.default
    )
    content = await state.composer.compose_section(locators)
    log.info("compose_complete", locator_count=len(locators))
    return render_document(f"MCP Documentation: {entry.title}", content)
