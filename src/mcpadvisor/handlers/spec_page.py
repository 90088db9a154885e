"""Handler for the read_spec_page tool.

Reads a single page listed in the documentation index. The URL must be in
the index, and a version segment in it must be a supported version.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from mcpadvisor.errors import AdvisorError, ErrorCode
from mcpadvisor.models.tools import ReadSpecPageInput, ReadSpecPageOutput

if TYPE_CHECKING:
    from mcpadvisor.state import AppState


async def handle(url: str, state: AppState) -> dict:
    log = structlog.get_logger().bind(handler="read_spec_page", url=url)
    log.info("handler_called")

    try:
        validated = ReadSpecPageInput(url=url)
    except ValueError as exc:
        raise AdvisorError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a page URL taken from the documentation index.",
            recoverable=False,
        ) from exc

    if validated.url not in await state.composer.load_index():
        raise AdvisorError(
            code=ErrorCode.UNKNOWN_LOCATOR,
            message=f"URL is not listed in the documentation index: {validated.url}",
            suggestion="Read a section resource first and use one of its source URLs.",
            recoverable=False,
        )

    version = state.resolver.extract_from_locator(validated.url, strict=True)
    content = await state.composer.fetch_fragment(validated.url)

    output = ReadSpecPageOutput(url=validated.url, version=version, content=content)
    return output.model_dump(mode="json")
