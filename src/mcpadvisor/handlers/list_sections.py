"""Handler for the list_sections tool."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcpadvisor.models.tools import ListSectionsOutput, SectionInfo
from mcpadvisor.sections import COMPLETE_SECTION

if TYPE_CHECKING:
    from mcpadvisor.state import AppState


async def handle(state: AppState) -> dict:
    catalog = state.composer.catalog
    default = state.resolver.default

    sections = [
        SectionInfo(
            name=section.name,
            title=section.title,
            kind="spec",
            uri=f"mcp-spec://{default}/{section.name}",
        )
        for section in catalog.spec_sections
    ]
    sections.append(
        SectionInfo(
            name=COMPLETE_SECTION,
            title="Complete Specification",
            kind="spec",
            uri=f"mcp-spec://{default}/{COMPLETE_SECTION}",
        )
    )
    sections.extend(
        SectionInfo(
            name=section.name,
            title=section.title,
            kind="docs",
            uri=f"mcp-docs://{section.name}",
        )
        for section in catalog.docs_sections
    )

    output = ListSectionsOutput(
        default_version=default,
        supported_versions=list(state.resolver.supported),
        sections=sections,
    )
    return output.model_dump(mode="json")
