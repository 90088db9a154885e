from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel


class ComposedSection(BaseModel):
    """One logical section of a complete document."""

    name: str
    title: str
    locators: list[str]
    content: str  # Composed Markdown, fragments in locator order


class CompleteDocument(BaseModel):
    """The whole specification for one version: schema first, then sections."""

    version: str
    spec_schema: dict[str, Any]
    sections: list[ComposedSection]

    def render(self) -> str:
        parts = [
            f"# MCP Specification {self.version} (Complete)",
            "## Schema",
            f"```json\n{json.dumps(self.spec_schema, indent=2)}\n```",
        ]
        for section in self.sections:
            parts.append(f"# {section.title}")
            parts.append(section.content)
        return "\n\n".join(parts) + "\n"
