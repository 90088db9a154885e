"""Markdown helpers for documentation fragments.

``parse_links`` turns the ``llms.txt`` index into the global locator list.
``strip_front_matter`` removes the metadata block that documentation pages
start with before they are composed.
"""

from __future__ import annotations

import re

_LINK_RE = re.compile(r"\[[^\]]*\]\(\s*([^)\s]+)(?:\s+\"[^\"]*\")?\s*\)")
FRONT_MATTER_MARKER = "---"


def parse_links(content: str) -> list[str]:
    """Extract link targets from Markdown content, in document order.

    Links inside fenced code blocks are ignored. Duplicates keep their
    first position.
    """
    links: list[str] = []
    seen: set[str] = set()

    in_code_block = False
    fence: str | None = None

    for line in content.splitlines():
        stripped = line.strip()

        # Rule 1: code block tracking
        if stripped.startswith("```") or stripped.startswith("~~~"):
            current_fence = stripped[:3]
            if not in_code_block:
                in_code_block = True
                fence = current_fence
            elif current_fence == fence:
                in_code_block = False
                fence = None
            continue

        if in_code_block:
            continue

        # Rule 2: link targets
        for target in _LINK_RE.findall(line):
            if target not in seen:
                seen.add(target)
                links.append(target)

    return links


def strip_front_matter(content: str) -> str:
    """Remove a leading ``---`` delimited metadata block.

    The block must open on the very first line. Content without a closing
    marker is returned unchanged.
    """
    lines = content.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_MARKER:
        return content

    for index, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_MARKER:
            return "".join(lines[index + 1 :]).lstrip("\n")

    return content
