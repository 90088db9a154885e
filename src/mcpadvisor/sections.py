"""Section specs, the locator filter, and the section catalog.

A section spec selects which locators of the documentation index belong to
one logical section. Exactly one matching rule applies per spec kind:

- ``TrailingSegmentRegex``: regex searched against the final path segment
- ``NamespaceRoot``: locators under the modelcontextprotocol GitHub org
- ``ShallowDoc``: top-level ``.md`` pages (one path segment below the root)
- ``Substring``: plain substring match anywhere in the locator

Version scoping runs before any of these: a locator that embeds a version
other than the requested one never matches.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from urllib.parse import urlparse

from mcpadvisor.versions import DEFAULT_VERSION, embedded_versions

# Appears in the llms.txt title line; never a fetchable locator.
NON_LOCATOR = "MCP"

NAMESPACE_ROOT_PREFIX = "https://github.com/modelcontextprotocol/"
MARKDOWN_EXTENSION = ".md"

# Legacy string forms of the two special-cased specs
NAMESPACE_ROOT_MARKER = "github.com/modelcontextprotocol/"
SHALLOW_DOC_MARKER = r"^[^/]+\.md$"


@dataclass(frozen=True)
class Substring:
    text: str


@dataclass(frozen=True)
class TrailingSegmentRegex:
    pattern: str


@dataclass(frozen=True)
class NamespaceRoot:
    pass


@dataclass(frozen=True)
class ShallowDoc:
    pass


SectionSpec = Substring | TrailingSegmentRegex | NamespaceRoot | ShallowDoc


def parse_section_spec(raw: str) -> SectionSpec:
    """Convert the string form used in config files into a ``SectionSpec``.

    Raises ``ValueError`` for an empty string or an invalid regex.
    """
    if not raw:
        raise ValueError("Section spec must not be empty")
    if raw == SHALLOW_DOC_MARKER:
        return ShallowDoc()
    if raw == NAMESPACE_ROOT_MARKER:
        return NamespaceRoot()
    if raw.startswith("^"):
        try:
            re.compile(raw)
        except re.error as exc:
            raise ValueError(f"Invalid section pattern {raw!r}: {exc}") from exc
        return TrailingSegmentRegex(raw)
    return Substring(raw)


def _in_version_scope(locator: str, version: str) -> bool:
    return embedded_versions(locator) <= {version}


def _is_parseable(locator: str) -> bool:
    try:
        urlparse(locator)
    except ValueError:
        # e.g. an unbalanced IPv6 bracket in the host
        return False
    return True


def _trailing_segment(locator: str) -> str:
    return locator.rsplit("/", 1)[-1]


def _is_shallow_doc(locator: str) -> bool:
    segments = [segment for segment in urlparse(locator).path.split("/") if segment]
    return len(segments) == 1 and segments[0].endswith(MARKDOWN_EXTENSION)


def filter_locators(
    locators: Iterable[str],
    spec: SectionSpec,
    version: str = DEFAULT_VERSION,
) -> list[str]:
    """Return the locators that belong to *spec* for *version*, in input order."""
    candidates = [
        locator
        for locator in locators
        if locator
        and locator != NON_LOCATOR
        and _is_parseable(locator)
        and _in_version_scope(locator, version)
    ]

    if isinstance(spec, TrailingSegmentRegex):
        regex = re.compile(spec.pattern)
        return [locator for locator in candidates if regex.search(_trailing_segment(locator))]
    if isinstance(spec, NamespaceRoot):
        return [locator for locator in candidates if locator.startswith(NAMESPACE_ROOT_PREFIX)]
    if isinstance(spec, ShallowDoc):
        return [locator for locator in candidates if _is_shallow_doc(locator)]
    return [locator for locator in candidates if spec.text in locator]


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Section:
    name: str
    title: str
    spec: SectionSpec


def _title_from_name(name: str) -> str:
    return " ".join(word.capitalize() for word in re.split(r"[-_\s]+", name) if word)


# Ordered: complete composition walks these in sequence.
SPEC_SECTIONS: tuple[Section, ...] = (
    Section("architecture", "Architecture", Substring("/architecture/")),
    Section("base-protocol", "Base Protocol", Substring("/basic/")),
    Section("utilities", "Utilities", Substring("/basic/utilities/")),
    Section("client", "Client Features", Substring("/client/")),
    Section("server", "Server Features", Substring("/server/")),
    Section("server-utilities", "Server Utilities", Substring("/server/utilities/")),
)

DOCS_SECTIONS: tuple[Section, ...] = (
    Section("quickstart", "Quickstart", Substring("/quickstart/")),
    Section("development", "Development", Substring("/development/")),
    Section("sdk", "SDKs", Substring("/sdk/")),
    Section("tutorials", "Tutorials", Substring("/tutorials/")),
    Section("concepts", "Concepts", Substring("/docs/concepts/")),
    Section("tools", "Tools", Substring("/docs/tools/")),
    Section("sdk-repositories", "SDK Repositories", NamespaceRoot()),
    Section("overview", "Overview", ShallowDoc()),
    Section("examples", "Examples", TrailingSegmentRegex(r"^(examples|clients)\.md$")),
)

COMPLETE_SECTION = "complete"


class SectionCatalog:
    """Named sections, looked up by the MCP handlers."""

    def __init__(
        self,
        spec_sections: Iterable[Section] = SPEC_SECTIONS,
        docs_sections: Iterable[Section] = DOCS_SECTIONS,
    ) -> None:
        self.spec_sections = tuple(spec_sections)
        self.docs_sections = tuple(docs_sections)
        self._spec_by_name = {section.name: section for section in self.spec_sections}
        self._docs_by_name = {section.name: section for section in self.docs_sections}

    @classmethod
    def with_extra_docs(cls, extra: Mapping[str, str]) -> SectionCatalog:
        """Build the default catalog plus documentation sections from config.

        Extra sections with a name already in the catalog replace the
        built-in definition.
        """
        docs = {section.name: section for section in DOCS_SECTIONS}
        for name, raw in extra.items():
            docs[name] = Section(name, _title_from_name(name), parse_section_spec(raw))
        return cls(SPEC_SECTIONS, docs.values())

    def spec_section(self, name: str) -> Section | None:
        return self._spec_by_name.get(name)

    def docs_section(self, name: str) -> Section | None:
        return self._docs_by_name.get(name)
