"""Document composition.

Fetches documentation fragments concurrently and merges them into a single
ordered Markdown document:

- each fragment loses its leading front-matter block and gains a
  ``_Source: <locator>_`` footer,
- the first fragment is emitted verbatim, every later one is prefixed with a
  divider and a ``## Section: <label>`` heading,
- fragments appear in locator order, never in completion order.

A fragment that cannot be fetched (and has no stale cache entry) becomes an
inline error placeholder; the rest of the document is unaffected. The
schema and the llms.txt index are different: without them there is nothing
to compose, so their failures raise ``AdvisorError``.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

import structlog

from mcpadvisor.errors import AdvisorError, ErrorCode
from mcpadvisor.models.documents import CompleteDocument, ComposedSection
from mcpadvisor.models.fetch import FetchInvalidContent, FetchOk, FetchTransportError
from mcpadvisor.parser import parse_links, strip_front_matter
from mcpadvisor.sections import SectionCatalog, filter_locators

if TYPE_CHECKING:
    from mcpadvisor.config import SourcesSettings
    from mcpadvisor.models.fetch import FetchFailure
    from mcpadvisor.sources import CachedSource
    from mcpadvisor.versions import VersionResolver

log = structlog.get_logger()

INDEX_CACHE_PREFIX = "index:"
SCHEMA_CACHE_PREFIX = "schema:"


def section_label(locator: str) -> str:
    """Derive a heading label from a locator's final path segment.

    ``.../basic/lifecycle.md`` → ``lifecycle``;
    ``.../basic/utilities/index.md`` → ``utilities overview``.
    """
    try:
        path = urlparse(locator).path
    except ValueError:
        path = locator
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return "Additional Content"
    stem = PurePosixPath(segments[-1]).stem
    if stem == "index":
        return f"{segments[-2]} overview" if len(segments) >= 2 else "Overview"
    return stem


def render_placeholder(locator: str, failure: FetchFailure) -> str:
    return f"> **Error:** failed to load {locator} ({failure.describe()})"


def render_document(title: str, content: str) -> str:
    """Wrap composed section content in a titled Markdown document."""
    body = content or "_No documents found for this section._"
    return f"# {title}\n\n{body}\n"


def _with_provenance(body: str, locator: str) -> str:
    return f"{strip_front_matter(body).rstrip()}\n\n_Source: {locator}_"


def parse_schema(body: str) -> dict[str, Any]:
    """Decode a schema document. Raises ``ValueError`` unless it is a JSON object."""
    schema = json.loads(body)
    if not isinstance(schema, dict):
        raise ValueError("schema is not a JSON object")
    return schema


class DocumentComposer:
    """Builds composite documents from the documentation index."""

    def __init__(
        self,
        source: CachedSource,
        resolver: VersionResolver,
        sources: SourcesSettings,
        catalog: SectionCatalog | None = None,
    ) -> None:
        self._source = source
        self._resolver = resolver
        self._index_url = sources.index_url
        self._schema_url = sources.schema_url
        self.catalog = catalog or SectionCatalog()

    # ------------------------------------------------------------------
    # Fragments
    # ------------------------------------------------------------------

    async def fetch_fragment(self, locator: str) -> str:
        """Return one fragment, annotated, or a placeholder if unavailable."""
        result = await self._source.load(locator, locator)
        if isinstance(result, FetchOk):
            return _with_provenance(result.body, locator)
        log.warning("fragment_unavailable", locator=locator, reason=result.describe())
        return render_placeholder(locator, result)

    async def compose_section(self, locators: list[str]) -> str:
        """Fetch all *locators* concurrently and join them in input order."""
        if not locators:
            return ""

        results = await asyncio.gather(
            *(self.fetch_fragment(loc) for loc in locators),
            return_exceptions=True,
        )
        fragments = [
            self._fragment_or_placeholder(locator, result)
            for locator, result in zip(locators, results, strict=True)
        ]

        parts = [fragments[0]]
        for locator, fragment in zip(locators[1:], fragments[1:], strict=True):
            parts.append(f"---\n\n## Section: {section_label(locator)}\n\n{fragment}")
        return "\n\n".join(parts)

    @staticmethod
    def _fragment_or_placeholder(locator: str, result: str | BaseException) -> str:
        if isinstance(result, str):
            return result
        if not isinstance(result, Exception):
            raise result
        log.error("fragment_unexpected_error", locator=locator, exc_info=result)
        failure = FetchTransportError(f"{type(result).__name__}: {result}")
        return render_placeholder(locator, failure)

    # ------------------------------------------------------------------
    # Index and schema
    # ------------------------------------------------------------------

    async def load_index(self) -> list[str]:
        """Return every locator listed in the llms.txt index."""
        result = await self._source.load(INDEX_CACHE_PREFIX + self._index_url, self._index_url)
        if not isinstance(result, FetchOk):
            raise AdvisorError(
                code=ErrorCode.INDEX_FETCH_FAILED,
                message=(
                    f"Could not fetch documentation index {self._index_url}: {result.describe()}"
                ),
                suggestion="The documentation site may be temporarily unavailable.",
                recoverable=True,
            )
        return parse_links(result.body)

    async def fetch_schema(self, version: str) -> dict[str, Any]:
        """Fetch the JSON schema for *version*. Unsupported versions are rejected.

        A body that is not a JSON object is never cached, so it cannot
        displace a previously fetched schema.
        """
        version = self._resolver.validate(version)
        url = self._schema_url.format(version=version)
        result = await self._source.load(SCHEMA_CACHE_PREFIX + version, url, parse_schema)
        if isinstance(result, FetchInvalidContent):
            raise AdvisorError(
                code=ErrorCode.SCHEMA_FETCH_FAILED,
                message=f"Schema for version {version} is not usable: {result.describe()}",
                suggestion="The schema source returned unexpected content.",
                recoverable=False,
            )
        if not isinstance(result, FetchOk):
            raise AdvisorError(
                code=ErrorCode.SCHEMA_FETCH_FAILED,
                message=f"Could not fetch schema for version {version}: {result.describe()}",
                suggestion="The schema source may be temporarily unavailable. Try again later.",
                recoverable=True,
            )
        return parse_schema(result.body)

    # ------------------------------------------------------------------
    # Composites
    # ------------------------------------------------------------------

    async def compose_complete(self, version: str) -> CompleteDocument:
        """Compose every specification section for *version*, schema first.

        Sections run one after another; sections without locators are
        left out entirely.
        """
        schema = await self.fetch_schema(version)
        locators = await self.load_index()

        sections: list[ComposedSection] = []
        for section in self.catalog.spec_sections:
            selected = filter_locators(locators, section.spec, version)
            if not selected:
                log.info("section_empty", section=section.name, version=version)
                continue
            sections.append(
                ComposedSection(
                    name=section.name,
                    title=section.title,
                    locators=selected,
                    content=await self.compose_section(selected),
                )
            )

        log.info("complete_composed", version=version, section_count=len(sections))
        return CompleteDocument(version=version, spec_schema=schema, sections=sections)
