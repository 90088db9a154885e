"""Specification version resolution.

Two resolution strengths coexist:

- ``resolve`` is soft: an unsupported version degrades to the configured
  default with a warning. Resource templates use it.
- ``validate`` is strict: an unsupported version raises an ``AdvisorError``
  listing the supported versions. Schema entry points use it.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

import structlog

from mcpadvisor.errors import AdvisorError, ErrorCode

log = structlog.get_logger()

SUPPORTED_VERSIONS: tuple[str, ...] = ("2024-11-05", "2025-03-26", "draft")
DEFAULT_VERSION = "2025-03-26"

# Locators carry their version as the path segment after this keyword:
# https://modelcontextprotocol.io/specification/2025-03-26/basic/lifecycle.md
VERSION_ANCHOR = "specification"

_VERSION_SEGMENT_RE = re.compile(r"^(\d{4}-\d{2}-\d{2}|draft)$")


def _path_segments(locator: str) -> list[str]:
    return [segment for segment in urlparse(locator).path.split("/") if segment]


def embedded_versions(locator: str) -> set[str]:
    """Return every path segment of *locator* that looks like a version.

    Dates (``YYYY-MM-DD``) count even when unsupported, so a locator for an
    unknown release is never mistaken for version-agnostic documentation.
    """
    return {segment for segment in _path_segments(locator) if _VERSION_SEGMENT_RE.match(segment)}


class VersionResolver:
    """Resolves and validates version tokens against the supported set."""

    def __init__(
        self,
        default: str = DEFAULT_VERSION,
        supported: tuple[str, ...] = SUPPORTED_VERSIONS,
    ) -> None:
        if default not in supported:
            raise ValueError(f"Default version {default!r} is not supported")
        self.default = default
        self.supported = supported

    def is_supported(self, candidate: str) -> bool:
        return candidate in self.supported

    def resolve(self, candidate: str | None) -> str:
        """Return *candidate* if supported, otherwise the default version."""
        if not candidate:
            return self.default
        if self.is_supported(candidate):
            return candidate
        log.warning(
            "version_unsupported_fallback",
            requested=candidate,
            fallback=self.default,
            supported=list(self.supported),
        )
        return self.default

    def validate(self, candidate: str) -> str:
        """Return *candidate* unchanged, or raise if it is not supported."""
        if self.is_supported(candidate):
            return candidate
        supported = ", ".join(self.supported)
        raise AdvisorError(
            code=ErrorCode.UNSUPPORTED_VERSION,
            message=f"Unsupported specification version: {candidate!r}. Supported: {supported}",
            suggestion=f"Use one of the supported versions: {supported}.",
            recoverable=False,
            supported_versions=self.supported,
        )

    def extract_from_locator(self, locator: str, *, strict: bool = False) -> str:
        """Read the version segment that follows the ``specification`` anchor.

        A missing segment always yields the default. An unsupported segment
        yields the default too, unless *strict* is set, in which case it is
        rejected through ``validate``.
        """
        segments = _path_segments(locator)
        try:
            candidate = segments[segments.index(VERSION_ANCHOR) + 1]
        except (ValueError, IndexError):
            return self.default
        if not _VERSION_SEGMENT_RE.match(candidate):
            # e.g. /specification/index.md has no version segment
            return self.default

        if strict:
            return self.validate(candidate)
        if self.is_supported(candidate):
            return candidate
        log.debug("locator_version_unsupported", locator=locator, segment=candidate)
        return self.default
