from __future__ import annotations

from mcpadvisor.models.cache import CacheEntry
from mcpadvisor.models.documents import CompleteDocument, ComposedSection
from mcpadvisor.models.fetch import (
    FetchFailure,
    FetchHttpError,
    FetchInvalidContent,
    FetchOk,
    FetchResult,
    FetchTransportError,
)
from mcpadvisor.models.tools import (
    ListSectionsOutput,
    ReadSpecPageInput,
    ReadSpecPageOutput,
    SectionInfo,
    SectionRequest,
)

__all__ = [
    # cache
    "CacheEntry",
    # fetch
    "FetchOk",
    "FetchHttpError",
    "FetchTransportError",
    "FetchInvalidContent",
    "FetchResult",
    "FetchFailure",
    # documents
    "ComposedSection",
    "CompleteDocument",
    # tools
    "SectionRequest",
    "ReadSpecPageInput",
    "ReadSpecPageOutput",
    "SectionInfo",
    "ListSectionsOutput",
]
