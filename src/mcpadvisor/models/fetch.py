"""Outcome of a single remote fetch.

Every fetch, whatever went wrong, is normalised into one of these shapes so
the fragment and schema paths can handle failures uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FetchOk:
    body: str
    stale: bool = False  # True when served from an expired cache entry


@dataclass(frozen=True)
class FetchHttpError:
    status: int

    def describe(self) -> str:
        return f"HTTP {self.status}"


@dataclass(frozen=True)
class FetchTransportError:
    message: str

    def describe(self) -> str:
        return self.message


@dataclass(frozen=True)
class FetchInvalidContent:
    """A 2xx body that the caller's validator rejected. Never cached."""

    reason: str

    def describe(self) -> str:
        return f"invalid content: {self.reason}"


FetchResult = FetchOk | FetchHttpError | FetchTransportError | FetchInvalidContent
FetchFailure = FetchHttpError | FetchTransportError | FetchInvalidContent
