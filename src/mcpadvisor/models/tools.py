from __future__ import annotations

import re
from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator

_SECTION_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


class SectionRequest(BaseModel):
    """Arguments of the spec and docs section resources."""

    section: str
    version: str | None = None

    @field_validator("section")
    @classmethod
    def validate_section(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("section must not be empty")
        if len(v) > 100 or not _SECTION_NAME_RE.match(v):
            raise ValueError(f"Invalid section name: {v!r}")
        return v

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ReadSpecPageInput(BaseModel):
    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if len(v) > 2048:
            raise ValueError("url must not exceed 2048 characters")
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must be an http or https URL")
        try:
            urlparse(v)
        except ValueError as exc:
            raise ValueError(f"url is not a valid URL: {exc}") from exc
        return v


class ReadSpecPageOutput(BaseModel):
    url: str
    version: str
    content: str


class SectionInfo(BaseModel):
    name: str
    title: str
    kind: Literal["spec", "docs"]
    uri: str


class ListSectionsOutput(BaseModel):
    default_version: str
    supported_versions: list[str]
    sections: list[SectionInfo]
