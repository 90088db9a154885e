"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (MCPADVISOR__CACHE__TTL_SECONDS=600)
  2. mcp-advisor.yaml       (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from mcpadvisor.versions import DEFAULT_VERSION, SUPPORTED_VERSIONS

_CONFIG_FILE_NAME = "mcp-advisor.yaml"


def _find_config_file() -> str | None:
    """Return the path of the first mcp-advisor.yaml found, or None."""
    candidates = [
        Path(_CONFIG_FILE_NAME),
        Path(platformdirs.user_config_dir("mcp-advisor")) / _CONFIG_FILE_NAME,
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CacheSettings(BaseModel):
    ttl_seconds: int = 3600


class FetcherSettings(BaseModel):
    timeout_seconds: float = 30.0
    max_redirects: int = 3
    user_agent: str = "mcp-advisor/1.0"


class SourcesSettings(BaseModel):
    index_url: str = "https://modelcontextprotocol.io/llms.txt"
    # {version} is substituted with a validated specification version
    schema_url: str = (
        "https://raw.githubusercontent.com/modelcontextprotocol/modelcontextprotocol"
        "/main/schema/{version}/schema.json"
    )


class VersionSettings(BaseModel):
    default: str = DEFAULT_VERSION

    @field_validator("default")
    @classmethod
    def validate_default(cls, v: str) -> str:
        if v not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Default version {v!r} is not one of: {', '.join(SUPPORTED_VERSIONS)}"
            )
        return v


class DocsSettings(BaseModel):
    # name -> raw section spec, e.g. {"faq": "^faq\\.md$"}
    extra_sections: dict[str, str] = {}


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: MCPADVISOR__FETCHER__TIMEOUT_SECONDS=10
        env_prefix="MCPADVISOR__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    cache: CacheSettings = CacheSettings()
    fetcher: FetcherSettings = FetcherSettings()
    sources: SourcesSettings = SourcesSettings()
    versions: VersionSettings = VersionSettings()
    docs: DocsSettings = DocsSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
