"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments
  2. Environment variables  (RFCVIEW__CACHE__DIR=/tmp/rfc-cache)
  3. rfcview.yaml           (searched in cwd, then the platform config dir)
  4. Hardcoded defaults

The config file is optional; every field has a sensible default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from rfcview import __version__

_APP_NAME = "rfcview"
_DEFAULT_CACHE_DIR = platformdirs.user_cache_dir(_APP_NAME)
_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir(_APP_NAME)


def _find_config_file() -> str | None:
    """Return the path of the first rfcview.yaml found, or None."""
    candidates = [
        Path("rfcview.yaml"),
        Path(_DEFAULT_CONFIG_DIR) / "rfcview.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dir: str = _DEFAULT_CACHE_DIR


class FetcherSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    rfc_editor_url: str = "https://www.rfc-editor.org/rfc"
    drafts_url: str = "https://www.ietf.org/archive/id"
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_redirects: int = Field(default=5, ge=0)
    user_agent: str = f"rfcview/{__version__}"


class DatatrackerSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_url: str = "https://datatracker.ietf.org"


class SearchSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    default_limit: int = Field(default=25, ge=1)


class ViewerSettings(BaseModel):
    """Viewer programs; ``None`` falls back to $EDITOR / $PAGER."""

    model_config = ConfigDict(extra="forbid")

    editor: str | None = None
    pager: str | None = None


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: RFCVIEW__SEARCH__DEFAULT_LIMIT=50
        env_prefix="RFCVIEW__",
        env_nested_delimiter="__",
        yaml_file_encoding="utf-8",
        extra="forbid",
    )

    cache: CacheSettings = CacheSettings()
    fetcher: FetcherSettings = FetcherSettings()
    datatracker: DatatrackerSettings = DatatrackerSettings()
    search: SearchSettings = SearchSettings()
    viewer: ViewerSettings = ViewerSettings()
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
            YamlConfigSettingsSource(settings_cls, yaml_file=_find_config_file()),  # YAML file
            # dotenv and file secrets intentionally excluded
        )

    @property
    def cache_dir(self) -> Path:
        return Path(self.cache.dir).expanduser()
