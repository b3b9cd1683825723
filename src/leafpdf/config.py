"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (LEAFPDF__ARTIFACT__STRATEGY=bytes)
  2. leafpdf.yaml           (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64; rv:114.0) Gecko/20100101 Firefox/114.0"
)


def _find_config_file() -> str | None:
    """Return the path of the first leafpdf.yaml found, or None."""
    candidates = [
        Path("leafpdf.yaml"),
        Path(platformdirs.user_config_dir("leafpdf")) / "leafpdf.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080


class RemoteSettings(BaseModel):
    base_url: str = "https://www.overleaf.com"
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = Field(default=30.0, gt=0)
    # Where the compile call carries the CSRF token: JSON body field or X-CSRF-Token header
    csrf_mode: Literal["body", "header"] = "body"
    load_metadata: bool = False


class ArtifactSettings(BaseModel):
    strategy: Literal["url", "bytes"] = "url"


class CacheSettings(BaseModel):
    ttl_seconds: int = Field(default=1200, ge=0)
    max_entries: int = Field(default=256, ge=1)
    cleanup_interval_seconds: int = Field(default=300, gt=0)
    coalesce_inflight: bool = True


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: LEAFPDF__SERVER__PORT=9090
        env_prefix="LEAFPDF__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    remote: RemoteSettings = RemoteSettings()
    artifact: ArtifactSettings = ArtifactSettings()
    cache: CacheSettings = CacheSettings()
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
        )
