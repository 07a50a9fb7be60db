"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from mdsite.errors import ConfigError


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDSITE_"


class Settings(BaseModel):
    content_dir:        str = Field(default="content", description="Root directory of Markdown sources")
    output_dir:         str = Field(default="public",  description="Directory for HTML fragments + index JSON")
    extensions:         list[str] = Field(default_factory=lambda: [".md", ".markdown"])
    frontmatter_format: str = Field(default="toml", pattern="^(toml|yaml)$", description="Block format for new files")
    parser_config:      str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    allow_html:         bool = Field(default=False, description="Pass raw HTML through instead of escaping it")
    summary_words:      int = Field(default=70,  ge=1, description="Words kept in an auto-summary")
    words_per_minute:   int = Field(default=200, ge=1, description="Reading speed for reading_minutes")
    timezone:           str = Field(default="UTC", description="Zone applied to dates without an offset")
    include_drafts:     bool = False
    workers:            int = Field(default=1, ge=1, description="Parallel parse/render workers; 1 is sequential")
    log_level:          str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator("extensions", mode="before")
    @classmethod
    def _split_extensions(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [v.strip() for v in value.split(",") if v.strip()]
        if isinstance(value, list):
            return [v if str(v).startswith(".") else f".{v}" for v in map(str, value)]
        return value

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone {value!r}") from e
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSITE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e
