"""Configuration model and helpers for the Blog Feed service."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field, HttpUrl, ValidationError

__all__ = [
    "DEFAULT_AGGREGATOR_URL",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_FEED_URL",
    "FeedSettings",
]

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "data" / "settings.json"
DEFAULT_FEED_URL = "https://medium.com/@kingsillu/feed"
DEFAULT_AGGREGATOR_URL = "https://api.rss2json.com/v1/api.json"

# Environment variable -> settings field.
_ENV_FIELDS = {
    "BLOGFEED_FEED_URL": "feed_url",
    "BLOGFEED_AGGREGATOR_URL": "aggregator_url",
    "BLOGFEED_REFRESH_INTERVAL": "refresh_interval",
    "BLOGFEED_REQUEST_TIMEOUT": "request_timeout",
    "PORT": "port",
    "APP_ENV": "environment",
    "LOG_LEVEL": "log_level",
}


class FeedSettings(BaseModel):
    """Runtime settings for fetching and serving the blog feed."""

    feed_url: HttpUrl = Field(
        default=DEFAULT_FEED_URL,
        validate_default=True,
        description="RSS feed converted by the aggregator",
    )
    aggregator_url: HttpUrl = Field(
        default=DEFAULT_AGGREGATOR_URL,
        validate_default=True,
        description="RSS-to-JSON endpoint; the feed URL is passed as the rss_url query parameter",
    )
    refresh_interval: int = Field(
        default=300,
        ge=0,
        description="Seconds between background refreshes of the reader page. 0 disables them.",
    )
    request_timeout: float | None = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for the aggregator request. None leaves it to requests.",
    )
    port: int = Field(default=5000, ge=1, le=65535)
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "FeedSettings":
        """Build settings from environment variables, falling back to defaults."""

        source = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for variable, field_name in _ENV_FIELDS.items():
            raw = source.get(variable)
            if raw is None or not raw.strip():
                continue
            value: object = raw.strip()
            if field_name == "request_timeout" and str(value).lower() == "none":
                value = None
            values[field_name] = value

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            names = {field: variable for variable, field in _ENV_FIELDS.items()}
            bad = sorted({names.get(str(error["loc"][0]), str(error["loc"][0])) for error in exc.errors()})
            raise ValueError(f"Invalid environment configuration: {', '.join(bad)}\n{exc}") from exc

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> "FeedSettings":
        """Load settings from a JSON file."""

        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Configuration file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in configuration file: {config_path}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Configuration file is invalid: {config_path}\n{exc}") from exc

    def dump(self, path: Path | str | None = None) -> None:
        """Persist the settings back to disk as JSON."""

        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
