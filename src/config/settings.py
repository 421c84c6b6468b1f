"""
Runtime Settings for Pause Tracker.

All runtime configuration comes from environment variables:

- PAUSE_ENVIRONMENT: "development" (default) or "production"
- PAUSE_DEV_MODE: "1" for human-readable logs and auto-reload
- PAUSE_CORS_ORIGINS: comma-separated list of allowed origins
- PAUSE_HOST / PAUSE_PORT: bind address for main.py
- PAUSE_TIMEZONE: IANA zone used for calendar rules in the API
  (defaults to the server's local time)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.lib.exceptions import ConfigurationError


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    environment: str = "development"
    dev_mode: bool = False
    cors_origins: list[str] = field(default_factory=list)
    host: str = "0.0.0.0"
    port: int = 8000
    timezone: tzinfo | None = None

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _parse_timezone(name: str) -> ZoneInfo | None:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"PAUSE_TIMEZONE is not a known timezone: {name!r}") from e


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Raises:
        ConfigurationError: If PAUSE_PORT is not an integer, PAUSE_TIMEZONE
            is unknown, or a wildcard CORS origin is used in production
    """
    environment = os.getenv("PAUSE_ENVIRONMENT", "development")

    port_raw = os.getenv("PAUSE_PORT", "8000")
    try:
        port = int(port_raw)
    except ValueError as e:
        raise ConfigurationError(f"PAUSE_PORT must be an integer, got {port_raw!r}") from e

    cors_origins = [
        origin.strip()
        for origin in os.getenv("PAUSE_CORS_ORIGINS", "").split(",")
        if origin.strip()
    ]
    if environment == "production" and "*" in cors_origins:
        raise ConfigurationError(
            "PAUSE_CORS_ORIGINS contains wildcard '*' which is forbidden in production. "
            "Specify explicit origins instead."
        )

    return Settings(
        environment=environment,
        dev_mode=os.getenv("PAUSE_DEV_MODE", "0") == "1",
        cors_origins=cors_origins,
        host=os.getenv("PAUSE_HOST", "0.0.0.0"),
        port=port,
        timezone=_parse_timezone(os.getenv("PAUSE_TIMEZONE", "")),
    )
