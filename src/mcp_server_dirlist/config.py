"""
Listing Configuration

Settings are read from environment variables. Malformed values fall back to
their defaults instead of failing the server at startup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingSettings:
    """Runtime settings for the listing core and server."""

    timezone_name: str = "UTC"
    session_idle_seconds: float = 60 * 60  # 1 hour
    completed_token_ttl: float = 10 * 60  # 10 minutes
    default_row_limit: int = 1000
    log_level: str = "INFO"

    @property
    def tz(self) -> tzinfo:
        return resolve_timezone(self.timezone_name)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed {name}={raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed {name}={raw!r}, using {default}")
        return default


_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _env_log_level(name: str, default: str) -> str:
    raw = os.environ.get(name, default).upper()
    if raw not in _LOG_LEVELS:
        logger.warning(f"Ignoring unknown {name}={raw!r}, using {default}")
        return default
    return raw


def resolve_timezone(name: str) -> tzinfo:
    """Return a tzinfo for an IANA zone name, falling back to UTC."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown time zone {name!r}, using UTC")
        return timezone.utc


def load_settings() -> ListingSettings:
    """Build settings from the DIRLIST_* environment variables."""
    return ListingSettings(
        timezone_name=os.environ.get("DIRLIST_TIMEZONE", "UTC"),
        session_idle_seconds=_env_float("DIRLIST_SESSION_IDLE_SECONDS", 60 * 60),
        completed_token_ttl=_env_float("DIRLIST_COMPLETED_TOKEN_TTL", 10 * 60),
        default_row_limit=_env_int("DIRLIST_DEFAULT_ROW_LIMIT", 1000),
        log_level=_env_log_level("DIRLIST_LOG_LEVEL", "INFO"),
    )
