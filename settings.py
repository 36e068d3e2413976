from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from core.config import WEATHER_REFRESH_INTERVAL_SECONDS


_WEATHER_URL_ENV = "WEATHER_API_URL"
_WEATHER_TIMEZONE_ENV = "WEATHER_TIMEZONE"
_WEATHER_TIMEOUT_ENV = "WEATHER_TIMEOUT_SECONDS"
_WEATHER_REFRESH_ENV = "WEATHER_REFRESH_SECONDS"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_WEATHER_URL = "https://api.open-meteo.com/v1/forecast"


@dataclass(frozen=True)
class Settings:
    weather_api_url: str
    weather_timezone: str
    weather_timeout: float
    weather_refresh_seconds: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        weather_api_url=_read_str_env(_WEATHER_URL_ENV, DEFAULT_WEATHER_URL),
        weather_timezone=_read_str_env(_WEATHER_TIMEZONE_ENV, "Asia/Manila"),
        weather_timeout=_read_positive_float(_WEATHER_TIMEOUT_ENV, 10.0),
        weather_refresh_seconds=_read_positive_float(
            _WEATHER_REFRESH_ENV, float(WEATHER_REFRESH_INTERVAL_SECONDS)
        ),
        log_level=_read_log_level("INFO"),
    )
