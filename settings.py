from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_API_KEY_ENV = "ECOWITT_API_KEY"
_APPLICATION_KEY_ENV = "ECOWITT_APPLICATION_KEY"
_DEVICE_MAC_ENV = "ECOWITT_DEVICE_MAC"
_BASE_URL_ENV = "ECOWITT_BASE_URL"
_TIMEOUT_ENV = "ECOWITT_TIMEOUT_SECONDS"
_STATION_TIMEZONE_ENV = "STATION_TIMEZONE"
_UPSTREAM_HISTORY_HOURS_ENV = "UPSTREAM_HISTORY_HOURS"
_TREND_WINDOW_HOURS_ENV = "TREND_WINDOW_HOURS"
_KV_ENABLED_ENV = "KV_STORE_ENABLED"
_KV_PATH_ENV = "KV_STORE_PATH"
_CORS_ORIGIN_ENV = "CORS_ALLOW_ORIGIN"
_LOG_LEVEL_ENV = "LOG_LEVEL"
_SERVER_HOST_ENV = "SERVER_HOST"
_SERVER_PORT_ENV = "SERVER_PORT"

DEFAULT_BASE_URL = "https://api.ecowitt.net/api/v3/device"


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    application_key: Optional[str]
    device_mac: Optional[str]
    base_url: str
    upstream_timeout: float
    station_timezone: str
    upstream_history_hours: int
    trend_window_hours: int
    kv_store_enabled: bool
    kv_store_path: Optional[str]
    cors_allow_origin: str
    log_level: str
    server_host: str
    server_port: int

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.application_key and self.device_mac)


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


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


def _read_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in {"1", "true", "yes", "on"}:
        return True
    if candidate in {"0", "false", "no", "off"}:
        return False
    return default


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
        api_key=_read_optional_env(_API_KEY_ENV, None),
        application_key=_read_optional_env(_APPLICATION_KEY_ENV, None),
        device_mac=_read_optional_env(_DEVICE_MAC_ENV, None),
        base_url=_read_str_env(_BASE_URL_ENV, DEFAULT_BASE_URL).rstrip("/"),
        upstream_timeout=_read_positive_float(_TIMEOUT_ENV, 10.0),
        station_timezone=_read_str_env(_STATION_TIMEZONE_ENV, "Africa/Johannesburg"),
        upstream_history_hours=_read_positive_int(_UPSTREAM_HISTORY_HOURS_ENV, 24),
        trend_window_hours=_read_positive_int(_TREND_WINDOW_HOURS_ENV, 48),
        kv_store_enabled=_read_bool(_KV_ENABLED_ENV, True),
        kv_store_path=_read_optional_env(_KV_PATH_ENV, "./tmp/weather_kv.json"),
        cors_allow_origin=_read_str_env(_CORS_ORIGIN_ENV, "*"),
        log_level=_read_log_level("INFO"),
        server_host=_read_str_env(_SERVER_HOST_ENV, "0.0.0.0"),
        server_port=_read_positive_int(_SERVER_PORT_ENV, 8000),
    )
