from __future__ import annotations

import asyncio
from typing import Iterable

from datastore.kv_store import build_default_store
from services.weather import build_default_weather_service
from settings import DEFAULT_BASE_URL, get_settings

_CACHES = (get_settings, build_default_store, build_default_weather_service)


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    store_path = tmp_path / "kv.json"

    monkeypatch.setenv("ECOWITT_API_KEY", " api-key ")
    monkeypatch.setenv("ECOWITT_APPLICATION_KEY", "app-key")
    monkeypatch.setenv("ECOWITT_DEVICE_MAC", "AA:BB:CC:DD:EE:FF")
    monkeypatch.setenv("ECOWITT_BASE_URL", "https://ecowitt.test/api/v3/device/")
    monkeypatch.setenv("STATION_TIMEZONE", "Europe/London")
    monkeypatch.setenv("TREND_WINDOW_HOURS", "12")
    monkeypatch.setenv("UPSTREAM_HISTORY_HOURS", "-3")
    monkeypatch.setenv("KV_STORE_PATH", str(store_path))
    monkeypatch.setenv("CORS_ALLOW_ORIGIN", "https://weather.example")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    _clear_caches(_CACHES)

    try:
        settings = get_settings()
        service = build_default_weather_service()

        assert settings.api_key == "api-key"
        assert settings.has_credentials is True
        assert settings.base_url == "https://ecowitt.test/api/v3/device"
        assert settings.upstream_history_hours == 24
        assert settings.cors_allow_origin == "https://weather.example"
        assert settings.log_level == "DEBUG"
        assert service.client is not None
        assert service.client.station_tz.key == "Europe/London"
        assert service.trends is not None
        assert service.trends.window_hours == 12
        assert service.trends.ttl_seconds == 13 * 3600
        assert service.trends.store.persistence_path == store_path
        asyncio.run(service.aclose())
    finally:
        _clear_caches(_CACHES)


def test_defaults_without_environment(monkeypatch) -> None:
    for name in (
        "ECOWITT_API_KEY",
        "ECOWITT_APPLICATION_KEY",
        "ECOWITT_DEVICE_MAC",
        "ECOWITT_BASE_URL",
        "STATION_TIMEZONE",
        "TREND_WINDOW_HOURS",
        "KV_STORE_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)
    _clear_caches(_CACHES)

    try:
        settings = get_settings()

        assert settings.has_credentials is False
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.trend_window_hours == 48
        assert settings.station_timezone == "Africa/Johannesburg"
        assert settings.kv_store_enabled is True
    finally:
        _clear_caches(_CACHES)


def test_disabled_store_means_no_trend_service(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("KV_STORE_ENABLED", "false")
    monkeypatch.setenv("KV_STORE_PATH", str(tmp_path / "kv.json"))
    monkeypatch.setenv("ECOWITT_API_KEY", "")
    _clear_caches(_CACHES)

    try:
        assert build_default_store() is None
        service = build_default_weather_service()
        assert service.trends is None
        assert service.client is None
    finally:
        _clear_caches(_CACHES)


def test_run_serves_app_on_configured_address(monkeypatch) -> None:
    from app import main

    calls = []
    monkeypatch.setenv("SERVER_HOST", "127.0.0.1")
    monkeypatch.setenv("SERVER_PORT", "9100")
    monkeypatch.setattr(main.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
    _clear_caches(_CACHES)

    try:
        main.run()
    finally:
        _clear_caches(_CACHES)

    assert calls == [
        ("app.main:app", {"host": "127.0.0.1", "port": 9100, "log_config": None})
    ]
