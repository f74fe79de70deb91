"""Request orchestration for the combined weather payload."""

from __future__ import annotations

import asyncio
import logging
import time
from functools import lru_cache
from typing import Any, Optional

from app.schemas import HistoryError, TrendHistory, WeatherResponse
from datastore.kv_store import build_default_store
from models.records import History
from services.ecowitt import EcowittClient
from services.errors import ConfigurationError, UpstreamApiError, UpstreamError
from services.trends import TrendHistoryService
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


class WeatherService:
    """Fetches Ecowitt data, folds the current reading into the trends and builds the response."""

    def __init__(
        self,
        client: Optional[EcowittClient],
        trends: Optional[TrendHistoryService],
    ) -> None:
        self.client = client
        self.trends = trends

    async def get_weather(self) -> WeatherResponse:
        if self.client is None:
            raise ConfigurationError("Server misconfiguration: missing environment variables.")

        start_time = time.perf_counter()
        realtime_result, history_result = await asyncio.gather(
            self.client.fetch_current_reading(),
            self.client.fetch_recent_history(),
            return_exceptions=True,
        )

        if isinstance(realtime_result, BaseException):
            raise self._as_upstream_error(realtime_result)

        history_data: Any = None
        history_error: Optional[HistoryError] = None
        if isinstance(history_result, BaseException):
            history_error = self._describe_history_error(history_result)
        else:
            history_data = history_result

        if self.trends is not None:
            trend_history = await asyncio.to_thread(
                self.trends.update_trend_history, realtime_result
            )
        else:
            trend_history = History()

        logger.info(
            "Weather payload assembled",
            extra={
                "pressure_count": len(trend_history.pressure),
                "temperature_count": len(trend_history.temperature),
                "elapsed_ms": int((time.perf_counter() - start_time) * 1000),
            },
        )
        return WeatherResponse(
            realtime=realtime_result,
            history=history_data,
            history_error=history_error,
            trends=TrendHistory.model_validate(trend_history.to_dict()),
        )

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()

    @staticmethod
    def _as_upstream_error(exc: BaseException) -> UpstreamError:
        if isinstance(exc, UpstreamApiError):
            return exc
        if isinstance(exc, UpstreamError):
            return UpstreamError(f"Failed to reach Ecowitt API: {exc}")
        if isinstance(exc, Exception):
            logger.exception("Unexpected failure fetching current reading", exc_info=exc)
            return UpstreamError(f"Failed to reach Ecowitt API: {exc}")
        raise exc

    @staticmethod
    def _describe_history_error(exc: BaseException) -> HistoryError:
        if not isinstance(exc, Exception):
            raise exc
        code = exc.code if isinstance(exc, UpstreamApiError) else None
        return HistoryError(
            code=code if isinstance(code, int) and not isinstance(code, bool) else None,
            msg=str(exc) or "fetch failed",
        )


def build_client(settings: Settings) -> Optional[EcowittClient]:
    if not settings.has_credentials:
        return None
    return EcowittClient(
        base_url=settings.base_url,
        api_key=settings.api_key or "",
        application_key=settings.application_key or "",
        mac=settings.device_mac or "",
        station_timezone=settings.station_timezone,
        history_hours=settings.upstream_history_hours,
        timeout=settings.upstream_timeout,
    )


@lru_cache
def build_default_weather_service() -> WeatherService:
    """Factory that wires the service from environment settings."""
    settings = get_settings()
    store = build_default_store()
    trends = (
        TrendHistoryService(store=store, window_hours=settings.trend_window_hours)
        if store is not None
        else None
    )
    return WeatherService(client=build_client(settings), trends=trends)
