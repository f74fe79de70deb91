"""Async client for the Ecowitt v3 device API.

Two endpoints are used:

* ``/real_time`` with ``call_back=all`` for the current snapshot.
* ``/history`` for a trailing window of outdoor temperature and pressure
  at 30-minute resolution.

Ecowitt interprets ``start_date``/``end_date`` as civil time in the station's
own timezone, so both are formatted in ``station_timezone`` rather than UTC.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional
from zoneinfo import ZoneInfo

import httpx

from services.errors import UpstreamApiError, UpstreamTransportError

logger = logging.getLogger(__name__)

ECOWITT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EcowittClient:
    """Thin wrapper over ``httpx.AsyncClient`` that maps failures to upstream errors."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        application_key: str,
        mac: str,
        station_timezone: str = "Africa/Johannesburg",
        history_hours: int = 24,
        cycle_type: str = "30min",
        history_channels: str = "outdoor,pressure",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._credentials = {
            "application_key": application_key,
            "api_key": api_key,
            "mac": mac,
        }
        self.station_tz = ZoneInfo(station_timezone)
        self.history_hours = history_hours
        self.cycle_type = cycle_type
        self.history_channels = history_channels
        self._clock = clock
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_current_reading(self) -> Any:
        """Return the ``data`` object of the real-time endpoint."""
        return await self._get("/real_time", {"call_back": "all"})

    async def fetch_recent_history(self) -> Any:
        """Return the ``data`` object of the history endpoint for the trailing window."""
        return await self._get("/history", self.history_params())

    def history_params(self) -> Dict[str, str]:
        end = self._clock()
        start = end - timedelta(hours=self.history_hours)
        return {
            "start_date": self.format_station_time(start),
            "end_date": self.format_station_time(end),
            "cycle_type": self.cycle_type,
            "call_back": self.history_channels,
        }

    def format_station_time(self, moment: datetime) -> str:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(self.station_tz).strftime(ECOWITT_DATE_FORMAT)

    async def _get(self, endpoint: str, params: Dict[str, str]) -> Any:
        query = {**self._credentials, **params}
        try:
            response = await self._client.get(endpoint, params=query)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning(
                "Ecowitt request rejected",
                extra={"endpoint": endpoint, "status": status},
            )
            raise UpstreamTransportError(f"HTTP {status}") from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "Ecowitt request failed",
                extra={"endpoint": endpoint, "reason": type(exc).__name__},
            )
            raise UpstreamTransportError(str(exc) or type(exc).__name__) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamTransportError("Ecowitt returned a non-JSON body.") from exc

        if not isinstance(body, dict):
            raise UpstreamApiError(None, "Ecowitt returned an unexpected payload.")

        code = body.get("code")
        if code != 0:
            logger.warning(
                "Ecowitt API returned an error",
                extra={"endpoint": endpoint, "code": code, "reason": body.get("msg")},
            )
            raise UpstreamApiError(code, body.get("msg"))

        return body.get("data")
