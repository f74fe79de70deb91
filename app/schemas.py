"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class TrendSample(BaseModel):
    """A single point of a persisted trend series."""

    time: int = Field(..., description="Epoch milliseconds when the sample was recorded.")
    value: float


class TrendHistory(BaseModel):
    """Rolling trend series in metric units (hPa and degrees Celsius)."""

    pressure: List[TrendSample] = Field(default_factory=list)
    temperature: List[TrendSample] = Field(default_factory=list)


class HistoryError(BaseModel):
    """Diagnostic detail when the upstream history call did not succeed."""

    code: Optional[int] = None
    msg: str


class WeatherResponse(BaseModel):
    """Combined payload served to the browser client."""

    realtime: Any = Field(..., description="Ecowitt real-time ``data`` object, passed through.")
    history: Any = Field(
        default=None, description="Ecowitt history ``data`` object, or null when unavailable."
    )
    history_error: Optional[HistoryError] = None
    trends: TrendHistory = Field(default_factory=TrendHistory)
