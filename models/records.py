"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

METRICS = ("pressure", "temperature")


@dataclass(frozen=True, slots=True)
class Sample:
    """A single trend point: epoch milliseconds and a metric value."""

    time: int
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"time": self.time, "value": self.value}

    @classmethod
    def from_payload(cls, payload: Any) -> "Sample":
        if not isinstance(payload, Mapping):
            raise ValueError("Sample must be an object.")
        time_raw = payload.get("time")
        value_raw = payload.get("value")
        if isinstance(time_raw, bool) or not isinstance(time_raw, (int, float)):
            raise ValueError("Sample time must be numeric.")
        if isinstance(value_raw, bool) or not isinstance(value_raw, (int, float)):
            raise ValueError("Sample value must be numeric.")
        return cls(time=int(time_raw), value=float(value_raw))


@dataclass(slots=True)
class History:
    """Rolling pressure and temperature trends, oldest first."""

    pressure: List[Sample] = field(default_factory=list)
    temperature: List[Sample] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "pressure": [sample.to_dict() for sample in self.pressure],
            "temperature": [sample.to_dict() for sample in self.temperature],
        }

    def trimmed(self, cutoff: int) -> "History":
        """Return a copy keeping only samples strictly newer than ``cutoff``."""
        return History(
            pressure=[sample for sample in self.pressure if sample.time > cutoff],
            temperature=[sample for sample in self.temperature if sample.time > cutoff],
        )

    @classmethod
    def from_payload(cls, payload: Any) -> "History":
        if not isinstance(payload, Mapping):
            raise ValueError("History must be an object.")
        series: Dict[str, List[Sample]] = {}
        for metric in METRICS:
            raw = payload.get(metric)
            if not isinstance(raw, list):
                raise ValueError(f"History is missing the {metric!r} series.")
            series[metric] = [Sample.from_payload(item) for item in raw]
        return cls(**series)
