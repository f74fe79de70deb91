"""Rolling temperature and pressure history kept in the key-value store."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from datastore.kv_store import KeyValueStore
from models.records import History, Sample
from services.errors import PersistenceError, PersistenceReadError, PersistenceWriteError
from services.parsing import extract_numeric, read_path
from services.units import fahrenheit_to_celsius, inches_hg_to_hectopascals

logger = logging.getLogger(__name__)

TREND_HISTORY_KEY = "trend_history"
MS_PER_HOUR = 3600 * 1000


def _epoch_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ReadOutcome:
    history: Optional[History] = None
    error: Optional[PersistenceReadError] = None


@dataclass(frozen=True)
class WriteOutcome:
    error: Optional[PersistenceWriteError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TrendHistoryService:
    """Maintains the rolling trend window with a read, append, trim and write cycle.

    There is no locking around the cycle: overlapping requests may each read the
    same blob and the last write wins.
    """

    def __init__(
        self,
        store: KeyValueStore,
        window_hours: int = 48,
        key: str = TREND_HISTORY_KEY,
        clock: Callable[[], int] = _epoch_ms,
    ) -> None:
        self.store = store
        self.window_hours = window_hours
        self.key = key
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return (self.window_hours + 1) * 3600

    def update_trend_history(self, current: Any) -> History:
        """Append the current reading to the stored trends and return the trimmed result."""
        outcome = self.read_history()
        if outcome.error is not None:
            logger.warning(
                "Trend history unreadable; starting fresh",
                extra={"key": self.key, "reason": str(outcome.error)},
            )
        history = outcome.history or History()

        now = self._clock()
        cutoff = now - self.window_hours * MS_PER_HOUR

        pressure = extract_numeric(read_path(current, "pressure", "relative"))
        temperature = extract_numeric(read_path(current, "outdoor", "temperature"))
        if pressure is not None:
            history.pressure.append(Sample(time=now, value=inches_hg_to_hectopascals(pressure)))
        if temperature is not None:
            history.temperature.append(Sample(time=now, value=fahrenheit_to_celsius(temperature)))

        history = history.trimmed(cutoff)

        written = self.write_history(history)
        if not written.ok:
            logger.warning(
                "Trend history not persisted",
                extra={"key": self.key, "reason": str(written.error)},
            )
        else:
            logger.debug(
                "Trend history updated",
                extra={
                    "key": self.key,
                    "ttl_seconds": self.ttl_seconds,
                    "pressure_count": len(history.pressure),
                    "temperature_count": len(history.temperature),
                },
            )
        return history

    def read_history(self) -> ReadOutcome:
        """Load the stored history; a missing key is an empty history, not an error."""
        try:
            raw = self.store.get(self.key)
        except PersistenceError as exc:
            return ReadOutcome(error=PersistenceReadError(str(exc)))

        if raw is None:
            return ReadOutcome(history=History())

        try:
            payload = json.loads(raw)
            return ReadOutcome(history=History.from_payload(payload))
        except ValueError as exc:
            return ReadOutcome(error=PersistenceReadError(f"Malformed trend history: {exc}"))

    def write_history(self, history: History) -> WriteOutcome:
        try:
            self.store.put(self.key, json.dumps(history.to_dict()), ttl_seconds=self.ttl_seconds)
        except PersistenceError as exc:
            return WriteOutcome(error=PersistenceWriteError(str(exc)))
        return WriteOutcome()
