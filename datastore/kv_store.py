from __future__ import annotations
import json
import logging
import time
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Callable, Dict, Optional

from services.errors import PersistenceReadError, PersistenceWriteError
from settings import get_settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Entry:
    value: str
    expires_at: Optional[float] = None


class KeyValueStore:
    """String key-value namespace with per-key expiry and optional JSON file persistence."""

    def __init__(
        self,
        name: str,
        persistence_path: Optional[Path] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.name = name
        self._entries: Dict[str, _Entry] = {}
        self.persistence_path = persistence_path
        self._clock = clock
        self._lock = Lock()
        if persistence_path:
            try:
                persistence_path.parent.mkdir(parents=True, exist_ok=True)
                self._load_from_disk()
            except (OSError, PersistenceReadError) as exc:
                logger.warning(
                    "Store file unusable; keeping entries in memory only",
                    extra={"key": str(persistence_path), "reason": str(exc)},
                )
                self.persistence_path = None

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at is not None and entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.value

    def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive.")
        with self._lock:
            expires_at = self._clock() + ttl_seconds if ttl_seconds is not None else None
            self._entries[key] = _Entry(value=value, expires_at=expires_at)
            self._persist()

    def delete(self, key: str) -> None:
        with self._lock:
            if self._entries.pop(key, None) is not None:
                self._persist()

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        now = self._clock()
        payload = {
            key: {"value": entry.value, "expires_at": entry.expires_at}
            for key, entry in self._entries.items()
            if entry.expires_at is None or entry.expires_at > now
        }
        try:
            self.persistence_path.write_text(json.dumps(payload, indent=2, sort_keys=True))
        except OSError as exc:
            raise PersistenceWriteError(
                f"Could not write store {self.name!r} to {self.persistence_path}."
            ) from exc

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
        except OSError as exc:
            raise PersistenceReadError(
                f"Could not read store {self.name!r} from {self.persistence_path}."
            ) from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        for key, payload in data.items():
            if not isinstance(payload, dict) or not isinstance(payload.get("value"), str):
                continue
            expires_at = payload.get("expires_at")
            if not isinstance(expires_at, (int, float)):
                expires_at = None
            self._entries[key] = _Entry(value=payload["value"], expires_at=expires_at)


@lru_cache
def build_default_store(
    name: str = "weather",
    path: Optional[str] = None,
) -> Optional[KeyValueStore]:
    """Return the configured store, or ``None`` when no persistence layer is bound."""
    settings = get_settings()
    if not settings.kv_store_enabled:
        return None
    store_path = settings.kv_store_path if path is None else path
    persistence = Path(store_path) if store_path else None
    return KeyValueStore(name=name, persistence_path=persistence)
