"""Error hierarchy shared by the upstream client, trend store and routes."""

from __future__ import annotations

from typing import Optional


class WeatherProxyError(Exception):
    """Base class for all weather proxy failures."""


class ConfigurationError(WeatherProxyError):
    """Required settings (Ecowitt credentials) are missing."""


class UpstreamError(WeatherProxyError):
    """A call to the Ecowitt API did not produce usable data."""

    code: Optional[int] = None


class UpstreamTransportError(UpstreamError):
    """The request failed before a successful HTTP response was received."""


class UpstreamApiError(UpstreamError):
    """Ecowitt answered with a non-zero ``code`` in the response body."""

    def __init__(self, code: Optional[int], message: Optional[str] = None) -> None:
        self.code = code
        self.message = message or "Ecowitt API returned an error."
        super().__init__(self.message)


class PersistenceError(WeatherProxyError):
    """The key-value store could not complete an operation."""


class PersistenceReadError(PersistenceError):
    pass


class PersistenceWriteError(PersistenceError):
    pass
