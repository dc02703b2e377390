"""Geolocation capability and per-field lookup tracking."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from quoteflow.messages import (
    GEO_PERMISSION_DENIED,
    GEO_POSITION_UNAVAILABLE,
    GEO_TIMEOUT,
    GEO_UNKNOWN,
    GEO_UNSUPPORTED,
)

logger = logging.getLogger(__name__)

PERMISSION_DENIED = "permission_denied"
POSITION_UNAVAILABLE = "position_unavailable"
TIMEOUT = "timeout"
UNSUPPORTED = "unsupported"
UNKNOWN = "unknown"

_ERROR_MESSAGES = {
    PERMISSION_DENIED: GEO_PERMISSION_DENIED,
    POSITION_UNAVAILABLE: GEO_POSITION_UNAVAILABLE,
    TIMEOUT: GEO_TIMEOUT,
    UNSUPPORTED: GEO_UNSUPPORTED,
}

LOOKUP_IDLE = "idle"
LOOKUP_PENDING = "pending"
LOOKUP_RESOLVED = "resolved"
LOOKUP_ERROR = "error"


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def to_location(self) -> dict[str, Any]:
        return {
            "text": f"{self.latitude}, {self.longitude}",
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


class GeolocationError(RuntimeError):
    def __init__(self, kind: str, detail: str | None = None) -> None:
        super().__init__(detail or kind)
        self.kind = kind


def error_message(kind: str) -> str:
    return _ERROR_MESSAGES.get(kind, GEO_UNKNOWN)


@runtime_checkable
class GeolocationProvider(Protocol):
    async def locate(self) -> Coordinates:
        """Resolve the device position or raise ``GeolocationError``."""


class StaticGeolocation:
    def __init__(self, latitude: float, longitude: float) -> None:
        self._coordinates = Coordinates(latitude=latitude, longitude=longitude)

    async def locate(self) -> Coordinates:
        return self._coordinates


class UnsupportedGeolocation:
    async def locate(self) -> Coordinates:
        raise GeolocationError(UNSUPPORTED)


class HttpGeolocation:
    """Looks up an approximate position from a JSON endpoint."""

    def __init__(self, url: str, *, timeout_s: float = 10.0) -> None:
        self._url = url
        self._timeout_s = timeout_s

    async def locate(self) -> Coordinates:
        try:
            async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                response = await client.get(self._url)
        except httpx.TimeoutException as exc:
            raise GeolocationError(TIMEOUT, str(exc)) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GeolocationError(POSITION_UNAVAILABLE, str(exc)) from exc
        if response.status_code in (401, 403):
            raise GeolocationError(PERMISSION_DENIED, f"status {response.status_code}")
        if response.status_code < 200 or response.status_code >= 300:
            raise GeolocationError(POSITION_UNAVAILABLE, f"status {response.status_code}")
        try:
            data = response.json()
            latitude = float(data.get("latitude", data.get("lat")))
            longitude = float(data.get("longitude", data.get("lon")))
        except (ValueError, TypeError, AttributeError) as exc:
            raise GeolocationError(POSITION_UNAVAILABLE, "malformed position payload") from exc
        return Coordinates(latitude=latitude, longitude=longitude)


def create_provider(url: str | None, *, timeout_s: float = 10.0) -> GeolocationProvider:
    if url:
        return HttpGeolocation(url, timeout_s=timeout_s)
    return UnsupportedGeolocation()


class LocationLookup:
    """Tracks one location field's geolocation request.

    Each request gets a token; ``abandon`` invalidates the outstanding token
    so a late result is dropped instead of written back.
    """

    def __init__(self) -> None:
        self.status = LOOKUP_IDLE
        self.error: str | None = None
        self.error_kind: str | None = None
        self.coordinates: Coordinates | None = None
        self._token = 0

    @property
    def pending(self) -> bool:
        return self.status == LOOKUP_PENDING

    async def run(self, provider: GeolocationProvider | None) -> Coordinates | None:
        if self.pending:
            return None
        if provider is None:
            self._fail(UNSUPPORTED)
            return None
        self._token += 1
        token = self._token
        self.status = LOOKUP_PENDING
        self.error = None
        self.error_kind = None
        self.coordinates = None
        try:
            coordinates = await provider.locate()
        except GeolocationError as exc:
            if token != self._token:
                return None
            logger.info("Geolocation failed: %s", exc.kind)
            self._fail(exc.kind)
            return None
        except Exception:  # noqa: BLE001
            if token != self._token:
                return None
            logger.warning("Geolocation provider failed", exc_info=True)
            self._fail(UNKNOWN)
            return None
        if token != self._token:
            logger.debug("Dropping stale geolocation result")
            return None
        self.status = LOOKUP_RESOLVED
        self.coordinates = coordinates
        return coordinates

    def abandon(self) -> None:
        self._token += 1
        if self.pending:
            self.status = LOOKUP_IDLE

    def _fail(self, kind: str) -> None:
        self.status = LOOKUP_ERROR
        self.error_kind = kind
        self.error = error_message(kind)
