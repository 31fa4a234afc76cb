from __future__ import annotations

from typing import Protocol

from weathermood.core.config import Settings
from weathermood.core.errors import LocationError
from weathermood.schemas.weather import Coordinates


class LocationProvider(Protocol):
    async def locate(self) -> Coordinates:
        """Return the device position or raise a LocationError."""
        ...


class StaticLocationProvider:
    def __init__(self, coordinates: Coordinates) -> None:
        self._coordinates = coordinates

    @classmethod
    def from_settings(cls, settings: Settings) -> "StaticLocationProvider":
        return cls(
            Coordinates(
                lat=settings.default_latitude,
                lon=settings.default_longitude,
                city=settings.default_city,
            )
        )

    async def locate(self) -> Coordinates:
        return self._coordinates


class UnavailableLocationProvider:
    """Always fails with the given error, e.g. when permission was refused."""

    def __init__(self, error: LocationError) -> None:
        self._error = error

    async def locate(self) -> Coordinates:
        raise self._error
