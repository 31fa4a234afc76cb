"""Typed failures raised by providers and persistence adapters.

The dashboard coordinator catches all of these and records their text on
the affected resource, so none of them escape to consumers.
"""

from __future__ import annotations


class WeatherMoodError(Exception):
    """Base class for every failure this package raises on purpose."""


class FetchError(WeatherMoodError):
    pass


class NetworkFailure(FetchError):
    """Transport error or a non-success status from a provider."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(FetchError):
    """Provider answered, but the payload does not match its schema."""


class LocationError(WeatherMoodError):
    pass


class PermissionDenied(LocationError):
    pass


class LocationUnavailable(LocationError):
    """No position fix: timeout, disabled services, unknown provider state."""


class PersistenceFailure(WeatherMoodError):
    pass
