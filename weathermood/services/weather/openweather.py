from __future__ import annotations

import logging
from datetime import datetime, timezone as dt_timezone
from typing import Any

import httpx

from weathermood.core.config import Settings
from weathermood.core.errors import MalformedResponse, NetworkFailure
from weathermood.core.http import request_json
from weathermood.schemas.weather import ForecastSample, ForecastSeries, TemperatureUnit, WeatherSnapshot


logger = logging.getLogger(__name__)

CURRENT_ENDPOINT = "/weather"
FORECAST_ENDPOINT = "/forecast"


def _check_cod(data: dict[str, Any], label: str) -> None:
    # /weather reports cod as an int, /forecast as a string.
    cod = data.get("cod")
    if cod is None:
        return
    try:
        code = int(cod)
    except (TypeError, ValueError):
        raise MalformedResponse(f"{label} returned an unreadable status {cod!r}") from None
    if code != 200:
        message = data.get("message") or f"{label} upstream status {code}"
        raise NetworkFailure(str(message), status_code=code)


def _primary_condition(entry: dict[str, Any]) -> dict[str, Any]:
    conditions = entry.get("weather") or []
    if not isinstance(conditions, list) or not conditions or not isinstance(conditions[0], dict):
        return {}
    return conditions[0]


def parse_current(data: dict[str, Any], unit: TemperatureUnit) -> WeatherSnapshot:
    main = data.get("main")
    if not isinstance(main, dict) or main.get("temp") is None:
        raise MalformedResponse("Current weather payload is missing main.temp")

    condition = _primary_condition(data)
    if not condition:
        raise MalformedResponse("Current weather payload is missing weather[]")

    wind = data.get("wind") or {}
    code = condition.get("id")
    try:
        return WeatherSnapshot(
            location_name=str(data.get("name") or ""),
            condition_code=int(code) if code is not None else None,
            condition=str(condition.get("main") or "unknown"),
            description=str(condition.get("description") or ""),
            temperature=float(main["temp"]),
            feels_like=float(main["feels_like"]) if main.get("feels_like") is not None else None,
            humidity=int(main["humidity"]) if main.get("humidity") is not None else None,
            wind_speed=float(wind["speed"]) if wind.get("speed") is not None else None,
            unit=unit,
            fetched_at=datetime.now(dt_timezone.utc),
        )
    except (TypeError, ValueError) as exc:
        raise MalformedResponse(f"Current weather payload is invalid: {exc}") from exc


def parse_forecast(data: dict[str, Any], unit: TemperatureUnit) -> ForecastSeries:
    items = data.get("list")
    if not isinstance(items, list):
        raise MalformedResponse("Forecast payload is missing list[]")

    city = data.get("city") or {}
    samples: list[ForecastSample] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        main = item.get("main") or {}
        if item.get("dt") is None or main.get("temp") is None:
            logger.debug("Skipping incomplete forecast sample: %s", item)
            continue
        condition = _primary_condition(item)
        try:
            samples.append(
                ForecastSample(
                    timestamp=datetime.fromtimestamp(int(item["dt"]), tz=dt_timezone.utc),
                    temperature=float(main["temp"]),
                    condition=str(condition.get("main") or "unknown"),
                    description=str(condition.get("description") or ""),
                )
            )
        except (TypeError, ValueError, OverflowError) as exc:
            raise MalformedResponse(f"Forecast sample is invalid: {exc}") from exc

    try:
        offset = int(city.get("timezone") or 0)
    except (TypeError, ValueError):
        offset = 0
    return ForecastSeries(
        samples=tuple(samples),
        unit=unit,
        utc_offset_seconds=offset,
        city_name=city.get("name"),
    )


class OpenWeatherClient:
    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._base_url = settings.weather_base_url.rstrip("/")
        self._api_key = settings.weather_api_key

    def _params(self, lat: float, lon: float, unit: TemperatureUnit) -> dict[str, Any]:
        params: dict[str, Any] = {"lat": lat, "lon": lon, "units": unit.api_units}
        if self._api_key:
            params["appid"] = self._api_key
        return params

    async def _get(self, endpoint: str, params: dict[str, Any], label: str) -> dict[str, Any]:
        resp, data = await request_json(
            self._client, url=f"{self._base_url}{endpoint}", params=params, label=label
        )
        _check_cod(data, label)
        if resp.status_code != 200:
            raise NetworkFailure(f"{label} upstream status {resp.status_code}", status_code=resp.status_code)
        return data

    async def fetch_current(self, lat: float, lon: float, unit: TemperatureUnit) -> WeatherSnapshot:
        data = await self._get(CURRENT_ENDPOINT, self._params(lat, lon, unit), "Weather")
        return parse_current(data, unit)

    async def fetch_forecast(self, lat: float, lon: float, unit: TemperatureUnit) -> ForecastSeries:
        data = await self._get(FORECAST_ENDPOINT, self._params(lat, lon, unit), "Forecast")
        return parse_forecast(data, unit)
