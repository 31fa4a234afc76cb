from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TemperatureUnit(str, Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    @property
    def api_units(self) -> str:
        return "imperial" if self is TemperatureUnit.FAHRENHEIT else "metric"

    @property
    def symbol(self) -> str:
        return "°F" if self is TemperatureUnit.FAHRENHEIT else "°C"


def to_celsius(value: float, unit: TemperatureUnit) -> float:
    if unit is TemperatureUnit.FAHRENHEIT:
        return (value - 32.0) * 5.0 / 9.0
    return value


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    city: str | None = None


class WeatherSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    location_name: str
    condition_code: int | None = Field(None, description="OpenWeather condition id.")
    condition: str = Field(..., description="Condition group, e.g. 'Rain'.")
    description: str = ""
    temperature: float = Field(..., description="Air temperature in `unit`.")
    feels_like: float | None = None
    humidity: int | None = Field(None, ge=0, le=100)
    wind_speed: float | None = Field(None, description="m/s for metric, mph for imperial.")
    unit: TemperatureUnit
    fetched_at: datetime

    @property
    def temperature_celsius(self) -> float:
        return to_celsius(self.temperature, self.unit)


class ForecastSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    temperature: float
    condition: str = "unknown"
    description: str = ""


class ForecastSeries(BaseModel):
    model_config = ConfigDict(frozen=True)

    samples: tuple[ForecastSample, ...] = ()
    unit: TemperatureUnit
    utc_offset_seconds: int = 0
    city_name: str | None = None


class DailyForecast(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    temperature: int
    condition: str
    description: str = ""
