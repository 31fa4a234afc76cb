from __future__ import annotations

from weathermood.schemas.news import NewsArticle
from weathermood.schemas.settings import DEFAULT_USER_SETTINGS, NEWS_CATEGORIES, UserSettings, UserSettingsUpdate
from weathermood.schemas.weather import (
    Coordinates,
    DailyForecast,
    ForecastSample,
    ForecastSeries,
    TemperatureUnit,
    WeatherSnapshot,
)

__all__ = [
    "Coordinates",
    "DailyForecast",
    "DEFAULT_USER_SETTINGS",
    "ForecastSample",
    "ForecastSeries",
    "NEWS_CATEGORIES",
    "NewsArticle",
    "TemperatureUnit",
    "UserSettings",
    "UserSettingsUpdate",
    "WeatherSnapshot",
]
