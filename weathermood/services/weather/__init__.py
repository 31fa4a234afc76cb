from __future__ import annotations

from weathermood.services.weather.forecast import build_daily_forecast, local_today
from weathermood.services.weather.openweather import OpenWeatherClient

__all__ = ["OpenWeatherClient", "build_daily_forecast", "local_today"]
