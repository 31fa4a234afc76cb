from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_WEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
DEFAULT_NEWS_BASE_URL = "https://newsapi.org/v2"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WEATHERMOOD_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)

    # Providers
    weather_api_key: str | None = Field(default=None)
    weather_base_url: str = Field(default=DEFAULT_WEATHER_BASE_URL)
    news_api_key: str | None = Field(default=None)
    news_base_url: str = Field(default=DEFAULT_NEWS_BASE_URL)
    news_country: str = Field(default="us", min_length=2, max_length=2)

    # Used when the device location cannot be resolved
    default_latitude: float = Field(default=40.7128, ge=-90, le=90)
    default_longitude: float = Field(default=-74.0060, ge=-180, le=180)
    default_city: str = Field(default="New York")

    # Persistence
    database_url: str = Field(default="sqlite+aiosqlite:///./weathermood.db")
    database_echo: bool = Field(default=False)
    settings_storage_key: str = Field(default="userSettings", min_length=1)

    log_level: str = Field(default="INFO")


@lru_cache
def get_settings() -> Settings:
    return Settings()
