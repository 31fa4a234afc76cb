from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from weathermood.schemas.news import NewsArticle
from weathermood.schemas.settings import DEFAULT_USER_SETTINGS, UserSettings
from weathermood.schemas.weather import DailyForecast, ForecastSeries, WeatherSnapshot


class ResourceStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass
class ResourceState:
    status: ResourceStatus = ResourceStatus.IDLE
    error: str | None = None
    # Sequence number of the most recently issued request. Responses carrying
    # an older number are discarded.
    sequence: int = 0

    @property
    def loading(self) -> bool:
        return self.status is ResourceStatus.LOADING


@dataclass
class SessionState:
    """Mutable session data. Only the dashboard coordinator writes to it."""

    settings: UserSettings = field(default_factory=lambda: DEFAULT_USER_SETTINGS)
    weather: WeatherSnapshot | None = None
    forecast: ForecastSeries | None = None
    news: tuple[NewsArticle, ...] | None = None
    weather_state: ResourceState = field(default_factory=ResourceState)
    news_state: ResourceState = field(default_factory=ResourceState)
    category_filter: str | None = None


class SessionView(BaseModel):
    """Read-only projection handed to presentation code."""

    model_config = ConfigDict(frozen=True)

    settings: UserSettings
    weather: WeatherSnapshot | None = None
    daily_forecast: list[DailyForecast] = Field(default_factory=list)
    mood_band: str | None = None
    weather_loading: bool = False
    weather_error: str | None = None
    news_loading: bool = False
    news_error: str | None = None
    category_filter: str = "all"
    articles: list[NewsArticle] = Field(default_factory=list)
    article_keys: list[str] = Field(default_factory=list)
