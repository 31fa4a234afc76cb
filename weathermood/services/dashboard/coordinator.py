from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Awaitable, Callable, Hashable, Mapping, Protocol

from weathermood.core.errors import LocationError, NetworkFailure, WeatherMoodError
from weathermood.schemas.news import NewsArticle
from weathermood.schemas.session import ResourceState, ResourceStatus, SessionState, SessionView
from weathermood.schemas.settings import UserSettings, UserSettingsUpdate
from weathermood.schemas.weather import DailyForecast, ForecastSeries, TemperatureUnit, WeatherSnapshot
from weathermood.services.dashboard.view import ALL_CATEGORIES, build_view, derive
from weathermood.services.location import LocationProvider
from weathermood.services.settings_store import SettingsStore
from weathermood.services.weather.forecast import build_daily_forecast, local_today


logger = logging.getLogger(__name__)

WEATHER = "weather"
NEWS = "news"


class WeatherProvider(Protocol):
    async def fetch_current(self, lat: float, lon: float, unit: TemperatureUnit) -> WeatherSnapshot: ...

    async def fetch_forecast(self, lat: float, lon: float, unit: TemperatureUnit) -> ForecastSeries: ...


class NewsProvider(Protocol):
    async def fetch_top_headlines(self, category: str | None = None) -> list[NewsArticle]: ...


@dataclass
class _InFlight:
    key: Hashable
    sequence: int
    task: asyncio.Task


class DashboardCoordinator:
    """Owns the session state and every operation that changes it.

    Weather and news are fetched independently. For each resource at most
    one request per distinct key is outstanding: a repeated call with the
    same key joins the running fetch, a call with a different key starts a
    new fetch and the older one's result is dropped when it lands.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        weather_provider: WeatherProvider,
        news_provider: NewsProvider,
        location_provider: LocationProvider | None = None,
    ) -> None:
        self._settings = settings_store
        self._weather = weather_provider
        self._news = news_provider
        self._location = location_provider
        self._state = SessionState(settings=settings_store.get())
        self._inflight: dict[str, _InFlight] = {}
        settings_store.subscribe(self._on_settings_changed)

    @property
    def settings(self) -> UserSettings:
        return self._sync_settings()

    def _sync_settings(self) -> UserSettings:
        # The store is authoritative; the session only mirrors it.
        self._state.settings = self._settings.get()
        return self._state.settings

    async def start(self) -> UserSettings:
        self._state.settings = await self._settings.load_initial()
        return self._state.settings

    # Fetching

    def _resource(self, name: str) -> ResourceState:
        return self._state.weather_state if name == WEATHER else self._state.news_state

    async def _run(
        self,
        name: str,
        key: Hashable,
        loader: Callable[[], Awaitable[Any]],
        apply: Callable[[Any], None],
        default_error: str,
    ) -> bool:
        current = self._inflight.get(name)
        if current is not None and current.key == key and not current.task.done():
            logger.debug("Joining in-flight %s fetch #%d", name, current.sequence)
            return await current.task

        resource = self._resource(name)
        resource.sequence += 1
        sequence = resource.sequence
        resource.status = ResourceStatus.LOADING
        resource.error = None

        task = asyncio.create_task(self._execute(name, sequence, loader, apply, default_error))
        self._inflight[name] = _InFlight(key=key, sequence=sequence, task=task)
        return await task

    async def _execute(
        self,
        name: str,
        sequence: int,
        loader: Callable[[], Awaitable[Any]],
        apply: Callable[[Any], None],
        default_error: str,
    ) -> bool:
        resource = self._resource(name)
        error: str | None = None
        result: Any = None
        try:
            result = await loader()
        except WeatherMoodError as exc:
            error = str(exc) or default_error
            logger.warning("%s fetch #%d failed: %s", name.capitalize(), sequence, error)
        except Exception:
            error = default_error
            logger.exception("%s fetch #%d failed unexpectedly", name.capitalize(), sequence)
        finally:
            current = self._inflight.get(name)
            if current is not None and current.sequence == sequence:
                del self._inflight[name]

        if sequence != resource.sequence:
            logger.info("Discarding stale %s response #%d (latest #%d)", name, sequence, resource.sequence)
            return False

        if error is not None:
            resource.status = ResourceStatus.FAILED
            resource.error = error
            return False

        apply(result)
        resource.status = ResourceStatus.READY
        return True

    async def fetch_weather(self, lat: float, lon: float) -> bool:
        unit = self._sync_settings().temperature_unit

        async def load() -> tuple[WeatherSnapshot, ForecastSeries]:
            current, forecast = await asyncio.gather(
                self._weather.fetch_current(lat, lon, unit),
                self._weather.fetch_forecast(lat, lon, unit),
                return_exceptions=True,
            )
            # Both requests have settled at this point; report the first failure.
            for outcome in (current, forecast):
                if isinstance(outcome, asyncio.CancelledError):
                    raise NetworkFailure("Weather request was cancelled") from outcome
                if isinstance(outcome, BaseException):
                    raise outcome
            return current, forecast

        def apply(result: tuple[WeatherSnapshot, ForecastSeries]) -> None:
            self._state.weather, self._state.forecast = result

        return await self._run(WEATHER, (lat, lon, unit), load, apply, "Failed to fetch weather")

    async def fetch_news(self, category: str | None = None) -> bool:
        if category == ALL_CATEGORIES:
            category = None
        requested = category or self._sync_settings().news_categories[0]

        def apply(articles: list[NewsArticle]) -> None:
            self._state.news = tuple(articles)

        return await self._run(
            NEWS,
            requested,
            lambda: self._news.fetch_top_headlines(requested),
            apply,
            "Failed to fetch news",
        )

    async def refresh_weather(self) -> bool:
        """Resolve the location and fetch weather for it; no location, no fetch."""
        if self._location is None:
            return False
        try:
            coords = await self._location.locate()
        except LocationError as exc:
            logger.warning("Skipping weather fetch, no location: %s", exc)
            return False
        return await self.fetch_weather(coords.lat, coords.lon)

    async def refresh(self) -> None:
        """Pull-to-refresh: reload weather, then news for the current filter."""
        await self.refresh_weather()
        await self.fetch_news(self._state.category_filter)

    # Filters and settings

    async def select_category(self, category: str | None) -> bool | None:
        """Change the category filter; ``"all"`` falls back to the preferences.

        Returns None when the filter did not change and nothing was fetched.
        """
        selected = None if category in (None, ALL_CATEGORIES) else category
        if selected == self._state.category_filter:
            return None
        self._state.category_filter = selected
        return await self.fetch_news(selected)

    async def reset_filters(self) -> bool | None:
        return await self.select_category(ALL_CATEGORIES)

    async def update_settings(self, partial: UserSettingsUpdate | Mapping[str, Any]) -> UserSettings:
        return await self._settings.update(partial)

    async def toggle_category(self, category: str) -> UserSettings:
        return await self._settings.toggle_category(category)

    async def toggle_temperature_unit(self) -> UserSettings:
        return await self._settings.toggle_temperature_unit()

    async def toggle_weather_filtering(self) -> UserSettings:
        return await self._settings.toggle_weather_filtering()

    async def reset_settings(self) -> UserSettings:
        return await self._settings.reset_to_defaults()

    async def _on_settings_changed(self, previous: UserSettings, current: UserSettings) -> None:
        self._state.settings = current
        # A new unit only applies to the next explicit weather fetch.
        if (
            self._state.category_filter is None
            and current.news_categories[0] != previous.news_categories[0]
        ):
            await self.fetch_news()

    def clear_errors(self) -> None:
        for resource, held in (
            (self._state.weather_state, self._state.weather is not None),
            (self._state.news_state, self._state.news is not None),
        ):
            resource.error = None
            if resource.status is ResourceStatus.FAILED:
                resource.status = ResourceStatus.READY if held else ResourceStatus.IDLE

    # Read-only projections

    def filtered_news(self) -> list[NewsArticle]:
        self._sync_settings()
        return derive(self._state)

    def daily_forecast(self, today: date | None = None) -> list[DailyForecast]:
        forecast = self._state.forecast
        if forecast is None:
            return []
        return build_daily_forecast(forecast, today or local_today(forecast))

    def view(self, today: date | None = None) -> SessionView:
        self._sync_settings()
        return build_view(self._state, today)
