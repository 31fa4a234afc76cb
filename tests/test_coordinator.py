import asyncio

import pytest

from fakes import FakeNewsProvider, FakeWeatherProvider, make_article, settle

from weathermood.core.errors import MalformedResponse, NetworkFailure, PermissionDenied
from weathermood.db.kv_store import MemoryKeyValueStore
from weathermood.schemas.weather import Coordinates, TemperatureUnit
from weathermood.services.dashboard import DashboardCoordinator
from weathermood.services.location import StaticLocationProvider, UnavailableLocationProvider
from weathermood.services.settings_store import SettingsStore


def _coordinator(weather=None, news=None, location=None, kv=None):
    weather = weather or FakeWeatherProvider()
    news = news or FakeNewsProvider([make_article("Hello")])
    coordinator = DashboardCoordinator(
        SettingsStore(kv or MemoryKeyValueStore()), weather, news, location
    )
    return coordinator, weather, news


@pytest.mark.asyncio
async def test_fetch_weather_uses_settings_unit():
    coordinator, weather, _ = _coordinator()
    await coordinator.update_settings({"temperature_unit": "fahrenheit"})

    assert await coordinator.fetch_weather(1.0, 2.0) is True

    assert weather.current_calls == [(1.0, 2.0, TemperatureUnit.FAHRENHEIT)]
    assert weather.forecast_calls == [(1.0, 2.0, TemperatureUnit.FAHRENHEIT)]
    view = coordinator.view()
    assert view.weather.unit is TemperatureUnit.FAHRENHEIT
    assert view.weather_loading is False
    assert view.weather_error is None


@pytest.mark.asyncio
async def test_unit_change_does_not_refetch_weather():
    coordinator, weather, _ = _coordinator()
    await coordinator.fetch_weather(1.0, 2.0)
    await coordinator.update_settings({"temperature_unit": "fahrenheit"})
    assert len(weather.current_calls) == 1


@pytest.mark.asyncio
async def test_weather_join_waits_for_both_requests():
    coordinator, weather, _ = _coordinator()
    weather.current_error = NetworkFailure("current down")
    weather.forecast_gate = asyncio.Event()

    task = asyncio.create_task(coordinator.fetch_weather(1.0, 2.0))
    await settle()
    # The current request already failed, but the forecast is still running.
    assert coordinator.view().weather_loading is True

    weather.forecast_gate.set()
    assert await task is False
    view = coordinator.view()
    assert view.weather_loading is False
    assert view.weather_error == "current down"


@pytest.mark.asyncio
async def test_weather_failure_keeps_previous_snapshot():
    coordinator, weather, _ = _coordinator()
    await coordinator.fetch_weather(1.0, 2.0)
    weather.forecast_error = MalformedResponse("bad forecast")

    assert await coordinator.fetch_weather(1.0, 2.0) is False

    view = coordinator.view()
    assert view.weather is not None
    assert view.weather_error == "bad forecast"


@pytest.mark.asyncio
async def test_duplicate_weather_fetches_are_coalesced():
    coordinator, weather, _ = _coordinator()
    weather.gates[(1.0, 2.0)] = asyncio.Event()

    first = asyncio.create_task(coordinator.fetch_weather(1.0, 2.0))
    second = asyncio.create_task(coordinator.fetch_weather(1.0, 2.0))
    await settle()
    weather.gates[(1.0, 2.0)].set()

    assert await asyncio.gather(first, second) == [True, True]
    assert len(weather.current_calls) == 1
    assert len(weather.forecast_calls) == 1


@pytest.mark.asyncio
async def test_stale_weather_response_is_discarded():
    coordinator, weather, _ = _coordinator()
    weather.gates[(1.0, 1.0)] = asyncio.Event()

    stale = asyncio.create_task(coordinator.fetch_weather(1.0, 1.0))
    await settle()
    assert await coordinator.fetch_weather(2.0, 2.0) is True

    weather.gates[(1.0, 1.0)].set()
    assert await stale is False
    assert coordinator.view().weather.location_name == "2.0,2.0"


@pytest.mark.asyncio
async def test_unexpected_provider_error_is_contained():
    coordinator, weather, _ = _coordinator()
    weather.current_error = RuntimeError("kaboom")
    assert await coordinator.fetch_weather(1.0, 2.0) is False
    assert coordinator.view().weather_error == "Failed to fetch weather"


@pytest.mark.asyncio
async def test_fetch_news_uses_first_preferred_category():
    coordinator, _, news = _coordinator()
    await coordinator.update_settings({"news_categories": ["science", "sports"]})
    news.calls.clear()

    await coordinator.fetch_news()
    await coordinator.fetch_news("business")
    assert news.calls == ["science", "business"]


@pytest.mark.asyncio
async def test_fetch_news_replaces_list():
    coordinator, _, news = _coordinator()
    await coordinator.fetch_news()
    news.articles = [make_article("Other", day=2)]
    await coordinator.fetch_news()
    assert [a.title for a in coordinator.filtered_news()] == ["Other"]


@pytest.mark.asyncio
async def test_news_failure_is_independent_of_weather():
    coordinator, _, news = _coordinator()
    await coordinator.fetch_weather(1.0, 2.0)
    news.error = MalformedResponse("Invalid response from News API")

    assert await coordinator.fetch_news() is False

    view = coordinator.view()
    assert view.news_error == "Invalid response from News API"
    assert view.weather is not None
    assert view.weather_error is None


@pytest.mark.asyncio
async def test_stale_news_for_old_category_is_discarded():
    coordinator, _, news = _coordinator()
    news.gates["business"] = asyncio.Event()

    old = asyncio.create_task(coordinator.select_category("business"))
    await settle()
    assert await coordinator.select_category("sports") is True
    news.gates["business"].set()

    assert await old is False
    assert {a.source for a in coordinator.filtered_news()} == {"sports"}


@pytest.mark.asyncio
async def test_category_filter_triggers_exactly_one_fetch():
    coordinator, _, news = _coordinator()

    await coordinator.select_category("health")
    assert await coordinator.select_category("health") is None
    await coordinator.reset_filters()
    assert await coordinator.reset_filters() is None

    assert news.calls == ["health", "general"]
    assert coordinator.view().category_filter == "all"


@pytest.mark.asyncio
async def test_preferred_category_change_refetches_news():
    coordinator, _, news = _coordinator()

    await coordinator.update_settings({"news_categories": ["technology"]})
    await coordinator.update_settings({"news_categories": ["technology", "sports"]})
    await coordinator.update_settings({"news_categories": []})

    assert news.calls == ["technology"]
    assert coordinator.settings.news_categories == ("technology", "sports")


@pytest.mark.asyncio
async def test_preferred_category_change_ignored_while_filter_selected():
    coordinator, _, news = _coordinator()
    await coordinator.select_category("sports")
    await coordinator.update_settings({"news_categories": ["technology"]})
    assert news.calls == ["sports"]


@pytest.mark.asyncio
async def test_start_loads_saved_settings():
    kv = MemoryKeyValueStore({"userSettings": '{"newsCategories": ["science"], "temperatureUnit": "fahrenheit"}'})
    coordinator, _, _ = _coordinator(kv=kv)
    loaded = await coordinator.start()
    assert loaded.news_categories == ("science",)
    assert coordinator.view().settings.temperature_unit is TemperatureUnit.FAHRENHEIT


@pytest.mark.asyncio
async def test_refresh_fetches_weather_then_news():
    location = StaticLocationProvider(Coordinates(lat=40.0, lon=29.0))
    coordinator, weather, news = _coordinator(location=location)

    await coordinator.refresh()

    assert weather.current_calls == [(40.0, 29.0, TemperatureUnit.CELSIUS)]
    assert news.calls == ["general"]


@pytest.mark.asyncio
async def test_refresh_without_location_skips_weather():
    location = UnavailableLocationProvider(PermissionDenied("Location permission denied"))
    coordinator, weather, news = _coordinator(location=location)

    await coordinator.refresh()

    assert weather.current_calls == []
    assert news.calls == ["general"]
    view = coordinator.view()
    assert view.weather is None
    assert view.weather_error is None


@pytest.mark.asyncio
async def test_clear_errors():
    coordinator, weather, news = _coordinator()
    weather.current_error = NetworkFailure("down")
    news.error = NetworkFailure("down")
    await coordinator.fetch_weather(1.0, 2.0)
    await coordinator.fetch_news()

    coordinator.clear_errors()

    view = coordinator.view()
    assert view.weather_error is None
    assert view.news_error is None


@pytest.mark.asyncio
async def test_store_changes_reach_the_session():
    store = SettingsStore(MemoryKeyValueStore())
    weather = FakeWeatherProvider(temperature=15.0)
    news = FakeNewsProvider([make_article("Championship victory", day=2), make_article("Budget talks")])
    coordinator = DashboardCoordinator(store, weather, news)
    await coordinator.fetch_weather(1.0, 2.0)
    await coordinator.fetch_news()
    assert [a.title for a in coordinator.filtered_news()] == ["Championship victory"]

    await store.toggle_weather_filtering()
    await store.toggle_category("sports")

    assert coordinator.settings == store.get()
    assert coordinator.view().settings.enable_weather_filtering is False
    assert [a.title for a in coordinator.filtered_news()] == ["Championship victory", "Budget talks"]


@pytest.mark.asyncio
async def test_coordinator_toggles_apply_refetch_rule():
    coordinator, weather, news = _coordinator()

    await coordinator.toggle_category("science")
    await coordinator.toggle_category("general")
    assert coordinator.settings.news_categories == ("science",)
    assert news.calls == ["science"]

    await coordinator.toggle_temperature_unit()
    await coordinator.toggle_weather_filtering()
    assert weather.current_calls == []
    assert coordinator.settings.temperature_unit is TemperatureUnit.FAHRENHEIT
    assert coordinator.settings.enable_weather_filtering is False

    await coordinator.reset_settings()
    assert coordinator.settings.news_categories == ("general",)
    assert news.calls == ["science", "general"]


@pytest.mark.asyncio
async def test_cancelled_forecast_request_still_clears_loading():
    coordinator, weather, _ = _coordinator()
    weather.forecast_error = asyncio.CancelledError()

    assert await coordinator.fetch_weather(1.0, 2.0) is False

    view = coordinator.view()
    assert view.weather_loading is False
    assert view.weather_error == "Weather request was cancelled"


@pytest.mark.asyncio
async def test_fetch_news_all_means_preferred_category():
    coordinator, _, news = _coordinator()
    await coordinator.fetch_news("all")
    assert news.calls == ["general"]
