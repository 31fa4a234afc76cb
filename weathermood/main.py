from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from weathermood.core.config import Settings, get_settings
from weathermood.core.http import create_http_client
from weathermood.db.kv_store import KeyValueStore, SqlKeyValueStore
from weathermood.db.session import create_engine
from weathermood.services.dashboard.coordinator import DashboardCoordinator
from weathermood.services.location import LocationProvider, StaticLocationProvider
from weathermood.services.news.newsapi import NewsApiClient
from weathermood.services.settings_store import SettingsStore
from weathermood.services.weather.openweather import OpenWeatherClient


logger = logging.getLogger(__name__)


@asynccontextmanager
async def open_session(
    settings: Settings | None = None,
    *,
    store: KeyValueStore | None = None,
    location: LocationProvider | None = None,
) -> AsyncIterator[DashboardCoordinator]:
    """Wire a coordinator to live providers and load the saved preferences.

    Each call builds its own HTTP client and storage, so sessions never
    share state.
    """
    settings = settings or get_settings()
    client = create_http_client(settings)
    engine = None
    if store is None:
        engine = create_engine(settings)
        store = SqlKeyValueStore(engine)

    coordinator = DashboardCoordinator(
        SettingsStore(store, key=settings.settings_storage_key),
        OpenWeatherClient(client, settings),
        NewsApiClient(client, settings),
        location or StaticLocationProvider.from_settings(settings),
    )

    try:
        loaded = await coordinator.start()
        logger.info(
            "Session started (unit=%s, categories=%s, filtering=%s)",
            loaded.temperature_unit.value,
            ",".join(loaded.news_categories),
            loaded.enable_weather_filtering,
        )
        yield coordinator
    finally:
        await client.aclose()
        if engine is not None:
            await engine.dispose()
