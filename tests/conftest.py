from __future__ import annotations

import pytest

from weathermood.core.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        weather_api_key="weather-key",
        news_api_key="news-key",
        database_url="sqlite+aiosqlite:///:memory:",
    )
