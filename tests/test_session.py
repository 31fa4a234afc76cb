import json

import pytest
import respx
from httpx import Response

from weathermood import open_session
from weathermood.__main__ import main
from weathermood.core.config import get_settings
from weathermood.db.kv_store import MemoryKeyValueStore


CURRENT_URL = "https://api.openweathermap.org/data/2.5/weather"
FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"
HEADLINES_URL = "https://newsapi.org/v2/top-headlines"


def _mock_providers(temp: float = 4.0):
    respx.get(CURRENT_URL).mock(
        return_value=Response(
            200,
            json={
                "cod": 200,
                "name": "New York",
                "weather": [{"id": 600, "main": "Snow", "description": "light snow"}],
                "main": {"temp": temp, "feels_like": temp - 2, "humidity": 70},
                "wind": {"speed": 5.1},
            },
        )
    )
    respx.get(FORECAST_URL).mock(
        return_value=Response(200, json={"cod": "200", "city": {"timezone": 0}, "list": []})
    )
    return respx.get(HEADLINES_URL).mock(
        return_value=Response(
            200,
            json={
                "status": "ok",
                "articles": [
                    {
                        "source": {"name": "Wire"},
                        "title": "Recession fears grow",
                        "url": "https://example.com/a",
                        "publishedAt": "2024-01-02T00:00:00Z",
                    },
                    {
                        "source": {"name": "Wire"},
                        "title": "Team celebrates",
                        "url": "https://example.com/b",
                        "publishedAt": "2024-01-03T00:00:00Z",
                    },
                ],
            },
        )
    )


@pytest.mark.asyncio
async def test_open_session_refresh(settings):
    kv = MemoryKeyValueStore({"userSettings": json.dumps({"newsCategories": ["business"]})})

    with respx.mock:
        news_route = _mock_providers()
        async with open_session(settings, store=kv) as session:
            assert session.settings.news_categories == ("business",)
            await session.refresh()
            view = session.view()

        assert news_route.calls.last.request.url.params["category"] == "business"

    assert view.weather.location_name == "New York"
    assert view.mood_band == "cold"
    assert [a.title for a in view.articles] == ["Recession fears grow"]
    assert view.weather_error is None
    assert view.news_error is None


def test_cli_prints_view(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("WEATHERMOOD_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("WEATHERMOOD_WEATHER_API_KEY", "weather-key")
    monkeypatch.setenv("WEATHERMOOD_NEWS_API_KEY", "news-key")
    get_settings.cache_clear()
    try:
        with respx.mock:
            news_route = _mock_providers(temp=22.0)
            code = main(["--lat", "41.0", "--lon", "29.0", "--category", "sports"])
            assert news_route.calls.last.request.url.params["category"] == "sports"
    finally:
        get_settings.cache_clear()

    assert code == 0
    body = json.loads(capsys.readouterr().out)
    assert body["mood_band"] == "neutral"
    assert body["category_filter"] == "sports"
    assert [a["title"] for a in body["articles"]] == ["Team celebrates", "Recession fears grow"]
