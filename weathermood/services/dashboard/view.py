from __future__ import annotations

from datetime import date, datetime, timezone as dt_timezone
from typing import Sequence

from weathermood.schemas.news import NewsArticle
from weathermood.schemas.session import SessionState, SessionView
from weathermood.services.mood import classify, filter_articles
from weathermood.services.mood.classifier import MoodBand
from weathermood.services.weather.forecast import build_daily_forecast, local_today


_EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)

ALL_CATEGORIES = "all"


def _published_key(article: NewsArticle) -> datetime:
    published = article.published_at
    if published is None:
        return _EPOCH
    if published.tzinfo is None:
        return published.replace(tzinfo=dt_timezone.utc)
    return published


def current_band(session: SessionState) -> MoodBand | None:
    if session.weather is None:
        return None
    return classify(session.weather.temperature_celsius).band


def derive(session: SessionState) -> list[NewsArticle]:
    """Articles to display: mood-filtered when enabled, newest first."""
    if session.news is None:
        return []

    articles: list[NewsArticle] = list(session.news)
    if session.settings.enable_weather_filtering and session.weather is not None:
        mood = classify(session.weather.temperature_celsius)
        articles = filter_articles(articles, mood.keywords)

    # sorted() stays stable with reverse=True, so equal timestamps keep their order.
    return sorted(articles, key=_published_key, reverse=True)


def article_keys(articles: Sequence[NewsArticle]) -> list[str]:
    return [article.display_key(index) for index, article in enumerate(articles)]


def build_view(session: SessionState, today: date | None = None) -> SessionView:
    articles = derive(session)
    daily = []
    if session.forecast is not None:
        daily = build_daily_forecast(session.forecast, today or local_today(session.forecast))
    band = current_band(session)

    return SessionView(
        settings=session.settings,
        weather=session.weather,
        daily_forecast=daily,
        mood_band=band.value if band else None,
        weather_loading=session.weather_state.loading,
        weather_error=session.weather_state.error,
        news_loading=session.news_state.loading,
        news_error=session.news_state.error,
        category_filter=session.category_filter or ALL_CATEGORIES,
        articles=articles,
        article_keys=article_keys(articles),
    )
