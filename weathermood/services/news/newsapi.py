from __future__ import annotations

import logging
from datetime import datetime, timezone as dt_timezone
from typing import Any

import httpx

from weathermood.core.config import Settings
from weathermood.core.errors import MalformedResponse, NetworkFailure
from weathermood.core.http import request_json
from weathermood.schemas.news import NewsArticle


logger = logging.getLogger(__name__)

TOP_HEADLINES_ENDPOINT = "/top-headlines"


def _parse_datetime(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_timezone.utc)
    return parsed


def _normalize_article(raw: Any) -> NewsArticle | None:
    if not isinstance(raw, dict):
        return None
    title = (raw.get("title") or "").strip()
    if not title:
        return None
    source = raw.get("source") or {}
    return NewsArticle(
        title=title,
        description=raw.get("description") or None,
        content=raw.get("content") or None,
        source=(source.get("name") if isinstance(source, dict) else None) or "",
        published_at=_parse_datetime(raw.get("publishedAt")),
        url=(raw.get("url") or "").strip() or None,
    )


def parse_top_headlines(data: dict[str, Any]) -> list[NewsArticle]:
    articles = data.get("articles")
    if data.get("status") != "ok" or not isinstance(articles, list):
        raise MalformedResponse("Invalid response from News API")

    items: list[NewsArticle] = []
    for raw in articles:
        item = _normalize_article(raw)
        if item:
            items.append(item)
    if len(items) != len(articles):
        logger.debug("Dropped %d untitled articles", len(articles) - len(items))
    return items


class NewsApiClient:
    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._base_url = settings.news_base_url.rstrip("/")
        self._api_key = settings.news_api_key
        self._country = settings.news_country

    async def fetch_top_headlines(self, category: str | None = None) -> list[NewsArticle]:
        params: dict[str, Any] = {"country": self._country}
        if self._api_key:
            params["apiKey"] = self._api_key
        if category:
            params["category"] = category

        resp, data = await request_json(
            self._client,
            url=f"{self._base_url}{TOP_HEADLINES_ENDPOINT}",
            params=params,
            label="News API",
        )
        if resp.status_code != 200:
            raise NetworkFailure(
                f"News API error: {resp.status_code} {resp.reason_phrase}".rstrip(),
                status_code=resp.status_code,
            )
        return parse_top_headlines(data)
