from __future__ import annotations

from weathermood.services.news.newsapi import NewsApiClient

__all__ = ["NewsApiClient"]
