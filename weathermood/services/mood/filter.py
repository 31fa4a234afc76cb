from __future__ import annotations

from typing import AbstractSet, Sequence

from weathermood.schemas.news import NewsArticle


def _haystacks(article: NewsArticle) -> tuple[str, str, str]:
    return (
        article.title.casefold(),
        (article.description or "").casefold(),
        (article.content or "").casefold(),
    )


def filter_articles(articles: Sequence[NewsArticle], keywords: AbstractSet[str]) -> list[NewsArticle]:
    """Keep articles mentioning at least one keyword, in their original order.

    An empty keyword set keeps everything.
    """
    if not keywords:
        return list(articles)

    needles = [k.casefold() for k in keywords if k]
    kept: list[NewsArticle] = []
    for article in articles:
        fields = _haystacks(article)
        if any(needle in field for needle in needles for field in fields):
            kept.append(article)
    return kept
