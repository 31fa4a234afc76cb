from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NewsArticle(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str | None = None
    content: str | None = None
    source: str = ""
    published_at: datetime | None = None
    url: str | None = None

    def display_key(self, index: int) -> str:
        # Position keys are only stable for a single rendering of one list.
        return self.url or f"#{index}"
