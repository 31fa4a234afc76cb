from __future__ import annotations

from datetime import datetime, timezone as dt_timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from weathermood.db.base import Base


def _utc_now() -> datetime:
    return datetime.now(dt_timezone.utc)


class KeyValueEntry(Base):
    __tablename__ = "key_value_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )
