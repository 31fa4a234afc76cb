from __future__ import annotations

import asyncio
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from weathermood.core.errors import PersistenceFailure
from weathermood.db.base import Base
from weathermood.db.models import KeyValueEntry
from weathermood.db.session import create_session_maker


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``; raise PersistenceFailure on error."""
        ...


class MemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlKeyValueStore:
    """Key-value adapter over a single SQLAlchemy table."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_maker = create_session_maker(engine)
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._schema_lock:
            if not self._schema_ready:
                async with self._engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
                self._schema_ready = True

    async def get(self, key: str) -> str | None:
        try:
            await self._ensure_schema()
            async with self._session_maker() as session:
                entry = await session.get(KeyValueEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as exc:
            raise PersistenceFailure(f"Failed to read {key!r}: {type(exc).__name__}") from exc

    async def set(self, key: str, value: str) -> None:
        try:
            await self._ensure_schema()
            async with self._session_maker() as session:
                entry = await session.get(KeyValueEntry, key)
                if entry is None:
                    session.add(KeyValueEntry(key=key, value=value))
                else:
                    entry.value = value
                await session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceFailure(f"Failed to write {key!r}: {type(exc).__name__}") from exc
