from __future__ import annotations

from weathermood.db.base import Base
from weathermood.db.kv_store import KeyValueStore, MemoryKeyValueStore, SqlKeyValueStore
from weathermood.db.session import create_engine, create_session_maker

__all__ = [
    "Base",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqlKeyValueStore",
    "create_engine",
    "create_session_maker",
]
