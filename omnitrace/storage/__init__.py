"""
Event storage

Pluggable event stores behind one async interface:
    - SQLiteEventStore: persistent local file (default)
    - InMemoryEventStore: volatile, for tests and dry runs

Usage:
    from omnitrace.storage import create_store

    store = await create_store()
    events = await store.read_all_events()
"""

from __future__ import annotations

from pathlib import Path

from omnitrace import PROJECT_ROOT
from omnitrace.config import StorageConfig

from .base import EventStore
from .memory_store import InMemoryEventStore
from .sqlite_store import SQLiteEventStore


async def create_store(config: StorageConfig | None = None, initialize: bool = True) -> EventStore:
    """
    Build and initialize the store selected by configuration.

    Relative database paths are resolved against the project root. Pass
    initialize=False to get a store that has not touched its backend yet.
    """
    config = config or StorageConfig()

    if config.backend == "memory":
        store: EventStore = InMemoryEventStore()
    else:
        db_path = Path(config.database_path)
        if not db_path.is_absolute():
            db_path = PROJECT_ROOT / db_path
        store = SQLiteEventStore(db_path)

    if initialize:
        await store.initialize()
    return store


__all__ = [
    "EventStore",
    "InMemoryEventStore",
    "SQLiteEventStore",
    "create_store",
]
