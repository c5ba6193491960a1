"""Full, irreversible wipe of local data."""

from __future__ import annotations

import logging

from omnitrace.errors import StorageError
from omnitrace.models import Confidence, Event, EventContext, EventType
from omnitrace.storage.base import EventStore
from omnitrace.storage.sqlite_store import SQLiteEventStore
from omnitrace.timeutil import now_ms


logger = logging.getLogger(__name__)


async def wipe_all_data(store: EventStore, now: int | None = None) -> None:
    """Record a wipe event, then delete everything (the wipe event included)."""
    timestamp = now if now is not None else now_ms()
    await store.append_event(Event(
        id=f"event-wipe-{timestamp}",
        type=EventType.WIPE,
        timestamp=timestamp,
        context=EventContext(),
        confidence=Confidence.AUTO,
    ))
    await store.wipe_all()
    logger.warning("All OMNITRACE data wiped")


async def wipe_all_data_for_recovery(store: EventStore) -> None:
    """
    Wipe a store that may be corrupt or uninitialized.

    Falls back to deleting the SQLite file when a normal wipe fails.

    Raises:
        StorageError: If neither the wipe nor the file deletion succeeds
    """
    try:
        await store.wipe_all()
        return
    except StorageError as e:
        logger.warning(f"Normal wipe failed, attempting database deletion: {e}")
        if not isinstance(store, SQLiteEventStore):
            raise

    try:
        store.db_path.unlink(missing_ok=True)
    except OSError as e:
        raise StorageError(f"Failed to wipe data: could not delete {store.db_path}: {e}") from e
    logger.warning(f"Deleted database file {store.db_path}")


__all__ = ["wipe_all_data", "wipe_all_data_for_recovery"]
