"""
SQLite Event Store

Local, single-file EventStore built on stdlib sqlite3.

Tables:
    events   - append-only event log (context/keywords stored as JSON)
    sessions - device usage sessions
    metadata - key/value pairs (schema version, event count)

Connections are opened per call. Event inserts and the event_count update
share one transaction so the count never drifts from the log.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path

from omnitrace.errors import DuplicateEventError, StorageError, StoreNotInitializedError
from omnitrace.models import SCHEMA_VERSION, Event, Session, StorageMetadata

from .base import EventStore


logger = logging.getLogger(__name__)


SCHEMA = """
    CREATE TABLE IF NOT EXISTS events (
        id TEXT PRIMARY KEY,
        type TEXT NOT NULL,
        timestamp INTEGER NOT NULL,
        context TEXT NOT NULL DEFAULT '{}',
        confidence TEXT NOT NULL DEFAULT 'auto',
        duration INTEGER,
        category TEXT,
        title TEXT,
        keywords TEXT,
        note TEXT
    );

    CREATE TABLE IF NOT EXISTS sessions (
        id TEXT PRIMARY KEY,
        start_time INTEGER NOT NULL,
        end_time INTEGER,
        recovered INTEGER
    );

    CREATE TABLE IF NOT EXISTS metadata (
        key TEXT PRIMARY KEY,
        value TEXT
    );

    CREATE INDEX IF NOT EXISTS idx_events_timestamp ON events(timestamp);
    CREATE INDEX IF NOT EXISTS idx_events_type ON events(type);
    CREATE INDEX IF NOT EXISTS idx_events_category ON events(category);
    CREATE INDEX IF NOT EXISTS idx_sessions_start ON sessions(start_time);
"""


def _event_to_row(event: Event) -> tuple:
    return (
        event.id,
        event.type.value,
        event.timestamp,
        json.dumps(event.context.to_dict()),
        event.confidence.value,
        event.duration,
        event.category.value if event.category else None,
        event.title,
        json.dumps(list(event.keywords)) if event.keywords is not None else None,
        event.note,
    )


def _row_to_event(row: sqlite3.Row) -> Event:
    data = {
        "id": row["id"],
        "type": row["type"],
        "timestamp": row["timestamp"],
        "context": json.loads(row["context"]) if row["context"] else {},
        "confidence": row["confidence"],
        "duration": row["duration"],
        "category": row["category"],
        "title": row["title"],
        "keywords": json.loads(row["keywords"]) if row["keywords"] else None,
        "note": row["note"],
    }
    return Event.from_dict(data)


def _row_to_session(row: sqlite3.Row) -> Session:
    recovered = row["recovered"]
    return Session(
        id=row["id"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        recovered=bool(recovered) if recovered is not None else None,
    )


class SQLiteEventStore(EventStore):
    """
    Persistent event store backed by a local SQLite file.

    Call ``await store.initialize()`` before use; every other method raises
    StoreNotInitializedError until then.
    """

    def __init__(self, db_path: str | Path):
        self._db_path = Path(db_path)
        self._initialized = False

    @property
    def name(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise StoreNotInitializedError()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def initialize(self) -> None:
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._get_connection()
            try:
                conn.executescript(SCHEMA)
                conn.execute(
                    "INSERT OR IGNORE INTO metadata (key, value) VALUES ('schema_version', ?)",
                    (SCHEMA_VERSION,),
                )
                conn.execute("INSERT OR IGNORE INTO metadata (key, value) VALUES ('event_count', '0')")
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Failed to initialize event store at {self._db_path}: {e}") from e

        self._initialized = True
        logger.debug(f"Event store initialized: {self._db_path}")

    # =========================================================================
    # Events
    # =========================================================================

    def _insert_events(self, events: list[Event]) -> None:
        self._require_initialized()
        conn = self._get_connection()
        try:
            with conn:
                conn.executemany(
                    """
                    INSERT INTO events (id, type, timestamp, context, confidence,
                                        duration, category, title, keywords, note)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [_event_to_row(e) for e in events],
                )
                conn.execute(
                    "UPDATE metadata SET value = CAST(value AS INTEGER) + ? WHERE key = 'event_count'",
                    (len(events),),
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateEventError(self._find_duplicate(conn, events)) from e
        except sqlite3.Error as e:
            raise StorageError(f"Failed to append events: {e}") from e
        finally:
            conn.close()

    @staticmethod
    def _find_duplicate(conn: sqlite3.Connection, events: list[Event]) -> str:
        """Id of the first event that collides with the log or with the batch."""
        seen: set[str] = set()
        for event in events:
            row = conn.execute("SELECT 1 FROM events WHERE id = ?", (event.id,)).fetchone()
            if row is not None or event.id in seen:
                return event.id
            seen.add(event.id)
        return events[0].id

    async def append_event(self, event: Event) -> None:
        self._insert_events([event])

    async def append_events(self, events: Iterable[Event]) -> None:
        batch = list(events)
        if batch:
            self._insert_events(batch)

    def _select_events(self, where: str = "", params: tuple = ()) -> list[Event]:
        self._require_initialized()
        conn = self._get_connection()
        try:
            rows = conn.execute(
                f"SELECT * FROM events {where} ORDER BY timestamp, rowid",
                params,
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read events: {e}") from e
        finally:
            conn.close()

        events = []
        for row in rows:
            try:
                events.append(_row_to_event(row))
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping unreadable event {row['id']}: {e}")
        return events

    async def read_all_events(self) -> list[Event]:
        return self._select_events()

    async def read_events_by_range(self, start: int, end: int) -> list[Event]:
        return self._select_events("WHERE timestamp >= ? AND timestamp <= ?", (start, end))

    # =========================================================================
    # Sessions
    # =========================================================================

    def _execute(self, sql: str, params: tuple, action: str) -> int:
        self._require_initialized()
        conn = self._get_connection()
        try:
            with conn:
                cursor = conn.execute(sql, params)
                return cursor.rowcount
        except sqlite3.Error as e:
            raise StorageError(f"Failed to {action}: {e}") from e
        finally:
            conn.close()

    @staticmethod
    def _recovered_value(session: Session) -> int | None:
        return int(session.recovered) if session.recovered is not None else None

    async def add_session(self, session: Session) -> None:
        self._execute(
            "INSERT INTO sessions (id, start_time, end_time, recovered) VALUES (?, ?, ?, ?)",
            (session.id, session.start_time, session.end_time, self._recovered_value(session)),
            "add session",
        )

    async def update_session(self, session: Session) -> None:
        updated = self._execute(
            "UPDATE sessions SET start_time = ?, end_time = ?, recovered = ? WHERE id = ?",
            (session.start_time, session.end_time, self._recovered_value(session), session.id),
            "update session",
        )
        if updated == 0:
            raise StorageError(f"Unknown session: {session.id}")

    def _select_sessions(self, suffix: str) -> list[Session]:
        self._require_initialized()
        conn = self._get_connection()
        try:
            rows = conn.execute(f"SELECT * FROM sessions ORDER BY start_time {suffix}").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read sessions: {e}") from e
        finally:
            conn.close()
        return [_row_to_session(row) for row in rows]

    async def get_last_session(self) -> Session | None:
        sessions = self._select_sessions("DESC LIMIT 1")
        return sessions[0] if sessions else None

    async def get_all_sessions(self) -> list[Session]:
        return self._select_sessions("ASC")

    # =========================================================================
    # Maintenance
    # =========================================================================

    async def get_metadata(self) -> StorageMetadata:
        self._require_initialized()
        conn = self._get_connection()
        try:
            rows = conn.execute("SELECT key, value FROM metadata").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read metadata: {e}") from e
        finally:
            conn.close()

        values = {row["key"]: row["value"] for row in rows}
        last_compaction = values.get("last_compaction")
        return StorageMetadata(
            schema_version=values.get("schema_version", SCHEMA_VERSION),
            event_count=int(values.get("event_count") or 0),
            last_compaction=int(last_compaction) if last_compaction else None,
        )

    async def wipe_all(self) -> None:
        self._require_initialized()
        conn = self._get_connection()
        try:
            with conn:
                conn.execute("DELETE FROM events")
                conn.execute("DELETE FROM sessions")
                conn.execute("DELETE FROM metadata")
                conn.execute(
                    "INSERT INTO metadata (key, value) VALUES ('schema_version', ?)",
                    (SCHEMA_VERSION,),
                )
                conn.execute("INSERT INTO metadata (key, value) VALUES ('event_count', '0')")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to wipe event store: {e}") from e
        finally:
            conn.close()
        logger.info(f"Event store wiped: {self._db_path}")


__all__ = ["SQLiteEventStore", "SCHEMA"]
