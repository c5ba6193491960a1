"""
In-Memory Event Store

List-backed EventStore with the same contract as the SQLite store. Used by
tests and by CLI invocations run with `storage.backend: memory`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from omnitrace.errors import DuplicateEventError, StorageError
from omnitrace.models import Event, Session, StorageMetadata

from .base import EventStore


logger = logging.getLogger(__name__)


class InMemoryEventStore(EventStore):
    """Volatile event store. Contents are lost when the process exits."""

    def __init__(self, events: Iterable[Event] | None = None):
        self._events: list[Event] = []
        self._ids: set[str] = set()
        self._sessions: dict[str, Session] = {}
        self._metadata = StorageMetadata()
        if events:
            for event in events:
                self._insert(event)

    @property
    def name(self) -> str:
        return "memory"

    def _insert(self, event: Event) -> None:
        if event.id in self._ids:
            raise DuplicateEventError(event.id)
        self._ids.add(event.id)
        self._events.append(event)
        self._metadata.event_count += 1

    async def append_event(self, event: Event) -> None:
        self._insert(event)

    async def append_events(self, events: Iterable[Event]) -> None:
        batch = list(events)
        seen = set(self._ids)
        for event in batch:
            if event.id in seen:
                raise DuplicateEventError(event.id)
            seen.add(event.id)
        for event in batch:
            self._insert(event)

    async def read_all_events(self) -> list[Event]:
        return sorted(self._events, key=lambda e: e.timestamp)

    async def read_events_by_range(self, start: int, end: int) -> list[Event]:
        return [e for e in await self.read_all_events() if start <= e.timestamp <= end]

    async def add_session(self, session: Session) -> None:
        if session.id in self._sessions:
            raise StorageError(f"Session already exists: {session.id}")
        self._sessions[session.id] = replace(session)

    async def update_session(self, session: Session) -> None:
        if session.id not in self._sessions:
            raise StorageError(f"Unknown session: {session.id}")
        self._sessions[session.id] = replace(session)

    async def get_last_session(self) -> Session | None:
        if not self._sessions:
            return None
        last = max(self._sessions.values(), key=lambda s: s.start_time)
        return replace(last)

    async def get_all_sessions(self) -> list[Session]:
        return [replace(s) for s in sorted(self._sessions.values(), key=lambda s: s.start_time)]

    async def get_metadata(self) -> StorageMetadata:
        return replace(self._metadata)

    async def wipe_all(self) -> None:
        self._events.clear()
        self._ids.clear()
        self._sessions.clear()
        self._metadata = StorageMetadata()
        logger.info("In-memory event store wiped")


__all__ = ["InMemoryEventStore"]
