"""
Event Store Base Class

Abstract interface for the append-only event log and its session records.
Every derived view (segments, analytics, assistant answers) is computed from
what an EventStore returns; nothing derived is ever written back.

Design Principles:
- Async-first so callers share one event loop with the UI/CLI driver
- Append-only: events are never updated or deleted, except by wipe_all()
- Failures surface as StorageError subclasses and are never masked
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from omnitrace.models import Event, Session, StorageMetadata


class EventStore(ABC):
    """
    Abstract base class for event stores.

    Lifecycle:
        1. initialize() - Create tables/indexes (no-op for in-memory)
        2. [ready for use]
        3. close() - Release resources
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Store identifier (e.g., 'sqlite', 'memory')."""
        pass

    async def initialize(self) -> None:
        """Prepare the backing storage. Default: no-op."""
        return None

    async def close(self) -> None:
        return None

    # =========================================================================
    # Events
    # =========================================================================

    @abstractmethod
    async def append_event(self, event: Event) -> None:
        """
        Append a single event.

        Raises:
            DuplicateEventError: If an event with the same id exists
            StorageError: On any other write failure
        """
        pass

    @abstractmethod
    async def append_events(self, events: Iterable[Event]) -> None:
        """Append several events atomically."""
        pass

    @abstractmethod
    async def read_all_events(self) -> list[Event]:
        """All events, oldest first."""
        pass

    @abstractmethod
    async def read_events_by_range(self, start: int, end: int) -> list[Event]:
        """Events with start <= timestamp <= end, oldest first."""
        pass

    # =========================================================================
    # Sessions
    # =========================================================================

    @abstractmethod
    async def add_session(self, session: Session) -> None:
        pass

    @abstractmethod
    async def update_session(self, session: Session) -> None:
        pass

    @abstractmethod
    async def get_last_session(self) -> Session | None:
        """Session with the latest start_time, if any."""
        pass

    @abstractmethod
    async def get_all_sessions(self) -> list[Session]:
        pass

    # =========================================================================
    # Maintenance
    # =========================================================================

    @abstractmethod
    async def get_metadata(self) -> StorageMetadata:
        pass

    @abstractmethod
    async def wipe_all(self) -> None:
        """Delete every event, session and metadata record."""
        pass


__all__ = ["EventStore"]
