"""Shared test fixtures for OMNITRACE tests.

This module provides common fixtures used across all test modules:
- A fixed local "now" and helpers for building timestamps on that day
- An event factory with unique ids
- Isolated in-memory and SQLite event stores

Usage:
    def test_something(make_event, at):
        event = make_event("navigation", at(9, 30))
        ...
"""

import itertools
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio

from omnitrace.models import Category, Confidence, Event, EventContext, EventType
from omnitrace.storage import InMemoryEventStore, SQLiteEventStore
from omnitrace.timeutil import from_local_datetime


# ─────────────────────────────────────────────────────────────────────────────
# Time Constants
# ─────────────────────────────────────────────────────────────────────────────

TEST_DAY = datetime(2026, 3, 10)
NOW = from_local_datetime(TEST_DAY.replace(hour=20))


def local_ms(hour: int, minute: int = 0, second: int = 0, day_offset: int = 0) -> int:
    """Epoch ms for a local wall-clock time on TEST_DAY (plus day_offset days)."""
    dt = TEST_DAY + timedelta(days=day_offset, hours=hour, minutes=minute, seconds=second)
    return from_local_datetime(dt)


# ─────────────────────────────────────────────────────────────────────────────
# Time Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def now() -> int:
    """Fixed "current time": 8 PM local on TEST_DAY."""
    return NOW


@pytest.fixture
def at() -> Callable[..., int]:
    """Build local timestamps on TEST_DAY: at(9, 30) → 9:30 AM."""
    return local_ms


# ─────────────────────────────────────────────────────────────────────────────
# Event Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory for events with unique ids.

    Usage:
        make_event("manual_event", ts, title="Reading", category="study", duration=60_000)
    """
    counter = itertools.count(1)

    def factory(
        event_type: str | EventType,
        timestamp: int,
        *,
        id: str | None = None,
        category: str | Category | None = None,
        confidence: str | Confidence | None = None,
        context: EventContext | None = None,
        **fields,
    ) -> Event:
        event_type = EventType(event_type)
        if confidence is None:
            confidence = Confidence.MANUAL if event_type == EventType.MANUAL_EVENT else Confidence.AUTO
        return Event(
            id=id or f"evt-{next(counter)}",
            type=event_type,
            timestamp=timestamp,
            context=context or EventContext(),
            confidence=Confidence(confidence),
            category=Category(category) if category is not None else None,
            **fields,
        )

    return factory


@pytest.fixture
def manual(make_event) -> Callable[..., Event]:
    """Shortcut for titled manual events: manual(ts, "Reading", "study", minutes=30)."""

    def factory(timestamp: int, title: str, category: str = "study", minutes: float | None = None, **fields) -> Event:
        duration = round(minutes * 60_000) if minutes is not None else None
        return make_event("manual_event", timestamp, title=title, category=category, duration=duration, **fields)

    return factory


# ─────────────────────────────────────────────────────────────────────────────
# Store Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def memory_store() -> InMemoryEventStore:
    """Empty in-memory store."""
    return InMemoryEventStore()


@pytest_asyncio.fixture
async def sqlite_store(tmp_path: Path) -> AsyncGenerator[SQLiteEventStore, None]:
    """Initialized SQLite store in a temporary directory."""
    store = SQLiteEventStore(tmp_path / "omnitrace.db")
    await store.initialize()

    yield store

    await store.close()
