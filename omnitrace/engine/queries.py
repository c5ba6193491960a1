"""
Event query helpers for timeline, forensic and search views.

Both helpers read through an EventStore; storage errors propagate.
"""

from __future__ import annotations

from omnitrace.models import Category, Confidence, Event
from omnitrace.storage.base import EventStore


def matches_keyword(event: Event, keyword: str) -> bool:
    """Case-insensitive substring match on title, any keyword, or note."""
    needle = keyword.lower()
    if event.title and needle in event.title.lower():
        return True
    if event.keywords and any(needle in k.lower() for k in event.keywords):
        return True
    return bool(event.note and needle in event.note.lower())


async def query_events(
    store: EventStore,
    start_time: int | None = None,
    end_time: int | None = None,
    category: Category | None = None,
    confidence: Confidence | None = None,
    keyword: str | None = None,
) -> list[Event]:
    """
    Filter the event log.

    A time range is applied only when both bounds are given; a single bound is
    ignored. Results are sorted newest first.
    """
    if start_time is not None and end_time is not None:
        events = await store.read_events_by_range(start_time, end_time)
    else:
        events = await store.read_all_events()

    if category:
        events = [e for e in events if e.category == category]

    if confidence:
        events = [e for e in events if e.confidence == confidence]

    if keyword:
        events = [e for e in events if matches_keyword(e, keyword)]

    return sorted(events, key=lambda e: e.timestamp, reverse=True)


async def find_nearest_event(store: EventStore, timestamp: int) -> Event | None:
    """Event closest to timestamp. Ties go to the earlier event in log order."""
    events = await store.read_all_events()
    if not events:
        return None

    nearest = events[0]
    for event in events[1:]:
        if abs(event.timestamp - timestamp) < abs(nearest.timestamp - timestamp):
            nearest = event
    return nearest


__all__ = ["matches_keyword", "query_events", "find_nearest_event"]
