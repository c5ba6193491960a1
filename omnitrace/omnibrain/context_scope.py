"""
Time windows for OMNIBRAIN context memory.

    today  local midnight → next local midnight
    week   local midnight seven days ago → now
    all    unbounded
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import StrEnum

from omnitrace.engine.queries import query_events
from omnitrace.models import Event
from omnitrace.storage.base import EventStore
from omnitrace.timeutil import from_local_datetime, now_ms, to_local_datetime


class ContextScope(StrEnum):
    TODAY = "today"
    WEEK = "week"
    ALL = "all"


def start_of_day(ms: int) -> datetime:
    """Local midnight of the day containing ms."""
    return to_local_datetime(ms).replace(hour=0, minute=0, second=0, microsecond=0)


def get_scope_time_range(scope: str, now: int | None = None) -> tuple[int | None, int | None]:
    """
    (start, end) in ms for a scope; (None, None) means no bounds.

    Raises:
        ValueError: If scope is not today, week or all
    """
    scope = ContextScope(scope)
    now = now if now is not None else now_ms()

    if scope == ContextScope.TODAY:
        today = start_of_day(now)
        return from_local_datetime(today), from_local_datetime(today + timedelta(days=1))

    if scope == ContextScope.WEEK:
        week_ago = start_of_day(now) - timedelta(days=7)
        return from_local_datetime(week_ago), now

    return None, None


async def load_events_for_scope(
    store: EventStore,
    scope: str,
    now: int | None = None,
) -> list[Event]:
    """Events inside the scope window, newest first."""
    start, end = get_scope_time_range(scope, now)
    return await query_events(store, start_time=start, end_time=end)


__all__ = ["ContextScope", "start_of_day", "get_scope_time_range", "load_events_for_scope"]
