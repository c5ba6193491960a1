"""Event logging for OMNIBRAIN usage."""

from __future__ import annotations

from omnitrace.instrumentation.context import InstrumentationContext
from omnitrace.instrumentation.logger import log_event
from omnitrace.models import Event, EventType
from omnitrace.storage.base import EventStore
from omnitrace.timeutil import Clock


MAX_LOGGED_QUERY_LENGTH = 100


async def log_omnibrain_open(
    store: EventStore,
    context: InstrumentationContext,
    clock: Clock | None = None,
) -> Event:
    """Record navigation to the assistant."""
    return await log_event(
        store,
        EventType.NAVIGATION,
        context.snapshot(to_screen="omnibrain"),
        clock=clock,
    )


async def log_omnibrain_submit(
    store: EventStore,
    context: InstrumentationContext,
    query: str,
    scope: str,
    mode: str,
    clock: Clock | None = None,
) -> Event:
    """Record a submitted question. Long queries are truncated."""
    state = {
        "action": "omnibrain_submit",
        "query": query[:MAX_LOGGED_QUERY_LENGTH],
        "scope": str(scope),
        "mode": str(mode),
    }
    return await log_event(store, EventType.BUTTON_CLICK, context.snapshot(state=state), clock=clock)


__all__ = ["log_omnibrain_open", "log_omnibrain_submit"]
