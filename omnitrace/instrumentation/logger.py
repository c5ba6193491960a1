"""
Centralized event logging.

Every event the application records passes through log_event(), which
stamps an id and timestamp and appends to the store.

Event ids look like ``event-<type>-<ms>-<9 base36 chars>``.
"""

from __future__ import annotations

import logging
import random
import string
from typing import Any

from omnitrace.models import Confidence, Event, EventContext, EventType
from omnitrace.storage.base import EventStore
from omnitrace.timeutil import Clock, now_ms


logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def random_suffix(length: int = 9) -> str:
    return "".join(random.choices(_BASE36, k=length))


def make_event_id(event_type: EventType, timestamp: int) -> str:
    return f"event-{event_type.value}-{timestamp}-{random_suffix()}"


async def log_event(
    store: EventStore,
    event_type: EventType,
    context: EventContext | None = None,
    clock: Clock | None = None,
    **fields: Any,
) -> Event:
    """
    Append a new event stamped with the current time.

    Args:
        store: Event store to append to
        event_type: Kind of event
        context: Auxiliary payload (defaults to empty)
        clock: Millisecond clock, for deterministic tests
        **fields: Any other Event field (title, category, duration,
            confidence, ...). Explicit values override the defaults.

    Returns:
        The appended event
    """
    timestamp = (clock or now_ms)()
    values: dict[str, Any] = {
        "id": make_event_id(event_type, timestamp),
        "type": event_type,
        "timestamp": timestamp,
        "context": context or EventContext(),
        "confidence": Confidence.AUTO,
    }
    values.update(fields)
    event = Event(**values)

    await store.append_event(event)
    logger.debug(f"Logged {event.type.value} event {event.id}")
    return event


__all__ = ["random_suffix", "make_event_id", "log_event"]
