"""
Idle/active detection from interaction signals.

The state machine is pure: on_activity() and on_tick() take the current
IdleState and a timestamp and return the next state plus the events to
record. IdleDetector wires them to a clock and an event store.

    active --(no activity for timeout)--> idle      emits idle_start
    idle   --(any activity)-------------> active    emits idle_end
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from omnitrace.models import Confidence, Event, EventContext, EventType
from omnitrace.storage.base import EventStore
from omnitrace.timeutil import Clock, SECOND_MS, now_ms


logger = logging.getLogger(__name__)

DEFAULT_IDLE_TIMEOUT_MS = 60 * SECOND_MS


@dataclass(frozen=True)
class IdleState:
    is_idle: bool = False
    last_activity: int | None = None


def _idle_event(event_type: EventType, timestamp: int) -> Event:
    slug = event_type.value.replace("_", "-")
    return Event(
        id=f"event-{slug}-{timestamp}",
        type=event_type,
        timestamp=timestamp,
        context=EventContext(),
        confidence=Confidence.AUTO,
    )


def on_activity(state: IdleState, now: int) -> tuple[IdleState, list[Event]]:
    """User interacted at now. Ends an idle period if one is open."""
    events = [_idle_event(EventType.IDLE_END, now)] if state.is_idle else []
    return IdleState(is_idle=False, last_activity=now), events


def on_tick(
    state: IdleState,
    now: int,
    timeout: int = DEFAULT_IDLE_TIMEOUT_MS,
) -> tuple[IdleState, list[Event]]:
    """
    Clock advanced to now with no interaction.

    The idle_start is stamped at the moment the timeout elapsed, not at now.
    """
    if state.is_idle or state.last_activity is None:
        return state, []

    idle_at = state.last_activity + timeout
    if now < idle_at:
        return state, []

    return IdleState(is_idle=True, last_activity=state.last_activity), [_idle_event(EventType.IDLE_START, idle_at)]


class IdleDetector:
    """Applies the idle state machine and appends emitted events to a store."""

    def __init__(
        self,
        store: EventStore,
        clock: Clock | None = None,
        timeout_ms: int = DEFAULT_IDLE_TIMEOUT_MS,
    ):
        self._store = store
        self._clock = clock or now_ms
        self._timeout = timeout_ms
        self.state = IdleState()

    @property
    def is_idle(self) -> bool:
        return self.state.is_idle

    async def _record(self, events: list[Event]) -> None:
        for event in events:
            await self._store.append_event(event)
            logger.debug(f"Recorded {event.type.value} at {event.timestamp}")

    async def start(self) -> None:
        """Begin watching; counts as an interaction."""
        await self.record_activity()

    async def record_activity(self) -> None:
        self.state, events = on_activity(self.state, self._clock())
        await self._record(events)

    async def tick(self) -> None:
        self.state, events = on_tick(self.state, self._clock(), self._timeout)
        await self._record(events)


__all__ = ["DEFAULT_IDLE_TIMEOUT_MS", "IdleState", "on_activity", "on_tick", "IdleDetector"]
