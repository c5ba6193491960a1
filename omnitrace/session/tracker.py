"""Session lifecycle tracking from start/stop and visibility signals."""

from __future__ import annotations

import logging
from dataclasses import replace

from omnitrace.models import Confidence, Event, EventContext, EventType, Session
from omnitrace.storage.base import EventStore
from omnitrace.timeutil import Clock, now_ms


logger = logging.getLogger(__name__)


class SessionTracker:
    """
    Records session boundaries and foreground/background transitions.

    Visibility events are only emitted on an actual transition; repeated
    "visible" or "hidden" signals are ignored.
    """

    def __init__(self, store: EventStore, clock: Clock | None = None):
        self._store = store
        self._clock = clock or now_ms
        self.current_session: Session | None = None
        self.is_visible = True

    async def start_session(self) -> Session:
        now = self._clock()
        session = Session(id=f"session-{now}", start_time=now)
        await self._store.add_session(session)
        self.current_session = session

        await self._store.append_event(Event(
            id=f"event-session-start-{now}",
            type=EventType.SESSION_START,
            timestamp=now,
            context=EventContext(state={"sessionId": session.id}),
            confidence=Confidence.AUTO,
        ))
        logger.info(f"Session started: {session.id}")
        return session

    async def end_session(self) -> Session | None:
        if self.current_session is None:
            return None

        now = self._clock()
        session = replace(self.current_session, end_time=now)
        await self._store.update_session(session)

        await self._store.append_event(Event(
            id=f"event-session-end-{now}",
            type=EventType.SESSION_END,
            timestamp=now,
            context=EventContext(state={"sessionId": session.id}),
            confidence=Confidence.AUTO,
        ))
        self.current_session = None
        logger.info(f"Session ended: {session.id}")
        return session

    async def handle_visibility_change(self, is_visible: bool) -> Event | None:
        """Emit foreground/background on a visibility transition. Returns the event, if any."""
        now = self._clock()
        event = None

        if is_visible and not self.is_visible:
            event = Event(id=f"event-foreground-{now}", type=EventType.FOREGROUND, timestamp=now)
        elif not is_visible and self.is_visible:
            event = Event(id=f"event-background-{now}", type=EventType.BACKGROUND, timestamp=now)

        if event is not None:
            await self._store.append_event(event)

        self.is_visible = is_visible
        return event


__all__ = ["SessionTracker"]
