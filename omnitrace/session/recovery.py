"""
Startup recovery for sessions left open by a crash or hard exit.

If the most recent session has no end time it is closed at recovery time,
flagged recovered, and a "Session recovered" event is appended so the gap is
visible on the timeline.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from omnitrace.models import Confidence, Event, EventContext, EventType, Session
from omnitrace.storage.base import EventStore
from omnitrace.timeutil import now_ms


logger = logging.getLogger(__name__)

RECOVERY_TITLE = "Session recovered"


async def perform_recovery(store: EventStore, now: int | None = None) -> Session | None:
    """
    Close an unclosed last session.

    Returns:
        The recovered session, or None when nothing needed recovery
    """
    last = await store.get_last_session()
    if last is None or last.end_time is not None:
        return None

    recovery_time = now if now is not None else now_ms()
    recovered = replace(last, end_time=recovery_time, recovered=True)
    await store.update_session(recovered)

    await store.append_event(Event(
        id=f"recovery-{recovery_time}",
        type=EventType.RECOVERY,
        timestamp=recovery_time,
        context=EventContext(state={"reason": "unclosed_session", "sessionId": last.id}),
        confidence=Confidence.AUTO,
        title=RECOVERY_TITLE,
    ))

    logger.warning(f"Recovered unclosed session {last.id}")
    return recovered


__all__ = ["RECOVERY_TITLE", "perform_recovery"]
