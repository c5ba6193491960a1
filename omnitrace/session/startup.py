"""Startup sequence: recover the previous session, then open a new one."""

from __future__ import annotations

from omnitrace.models import Session
from omnitrace.storage.base import EventStore

from .recovery import perform_recovery
from .tracker import SessionTracker


async def initialize_session(
    store: EventStore,
    tracker: SessionTracker,
    now: int | None = None,
    recover: bool = True,
) -> Session:
    """
    Run recovery (unless disabled) and start a new session.

    The store must already be initialized. Storage errors propagate.
    """
    if recover:
        await perform_recovery(store, now)
    return await tracker.start_session()


__all__ = ["initialize_session"]
