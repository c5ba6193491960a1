"""
Tool: Session Metrics
Purpose: Time-in-state totals and context switches from the raw event stream

Unlike the segment-based analytics, these metrics read event transitions
directly:
    - foreground → background accumulates background time
    - idle_end → idle_start accumulates active time (from the most recent
      idle_end, which is never reset)
    - idle_end accumulates idle time up to the next event
    - navigation to a different screen counts as a context switch
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

from omnitrace.engine.time_engine import sort_events
from omnitrace.models import Event, EventType
from omnitrace.timeutil import safe_denominator


@dataclass(frozen=True)
class SessionMetrics:
    total_active_time: int
    total_background_time: int
    total_idle_time: int
    context_switches: int
    focus_density: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def compute_metrics(events: Sequence[Event]) -> SessionMetrics:
    sorted_events = sort_events(events)

    active_time = 0
    background_time = 0
    idle_time = 0
    context_switches = 0

    last_foreground: int | None = None
    last_idle_end: int | None = None
    last_screen: str | None = None

    for i, event in enumerate(sorted_events):
        if event.type == EventType.FOREGROUND:
            last_foreground = event.timestamp
        elif event.type == EventType.BACKGROUND:
            if last_foreground is not None:
                background_time += event.timestamp - last_foreground
                last_foreground = None
        elif event.type == EventType.IDLE_START:
            if last_idle_end is not None:
                active_time += event.timestamp - last_idle_end
        elif event.type == EventType.IDLE_END:
            if i + 1 < len(sorted_events):
                idle_time += sorted_events[i + 1].timestamp - event.timestamp
            last_idle_end = event.timestamp
        elif event.type == EventType.NAVIGATION:
            to_screen = event.context.to_screen
            if last_screen and to_screen != last_screen:
                context_switches += 1
            last_screen = to_screen or None

    return SessionMetrics(
        total_active_time=active_time,
        total_background_time=background_time,
        total_idle_time=idle_time,
        context_switches=context_switches,
        focus_density=active_time / safe_denominator(active_time + idle_time),
    )


__all__ = ["SessionMetrics", "compute_metrics"]
