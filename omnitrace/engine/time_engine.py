"""
Deterministic time engine: event log → segments

derive_segments() is the single source of truth for every derived view.
Merged segments, heatmaps, scores, summaries and titles all start here, so
they agree by construction.

Rules (one forward pass over events sorted by timestamp, ties kept in input
order):
    - manual event with a title: close the open activity at its timestamp,
      emit its own [ts, ts + duration) segment, then start accumulating
      afresh from its end
    - idle_start: close the open activity, open "Idle"
    - idle_end: close "Idle", open "Active"
    - anything else: open "Active" if nothing is open, then attach its id

The last open span is never flushed. Callers must treat the window after the
final boundary as ongoing.
"""

from __future__ import annotations

from collections.abc import Iterable

from omnitrace.models import (
    ACTIVE_LABEL,
    IDLE_LABEL,
    Category,
    Confidence,
    Event,
    EventType,
    Segment,
)
from omnitrace.timeutil import now_ms


def sort_events(events: Iterable[Event]) -> list[Event]:
    """Stable ascending sort by timestamp."""
    return sorted(events, key=lambda e: e.timestamp)


def derive_segments(events: Iterable[Event], now: int | None = None) -> list[Segment]:
    """
    Convert an event set into non-overlapping activity segments.

    Args:
        events: Events in any order
        now: Timestamp (ms) closing a trailing manual event that has neither
            a duration nor a following event. Defaults to the wall clock.

    Returns:
        Segments in emission order
    """
    segments: list[Segment] = []
    sorted_events = sort_events(events)

    current_activity: str | None = None
    current_category = Category.UNKNOWN
    current_confidence = Confidence.AUTO
    segment_start: int | None = None
    source_ids: list[str] = []

    for i, event in enumerate(sorted_events):
        if event.type == EventType.MANUAL_EVENT and event.title:
            if segment_start is not None and current_activity:
                segments.append(Segment(
                    start_time=segment_start,
                    end_time=event.timestamp,
                    activity=current_activity,
                    category=current_category,
                    confidence=current_confidence,
                    source_event_ids=source_ids,
                ))

            if event.duration:
                end_time = event.timestamp + event.duration
            elif i + 1 < len(sorted_events):
                end_time = sorted_events[i + 1].timestamp
            else:
                end_time = now if now is not None else now_ms()

            segments.append(Segment(
                start_time=event.timestamp,
                end_time=end_time,
                activity=event.title,
                category=event.category or Category.UNKNOWN,
                confidence=Confidence.MANUAL,
                source_event_ids=[event.id],
            ))

            segment_start = end_time
            current_activity = None
            source_ids = []

        elif event.type == EventType.IDLE_START:
            if segment_start is not None and current_activity:
                segments.append(Segment(
                    start_time=segment_start,
                    end_time=event.timestamp,
                    activity=current_activity,
                    category=current_category,
                    confidence=current_confidence,
                    source_event_ids=source_ids,
                ))
            segment_start = event.timestamp
            current_activity = IDLE_LABEL
            current_category = Category.UNKNOWN
            current_confidence = Confidence.AUTO
            source_ids = [event.id]

        elif event.type == EventType.IDLE_END:
            if segment_start is not None:
                segments.append(Segment(
                    start_time=segment_start,
                    end_time=event.timestamp,
                    activity=IDLE_LABEL,
                    category=Category.UNKNOWN,
                    confidence=Confidence.AUTO,
                    source_event_ids=source_ids,
                ))
            segment_start = event.timestamp
            current_activity = ACTIVE_LABEL
            source_ids = [event.id]

        else:
            if not current_activity:
                current_activity = ACTIVE_LABEL
                segment_start = event.timestamp
            source_ids.append(event.id)

    return segments


def get_activity_at(
    timestamp: int,
    events: Iterable[Event],
    now: int | None = None,
) -> Segment | None:
    """First segment whose interval contains timestamp (both ends inclusive)."""
    for segment in derive_segments(events, now=now):
        if segment.start_time <= timestamp <= segment.end_time:
            return segment
    return None


def total_duration(segments: Iterable[Segment]) -> int:
    return sum(s.duration for s in segments)


def focus_segments(segments: Iterable[Segment]) -> list[Segment]:
    """Study and work segments, in order."""
    return [s for s in segments if s.is_focus]


__all__ = [
    "sort_events",
    "derive_segments",
    "get_activity_at",
    "total_duration",
    "focus_segments",
]
