"""
Tool: Forensic Reconstruction
Purpose: Auditable view of an arbitrary time window

Every derived value in the result carries source_event_ids, so any segment
or merged block can be traced back to the raw events that produced it.

Usage:
    from omnitrace.forensics.reconstruct import reconstruct_timeline
    result = await reconstruct_timeline(store, start, end)
    for gap in result.gaps:
        print(gap.start, gap.end)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from omnitrace.analytics.smart_merging import CognitiveMode, merge_segments
from omnitrace.engine.queries import query_events
from omnitrace.engine.time_engine import derive_segments
from omnitrace.models import Event, MergedSegment, Segment
from omnitrace.storage.base import EventStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeGap:
    """Interval with no derived segment."""

    start: int
    end: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ForensicReconstruction:
    raw_events: list[Event] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)
    merged_segments: list[MergedSegment] = field(default_factory=list)
    gaps: list[TimeGap] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rawEvents": [e.to_dict() for e in self.raw_events],
            "segments": [s.to_dict() for s in self.segments],
            "mergedSegments": [m.to_dict() for m in self.merged_segments],
            "gaps": [g.to_dict() for g in self.gaps],
        }


def find_gaps(segments: Sequence[Segment]) -> list[TimeGap]:
    """Intervals where the next segment (by start time) begins after the current one ends."""
    ordered = sorted(segments, key=lambda s: s.start_time)
    return [
        TimeGap(start=current.end_time, end=nxt.start_time)
        for current, nxt in zip(ordered, ordered[1:])
        if nxt.start_time > current.end_time
    ]


async def reconstruct_timeline(
    store: EventStore,
    start_time: int,
    end_time: int,
    mode: str = CognitiveMode.FOCUS,
    now: int | None = None,
) -> ForensicReconstruction:
    """
    Rebuild segments, merged segments and gaps for [start_time, end_time].

    Raw events are returned newest first, as the query layer orders them.
    Storage errors propagate unmodified.
    """
    events = await query_events(store, start_time=start_time, end_time=end_time)
    segments = derive_segments(events, now=now)
    merged = merge_segments(segments, events, mode)
    ordered = sorted(segments, key=lambda s: s.start_time)

    result = ForensicReconstruction(
        raw_events=events,
        segments=ordered,
        merged_segments=merged,
        gaps=find_gaps(ordered),
    )
    logger.debug(
        f"Reconstructed {len(events)} events into {len(ordered)} segments "
        f"with {len(result.gaps)} gaps"
    )
    return result


__all__ = ["TimeGap", "ForensicReconstruction", "find_gaps", "reconstruct_timeline"]
