"""
Tool: Daily Summary
Purpose: Calm, plain-English recap of the day's activity

Sentences (each only when its data exists):
    - longest study/work window with clock times
    - micro-distraction pattern (evening-heavy or a plain count)
    - rest → focus correlation
    - total minutes in recovery gaps
A fallback sentence is used when none apply.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from omnitrace.analytics.smart_merging import (
    MICRO_DISTRACTION_LABEL,
    RECOVERY_GAP_LABEL,
    CognitiveMode,
    merge_segments,
)
from omnitrace.engine.time_engine import derive_segments, focus_segments, total_duration
from omnitrace.models import Category, Event, Segment
from omnitrace.timeutil import MINUTE_MS, format_clock, local_hour, to_minutes


MIN_EVENTS_FOR_SUMMARY = 10
MIN_DURATION_MS = 15 * MINUTE_MS
EVENING_HOUR = 18
REST_TO_FOCUS_WINDOW_MS = 30 * MINUTE_MS

FALLBACK_INSIGHT = "Activity patterns are still developing. Keep logging to see deeper insights."


@dataclass(frozen=True)
class DailySummary:
    insights: list[str] = field(default_factory=list)
    has_enough_data: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"insights": list(self.insights), "hasEnoughData": self.has_enough_data}


def longest_segment(segments: Sequence[Segment]) -> Segment:
    """Longest segment; the earliest one wins ties."""
    longest = segments[0]
    for seg in segments[1:]:
        if seg.duration > longest.duration:
            longest = seg
    return longest


def generate_daily_summary(
    events: Sequence[Event],
    mode: str = CognitiveMode.FOCUS,
    now: int | None = None,
) -> DailySummary:
    if len(events) < MIN_EVENTS_FOR_SUMMARY:
        return DailySummary(
            insights=["Not enough activity recorded today to generate insights."],
            has_enough_data=False,
        )

    segments = derive_segments(events, now=now)
    if total_duration(segments) < MIN_DURATION_MS:
        return DailySummary(
            insights=["Activity duration too short for meaningful insights."],
            has_enough_data=False,
        )

    insights: list[str] = []
    merged = merge_segments(segments, events, mode)
    focused = focus_segments(segments)

    if focused:
        best = longest_segment(focused)
        insights.append(
            f"You were most focused between {format_clock(best.start_time)} and "
            f"{format_clock(best.end_time)} ({to_minutes(best.duration)} minutes)."
        )

    distractions = [m for m in merged if m.label == MICRO_DISTRACTION_LABEL]
    if distractions:
        evening = [m for m in distractions if local_hour(m.start_time) >= EVENING_HOUR]
        if len(evening) > len(distractions) / 2:
            insights.append("Distractions increased after 6 PM.")
        else:
            insights.append(f"{len(distractions)} micro-distraction periods detected.")

    rest_segments = [s for s in segments if s.category == Category.REST]
    if rest_segments and focused:
        followed = sum(
            1
            for rest in rest_segments
            if any(
                f.start_time > rest.end_time and f.start_time - rest.end_time < REST_TO_FOCUS_WINDOW_MS
                for f in focused
            )
        )
        if followed > len(rest_segments) / 2:
            insights.append("Best focus sessions followed rest periods.")

    recovery_gaps = [m for m in merged if m.label == RECOVERY_GAP_LABEL]
    if recovery_gaps:
        recovery_ms = sum(m.duration for m in recovery_gaps)
        insights.append(f"{to_minutes(recovery_ms)} minutes spent in recovery periods.")

    if not insights:
        insights.append(FALLBACK_INSIGHT)

    return DailySummary(insights=insights, has_enough_data=True)


__all__ = [
    "MIN_EVENTS_FOR_SUMMARY",
    "FALLBACK_INSIGHT",
    "DailySummary",
    "longest_segment",
    "generate_daily_summary",
]
