"""
Activity intelligence cards.

Each insight is emitted only when the data behind it exists:
    - Most Frequent Activity
    - Longest Focus Session
    - Context Switches
    - Peak Productivity Hour
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass
from typing import Any

from omnitrace.engine.time_engine import derive_segments, focus_segments
from omnitrace.models import Event, EventType
from omnitrace.timeutil import MINUTE_MS, format_hour_range, local_hour


MOST_FREQUENT_ACTIVITY = "Most Frequent Activity"
LONGEST_FOCUS_SESSION = "Longest Focus Session"
CONTEXT_SWITCHES = "Context Switches"
PEAK_PRODUCTIVITY_HOUR = "Peak Productivity Hour"
INSIGHT_TITLES = frozenset({
    MOST_FREQUENT_ACTIVITY,
    LONGEST_FOCUS_SESSION,
    CONTEXT_SWITCHES,
    PEAK_PRODUCTIVITY_HOUR,
})


@dataclass(frozen=True)
class Insight:
    title: str
    value: str
    definition: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _first_max(counts: dict[Any, int]) -> tuple[Any, int]:
    """Key with the highest count; the earliest inserted key wins ties."""
    best_key, best_count = None, 0
    for key, count in counts.items():
        if count > best_count:
            best_key, best_count = key, count
    return best_key, best_count


def compute_insights(
    events: Sequence[Event],
    now: int | None = None,
    label: Callable[[str], str] | None = None,
) -> list[Insight]:
    """Insight cards for events. label, when given, renders activity names."""
    insights: list[Insight] = []
    segments = derive_segments(events, now=now)

    activity_counts: dict[str, int] = {}
    for seg in segments:
        activity_counts[seg.activity] = activity_counts.get(seg.activity, 0) + 1

    top_activity, top_count = _first_max(activity_counts)
    if top_activity:
        insights.append(Insight(
            title=MOST_FREQUENT_ACTIVITY,
            value=f"{label(top_activity) if label else top_activity} ({top_count} times)",
            definition="Activity that occurred most frequently in recorded segments",
        ))

    focused = focus_segments(segments)
    if focused:
        longest = focused[0]
        for seg in focused[1:]:
            if seg.duration > longest.duration:
                longest = seg
        insights.append(Insight(
            title=LONGEST_FOCUS_SESSION,
            value=f"{longest.duration // MINUTE_MS} minutes",
            definition="Longest continuous segment categorized as Study or Work without interruption",
        ))

    navigation_count = sum(1 for e in events if e.type == EventType.NAVIGATION)
    if navigation_count > 0:
        insights.append(Insight(
            title=CONTEXT_SWITCHES,
            value=f"{navigation_count} switches",
            definition="Number of times you navigated between different screens",
        ))

    hour_counts: dict[int, int] = {}
    for seg in focused:
        hour = local_hour(seg.start_time)
        hour_counts[hour] = hour_counts.get(hour, 0) + 1

    if hour_counts:
        peak_hour, _ = _first_max(hour_counts)
        insights.append(Insight(
            title=PEAK_PRODUCTIVITY_HOUR,
            value=format_hour_range(peak_hour),
            definition="Hour with the most Study/Work activity segments",
        ))

    return insights


__all__ = ["INSIGHT_TITLES", "Insight", "compute_insights"]
