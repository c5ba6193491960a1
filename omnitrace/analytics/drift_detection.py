"""
Tool: Cognitive Drift Detection
Purpose: Spot a repeatable focus-decay pattern or clustered distractions

Checks, in order:
    1. Consistent focus length: population std dev of study/work segment
       durations under 30% of their mean → high confidence
    2. Distraction clustering: more than 5 distraction-category events where
       the largest run with gaps under 10 minutes has at least 3 events →
       medium confidence

Returns None when neither pattern holds or there is too little data.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any, Literal

from omnitrace.engine.time_engine import derive_segments, focus_segments, sort_events
from omnitrace.models import Category, Event
from omnitrace.timeutil import MINUTE_MS, round_half_up


MIN_EVENTS_FOR_DRIFT = 20
MIN_FOCUS_SEGMENTS = 3
CONSISTENCY_RATIO = 0.3
CLUSTER_GAP_MS = 10 * MINUTE_MS
MIN_DISTRACTION_EVENTS = 5
MIN_CLUSTER_SIZE = 3


@dataclass(frozen=True)
class DriftRecommendation:
    message: str
    confidence: Literal["low", "medium", "high"]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def largest_cluster(timestamps: Sequence[int], max_gap: int = CLUSTER_GAP_MS) -> int:
    """Size of the longest run of sorted timestamps with consecutive gaps < max_gap."""
    if not timestamps:
        return 0

    best = 0
    current = 1
    for prev, ts in zip(timestamps, timestamps[1:]):
        if ts - prev < max_gap:
            current += 1
        else:
            best = max(best, current)
            current = 1
    return max(best, current)


def detect_cognitive_drift(events: Sequence[Event], now: int | None = None) -> DriftRecommendation | None:
    if len(events) < MIN_EVENTS_FOR_DRIFT:
        return None

    focused = focus_segments(derive_segments(events, now=now))
    if len(focused) < MIN_FOCUS_SEGMENTS:
        return None

    durations = [s.duration for s in focused]
    mean = sum(durations) / len(durations)
    std_dev = math.sqrt(sum((d - mean) ** 2 for d in durations) / len(durations))

    if std_dev < mean * CONSISTENCY_RATIO:
        return DriftRecommendation(
            message=(
                f"You usually lose focus after {round_half_up(mean / MINUTE_MS)} minutes. "
                "Consider a break around that time."
            ),
            confidence="high",
        )

    distractions = [e for e in events if e.category == Category.DISTRACTION]
    if len(distractions) > MIN_DISTRACTION_EVENTS:
        timestamps = [e.timestamp for e in sort_events(distractions)]
        if largest_cluster(timestamps) >= MIN_CLUSTER_SIZE:
            return DriftRecommendation(
                message="Distractions tend to cluster together. A short break might help reset your attention.",
                confidence="medium",
            )

    return None


__all__ = ["DriftRecommendation", "largest_cluster", "detect_cognitive_drift"]
