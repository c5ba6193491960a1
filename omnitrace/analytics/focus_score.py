"""
Tool: Focus Score
Purpose: Deterministic 0-100 focus score with human-readable reasons

Score starts neutral at 50 and is adjusted by four factors:
    1. Focus session quality: average study/work segment length (0 to +30,
       or -15 when there are no focus segments)
    2. Navigation rate per minute (-20, -10 or 0)
    3. Rest balance: rest + idle time over total time (+15 or -10)
    4. Rapid switching: more than 5 navigations within 10s of the previous
       event (-5)

Labels:
    >= 80  Deep Focus
    >= 60  Flow
    >= 40  Unstable
    else   Distracted

Usage:
    from omnitrace.analytics.focus_score import compute_focus_score
    result = compute_focus_score(events)
    print(result.score, result.label, result.reasons)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from omnitrace.engine.time_engine import derive_segments, focus_segments, sort_events, total_duration
from omnitrace.models import IDLE_LABEL, Category, Event, EventType
from omnitrace.timeutil import MINUTE_MS, round_half_up


MIN_EVENTS_FOR_SCORE = 5
MIN_DURATION_MS = 5 * MINUTE_MS

NEUTRAL_SCORE = 50
LONG_FOCUS_MS = 20 * MINUTE_MS
FULL_CREDIT_FOCUS_MS = 30 * MINUTE_MS
RAPID_SWITCH_MS = 10_000


class FocusLabel(StrEnum):
    DEEP_FOCUS = "Deep Focus"
    FLOW = "Flow"
    UNSTABLE = "Unstable"
    DISTRACTED = "Distracted"


@dataclass(frozen=True)
class FocusScoreResult:
    score: int
    label: FocusLabel
    has_enough_data: bool
    reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "label": self.label.value,
            "hasEnoughData": self.has_enough_data,
            "reasons": list(self.reasons),
        }


def label_for_score(score: int) -> FocusLabel:
    if score >= 80:
        return FocusLabel.DEEP_FOCUS
    if score >= 60:
        return FocusLabel.FLOW
    if score >= 40:
        return FocusLabel.UNSTABLE
    return FocusLabel.DISTRACTED


def _not_enough(reason: str) -> FocusScoreResult:
    return FocusScoreResult(score=0, label=FocusLabel.DISTRACTED, has_enough_data=False, reasons=[reason])


def compute_focus_score(events: Sequence[Event], now: int | None = None) -> FocusScoreResult:
    if len(events) < MIN_EVENTS_FOR_SCORE:
        return _not_enough("Not enough events recorded yet")

    segments = derive_segments(events, now=now)
    duration = total_duration(segments)

    if duration < MIN_DURATION_MS:
        return _not_enough("Not enough activity duration recorded yet")

    score: float = NEUTRAL_SCORE
    reasons: list[str] = []

    # Factor 1: focus session quality
    focused = focus_segments(segments)
    if focused:
        avg_focus = total_duration(focused) / len(focused)
        score += min(30, (avg_focus / FULL_CREDIT_FOCUS_MS) * 30)
        if avg_focus > LONG_FOCUS_MS:
            reasons.append("Long focus sessions detected")
    else:
        score -= 15
        reasons.append("No focused work sessions")

    # Factor 2: navigation rate
    navigation_count = sum(1 for e in events if e.type == EventType.NAVIGATION)
    distraction_rate = navigation_count / (duration / MINUTE_MS)
    if distraction_rate > 2:
        score -= 20
        reasons.append("High context-switching rate")
    elif distraction_rate > 1:
        score -= 10
        reasons.append("Moderate context-switching")
    else:
        reasons.append("Low distraction rate")

    # Factor 3: rest balance. A rest-category "Idle" segment counts twice.
    rest_time = total_duration(s for s in segments if s.category == Category.REST)
    rest_time += total_duration(s for s in segments if s.activity == IDLE_LABEL)
    rest_ratio = rest_time / duration
    if 0.1 < rest_ratio < 0.3:
        score += 15
        reasons.append("Healthy rest balance")
    elif rest_ratio >= 0.3:
        score -= 10
        reasons.append("Excessive idle time")

    # Factor 4: rapid switching, judged on time order
    ordered = sort_events(events)
    rapid_switches = sum(
        1
        for prev, event in zip(ordered, ordered[1:])
        if event.type == EventType.NAVIGATION and event.timestamp - prev.timestamp < RAPID_SWITCH_MS
    )
    if rapid_switches > 5:
        score -= 5
        reasons.append("Rapid app switching detected")

    final = max(0, min(100, round_half_up(score)))
    return FocusScoreResult(score=final, label=label_for_score(final), has_enough_data=True, reasons=reasons)


__all__ = [
    "MIN_EVENTS_FOR_SCORE",
    "MIN_DURATION_MS",
    "FocusLabel",
    "FocusScoreResult",
    "label_for_score",
    "compute_focus_score",
]
