"""
Micro-gamification titles earned from the day's timeline.

    Flow Architect        two or more study/work segments over 30 minutes
    Focus Breaker         more than 5 micro-distractions and over an hour
                          of total focus time
    Distraction Survivor  two or more exploration sessions and at least
                          one focus segment
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from omnitrace.analytics.smart_merging import (
    EXPLORATION_LABEL,
    MICRO_DISTRACTION_LABEL,
    CognitiveMode,
    merge_segments,
)
from omnitrace.engine.time_engine import derive_segments, focus_segments, total_duration
from omnitrace.models import Event
from omnitrace.timeutil import HOUR_MS, MINUTE_MS


MIN_EVENTS_FOR_TITLES = 10
DEEP_SESSION_MS = 30 * MINUTE_MS


class Title(StrEnum):
    FLOW_ARCHITECT = "Flow Architect"
    FOCUS_BREAKER = "Focus Breaker"
    DISTRACTION_SURVIVOR = "Distraction Survivor"


@dataclass(frozen=True)
class TitleResult:
    earned_titles: list[Title] = field(default_factory=list)
    reasons: dict[Title, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "earnedTitles": [t.value for t in self.earned_titles],
            "reasons": {t.value: r for t, r in self.reasons.items()},
        }


def compute_titles(
    events: Sequence[Event],
    mode: str = CognitiveMode.FOCUS,
    now: int | None = None,
) -> TitleResult:
    result = TitleResult()
    if len(events) < MIN_EVENTS_FOR_TITLES:
        return result

    segments = derive_segments(events, now=now)
    merged = merge_segments(segments, events, mode)
    focused = focus_segments(segments)

    deep_sessions = [s for s in focused if s.duration > DEEP_SESSION_MS]
    if len(deep_sessions) >= 2:
        result.earned_titles.append(Title.FLOW_ARCHITECT)
        result.reasons[Title.FLOW_ARCHITECT] = (
            f"Achieved {len(deep_sessions)} deep focus sessions over 30 minutes"
        )

    distractions = [m for m in merged if m.label == MICRO_DISTRACTION_LABEL]
    if len(distractions) > 5 and total_duration(focused) > HOUR_MS:
        result.earned_titles.append(Title.FOCUS_BREAKER)
        result.reasons[Title.FOCUS_BREAKER] = "Maintained productivity despite frequent context switches"

    explorations = [m for m in merged if m.label == EXPLORATION_LABEL]
    if len(explorations) >= 2 and focused:
        result.earned_titles.append(Title.DISTRACTION_SURVIVOR)
        result.reasons[Title.DISTRACTION_SURVIVOR] = "Navigated through distractions and returned to focus"

    return result


__all__ = ["MIN_EVENTS_FOR_TITLES", "Title", "TitleResult", "compute_titles"]
