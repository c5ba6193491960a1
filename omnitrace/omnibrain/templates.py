"""
Fact generators for OMNIBRAIN data intents.

Each generator turns events into a FactPayload: an ordered list of short
English sentences computed from derived segments or metrics, plus a
confidence. The first facts are the headline; later ones are detail that
only the verbose render modes show. Confidence drops to "low" when the data
needed to answer is missing.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from omnitrace.analytics.metrics import compute_metrics
from omnitrace.engine.time_engine import derive_segments, focus_segments, total_duration
from omnitrace.models import Category, Event, EventType, Segment
from omnitrace.timeutil import (
    DAY_MS,
    format_clock_padded,
    format_date,
    format_hour_range,
    local_hour,
    now_ms,
    round_half_up,
    safe_denominator,
    to_minutes,
)


ConfidenceLevel = Literal["high", "medium", "low"]

WEEK_MS = 7 * DAY_MS
FOCUS_DENSITY_THRESHOLD = 0.05
ACTIVE_MINUTES_THRESHOLD = 30


@dataclass(frozen=True)
class FactPayload:
    facts: list[str] = field(default_factory=list)
    confidence: ConfidenceLevel = "high"

    def to_dict(self) -> dict[str, Any]:
        return {"facts": list(self.facts), "confidence": self.confidence}


# =============================================================================
# Helpers
# =============================================================================

def _duration_by_hour(segments: Sequence[Segment]) -> dict[int, int]:
    """Total segment duration keyed by local start hour, in first-seen order."""
    totals: dict[int, int] = {}
    for seg in segments:
        hour = local_hour(seg.start_time)
        totals[hour] = totals.get(hour, 0) + seg.duration
    return totals


def _peak(totals: dict[Any, int], default: Any = None) -> tuple[Any, int]:
    """Entry with the largest value; the first one wins ties."""
    best_key, best_value = default, 0
    for key, value in totals.items():
        if value > best_value:
            best_key, best_value = key, value
    return best_key, best_value


def _ranked(totals: dict[Any, int]) -> list[tuple[Any, int]]:
    return sorted(totals.items(), key=lambda kv: kv[1], reverse=True)


def _top_hours(ranked: list[tuple[int, int]]) -> str:
    return ", ".join(f"{hour}:00 ({to_minutes(ms)}min)" for hour, ms in ranked[:3])


def _distraction_segments(events: Sequence[Event], now: int | None) -> list[Segment]:
    return [s for s in derive_segments(events, now=now) if s.category == Category.DISTRACTION]


# =============================================================================
# Generators
# =============================================================================

def generate_distraction_facts(events: Sequence[Event], now: int | None = None) -> FactPayload:
    distractions = _distraction_segments(events, now)
    if not distractions:
        return FactPayload(["No significant distractions detected in this period."], "high")

    total = total_duration(distractions)
    facts = [f"You had {len(distractions)} distraction periods totaling {to_minutes(total)} minutes."]

    hour_counts: dict[int, int] = {}
    for seg in distractions:
        hour = local_hour(seg.start_time)
        hour_counts[hour] = hour_counts.get(hour, 0) + 1
    peak_hour, _ = _peak(hour_counts, default=0)
    facts.append(f"Most distractions occurred around {peak_hour}:00.")
    facts.append(f"Average distraction duration was {to_minutes(total / len(distractions))} minutes.")

    hours = [local_hour(s.start_time) for s in distractions]
    morning = sum(1 for h in hours if 6 <= h < 12)
    afternoon = sum(1 for h in hours if 12 <= h < 18)
    evening = sum(1 for h in hours if h >= 18 or h < 6)
    facts.append(f"Distribution: {morning} morning, {afternoon} afternoon, {evening} evening.")

    return FactPayload(facts, "high")


def generate_focus_drop_facts(
    events: Sequence[Event],
    after_time: int,
    now: int | None = None,
) -> FactPayload:
    """Facts about events at or after after_time (ms)."""
    relevant = [e for e in events if e.timestamp >= after_time]
    if not relevant:
        return FactPayload(
            ["Insufficient data after the specified time. Could you clarify which day or time period you mean?"],
            "low",
        )

    segments = derive_segments(relevant, now=now)
    distractions = [s for s in segments if s.category == Category.DISTRACTION]
    idle_starts = sum(1 for e in relevant if e.type == EventType.IDLE_START)
    focused = focus_segments(segments)
    clock = format_clock_padded(after_time)

    facts: list[str] = []
    if distractions:
        facts.append(
            f"After {clock}, you had {len(distractions)} distraction periods totaling "
            f"{to_minutes(total_duration(distractions))} minutes."
        )
    if idle_starts:
        facts.append(f"There were {idle_starts} idle periods detected.")
    if focused:
        facts.append(f"You maintained {to_minutes(total_duration(focused))} minutes of focus work after that time.")

    navigations = sum(1 for e in relevant if e.type == EventType.NAVIGATION)
    if navigations:
        facts.append(f"Session fragmentation: {navigations} screen changes detected.")

    if not facts:
        facts.append(f"Activity after {clock} appears stable with no major focus drops.")

    return FactPayload(facts, "high" if distractions else "medium")


def generate_best_focus_time_facts(events: Sequence[Event], now: int | None = None) -> FactPayload:
    focused = focus_segments(derive_segments(events, now=now))
    if not focused:
        return FactPayload(
            ["Not enough focus activity recorded to determine best times. "
             "Try asking about a specific day or activity type."],
            "low",
        )

    by_hour = _duration_by_hour(focused)
    peak_hour, peak_ms = _peak(by_hour, default=0)

    facts = [
        f"Your best focus time is around {format_hour_range(peak_hour)}.",
        f"You spent {to_minutes(peak_ms)} minutes in focused work during this hour.",
        f"This represents {round_half_up(peak_ms / safe_denominator(total_duration(focused)) * 100)}% "
        "of your total focus time.",
    ]

    ranked = _ranked(by_hour)
    if len(ranked) > 1:
        second_hour, second_ms = ranked[1]
        facts.append(f"Second-best focus window: {second_hour}:00 with {to_minutes(second_ms)} minutes.")

    return FactPayload(facts, "high")


def generate_improvement_facts(events: Sequence[Event], now: int | None = None) -> FactPayload:
    """Compare the last 7 days with the 7 days before them."""
    now = now if now is not None else now_ms()
    week_ago = now - WEEK_MS

    this_week = [e for e in events if e.timestamp >= week_ago]
    last_week = [e for e in events if week_ago - WEEK_MS <= e.timestamp < week_ago]

    if not this_week or not last_week:
        return FactPayload(
            ["Not enough data to compare weekly progress. Try asking about today or a specific time period."],
            "low",
        )

    current = compute_metrics(this_week)
    previous = compute_metrics(last_week)
    facts: list[str] = []

    focus_change = current.focus_density - previous.focus_density
    if abs(focus_change) > FOCUS_DENSITY_THRESHOLD:
        if focus_change > 0:
            facts.append(f"Your focus density improved by {round_half_up(focus_change * 100)}% this week.")
        else:
            facts.append(f"Your focus density decreased by {round_half_up(abs(focus_change) * 100)}% this week.")
    else:
        facts.append("Your focus density remained stable this week.")

    switch_change = current.context_switches - previous.context_switches
    if switch_change < 0:
        facts.append(f"You reduced context switches by {abs(switch_change)}.")
    elif switch_change > 0:
        facts.append(f"Context switches increased by {switch_change}.")

    active_minutes_change = to_minutes(current.total_active_time - previous.total_active_time)
    if abs(active_minutes_change) > ACTIVE_MINUTES_THRESHOLD:
        direction = "increased" if active_minutes_change > 0 else "decreased"
        facts.append(f"Active time {direction} by {abs(active_minutes_change)} minutes.")

    return FactPayload(facts, "medium")


def generate_daily_summary_facts(events: Sequence[Event], now: int | None = None) -> FactPayload:
    if not events:
        return FactPayload(["No activity recorded today."], "high")

    segments = derive_segments(events, now=now)
    metrics = compute_metrics(events)

    facts = [
        f"You were active for {to_minutes(metrics.total_active_time)} minutes with "
        f"{to_minutes(metrics.total_idle_time)} minutes of idle time."
    ]

    by_category: dict[Category, int] = {}
    for seg in segments:
        by_category[seg.category] = by_category.get(seg.category, 0) + seg.duration
    top_categories = _ranked(by_category)[:3]

    if top_categories:
        category, ms = top_categories[0]
        facts.append(f"Most time spent on {category.value} ({to_minutes(ms)} minutes).")

    facts.append(f"You had {metrics.context_switches} context switches today.")

    if len(top_categories) > 1:
        breakdown = ", ".join(f"{cat.value}: {to_minutes(ms)}min" for cat, ms in top_categories)
        facts.append(f"Category breakdown: {breakdown}.")

    return FactPayload(facts, "high")


def generate_longest_focus_facts(events: Sequence[Event], now: int | None = None) -> FactPayload:
    focused = focus_segments(derive_segments(events, now=now))
    if not focused:
        return FactPayload(
            ["No focus sessions recorded yet. Try asking about a different time period."],
            "low",
        )

    longest = focused[0]
    for seg in focused[1:]:
        if seg.duration > longest.duration:
            longest = seg

    minutes = to_minutes(longest.duration)
    hours, remaining = divmod(minutes, 60)
    if hours > 0:
        plural = "s" if hours > 1 else ""
        headline = f"Your longest focus session was {hours} hour{plural} and {remaining} minutes."
    else:
        headline = f"Your longest focus session was {minutes} minutes."

    return FactPayload(
        [
            headline,
            f"It occurred at {format_clock_padded(longest.start_time)} on {format_date(longest.start_time)}.",
            f"Your average focus session is {to_minutes(total_duration(focused) / len(focused))} minutes.",
            f"Total focus sessions recorded: {len(focused)}.",
        ],
        "high",
    )


def generate_main_distractions_facts(events: Sequence[Event], now: int | None = None) -> FactPayload:
    distractions = _distraction_segments(events, now)
    if not distractions:
        return FactPayload(["No distractions detected in this period."], "high")

    ranked = _ranked(_duration_by_hour(distractions))
    top_hour, top_ms = ranked[0]
    total = total_duration(distractions)

    facts = [
        f"Main distraction window: {format_hour_range(top_hour)} with {to_minutes(top_ms)} minutes.",
        f"Total distraction time: {to_minutes(total)} minutes across {len(distractions)} periods.",
        f"Average distraction length: {to_minutes(total / len(distractions))} minutes.",
    ]
    if len(ranked) > 1:
        facts.append(f"Top distraction hours: {_top_hours(ranked)}.")

    return FactPayload(facts, "high")


def generate_most_productive_facts(events: Sequence[Event], now: int | None = None) -> FactPayload:
    productive = focus_segments(derive_segments(events, now=now))
    if not productive:
        return FactPayload(
            ["Not enough productive activity recorded. Try asking about a different time period."],
            "low",
        )

    by_hour = _duration_by_hour(productive)
    peak_hour, peak_ms = _peak(by_hour, default=0)

    facts = [
        f"Most productive time: {format_hour_range(peak_hour)} with {to_minutes(peak_ms)} minutes of focused work."
    ]

    by_day: dict[str, int] = {}
    for seg in productive:
        day = format_date(seg.start_time)
        by_day[day] = by_day.get(day, 0) + seg.duration

    if len(by_day) > 1:
        peak_day, peak_day_ms = _peak(by_day)
        if peak_day is not None:
            facts.append(f"Most productive day: {peak_day} with {to_minutes(peak_day_ms)} minutes.")

    facts.append(
        f"Total productive time: {to_minutes(total_duration(productive))} minutes "
        f"across {len(productive)} sessions."
    )

    ranked = _ranked(by_hour)
    if len(ranked) > 1:
        facts.append(f"Top productive hours: {_top_hours(ranked)}.")

    return FactPayload(facts, "high")


__all__ = [
    "FactPayload",
    "generate_distraction_facts",
    "generate_focus_drop_facts",
    "generate_best_focus_time_facts",
    "generate_improvement_facts",
    "generate_daily_summary_facts",
    "generate_longest_focus_facts",
    "generate_main_distractions_facts",
    "generate_most_productive_facts",
]
