"""
Tool: Smart Merging
Purpose: Group adjacent raw segments into semantic blocks, tuned by cognitive mode

Merged labels (checked in this order at every position):
    - Exploration Session: burst of navigation-sourced segments
    - Micro-Distraction: run of short segments separated by short gaps
    - Recovery Gap: long idle or rest segment
    - otherwise the raw segment passes through unchanged

Every raw segment lands in exactly one merged segment, so
sum(raw_segment_count) == len(derive_segments(events)).

Usage:
    from omnitrace.analytics.smart_merging import smart_merge_segments
    merged = smart_merge_segments(events, mode="flow")
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from omnitrace.engine.time_engine import derive_segments
from omnitrace.models import IDLE_LABEL, Category, Confidence, Event, EventType, MergedSegment, Segment


class CognitiveMode(StrEnum):
    """Lens applied to the timeline. Changes thresholds, never the data."""

    FOCUS = "focus"
    FLOW = "flow"
    RECOVERY = "recovery"
    ANALYSIS = "analysis"


EXPLORATION_LABEL = "Exploration Session"
MICRO_DISTRACTION_LABEL = "Micro-Distraction"
RECOVERY_GAP_LABEL = "Recovery Gap"


@dataclass(frozen=True)
class ModeThresholds:
    """Merge thresholds. Durations in ms."""

    navigation_gap: int
    navigation_min_count: int
    switch_gap: int
    switch_duration: int
    switch_min_count: int
    recovery_min_duration: int


DEFAULT_THRESHOLDS = ModeThresholds(
    navigation_gap=30_000,
    navigation_min_count=5,
    switch_gap=5_000,
    switch_duration=10_000,
    switch_min_count=2,
    recovery_min_duration=60_000,
)

MODE_THRESHOLDS: dict[str, ModeThresholds] = {
    # Aggressive distraction merging
    CognitiveMode.FOCUS: ModeThresholds(
        navigation_gap=30_000,
        navigation_min_count=4,
        switch_gap=8_000,
        switch_duration=15_000,
        switch_min_count=2,
        recovery_min_duration=60_000,
    ),
    # Stricter switch detection, more switches required
    CognitiveMode.FLOW: ModeThresholds(
        navigation_gap=30_000,
        navigation_min_count=5,
        switch_gap=3_000,
        switch_duration=8_000,
        switch_min_count=3,
        recovery_min_duration=60_000,
    ),
    # More sensitive to rest
    CognitiveMode.RECOVERY: ModeThresholds(
        navigation_gap=30_000,
        navigation_min_count=5,
        switch_gap=5_000,
        switch_duration=10_000,
        switch_min_count=2,
        recovery_min_duration=30_000,
    ),
}


def get_mode_thresholds(mode: str) -> ModeThresholds:
    """Thresholds for a mode; unknown modes (and analysis) get the defaults."""
    return MODE_THRESHOLDS.get(mode, DEFAULT_THRESHOLDS)


def _merge(label: str, segments: Sequence[Segment], category: Category, confidence: Confidence) -> MergedSegment:
    return MergedSegment(
        label=label,
        start_time=segments[0].start_time,
        end_time=segments[-1].end_time,
        category=category,
        confidence=confidence,
        source_event_ids=[sid for s in segments for sid in s.source_event_ids],
        raw_segment_count=len(segments),
    )


def _passthrough(segment: Segment) -> MergedSegment:
    return _merge(segment.activity, [segment], segment.category, segment.confidence)


def _is_navigation_segment(segment: Segment, events_by_id: dict[str, Event]) -> bool:
    return any(
        (event := events_by_id.get(sid)) is not None and event.type == EventType.NAVIGATION
        for sid in segment.source_event_ids
    )


def _collect_navigation_burst(
    segments: list[Segment],
    start: int,
    events_by_id: dict[str, Event],
    max_gap: int,
) -> list[Segment]:
    burst: list[Segment] = []
    i = start
    while i < len(segments) and _is_navigation_segment(segments[i], events_by_id):
        burst.append(segments[i])
        i += 1
        if i < len(segments) and segments[i].start_time - segments[i - 1].end_time > max_gap:
            break
    return burst


def _collect_rapid_switches(segments: list[Segment], start: int, thresholds: ModeThresholds) -> list[Segment]:
    switches = [segments[start]]
    i = start + 1
    while i < len(segments):
        gap = segments[i].start_time - segments[i - 1].end_time
        if gap < thresholds.switch_gap and segments[i].duration < thresholds.switch_duration:
            switches.append(segments[i])
            i += 1
        else:
            break
    return switches


def merge_segments(
    raw_segments: list[Segment],
    events: Sequence[Event],
    mode: str = CognitiveMode.FOCUS,
) -> list[MergedSegment]:
    """Merge already-derived segments. events resolves source ids to types."""
    if mode == CognitiveMode.ANALYSIS:
        return [_passthrough(s) for s in raw_segments]

    thresholds = get_mode_thresholds(mode)

    events_by_id: dict[str, Event] = {}
    for event in events:
        events_by_id.setdefault(event.id, event)

    merged: list[MergedSegment] = []
    i = 0
    while i < len(raw_segments):
        segment = raw_segments[i]

        if _is_navigation_segment(segment, events_by_id):
            burst = _collect_navigation_burst(raw_segments, i, events_by_id, thresholds.navigation_gap)
            if len(burst) >= thresholds.navigation_min_count:
                merged.append(_merge(EXPLORATION_LABEL, burst, Category.UNKNOWN, Confidence.AUTO))
                i += len(burst)
                continue

        if i < len(raw_segments) - 1:
            gap = raw_segments[i + 1].start_time - segment.end_time
            if gap < thresholds.switch_gap and segment.duration < thresholds.switch_duration:
                switches = _collect_rapid_switches(raw_segments, i, thresholds)
                if len(switches) >= thresholds.switch_min_count:
                    merged.append(_merge(MICRO_DISTRACTION_LABEL, switches, Category.DISTRACTION, Confidence.AUTO))
                    i += len(switches)
                    continue

        if segment.activity == IDLE_LABEL or segment.category == Category.REST:
            if segment.duration > thresholds.recovery_min_duration:
                merged.append(_merge(RECOVERY_GAP_LABEL, [segment], Category.REST, segment.confidence))
                i += 1
                continue

        merged.append(_passthrough(segment))
        i += 1

    return merged


def smart_merge_segments(
    events: Sequence[Event],
    mode: str = CognitiveMode.FOCUS,
    now: int | None = None,
) -> list[MergedSegment]:
    """Derive segments from events and merge them under the given mode."""
    return merge_segments(derive_segments(events, now=now), events, mode)


__all__ = [
    "CognitiveMode",
    "ModeThresholds",
    "DEFAULT_THRESHOLDS",
    "MODE_THRESHOLDS",
    "EXPLORATION_LABEL",
    "MICRO_DISTRACTION_LABEL",
    "RECOVERY_GAP_LABEL",
    "get_mode_thresholds",
    "merge_segments",
    "smart_merge_segments",
]
