"""
Segmentation engine and event queries.

Segments are derived, never stored:
    events → derive_segments() → list[Segment]
"""

from .time_engine import derive_segments, focus_segments, get_activity_at, sort_events, total_duration


__all__ = [
    "derive_segments",
    "focus_segments",
    "get_activity_at",
    "sort_events",
    "total_duration",
]
