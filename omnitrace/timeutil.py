"""Millisecond time helpers shared by the engine, analytics and templates.

All wall-clock conversions use the local timezone, the same way hours of day
are presented to the user.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from datetime import datetime

SECOND_MS = 1000
MINUTE_MS = 60 * SECOND_MS
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS

Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (matches how scores are shown)."""
    return math.floor(value + 0.5)


def to_minutes(ms: float) -> int:
    return round_half_up(ms / MINUTE_MS)


def safe_denominator(value: float) -> float:
    """Divide-by-zero policy: a zero denominator is replaced by 1."""
    return value or 1


def to_local_datetime(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000)


def local_hour(ms: int) -> int:
    return to_local_datetime(ms).hour


def from_local_datetime(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def format_clock(ms: int) -> str:
    """'2:05 PM' style."""
    dt = to_local_datetime(ms)
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {suffix}"


def format_clock_padded(ms: int) -> str:
    """'02:05 PM' style."""
    return to_local_datetime(ms).strftime("%I:%M %p")


def format_date(ms: int) -> str:
    """'3/14/2026' style."""
    dt = to_local_datetime(ms)
    return f"{dt.month}/{dt.day}/{dt.year}"


def format_hour_range(hour: int) -> str:
    return f"{hour}:00 - {hour + 1}:00"
