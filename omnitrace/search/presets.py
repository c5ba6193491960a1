"""One-click anomaly search presets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from omnitrace.models import Confidence
from omnitrace.omnibrain.context_scope import start_of_day
from omnitrace.search import SearchFilters
from omnitrace.timeutil import MINUTE_MS, from_local_datetime, now_ms


@dataclass(frozen=True)
class SearchPreset:
    name: str
    description: str
    filters: SearchFilters


def get_search_presets(now: int | None = None) -> list[SearchPreset]:
    """Presets evaluated against now; "Today" covers the local day containing it."""
    now = now if now is not None else now_ms()
    midnight = start_of_day(now)
    day_end = midnight + timedelta(days=1) - timedelta(milliseconds=1)

    return [
        SearchPreset(
            name="Long Idle Periods",
            description="Idle periods longer than 15 minutes",
            filters=SearchFilters(keyword="idle", min_duration=15 * MINUTE_MS),
        ),
        SearchPreset(
            name="Manual Events",
            description="All manually logged events",
            filters=SearchFilters(confidence=Confidence.MANUAL),
        ),
        SearchPreset(
            name="Today",
            description="All events from today",
            filters=SearchFilters(
                start_time=from_local_datetime(midnight),
                end_time=from_local_datetime(day_end),
            ),
        ),
    ]


def get_preset(name: str, now: int | None = None) -> SearchPreset | None:
    """Preset by case-insensitive name."""
    wanted = name.lower()
    return next((p for p in get_search_presets(now) if p.name.lower() == wanted), None)


__all__ = ["SearchPreset", "get_search_presets", "get_preset"]
