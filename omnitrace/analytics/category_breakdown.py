"""Time per category, from derived segments."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from omnitrace.engine.time_engine import derive_segments
from omnitrace.models import Category, Event


@dataclass(frozen=True)
class CategoryBreakdown:
    category: Category
    duration: int
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "duration": self.duration,
            "percentage": self.percentage,
        }


def compute_category_breakdown(events: Sequence[Event], now: int | None = None) -> list[CategoryBreakdown]:
    """
    One entry per category, longest first.

    Categories with equal duration keep their declaration order. Percentages
    are 0 when there is no segment time at all.
    """
    totals: dict[Category, int] = {}
    total_duration = 0

    for segment in derive_segments(events, now=now):
        totals[segment.category] = totals.get(segment.category, 0) + segment.duration
        total_duration += segment.duration

    breakdown = [
        CategoryBreakdown(
            category=category,
            duration=totals.get(category, 0),
            percentage=(totals.get(category, 0) / total_duration) * 100 if total_duration > 0 else 0,
        )
        for category in Category
    ]
    return sorted(breakdown, key=lambda b: b.duration, reverse=True)


__all__ = ["CategoryBreakdown", "compute_category_breakdown"]
