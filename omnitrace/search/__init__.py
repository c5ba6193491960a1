"""
Local event search with composable filters.

Usage:
    from omnitrace.search import SearchFilters, search
    results = await search(store, SearchFilters(keyword="idle", min_duration=15 * 60_000))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from omnitrace.engine.queries import query_events
from omnitrace.models import Category, Confidence, Event
from omnitrace.storage.base import EventStore


@dataclass
class SearchFilters:
    """All filters are optional and combine with AND. Times and durations in ms."""

    keyword: str | None = None
    category: Category | None = None
    confidence: Confidence | None = None
    start_time: int | None = None
    end_time: int | None = None
    min_duration: int | None = None
    max_duration: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: (v.value if isinstance(v, (Category, Confidence)) else v) for k, v in self.__dict__.items()}


async def search(store: EventStore, filters: SearchFilters) -> list[Event]:
    """
    Events matching every filter, newest first.

    Events without a duration count as duration 0 for the duration filters.
    """
    results = await query_events(
        store,
        start_time=filters.start_time,
        end_time=filters.end_time,
        category=filters.category,
        confidence=filters.confidence,
        keyword=filters.keyword,
    )

    if filters.min_duration is not None:
        results = [e for e in results if (e.duration or 0) >= filters.min_duration]

    if filters.max_duration is not None:
        results = [e for e in results if (e.duration or 0) <= filters.max_duration]

    return results


__all__ = ["SearchFilters", "search"]
