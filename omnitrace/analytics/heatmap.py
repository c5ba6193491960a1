"""
Tool: Mental-Load Heatmap
Purpose: Fixed-size intensity bins over a time window

Each bin's intensity is the overlap-weighted sum of category weights of the
segments touching it, capped at 1, followed by one 1:2:1 smoothing pass that
leaves the first and last bins untouched.

Category weights:
    work, study   0.9
    distraction   0.6
    rest          0.1
    unknown       0.3
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

from omnitrace.engine.time_engine import derive_segments
from omnitrace.models import Category, Event


DEFAULT_BIN_COUNT = 100

CATEGORY_WEIGHTS: dict[Category, float] = {
    Category.WORK: 0.9,
    Category.STUDY: 0.9,
    Category.DISTRACTION: 0.6,
    Category.REST: 0.1,
}
DEFAULT_WEIGHT = 0.3


@dataclass(frozen=True)
class HeatmapBin:
    timestamp: float  # bin centre, ms
    intensity: float  # 0-1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def smooth_bins(bins: list[HeatmapBin]) -> list[HeatmapBin]:
    if len(bins) < 3:
        return bins

    smoothed = [bins[0]]
    for prev, curr, nxt in zip(bins, bins[1:], bins[2:]):
        smoothed.append(HeatmapBin(
            timestamp=curr.timestamp,
            intensity=(prev.intensity + curr.intensity * 2 + nxt.intensity) / 4,
        ))
    smoothed.append(bins[-1])
    return smoothed


def generate_heatmap(
    events: Sequence[Event],
    start_time: int,
    end_time: int,
    bin_count: int = DEFAULT_BIN_COUNT,
    now: int | None = None,
) -> list[HeatmapBin]:
    """
    Build exactly bin_count bins covering [start_time, end_time).

    A window with end_time <= start_time yields bins of zero intensity.
    """
    if bin_count <= 0:
        return []

    segments = derive_segments(events, now=now)
    bin_duration = (end_time - start_time) / bin_count
    bins: list[HeatmapBin] = []

    for i in range(bin_count):
        bin_start = start_time + i * bin_duration
        bin_end = bin_start + bin_duration
        intensity = 0.0

        if bin_duration > 0:
            for seg in segments:
                if seg.start_time < bin_end and seg.end_time > bin_start:
                    overlap = min(seg.end_time, bin_end) - max(seg.start_time, bin_start)
                    weight = CATEGORY_WEIGHTS.get(seg.category, DEFAULT_WEIGHT)
                    intensity += weight * (overlap / bin_duration)
            intensity = min(1.0, intensity)

        bins.append(HeatmapBin(timestamp=bin_start + bin_duration / 2, intensity=intensity))

    return smooth_bins(bins)


__all__ = [
    "DEFAULT_BIN_COUNT",
    "CATEGORY_WEIGHTS",
    "HeatmapBin",
    "smooth_bins",
    "generate_heatmap",
]
