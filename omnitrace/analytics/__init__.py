"""
Analytics Layer

Pure functions over the event log. Each one short-circuits with a gated
result (has_enough_data=False, None, or an empty list) when there is too
little data; none of them raise for insufficient input.

Components:
    smart_merging.py: Exploration / Micro-Distraction / Recovery Gap grouping
    metrics.py: Active, background and idle time, context switches
    category_breakdown.py: Time per category
    focus_score.py: 0-100 score with label and reasons
    heatmap.py: Mental-load intensity bins
    insights.py: Activity intelligence cards
    drift_detection.py: Focus decay and distraction clustering
    daily_summary.py: Plain-English day recap
    titles.py: Micro-gamification titles
"""

from .category_breakdown import CategoryBreakdown, compute_category_breakdown
from .daily_summary import DailySummary, generate_daily_summary
from .drift_detection import DriftRecommendation, detect_cognitive_drift
from .focus_score import FocusLabel, FocusScoreResult, compute_focus_score, label_for_score
from .heatmap import HeatmapBin, generate_heatmap
from .insights import Insight, compute_insights
from .metrics import SessionMetrics, compute_metrics
from .smart_merging import CognitiveMode, ModeThresholds, get_mode_thresholds, smart_merge_segments
from .titles import Title, TitleResult, compute_titles


__all__ = [
    "CategoryBreakdown",
    "compute_category_breakdown",
    "DailySummary",
    "generate_daily_summary",
    "DriftRecommendation",
    "detect_cognitive_drift",
    "FocusLabel",
    "FocusScoreResult",
    "compute_focus_score",
    "label_for_score",
    "HeatmapBin",
    "generate_heatmap",
    "Insight",
    "compute_insights",
    "SessionMetrics",
    "compute_metrics",
    "CognitiveMode",
    "ModeThresholds",
    "get_mode_thresholds",
    "smart_merge_segments",
    "Title",
    "TitleResult",
    "compute_titles",
]
