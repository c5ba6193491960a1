"""
Private Mode: mask user-entered text in displayed output.

Only presentation is affected. Stored events are never modified, and
engine-generated labels ("Active", "Idle", merged-segment labels, insight
card titles, focus-score labels) stay visible so the shape of the timeline
is still readable.
"""

from __future__ import annotations

from typing import Any

from omnitrace.analytics.focus_score import FocusLabel
from omnitrace.analytics.insights import INSIGHT_TITLES
from omnitrace.analytics.smart_merging import EXPLORATION_LABEL, MICRO_DISTRACTION_LABEL, RECOVERY_GAP_LABEL
from omnitrace.models import ACTIVE_LABEL, IDLE_LABEL
from omnitrace.session.recovery import RECOVERY_TITLE


MASK = "•••"

SENSITIVE_KEYS = frozenset({"title", "note", "query"})
LABEL_KEYS = frozenset({"activity", "label"})
SYSTEM_LABELS = frozenset({
    ACTIVE_LABEL,
    IDLE_LABEL,
    EXPLORATION_LABEL,
    MICRO_DISTRACTION_LABEL,
    RECOVERY_GAP_LABEL,
    RECOVERY_TITLE,
    *INSIGHT_TITLES,
    *(label.value for label in FocusLabel),
})


def mask_label(value: str) -> str:
    """Mask a user-entered activity name; engine labels pass through."""
    return value if value in SYSTEM_LABELS else MASK


def redact(data: Any) -> Any:
    """Return a copy of a JSON-like structure with user text masked."""
    if isinstance(data, list):
        return [redact(item) for item in data]

    if not isinstance(data, dict):
        return data

    result: dict[str, Any] = {}
    for key, value in data.items():
        if key in SENSITIVE_KEYS and isinstance(value, str) and value and value not in SYSTEM_LABELS:
            result[key] = MASK
        elif key == "keywords" and isinstance(value, list):
            result[key] = [MASK for _ in value]
        elif key in LABEL_KEYS and isinstance(value, str) and value not in SYSTEM_LABELS:
            result[key] = MASK
        else:
            result[key] = redact(value)
    return result


__all__ = ["MASK", "mask_label", "redact"]
