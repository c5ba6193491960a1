"""Intent detection for OMNIBRAIN questions.

Ordered keyword rules over the lower-cased query; the first rule that matches
wins. External-AI vocabulary and app-help vocabulary are checked before any
data question so "how does the focus score work" is answered from the help
knowledge base rather than computed.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum


class IntentType(StrEnum):
    DISTRACTION_TODAY = "distraction_today"
    FOCUS_DROP = "focus_drop"
    BEST_FOCUS_TIME = "best_focus_time"
    IMPROVEMENT_WEEK = "improvement_week"
    DAILY_SUMMARY = "daily_summary"
    LONGEST_FOCUS = "longest_focus"
    MAIN_DISTRACTIONS = "main_distractions"
    MOST_PRODUCTIVE = "most_productive"
    HELP = "help"
    EXTERNAL_AI_UNAVAILABLE = "external_ai_unavailable"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Intent:
    type: IntentType
    query: str = ""
    after_hour: int | None = None  # focus_drop only, 0-23 (or beyond for "after 13pm")


EXTERNAL_AI_TERMS = (
    "api key", "api-key", "apikey", "openai", "chatgpt", "gpt", "anthropic",
    "claude", "llm", "ai key", "external ai",
)

HELP_TERMS = (
    "wipe", "delete", "clear", "private mode", "blur", "context memory", "scope",
    "intelligence mode", "explain", "analyze", "smart merg", "cognitive mode",
    "focus score",
)

FOCUS_DROP_TIME = re.compile(r"after\s+(\d{1,2})(:\d{2})?\s*(am|pm)?", re.IGNORECASE)


def _has(text: str, *terms: str) -> bool:
    return any(t in text for t in terms)


def _is_external_ai(q: str) -> bool:
    return (
        _has(q, *EXTERNAL_AI_TERMS)
        or ("chatbot" in q and "integrat" in q)
        or ("connect" in q and _has(q, "ai", "api"))
    )


def _is_help(q: str) -> bool:
    return (
        ("how" in q and _has(q, "export", "download", "save"))
        or _has(q, *HELP_TERMS)
        or ("how" in q and "work" in q)
    )


# Data intents checked after help, in order. focus_drop sits between
# distraction_today and best_focus_time and is handled separately because it
# also extracts a time.
_LEADING_RULES: list[tuple[IntentType, Callable[[str], bool]]] = [
    (IntentType.LONGEST_FOCUS, lambda q: "longest" in q and "focus" in q),
    (IntentType.MAIN_DISTRACTIONS, lambda q: _has(q, "main", "top", "biggest") and "distract" in q),
    (IntentType.MOST_PRODUCTIVE, lambda q: _has(q, "most", "when") and "productive" in q),
    (IntentType.DISTRACTION_TODAY, lambda q: "distract" in q and _has(q, "today", "why")),
]

_TRAILING_RULES: list[tuple[IntentType, Callable[[str], bool]]] = [
    (IntentType.BEST_FOCUS_TIME, lambda q: _has(q, "when", "what time") and "focus" in q and "best" in q),
    (IntentType.IMPROVEMENT_WEEK, lambda q: "improv" in q and "week" in q),
    (IntentType.DAILY_SUMMARY, lambda q: "what" in q and "happen" in q and "today" in q),
]


def parse_after_hour(text: str) -> int | None:
    """Hour named by 'after H[:MM][am|pm]', or None. Minutes are ignored."""
    match = FOCUS_DROP_TIME.search(text)
    if not match:
        return None

    hour = int(match.group(1))
    meridiem = (match.group(3) or "").lower()
    if meridiem == "pm" and hour < 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    return hour


def detect_intent(query: str) -> Intent:
    """Classify a free-text question. Never raises."""
    q = query.lower()

    if _is_external_ai(q):
        return Intent(IntentType.EXTERNAL_AI_UNAVAILABLE, query=query)

    if _is_help(q):
        return Intent(IntentType.HELP, query=query)

    for intent_type, matches in _LEADING_RULES:
        if matches(q):
            return Intent(intent_type, query=query)

    if "focus" in q and "drop" in q and "after" in q:
        hour = parse_after_hour(q)
        if hour is not None:
            return Intent(IntentType.FOCUS_DROP, query=query, after_hour=hour)

    for intent_type, matches in _TRAILING_RULES:
        if matches(q):
            return Intent(intent_type, query=query)

    return Intent(IntentType.UNSUPPORTED, query=query)


__all__ = ["IntentType", "Intent", "parse_after_hour", "detect_intent"]
