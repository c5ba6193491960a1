"""
Tool: OMNIBRAIN Assistant Engine
Purpose: Answer questions from local activity data and static app help only

Pipeline:
    query → detect_intent() → fact generator or knowledge-base search
          → render_with_mode() → banner-labelled AssistantResponse

No answer is ever invented: unsupported questions get a fixed fallback with
a clarifying question and suggestions, and external-AI questions get a
fixed explanation. Any error while building a response is logged and turned
into the fallback, so generate_response() never raises.

Usage:
    from omnitrace.omnibrain.engine import ask
    response = await ask(store, "Why was I distracted today?", scope="today", mode="explain")
    print(response.text)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Literal

from omnitrace.instrumentation.context import InstrumentationContext
from omnitrace.models import Event
from omnitrace.omnibrain import templates
from omnitrace.omnibrain.chat_history import ChatHistory, new_message
from omnitrace.omnibrain.context_scope import ContextScope, load_events_for_scope, start_of_day
from omnitrace.omnibrain.help_search import search_knowledge_base
from omnitrace.omnibrain.instrumentation import log_omnibrain_submit
from omnitrace.omnibrain.intents import Intent, IntentType, detect_intent
from omnitrace.omnibrain.modes import IntelligenceMode, render_with_mode
from omnitrace.omnibrain.suggested_questions import SUGGESTED_QUESTIONS
from omnitrace.storage.base import EventStore
from omnitrace.timeutil import from_local_datetime, now_ms


logger = logging.getLogger(__name__)


DATA_BANNER = "📊 Your data (computed):\n\n"
HELP_BANNER = "📚 App help (static):\n\n"

HELP_RESULT_LIMIT = 2

LIMITATION_TEXT = (
    "I can only answer questions using your local activity data and app help information. "
    "I don't guess or make up answers."
)

CLARIFYING_QUESTIONS = [
    "Could you ask about a specific time period (today, this week)?",
    "Are you asking about your focus patterns, distractions, or how OMNITRACE works?",
    "Would you like to know about a specific activity or time of day?",
]

EXTERNAL_AI_TEXT = (
    "External AI services (OpenAI, Anthropic, etc.) are not supported in this build. "
    "OMNIBRAIN runs fully offline using only your local OMNITRACE data and a static knowledge base. "
    "No API keys are accepted, and no network calls are made."
)

OFFLINE_SUGGESTIONS = [
    "What happened today?",
    "Why was I distracted today?",
    "When do I focus best?",
]


@dataclass(frozen=True)
class AssistantResponse:
    text: str
    confidence: Literal["high", "medium", "low"]
    suggested_follow_ups: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"text": self.text, "confidence": self.confidence}
        if self.suggested_follow_ups is not None:
            data["suggestedFollowUps"] = list(self.suggested_follow_ups)
        return data


def _bullets(items: Sequence[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


def build_fallback_response(query: str) -> AssistantResponse:
    """Fixed limitation, one clarifying question picked by query length, three suggestions."""
    clarify = CLARIFYING_QUESTIONS[len(query) % len(CLARIFYING_QUESTIONS)]
    suggestions = SUGGESTED_QUESTIONS[:3]
    text = f"{LIMITATION_TEXT}\n\n{clarify}\n\nTry asking:\n{_bullets(suggestions)}"
    return AssistantResponse(text=text, confidence="low", suggested_follow_ups=list(suggestions))


def build_external_ai_unavailable_response() -> AssistantResponse:
    text = f"{EXTERNAL_AI_TEXT}\n\nYou can ask me about:\n{_bullets(OFFLINE_SUGGESTIONS)}"
    return AssistantResponse(text=text, confidence="high", suggested_follow_ups=list(OFFLINE_SUGGESTIONS))


def focus_drop_time(after_hour: int, now: int) -> int:
    """Timestamp of after_hour:00 on the local day containing now. Hours past 23 roll into the next day."""
    return from_local_datetime(start_of_day(now) + timedelta(hours=after_hour))


def _compute_facts(intent: Intent, events: Sequence[Event], now: int) -> templates.FactPayload:
    if intent.type == IntentType.LONGEST_FOCUS:
        return templates.generate_longest_focus_facts(events, now=now)
    if intent.type == IntentType.MAIN_DISTRACTIONS:
        return templates.generate_main_distractions_facts(events, now=now)
    if intent.type == IntentType.MOST_PRODUCTIVE:
        return templates.generate_most_productive_facts(events, now=now)
    if intent.type == IntentType.DISTRACTION_TODAY:
        return templates.generate_distraction_facts(events, now=now)
    if intent.type == IntentType.FOCUS_DROP:
        after_time = focus_drop_time(intent.after_hour or 0, now)
        return templates.generate_focus_drop_facts(events, after_time, now=now)
    if intent.type == IntentType.BEST_FOCUS_TIME:
        return templates.generate_best_focus_time_facts(events, now=now)
    if intent.type == IntentType.IMPROVEMENT_WEEK:
        return templates.generate_improvement_facts(events, now=now)
    if intent.type == IntentType.DAILY_SUMMARY:
        return templates.generate_daily_summary_facts(events, now=now)
    raise ValueError(f"No fact generator for intent: {intent.type}")


def generate_response(
    intent: Intent,
    events: Sequence[Event],
    mode: str = IntelligenceMode.EXPLAIN,
    now: int | None = None,
) -> AssistantResponse:
    """Build the answer for a classified question. Never raises."""
    now = now if now is not None else now_ms()

    try:
        if intent.type == IntentType.EXTERNAL_AI_UNAVAILABLE:
            return build_external_ai_unavailable_response()

        if intent.type == IntentType.UNSUPPORTED:
            return build_fallback_response(intent.query)

        if intent.type == IntentType.HELP:
            results = search_knowledge_base(intent.query, HELP_RESULT_LIMIT)
            if not results:
                return build_fallback_response(intent.query)
            facts = [f"{entry.title}: {entry.answer}" for entry in results]
            return AssistantResponse(text=HELP_BANNER + render_with_mode(facts, mode), confidence="high")

        payload = _compute_facts(intent, events, now)
        return AssistantResponse(
            text=DATA_BANNER + render_with_mode(payload.facts, mode),
            confidence=payload.confidence,
        )
    except Exception as e:
        logger.error(f"Error generating response for {intent.type}: {e}", exc_info=True)
        return build_fallback_response("")


async def ask(
    store: EventStore,
    query: str,
    scope: str = ContextScope.TODAY,
    mode: str = IntelligenceMode.EXPLAIN,
    now: int | None = None,
    context: InstrumentationContext | None = None,
    record_query: bool = True,
    history: ChatHistory | None = None,
) -> AssistantResponse:
    """
    Answer a question end to end.

    Records the submit event (when record_query is set), loads events for the
    scope, classifies the query and builds the response. When a history is
    given, both the question and the answer are appended to it. Storage
    errors propagate.
    """
    now = now if now is not None else now_ms()
    query = query.strip()

    if history is not None:
        history.append(new_message("user", query, timestamp=now))

    if record_query:
        await log_omnibrain_submit(
            store, context or InstrumentationContext(), query, scope, mode, clock=lambda: now
        )

    events = await load_events_for_scope(store, scope, now)
    intent = detect_intent(query)
    logger.info(f"OMNIBRAIN intent={intent.type} scope={scope} mode={mode} events={len(events)}")

    response = generate_response(intent, events, mode, now=now)

    if history is not None:
        history.append(new_message(
            "assistant",
            response.text,
            timestamp=now,
            confidence=response.confidence,
            suggested_follow_ups=response.suggested_follow_ups,
        ))

    return response


__all__ = [
    "DATA_BANNER",
    "HELP_BANNER",
    "CLARIFYING_QUESTIONS",
    "AssistantResponse",
    "build_fallback_response",
    "build_external_ai_unavailable_response",
    "focus_drop_time",
    "generate_response",
    "ask",
]
