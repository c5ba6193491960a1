"""
OMNIBRAIN - offline, rule-based activity assistant

Answers come only from the local event log (computed facts) or from a
static knowledge base (app help). No external services are contacted.

Components:
    intents.py: Ordered keyword intent detection
    templates.py: Fact generators per data intent
    modes.py: Explain / Analyze / Coach / Silent rendering
    help_search.py: Knowledge-base keyword search
    knowledge_base.py: Static help entries
    context_scope.py: Today / week / all time windows
    chat_history.py: JSON-file chat log
    engine.py: Response assembly and the ask() entry point
"""

from .engine import AssistantResponse, ask, generate_response
from .intents import Intent, IntentType, detect_intent
from .modes import IntelligenceMode, render_with_mode


__all__ = [
    "AssistantResponse",
    "ask",
    "generate_response",
    "Intent",
    "IntentType",
    "detect_intent",
    "IntelligenceMode",
    "render_with_mode",
]
