"""
Tool: OMNIBRAIN Intelligence Modes
Purpose: Render the same facts in four presentation styles

Modes never change which facts are computed, only how many are shown and
how they are laid out:
    explain  first three facts as one paragraph
    analyze  every fact as a numbered list
    coach    every fact with a 💡 marker, blank line between
    silent   only the first fact as a bullet

Examples:
    render_with_mode(["A.", "B."], "analyze")  →  "1. A.\n2. B."
    render_with_mode(["A.", "B."], "silent")   →  "• A."
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class IntelligenceMode(StrEnum):
    EXPLAIN = "explain"
    ANALYZE = "analyze"
    COACH = "coach"
    SILENT = "silent"


@dataclass(frozen=True)
class ModeConfig:
    label: str
    description: str


MODE_CONFIGS: dict[IntelligenceMode, ModeConfig] = {
    IntelligenceMode.EXPLAIN: ModeConfig("Explain", "Clear, detailed explanations with context"),
    IntelligenceMode.ANALYZE: ModeConfig("Analyze", "Data-driven insights with patterns"),
    IntelligenceMode.COACH: ModeConfig("Coach", "Supportive guidance and recommendations"),
    IntelligenceMode.SILENT: ModeConfig("Silent", "Brief, minimal output"),
}

EXPLAIN_FACT_LIMIT = 3


def render_with_mode(facts: list[str], mode: str) -> str:
    """
    Lay out facts for the given mode. Empty facts render as "".

    Raises:
        ValueError: If mode is not one of the four intelligence modes
    """
    if not facts:
        return ""

    mode = IntelligenceMode(mode)

    if mode == IntelligenceMode.EXPLAIN:
        return " ".join(facts[:EXPLAIN_FACT_LIMIT])

    if mode == IntelligenceMode.ANALYZE:
        return "\n".join(f"{i}. {fact}" for i, fact in enumerate(facts, start=1))

    if mode == IntelligenceMode.COACH:
        return "\n\n".join(f"💡 {fact}" for fact in facts)

    return f"• {facts[0]}"


__all__ = ["IntelligenceMode", "ModeConfig", "MODE_CONFIGS", "render_with_mode"]
