"""Static app-help entries searched by OMNIBRAIN help questions."""

from __future__ import annotations

from omnitrace.models import KnowledgeEntry


KNOWLEDGE_BASE: list[KnowledgeEntry] = [
    KnowledgeEntry(
        id="private-mode",
        title="Private Mode",
        keywords=("private", "mode", "blur", "privacy", "hide", "screen", "sensitive"),
        answer=(
            "Private Mode masks activity titles, notes and keywords in everything OMNITRACE displays. "
            "Turn it on for one command with omnitrace --private, or permanently with privacy.private_mode "
            "in args/omnitrace.yaml. It only changes what is shown; recorded events are untouched and stay on this device."
        ),
    ),
    KnowledgeEntry(
        id="export-data",
        title="Export Data",
        keywords=("export", "download", "save", "backup", "data", "json", "csv"),
        answer=(
            "Run `omnitrace export --format json` for a complete backup of events, sessions and "
            "metadata, or `--format csv` for a spreadsheet-friendly event table. Exports are written "
            "locally and never uploaded."
        ),
    ),
    KnowledgeEntry(
        id="wipe-data",
        title="Wipe Data",
        keywords=("wipe", "delete", "clear", "remove", "reset", "erase", "data"),
        answer=(
            "Run `omnitrace wipe --yes` to permanently delete every recorded event, session and "
            "metadata record from the local database. This cannot be undone, so export first if "
            "you want a copy."
        ),
    ),
    KnowledgeEntry(
        id="context-memory",
        title="Context Memory",
        keywords=("context", "memory", "scope", "today", "week", "all time", "time range"),
        answer=(
            "Context Memory is the time range OMNIBRAIN reads before answering. \"today\" covers the "
            "current calendar day, \"week\" the last seven days, and \"all\" your full history. "
            "Pass --scope to `omnitrace ask` or set omnibrain.context_scope in args/omnitrace.yaml."
        ),
    ),
    KnowledgeEntry(
        id="intelligence-modes",
        title="Intelligence Modes",
        keywords=("intelligence", "mode", "explain", "analyze", "coach", "silent", "style"),
        answer=(
            "Intelligence Modes change how answers are laid out. Explain gives a short paragraph, "
            "Analyze lists every computed fact, Coach adds gentle markers, and Silent returns a "
            "single line. The facts behind each answer are identical in every mode."
        ),
    ),
    KnowledgeEntry(
        id="smart-merging",
        title="Smart Merging",
        keywords=("smart", "merge", "merging", "segments", "combine", "timeline"),
        answer=(
            "Smart Merging groups neighbouring timeline segments into Exploration Sessions, "
            "Micro-Distractions and Recovery Gaps. Its thresholds follow the Cognitive Mode: Focus "
            "merges distractions aggressively, Flow needs more evidence, Recovery is more sensitive "
            "to rest, and Analysis leaves raw segments unmerged."
        ),
    ),
    KnowledgeEntry(
        id="cognitive-mode",
        title="Cognitive Mode",
        keywords=("cognitive", "mode", "focus", "flow", "recovery", "analysis"),
        answer=(
            "Cognitive Mode is the lens applied to your timeline: focus, flow, recovery or analysis. "
            "It tunes merging thresholds without altering the recorded events. Set it with --mode on "
            "the timeline commands or timeline.cognitive_mode in args/omnitrace.yaml."
        ),
    ),
    KnowledgeEntry(
        id="focus-score",
        title="Focus Score",
        keywords=("focus", "score", "ring", "rating", "performance"),
        answer=(
            "Focus Score (0-100) starts at 50 and is adjusted for focus session length, navigation "
            "rate, rest balance and rapid switching. Labels: Deep Focus (80+), Flow (60-79), "
            "Unstable (40-59), Distracted (below 40). It needs at least 5 events and 5 minutes of activity."
        ),
    ),
    KnowledgeEntry(
        id="manual-events",
        title="Manual Events",
        keywords=("manual", "event", "add", "create", "log", "record"),
        answer=(
            "Log activity that was not captured automatically with `omnitrace log --title ... "
            "--category work --duration 30`. Manual events carry their own title, category, "
            "duration and note, and always form their own timeline segment."
        ),
    ),
    KnowledgeEntry(
        id="how-it-works",
        title="How OMNITRACE Works",
        keywords=("how", "works", "track", "tracking", "record", "capture", "detect"),
        answer=(
            "OMNITRACE appends every interaction, idle period and session boundary to a local "
            "append-only event log in SQLite. Segments, scores, heatmaps and answers are recomputed "
            "from that log with deterministic rules, so the same events always give the same results."
        ),
    ),
    KnowledgeEntry(
        id="offline",
        title="Offline Operation",
        keywords=("offline", "internet", "connection", "local", "network"),
        answer=(
            "OMNITRACE works entirely offline. Tracking, analytics and OMNIBRAIN answers are all "
            "computed on this machine, no network connection is ever opened, and your data never "
            "leaves the device."
        ),
    ),
    KnowledgeEntry(
        id="no-external-ai",
        title="No External AI Integration",
        keywords=(
            "api key", "api-key", "apikey", "openai", "chatgpt", "gpt", "anthropic", "claude",
            "llm", "ai key", "external ai", "chatbot", "integration", "connect",
        ),
        answer=(
            "OMNIBRAIN does not use external AI services and accepts no API keys. Every answer is "
            "produced from your local event log and this static help text, with no network calls."
        ),
    ),
]


def get_entry(entry_id: str) -> KnowledgeEntry | None:
    return next((e for e in KNOWLEDGE_BASE if e.id == entry_id), None)


__all__ = ["KNOWLEDGE_BASE", "get_entry"]
