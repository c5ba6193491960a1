#!/usr/bin/env python3
"""
OMNITRACE Command Line Interface

Main entry point for the `omnitrace` command. Every command prints one JSON
object to stdout:

    {"success": true, "data": ...}
    {"success": false, "error": "..."}

Usage:
    omnitrace log --title "Thesis draft" --category study --duration 45
    omnitrace segments --scope today
    omnitrace merge --mode flow --scope week
    omnitrace score
    omnitrace heatmap --bins 48
    omnitrace reconstruct --start 2026-10-19T09:00 --end 2026-10-19T12:00
    omnitrace search --preset "Long Idle Periods"
    omnitrace ask "Why was I distracted today?" --mode coach
    omnitrace export --format csv --output backup.csv
    omnitrace wipe --yes
    omnitrace --version
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable

from omnitrace import DATA_DIR, PROJECT_ROOT, __version__
from omnitrace.analytics import (
    CognitiveMode,
    compute_category_breakdown,
    compute_focus_score,
    compute_insights,
    compute_metrics,
    compute_titles,
    detect_cognitive_drift,
    generate_daily_summary,
    generate_heatmap,
)
from omnitrace.analytics.smart_merging import merge_segments
from omnitrace.config import OmnitraceConfig, load_config
from omnitrace.engine.queries import find_nearest_event, query_events
from omnitrace.engine.time_engine import derive_segments, get_activity_at
from omnitrace.errors import OmnitraceError
from omnitrace.forensics import reconstruct_timeline
from omnitrace.instrumentation import InstrumentationContext, log_event
from omnitrace.logging_config import setup_logging
from omnitrace.models import Category, Confidence, Event, EventType
from omnitrace.omnibrain import IntelligenceMode, ask
from omnitrace.omnibrain.chat_history import ChatHistory
from omnitrace.omnibrain.context_scope import ContextScope, get_scope_time_range
from omnitrace.omnibrain.instrumentation import log_omnibrain_open
from omnitrace.omnibrain.suggested_questions import SUGGESTED_QUESTIONS
from omnitrace.privacy import (
    export_to_csv,
    export_to_json,
    mask_label,
    redact,
    wipe_all_data,
    wipe_all_data_for_recovery,
)
from omnitrace.privacy.export import default_export_filename, write_export
from omnitrace.search import SearchFilters, search
from omnitrace.search.presets import get_preset, get_search_presets
from omnitrace.session import SessionTracker, initialize_session, perform_recovery
from omnitrace.storage import EventStore, create_store
from omnitrace.timeutil import MINUTE_MS, from_local_datetime, now_ms


logger = logging.getLogger(__name__)

Handler = Callable[[argparse.Namespace, EventStore, OmnitraceConfig, int], Awaitable[Any]]


# =============================================================================
# Argument helpers
# =============================================================================

def parse_time(value: str) -> int:
    """Epoch milliseconds, or an ISO-8601 date/time (naive values are local time)."""
    if value.lstrip("-").isdigit():
        return int(value)
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid time: {value!r} (use epoch ms or ISO-8601)") from None
    return from_local_datetime(dt)


def parse_keywords(value: str) -> tuple[str, ...]:
    return tuple(k.strip() for k in value.split(",") if k.strip())


def _resolve_window(args: argparse.Namespace, now: int) -> tuple[int | None, int | None]:
    start = getattr(args, "start", None)
    end = getattr(args, "end", None)
    if start is not None or end is not None:
        if start is None or end is None:
            raise ValueError("--start and --end must be given together")
        if end < start:
            raise ValueError("--end must not be before --start")
        return start, end
    return get_scope_time_range(getattr(args, "scope", ContextScope.TODAY), now)


async def _load_window(args: argparse.Namespace, store: EventStore, now: int) -> list[Event]:
    start, end = _resolve_window(args, now)
    return await query_events(store, start_time=start, end_time=end)


def _add_window_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--scope",
        choices=[s.value for s in ContextScope],
        default=ContextScope.TODAY.value,
        help="Time window when --start/--end are not given (default: today)",
    )
    parser.add_argument("--start", type=parse_time, help="Window start (epoch ms or ISO-8601)")
    parser.add_argument("--end", type=parse_time, help="Window end (epoch ms or ISO-8601)")


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _is_private(args: argparse.Namespace, config: OmnitraceConfig) -> bool:
    return args.private or config.privacy.private_mode


# =============================================================================
# Event logging
# =============================================================================

async def cmd_log(args, store, config, now):
    """Append one event (a manual entry unless --type says otherwise)."""
    event_type = EventType(args.type)
    at = args.at if args.at is not None else now
    context = InstrumentationContext(screen="cli").snapshot()

    fields: dict[str, Any] = {}
    if event_type == EventType.MANUAL_EVENT:
        fields["confidence"] = Confidence.MANUAL
    if args.title:
        fields["title"] = args.title
    if args.category:
        fields["category"] = Category(args.category)
    if args.duration is not None:
        if args.duration < 0:
            raise ValueError("--duration must not be negative")
        fields["duration"] = int(args.duration * MINUTE_MS)
    if args.keywords:
        fields["keywords"] = args.keywords
    if args.note:
        fields["note"] = args.note

    event = await log_event(store, event_type, context=context, clock=lambda: at, **fields)
    return event.to_dict()


# =============================================================================
# Timeline
# =============================================================================

async def cmd_segments(args, store, config, now):
    events = await _load_window(args, store, now)
    segments = derive_segments(events, now=now)
    return [s.to_dict() for s in segments]


async def cmd_merge(args, store, config, now):
    mode = args.mode or config.timeline.cognitive_mode
    events = await _load_window(args, store, now)
    merged = merge_segments(derive_segments(events, now=now), events, mode)
    return {"mode": mode, "segments": [m.to_dict() for m in merged]}


async def cmd_at(args, store, config, now):
    """What was happening at a point in time, and the closest recorded event."""
    events = await store.read_all_events()
    activity = get_activity_at(args.timestamp, events, now=now)
    nearest = await find_nearest_event(store, args.timestamp)
    return {
        "timestamp": args.timestamp,
        "activity": activity.to_dict() if activity else None,
        "nearestEvent": nearest.to_dict() if nearest else None,
    }


# =============================================================================
# Analytics
# =============================================================================

async def cmd_metrics(args, store, config, now):
    events = await _load_window(args, store, now)
    return compute_metrics(events).to_dict()


async def cmd_breakdown(args, store, config, now):
    events = await _load_window(args, store, now)
    return [b.to_dict() for b in compute_category_breakdown(events, now=now)]


async def cmd_score(args, store, config, now):
    events = await _load_window(args, store, now)
    return compute_focus_score(events, now=now).to_dict()


async def cmd_heatmap(args, store, config, now):
    start, end = _resolve_window(args, now)
    events = await query_events(store, start_time=start, end_time=end)

    if start is None or end is None:
        timestamps = [e.timestamp for e in events]
        start = min(timestamps, default=now)
        end = max(now, start)

    bin_count = args.bins if args.bins is not None else config.heatmap.bin_count
    bins = generate_heatmap(events, start, end, bin_count=bin_count, now=now)
    return {"startTime": start, "endTime": end, "bins": [b.to_dict() for b in bins]}


async def cmd_insights(args, store, config, now):
    events = await _load_window(args, store, now)
    label = mask_label if _is_private(args, config) else None
    return [i.to_dict() for i in compute_insights(events, now=now, label=label)]


async def cmd_drift(args, store, config, now):
    events = await _load_window(args, store, now)
    recommendation = detect_cognitive_drift(events, now=now)
    return recommendation.to_dict() if recommendation else None


async def cmd_summary(args, store, config, now):
    mode = args.mode or config.timeline.cognitive_mode
    events = await _load_window(args, store, now)
    return generate_daily_summary(events, mode, now=now).to_dict()


async def cmd_titles(args, store, config, now):
    mode = args.mode or config.timeline.cognitive_mode
    events = await _load_window(args, store, now)
    return compute_titles(events, mode, now=now).to_dict()


async def cmd_reconstruct(args, store, config, now):
    if args.end < args.start:
        raise ValueError("--end must not be before --start")
    mode = args.mode or config.timeline.cognitive_mode
    result = await reconstruct_timeline(store, args.start, args.end, mode, now=now)
    return result.to_dict()


# =============================================================================
# Search
# =============================================================================

async def cmd_search(args, store, config, now):
    if args.list_presets:
        return [
            {"name": p.name, "description": p.description, "filters": p.filters.to_dict()}
            for p in get_search_presets(now)
        ]

    if args.preset:
        preset = get_preset(args.preset, now)
        if preset is None:
            raise ValueError(f"Unknown preset: {args.preset}")
        filters = preset.filters
    else:
        if (args.start is None) != (args.end is None):
            raise ValueError("--start and --end must be given together")
        filters = SearchFilters(
            keyword=args.keyword,
            category=Category(args.category) if args.category else None,
            confidence=Confidence(args.confidence) if args.confidence else None,
            start_time=args.start,
            end_time=args.end,
            min_duration=int(args.min_duration * MINUTE_MS) if args.min_duration is not None else None,
            max_duration=int(args.max_duration * MINUTE_MS) if args.max_duration is not None else None,
        )

    results = await search(store, filters)
    return {"filters": filters.to_dict(), "count": len(results), "events": [e.to_dict() for e in results]}


# =============================================================================
# OMNIBRAIN
# =============================================================================

def _history_path(config: OmnitraceConfig) -> Path:
    path = Path(config.omnibrain.history_path)
    return path if path.is_absolute() else PROJECT_ROOT / path


async def cmd_ask(args, store, config, now):
    if args.suggestions:
        return {"suggestedQuestions": list(SUGGESTED_QUESTIONS)}

    if not args.query:
        raise ValueError("A question is required (or use --suggestions)")

    scope = args.scope or config.omnibrain.context_scope
    mode = args.mode or config.omnibrain.intelligence_mode
    record = config.omnibrain.record_queries and not args.no_record
    context = InstrumentationContext(screen="cli", mode=mode)

    history = None
    if args.history:
        history = ChatHistory(_history_path(config))
        history.load()

    if record:
        await log_omnibrain_open(store, context, clock=lambda: now)
    context.set_screen("omnibrain")

    response = await ask(
        store,
        " ".join(args.query),
        scope=scope,
        mode=mode,
        now=now,
        context=context,
        record_query=record,
        history=history,
    )
    return {"scope": scope, "mode": mode, **response.to_dict()}


# =============================================================================
# Sessions
# =============================================================================

async def cmd_session(args, store, config, now):
    tracker = SessionTracker(store, clock=lambda: now)

    if args.session_command == "start":
        session = await initialize_session(
            store, tracker, now=now, recover=config.session.recover_unclosed_sessions
        )
        return session.to_dict()

    if args.session_command == "end":
        last = await store.get_last_session()
        if last is None or last.end_time is not None:
            raise ValueError("No open session to end")
        tracker.current_session = last
        session = await tracker.end_session()
        return session.to_dict() if session else None

    sessions = await store.get_all_sessions()
    return [s.to_dict() for s in sessions]


async def cmd_recover(args, store, config, now):
    session = await perform_recovery(store, now)
    return {"recovered": session is not None, "session": session.to_dict() if session else None}


# =============================================================================
# Privacy
# =============================================================================

async def cmd_export(args, store, config, now):
    if args.format == "csv":
        content = await export_to_csv(store)
    else:
        content = await export_to_json(store, now=now)

    output = Path(args.output) if args.output else DATA_DIR / default_export_filename(args.format, now)
    path = write_export(content, output)
    logger.info(f"Exported {args.format} to {path}")
    return {"format": args.format, "path": str(path), "bytes": len(content.encode("utf-8"))}


async def cmd_wipe(args, store, config, now):
    if not args.yes:
        raise ValueError("Refusing to wipe without --yes (this cannot be undone)")
    if args.force:
        await wipe_all_data_for_recovery(store)
    else:
        await wipe_all_data(store, now=now)
    return {"wiped": True}


# =============================================================================
# Runner
# =============================================================================

def run_command(args: argparse.Namespace, handler: Handler) -> int:
    """Load config, open the store, run one handler and print the result."""
    config = load_config(Path(args.config_dir) if args.config_dir else None)
    storage = config.storage
    if args.db:
        storage = storage.model_copy(update={"backend": "sqlite", "database_path": args.db})
    elif args.memory:
        storage = storage.model_copy(update={"backend": "memory"})

    private = _is_private(args, config)

    async def runner():
        force_wipe = args.command == "wipe" and args.force
        store = await create_store(storage, initialize=not force_wipe)
        try:
            return await handler(args, store, config, now_ms())
        finally:
            await store.close()

    try:
        data = asyncio.run(runner())
    except (OmnitraceError, ValueError) as e:
        logger.error(f"Command {args.command} failed: {e}")
        _emit({"success": False, "error": str(e)})
        return 1

    _emit({"success": True, "data": redact(data) if private else data})
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="omnitrace",
        description="OMNITRACE - local activity timeline and focus analytics",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version and exit"
    )
    parser.add_argument(
        "--config-dir", default=None, help="Directory containing omnitrace.yaml (default: args/)"
    )
    parser.add_argument(
        "--db", default=None, help="SQLite database path (overrides configuration)"
    )
    parser.add_argument(
        "--memory", action="store_true", help="Use a throwaway in-memory store"
    )
    parser.add_argument(
        "--private", action="store_true", help="Mask titles, notes and keywords in output"
    )
    parser.add_argument(
        "--log-level", default=None, help="Log level (default: OMNITRACE_LOG_LEVEL or WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # log
    log_parser = subparsers.add_parser("log", help="Record an event (manual entry by default)")
    log_parser.add_argument(
        "--type",
        choices=[t.value for t in EventType],
        default=EventType.MANUAL_EVENT.value,
        help="Event type (default: manual_event)",
    )
    log_parser.add_argument("--title", help="Event title")
    log_parser.add_argument("--category", choices=[c.value for c in Category], help="Activity category")
    log_parser.add_argument("--duration", type=float, help="Duration in minutes")
    log_parser.add_argument("--keywords", type=parse_keywords, help="Comma-separated keywords")
    log_parser.add_argument("--note", help="Free-text note")
    log_parser.add_argument("--at", type=parse_time, help="Event time (default: now)")
    log_parser.set_defaults(func=cmd_log)

    # segments / merge / at
    segments_parser = subparsers.add_parser("segments", help="Derive activity segments")
    _add_window_arguments(segments_parser)
    segments_parser.set_defaults(func=cmd_segments)

    merge_parser = subparsers.add_parser("merge", help="Smart-merge segments for a cognitive mode")
    _add_window_arguments(merge_parser)
    merge_parser.add_argument("--mode", choices=[m.value for m in CognitiveMode], help="Cognitive mode")
    merge_parser.set_defaults(func=cmd_merge)

    at_parser = subparsers.add_parser("at", help="Activity at a point in time")
    at_parser.add_argument("timestamp", type=parse_time, help="Epoch ms or ISO-8601")
    at_parser.set_defaults(func=cmd_at)

    # analytics
    for name, func, help_text in (
        ("metrics", cmd_metrics, "Active/background/idle time and context switches"),
        ("breakdown", cmd_breakdown, "Time per category"),
        ("score", cmd_score, "Focus score (0-100) with reasons"),
        ("insights", cmd_insights, "Pattern insights"),
        ("drift", cmd_drift, "Cognitive drift recommendation"),
    ):
        analytics_parser = subparsers.add_parser(name, help=help_text)
        _add_window_arguments(analytics_parser)
        analytics_parser.set_defaults(func=func)

    heatmap_parser = subparsers.add_parser("heatmap", help="Focus-intensity heatmap bins")
    _add_window_arguments(heatmap_parser)
    heatmap_parser.add_argument("--bins", type=int, help="Number of bins (default: from config)")
    heatmap_parser.set_defaults(func=cmd_heatmap)

    for name, func, help_text in (
        ("summary", cmd_summary, "Daily summary insights"),
        ("titles", cmd_titles, "Earned behavioural titles"),
    ):
        mode_parser = subparsers.add_parser(name, help=help_text)
        _add_window_arguments(mode_parser)
        mode_parser.add_argument("--mode", choices=[m.value for m in CognitiveMode], help="Cognitive mode")
        mode_parser.set_defaults(func=func)

    # reconstruct
    reconstruct_parser = subparsers.add_parser("reconstruct", help="Forensic reconstruction of a window")
    reconstruct_parser.add_argument("--start", type=parse_time, required=True, help="Window start")
    reconstruct_parser.add_argument("--end", type=parse_time, required=True, help="Window end")
    reconstruct_parser.add_argument("--mode", choices=[m.value for m in CognitiveMode], help="Cognitive mode")
    reconstruct_parser.set_defaults(func=cmd_reconstruct)

    # search
    search_parser = subparsers.add_parser("search", help="Search events")
    search_parser.add_argument("--keyword", help="Match title, keywords or note")
    search_parser.add_argument("--category", choices=[c.value for c in Category])
    search_parser.add_argument("--confidence", choices=[c.value for c in Confidence])
    search_parser.add_argument("--start", type=parse_time, help="Range start")
    search_parser.add_argument("--end", type=parse_time, help="Range end")
    search_parser.add_argument("--min-duration", type=float, help="Minimum duration in minutes")
    search_parser.add_argument("--max-duration", type=float, help="Maximum duration in minutes")
    search_parser.add_argument("--preset", help="Run a named preset instead of filters")
    search_parser.add_argument("--list-presets", action="store_true", help="List available presets")
    search_parser.set_defaults(func=cmd_search)

    # ask
    ask_parser = subparsers.add_parser("ask", help="Ask OMNIBRAIN about your activity")
    ask_parser.add_argument("query", nargs="*", help="Question")
    ask_parser.add_argument("--scope", choices=[s.value for s in ContextScope], help="Context window")
    ask_parser.add_argument("--mode", choices=[m.value for m in IntelligenceMode], help="Answer style")
    ask_parser.add_argument("--no-record", action="store_true", help="Do not log the question as an event")
    ask_parser.add_argument("--history", action="store_true", help="Append the exchange to the chat history")
    ask_parser.add_argument("--suggestions", action="store_true", help="List suggested questions")
    ask_parser.set_defaults(func=cmd_ask)

    # session
    session_parser = subparsers.add_parser("session", help="Session lifecycle")
    session_subparsers = session_parser.add_subparsers(dest="session_command", help="Session commands")
    session_subparsers.add_parser("start", help="Recover the previous session and start a new one")
    session_subparsers.add_parser("end", help="End the open session")
    session_subparsers.add_parser("list", help="List all sessions")
    session_parser.set_defaults(func=cmd_session, session_command="list")

    recover_parser = subparsers.add_parser("recover", help="Close a session left open by a crash")
    recover_parser.set_defaults(func=cmd_recover)

    # privacy
    export_parser = subparsers.add_parser("export", help="Export all local data")
    export_parser.add_argument("--format", choices=["json", "csv"], default="json")
    export_parser.add_argument("--output", help="Output file (default: data/omnitrace-export-<ms>.<format>)")
    export_parser.set_defaults(func=cmd_export)

    wipe_parser = subparsers.add_parser("wipe", help="Permanently delete all local data")
    wipe_parser.add_argument("--yes", action="store_true", help="Confirm the wipe")
    wipe_parser.add_argument("--force", action="store_true", help="Delete the database file if it is unreadable")
    wipe_parser.set_defaults(func=cmd_wipe)

    args = parser.parse_args()

    # Handle --version at top level
    if args.version:
        print(f"omnitrace {__version__}")
        return

    # If no command given, show help
    if not args.command:
        parser.print_help()
        return

    setup_logging(args.log_level)

    result = run_command(args, args.func)

    # Commands may return an exit code
    if isinstance(result, int) and result != 0:
        sys.exit(result)


if __name__ == "__main__":
    main()
