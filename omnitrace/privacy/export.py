"""
Complete local export of the event log.

    JSON: {schemaVersion, exportTime, events, sessions, metadata}, indent 2
    CSV:  one row per event, every cell double-quoted, timestamps as
          ISO-8601 UTC with milliseconds and a trailing Z
"""

from __future__ import annotations

import csv
import io
import json
from datetime import UTC, datetime
from pathlib import Path

from omnitrace.models import SCHEMA_VERSION, Event
from omnitrace.storage.base import EventStore
from omnitrace.timeutil import now_ms


CSV_HEADERS = ["ID", "Type", "Timestamp", "Title", "Category", "Confidence", "Duration", "Note"]


def to_iso_utc(ms: int) -> str:
    """1700000000123 → '2023-11-14T22:13:20.123Z'"""
    dt = datetime.fromtimestamp(ms / 1000, tz=UTC)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _csv_row(event: Event) -> list[str]:
    return [
        event.id,
        event.type.value,
        to_iso_utc(event.timestamp),
        event.title or "",
        event.category.value if event.category else "",
        event.confidence.value,
        str(event.duration) if event.duration is not None else "",
        event.note or "",
    ]


async def export_to_json(store: EventStore, now: int | None = None) -> str:
    events = await store.read_all_events()
    sessions = await store.get_all_sessions()
    metadata = await store.get_metadata()

    data = {
        "schemaVersion": SCHEMA_VERSION,
        "exportTime": now if now is not None else now_ms(),
        "events": [e.to_dict() for e in events],
        "sessions": [s.to_dict() for s in sessions],
        "metadata": metadata.to_dict(),
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


async def export_to_csv(store: EventStore) -> str:
    """Embedded double quotes are escaped by doubling them."""
    events = await store.read_all_events()

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(_csv_row(e) for e in events)
    return buffer.getvalue().rstrip("\n")


def default_export_filename(fmt: str, now: int | None = None) -> str:
    return f"omnitrace-export-{now if now is not None else now_ms()}.{fmt}"


def write_export(content: str, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


__all__ = [
    "CSV_HEADERS",
    "to_iso_utc",
    "export_to_json",
    "export_to_csv",
    "default_export_filename",
    "write_export",
]
