"""OMNITRACE data models.

Defines the event log record and every value derived from it:
    Event → Segment → MergedSegment

Events are immutable once appended. Segments and merged segments are never
stored; they are recomputed from events on demand.

Wire format (export, SQLite context column) uses camelCase keys so exported
files stay compatible across clients.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


SCHEMA_VERSION = "1.0.0"


class EventType(StrEnum):
    """Closed set of event kinds recorded in the log."""

    # User-initiated actions
    NAVIGATION = "navigation"
    BUTTON_CLICK = "button_click"
    MODE_CHANGE = "mode_change"
    MANUAL_EVENT = "manual_event"
    EDIT = "edit"
    SETTINGS_CHANGE = "settings_change"

    # Session/device context
    SESSION_START = "session_start"
    SESSION_END = "session_end"
    FOREGROUND = "foreground"
    BACKGROUND = "background"
    IDLE_START = "idle_start"
    IDLE_END = "idle_end"

    # System events
    RECOVERY = "recovery"
    WIPE = "wipe"


class Category(StrEnum):
    """Activity category, user- or rule-assigned."""

    STUDY = "study"
    WORK = "work"
    DISTRACTION = "distraction"
    REST = "rest"
    UNKNOWN = "unknown"


class Confidence(StrEnum):
    """Provenance tag for events and segments."""

    AUTO = "auto"
    MANUAL = "manual"
    RECOVERED = "recovered"


# Study and work both count as focused time everywhere in analytics
FOCUS_CATEGORIES = frozenset({Category.STUDY, Category.WORK})

# Activity labels produced by the segmentation engine
ACTIVE_LABEL = "Active"
IDLE_LABEL = "Idle"


def _parse_enum(enum_cls: type[StrEnum], value: Any, default: Any = None) -> Any:
    if value is None or isinstance(value, enum_cls):
        return value if value is not None else default
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _parse_keywords(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class EventContext:
    """Free-form auxiliary payload attached to an event.

    Only the well-known keys are lifted into attributes; everything else is
    preserved in ``extra`` so unknown payloads survive a round trip.
    """

    screen: str | None = None
    mode: str | None = None
    state: dict[str, Any] | None = None
    from_screen: str | None = None
    to_screen: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        if self.screen is not None:
            data["screen"] = self.screen
        if self.mode is not None:
            data["mode"] = self.mode
        if self.state is not None:
            data["state"] = self.state
        if self.from_screen is not None:
            data["fromScreen"] = self.from_screen
        if self.to_screen is not None:
            data["toScreen"] = self.to_screen
        return data

    @classmethod
    def from_dict(cls, data: Any) -> EventContext:
        """Non-dict payloads (legacy or hand-edited rows) decode as empty."""
        if not data or not isinstance(data, dict):
            return cls()
        known = {"screen", "mode", "state", "fromScreen", "toScreen"}
        state = data.get("state")
        return cls(
            screen=data.get("screen"),
            mode=data.get("mode"),
            state=state if isinstance(state, dict) else None,
            from_screen=data.get("fromScreen"),
            to_screen=data.get("toScreen"),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass(frozen=True)
class Event:
    """Immutable atomic record of something that happened."""

    id: str
    type: EventType
    timestamp: int  # ms since epoch
    context: EventContext = field(default_factory=EventContext)
    confidence: Confidence = Confidence.AUTO
    duration: int | None = None  # ms, manual events only
    category: Category | None = None
    title: str | None = None
    keywords: tuple[str, ...] | None = None
    note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "timestamp": self.timestamp,
            "context": self.context.to_dict(),
            "confidence": self.confidence.value,
        }
        if self.duration is not None:
            data["duration"] = self.duration
        if self.category is not None:
            data["category"] = self.category.value
        if self.title is not None:
            data["title"] = self.title
        if self.keywords is not None:
            data["keywords"] = list(self.keywords)
        if self.note is not None:
            data["note"] = self.note
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        """Create from dictionary.

        Raises ValueError for an unknown event type. Unknown categories and
        confidences degrade to absent/auto rather than failing, and a bare
        keyword string becomes a one-element tuple.
        """
        event_type = EventType(data["type"])
        keywords = data.get("keywords")
        duration = data.get("duration")
        return cls(
            id=str(data["id"]),
            type=event_type,
            timestamp=int(data["timestamp"]),
            context=EventContext.from_dict(data.get("context")),
            confidence=_parse_enum(Confidence, data.get("confidence"), Confidence.AUTO),
            duration=int(duration) if duration is not None else None,
            category=_parse_enum(Category, data.get("category")),
            title=data.get("title"),
            keywords=_parse_keywords(keywords),
            note=data.get("note"),
        )


@dataclass
class Session:
    """Device-usage lifecycle record."""

    id: str
    start_time: int
    end_time: int | None = None
    recovered: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "startTime": self.start_time}
        if self.end_time is not None:
            data["endTime"] = self.end_time
        if self.recovered is not None:
            data["recovered"] = self.recovered
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        return cls(
            id=data["id"],
            start_time=int(data["startTime"]),
            end_time=data.get("endTime"),
            recovered=data.get("recovered"),
        )


@dataclass(frozen=True)
class Segment:
    """Derived half-open interval [start_time, end_time) with one activity."""

    start_time: int
    end_time: int
    activity: str
    category: Category
    confidence: Confidence
    source_event_ids: list[str] = field(default_factory=list)

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def is_focus(self) -> bool:
        return self.category in FOCUS_CATEGORIES

    def to_dict(self) -> dict[str, Any]:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "activity": self.activity,
            "category": self.category.value,
            "confidence": self.confidence.value,
            "sourceEventIds": list(self.source_event_ids),
        }


@dataclass(frozen=True)
class MergedSegment:
    """One or more adjacent segments grouped under a semantic label."""

    label: str
    start_time: int
    end_time: int
    category: Category
    confidence: Confidence
    source_event_ids: list[str] = field(default_factory=list)
    raw_segment_count: int = 1

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "category": self.category.value,
            "confidence": self.confidence.value,
            "sourceEventIds": list(self.source_event_ids),
            "rawSegmentCount": self.raw_segment_count,
        }


@dataclass(frozen=True)
class KnowledgeEntry:
    """Static help entry used only for lookup."""

    id: str
    title: str
    keywords: tuple[str, ...]
    answer: str


@dataclass
class StorageMetadata:
    schema_version: str = SCHEMA_VERSION
    event_count: int = 0
    last_compaction: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "schemaVersion": self.schema_version,
            "eventCount": self.event_count,
        }
        if self.last_compaction is not None:
            data["lastCompaction"] = self.last_compaction
        return data


__all__ = [
    "SCHEMA_VERSION",
    "EventType",
    "Category",
    "Confidence",
    "FOCUS_CATEGORIES",
    "ACTIVE_LABEL",
    "IDLE_LABEL",
    "EventContext",
    "Event",
    "Session",
    "Segment",
    "MergedSegment",
    "KnowledgeEntry",
    "StorageMetadata",
]
