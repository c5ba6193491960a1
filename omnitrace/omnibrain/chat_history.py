"""
OMNIBRAIN chat history persisted as a local JSON file.

Read and write failures are logged and never raised: a corrupt or missing
file loads as an empty history, and a failed save leaves the previous file
in place.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from omnitrace.timeutil import now_ms


logger = logging.getLogger(__name__)


@dataclass
class ChatMessage:
    id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: int
    confidence: Literal["high", "medium", "low"] | None = None
    suggested_follow_ups: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
        }
        if self.confidence is not None:
            data["confidence"] = self.confidence
        if self.suggested_follow_ups is not None:
            data["suggestedFollowUps"] = list(self.suggested_follow_ups)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatMessage:
        return cls(
            id=str(data["id"]),
            role=data["role"],
            content=data["content"],
            timestamp=int(data["timestamp"]),
            confidence=data.get("confidence"),
            suggested_follow_ups=data.get("suggestedFollowUps"),
        )


@dataclass
class ChatHistory:
    path: Path
    messages: list[ChatMessage] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    def load(self) -> list[ChatMessage]:
        if not self.path.exists():
            self.messages = []
            return self.messages

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
            self.messages = [ChatMessage.from_dict(m) for m in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to load chat history from {self.path}: {e}")
            self.messages = []
        return self.messages

    def save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump([m.to_dict() for m in self.messages], f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to save chat history to {self.path}: {e}")

    def append(self, message: ChatMessage) -> None:
        self.messages.append(message)
        self.save()

    def clear(self) -> None:
        self.messages = []
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to clear chat history at {self.path}: {e}")


def new_message(
    role: Literal["user", "assistant"],
    content: str,
    timestamp: int | None = None,
    **extra: Any,
) -> ChatMessage:
    timestamp = timestamp if timestamp is not None else now_ms()
    return ChatMessage(id=f"{role}-{timestamp}", role=role, content=content, timestamp=timestamp, **extra)


__all__ = ["ChatMessage", "ChatHistory", "new_message"]
