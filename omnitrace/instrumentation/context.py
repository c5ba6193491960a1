"""Screen/mode snapshot attached to every logged event."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from omnitrace.models import EventContext


@dataclass
class InstrumentationContext:
    """Current screen and mode, held by whoever drives the UI or CLI."""

    screen: str = "timeline"
    mode: str = "default"

    def set_screen(self, screen: str) -> None:
        self.screen = screen

    def set_mode(self, mode: str) -> None:
        self.mode = mode

    def snapshot(self, **overrides: Any) -> EventContext:
        """EventContext for the current screen and mode, with optional overrides."""
        return replace(EventContext(screen=self.screen, mode=self.mode), **overrides)


__all__ = ["InstrumentationContext"]
