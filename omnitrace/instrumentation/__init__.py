"""Event logging helpers."""

from .context import InstrumentationContext
from .logger import log_event, make_event_id


__all__ = ["InstrumentationContext", "log_event", "make_event_id"]
