"""Session lifecycle, idle detection and startup recovery."""

from .idle import DEFAULT_IDLE_TIMEOUT_MS, IdleDetector, IdleState, on_activity, on_tick
from .recovery import perform_recovery
from .startup import initialize_session
from .tracker import SessionTracker


__all__ = [
    "DEFAULT_IDLE_TIMEOUT_MS",
    "IdleDetector",
    "IdleState",
    "on_activity",
    "on_tick",
    "perform_recovery",
    "initialize_session",
    "SessionTracker",
]
