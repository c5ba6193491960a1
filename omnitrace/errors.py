"""
Exception hierarchy for OMNITRACE.

Only the storage collaborator raises these. Insufficient data is never an
error: analytics return gated results (has_enough_data=False, None, empty
lists) instead. Assistant failures are converted into the fallback response
at the generate_response boundary and never reach callers.
"""


class OmnitraceError(Exception):
    """Base class for all OMNITRACE errors."""


class StorageError(OmnitraceError):
    """Event store read/write failure. Propagated unmodified by the core."""


class StoreNotInitializedError(StorageError):
    """Raised when a store is used before initialize() completed."""

    def __init__(self, message: str = "Event store not initialized"):
        super().__init__(message)


class DuplicateEventError(StorageError):
    """Raised when appending an event whose id already exists in the log."""

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Event already exists: {event_id}")


__all__ = [
    "OmnitraceError",
    "StorageError",
    "StoreNotInitializedError",
    "DuplicateEventError",
]
