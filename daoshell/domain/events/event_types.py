"""Event types for the presentation-facing event bus."""

from __future__ import annotations
from enum import Enum


class EventType(Enum):
    """Events fanned out to presentation consumers."""
    # Control
    SHUTDOWN = "shutdown"

    # Session
    SESSION_UPDATED = "session_updated"
    FATAL_ERROR = "fatal_error"

    # Lifecycle
    DAO_LOADING = "dao_loading"
    DAO_UNLOADED = "dao_unloaded"
    WRAPPER_READY = "wrapper_ready"


# Events where only the most recent payload matters; bursts are coalesced
COALESCED_EVENTS = frozenset({EventType.SESSION_UPDATED})
