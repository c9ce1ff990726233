"""Application layer: session store, event bus and orchestration."""

from .async_event_bus import AsyncEventBus
from .session_store import SessionStore
from .wrapper_readiness import WrapperReadiness
from .orchestrator import SessionOrchestrator

__all__ = [
    "AsyncEventBus",
    "SessionStore",
    "WrapperReadiness",
    "SessionOrchestrator",
]
