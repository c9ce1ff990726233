"""
Session store: the single owner of the session snapshot.

Events are applied strictly in publication order through the pure
reducer. Publishing from inside a listener (or a history listener fired
by a navigation command) is allowed; the nested event is queued and
applied after the current one, never interleaved with it.

Readers get the current snapshot through ``state``; the reference is
swapped atomically after each applied event, so a reader never observes
a partially updated state.
"""

from __future__ import annotations
from collections import deque
from typing import Any, Callable, Deque, List, Optional, Protocol

from ..domain.events.event_types import EventType
from ..domain.events.session_events import SessionEvent
from ..domain.services.session_reducer import reduce_session
from ..models.session_state import SessionState
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)


class EventPublisher(Protocol):
    """Protocol for event publishing."""
    def publish(self, event_type: EventType, payload: Any) -> None: ...


StateListener = Callable[[SessionState], None]


class SessionStore:
    """
    Ordered, re-entrant-safe store of :class:`SessionState` snapshots.

    Listeners are called synchronously with every new snapshot. When an
    event bus is given, each new snapshot is also published as
    SESSION_UPDATED, and the first fatal error as FATAL_ERROR.
    """

    def __init__(
        self,
        event_bus: Optional[EventPublisher] = None,
        initial: Optional[SessionState] = None,
    ):
        self._state = initial or SessionState()
        self._event_bus = event_bus
        self._pending: Deque[SessionEvent] = deque()
        self._draining = False
        self._listeners: List[StateListener] = []
        self._applied = 0
        self._dropped = 0

    @property
    def state(self) -> SessionState:
        """Current snapshot (lock-free read)."""
        return self._state

    def publish(self, event: SessionEvent) -> None:
        """Queue an event; applies it immediately unless already draining."""
        self._pending.append(event)
        if self._draining:
            return

        self._draining = True
        try:
            while self._pending:
                self._apply(self._pending.popleft())
        finally:
            self._draining = False

    def _apply(self, event: SessionEvent) -> None:
        previous = self._state
        state = reduce_session(previous, event)
        if state is previous:
            self._dropped += 1
            logger.debug(f"Dropped {event.name} (generation {previous.generation})")
            return

        self._state = state  # Atomic reference swap
        self._applied += 1
        logger.debug(f"Applied {event.name} (generation {state.generation})")

        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Error in session listener: {e}", exc_info=True)

        if self._event_bus is not None:
            self._event_bus.publish(EventType.SESSION_UPDATED, state)
            if state.fatal_error is not None and previous.fatal_error is None:
                self._event_bus.publish(EventType.FATAL_ERROR, state.fatal_error)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a snapshot listener.

        Returns:
            Callable removing the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def get_stats(self) -> dict:
        return {
            "applied": self._applied,
            "dropped": self._dropped,
            "generation": self._state.generation,
            "listeners": len(self._listeners),
        }
