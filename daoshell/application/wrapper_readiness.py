"""Readiness signal for the organization client of the current DAO."""

from __future__ import annotations
import asyncio
from typing import Any, Optional, Protocol

from ..domain.events.event_types import EventType
from ..domain.interfaces.organization_client import OrganizationClient
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)


class EventPublisher(Protocol):
    """Protocol for event publishing."""
    def publish(self, event_type: EventType, payload: Any) -> None: ...


class WrapperReadiness:
    """
    Tracks whether a client is attached and lets callers wait for one.

    Set when a freshly constructed client is attached for the current
    generation, cleared when the session is torn down for a transition.
    Waiting never raises on timeout; callers re-check and decide.
    """

    def __init__(self, event_bus: Optional[EventPublisher] = None):
        self._event_bus = event_bus
        self._ready = asyncio.Event()
        self._wrapper: Optional[OrganizationClient] = None
        self._generation: Optional[int] = None

    @property
    def wrapper(self) -> Optional[OrganizationClient]:
        return self._wrapper

    @property
    def generation(self) -> Optional[int]:
        return self._generation

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    def attach(self, wrapper: OrganizationClient, generation: int) -> None:
        """Mark ``wrapper`` as the live client for ``generation``."""
        self._wrapper = wrapper
        self._generation = generation
        self._ready.set()
        logger.info(f"Wrapper ready (generation {generation})")
        if self._event_bus is not None:
            self._event_bus.publish(EventType.WRAPPER_READY, {"generation": generation})

    def detach(self) -> None:
        """Forget the current client, if any."""
        if self._wrapper is not None:
            logger.debug(f"Wrapper detached (generation {self._generation})")
        self._wrapper = None
        self._generation = None
        self._ready.clear()

    async def wait(self, timeout: Optional[float] = None) -> Optional[OrganizationClient]:
        """
        Wait until a client is attached or ``timeout`` elapses.

        Returns:
            The attached client, or None if none became ready in time.
        """
        if not self._ready.is_set():
            try:
                await asyncio.wait_for(self._ready.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                pass
        return self._wrapper
