"""Async event bus fanning session snapshots and lifecycle events out to consumers."""

from __future__ import annotations
import asyncio
import time
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..domain.interfaces.event_bus import EventBus
from ..domain.events.event_types import EventType, COALESCED_EVENTS
from ..utils.logging_setup import get_logger


logger = get_logger(__name__)

# Queue marker: dispatch the latest coalesced payloads now
_FLUSH = object()

QueueItem = Union[Tuple[EventType, Any], object]


class AsyncEventBus(EventBus):
    """
    Event bus for the session orchestrator and the presentation layer.

    Lifecycle events (DAO_LOADING, WRAPPER_READY, FATAL_ERROR, ...) are
    queued and dispatched in publication order by a task on the running
    loop. Snapshot types in COALESCED_EVENTS skip the queue: only the latest
    payload is kept, and it is dispatched once per debounce window.

    Before start() and after stop() every publish is dispatched synchronously.
    """

    def __init__(self, debounce_ms: int = 50):
        """
        Args:
            debounce_ms: Coalescing window for snapshot events
        """
        self._subscribers: Dict[EventType, List[Callable[[Any], None]]] = defaultdict(list)
        self._async_subscribers: Dict[EventType, List[Callable[[Any], Any]]] = defaultdict(list)
        self._debounce_sec = debounce_ms / 1000.0

        self._queue: Optional[asyncio.Queue] = None  # Created in start()
        self._task: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._running = False

        # Latest undispatched payload per coalesced event type
        self._latest: Dict[EventType, Any] = {}
        self._flush_handle: Optional[asyncio.TimerHandle] = None

        self._stats = {
            "published": 0,
            "dispatched": 0,
            "coalesced": 0,
            "errors": 0,
        }

    def publish(self, event_type: EventType, payload: Any) -> None:
        """Publish an event without blocking; must be called on the bus loop."""
        self._stats["published"] += 1

        if not self._running:
            self._dispatch_sync(event_type, payload)
        elif event_type in COALESCED_EVENTS:
            self._coalesce(event_type, payload)
        else:
            self._queue.put_nowait((event_type, payload))

    def _coalesce(self, event_type: EventType, payload: Any) -> None:
        if event_type in self._latest:
            self._stats["coalesced"] += 1
        self._latest[event_type] = payload

        if self._flush_handle is None:
            self._flush_handle = self._loop.call_later(self._debounce_sec, self._request_flush)

    def _request_flush(self) -> None:
        self._flush_handle = None
        if self._running:
            self._queue.put_nowait(_FLUSH)

    def subscribe(self, event_type: EventType, callback: Callable[[Any], None]) -> None:
        self._subscribers[event_type].append(callback)
        logger.debug(f"Subscribed to {event_type.value}")

    def subscribe_async(self, event_type: EventType, callback: Callable[[Any], Any]) -> None:
        """Subscribe a coroutine function; it is awaited by the dispatch task."""
        self._async_subscribers[event_type].append(callback)
        logger.debug(f"Async subscribed to {event_type.value}")

    def unsubscribe(self, event_type: EventType, callback: Callable[[Any], None]) -> None:
        if callback in self._subscribers.get(event_type, []):
            self._subscribers[event_type].remove(callback)
        if callback in self._async_subscribers.get(event_type, []):
            self._async_subscribers[event_type].remove(callback)
        logger.debug(f"Unsubscribed from {event_type.value}")

    async def start(self) -> None:
        """Start the dispatch task on the running loop."""
        if self._running:
            logger.warning("AsyncEventBus already running")
            return

        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._running = True
        self._task = asyncio.create_task(self._dispatch_loop())
        logger.info("AsyncEventBus started")

    async def stop(self) -> None:
        """
        Stop dispatching.

        Queued events and the latest coalesced snapshots are delivered
        first; subscribers see SHUTDOWN last.
        """
        if not self._running:
            return

        logger.info("Stopping AsyncEventBus...")
        self._running = False

        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        drained = 0
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item is not _FLUSH:
                await self._dispatch(*item)
                drained += 1
        if drained:
            logger.info(f"Drained {drained} events from queue")
        await self._flush()

        self._dispatch_sync(EventType.SHUTDOWN, {"timestamp": time.time()})
        logger.info(f"AsyncEventBus stopped. Stats: {self._stats}")

    async def _dispatch_loop(self) -> None:
        logger.debug("Event dispatch loop started")
        while True:
            item: QueueItem = await self._queue.get()
            if item is _FLUSH:
                await self._flush()
            else:
                await self._dispatch(*item)

    async def _flush(self) -> None:
        latest, self._latest = self._latest, {}
        for event_type, payload in latest.items():
            await self._dispatch(event_type, payload)

    def _dispatch_sync(self, event_type: EventType, payload: Any) -> None:
        for callback in list(self._subscribers.get(event_type, [])):
            self._call(callback, event_type, payload)

    async def _dispatch(self, event_type: EventType, payload: Any) -> None:
        self._dispatch_sync(event_type, payload)

        for callback in list(self._async_subscribers.get(event_type, [])):
            try:
                result = callback(payload)
                if asyncio.iscoroutine(result):
                    await result
                self._stats["dispatched"] += 1
            except Exception as e:
                self._stats["errors"] += 1
                logger.error(f"Error in async subscriber for {event_type.value}: {e}", exc_info=True)

    def _call(self, callback: Callable[[Any], None], event_type: EventType, payload: Any) -> None:
        try:
            callback(payload)
            self._stats["dispatched"] += 1
        except Exception as e:
            self._stats["errors"] += 1
            logger.error(f"Error in subscriber for {event_type.value}: {e}", exc_info=True)

    def get_stats(self) -> Dict[str, Any]:
        stats = dict(self._stats)
        stats["queue_size"] = self._queue.qsize() if self._queue else 0
        stats["pending_coalesced"] = len(self._latest)
        stats["subscriber_count"] = sum(len(v) for v in self._subscribers.values())
        stats["async_subscriber_count"] = sum(len(v) for v in self._async_subscribers.values())
        return stats

    @property
    def is_running(self) -> bool:
        return self._running
