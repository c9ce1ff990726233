"""Unit tests for AsyncEventBus."""

import asyncio

import pytest

from daoshell.application.async_event_bus import AsyncEventBus
from daoshell.domain.events.event_types import EventType


class TestSyncMode:
    """Tests for dispatch while the loop is not running."""

    def test_dispatches_synchronously(self):
        bus = AsyncEventBus()
        received = []
        bus.subscribe(EventType.DAO_LOADING, received.append)

        bus.publish(EventType.DAO_LOADING, {"dao": "acme"})

        assert received == [{"dao": "acme"}]

    def test_unsubscribe(self):
        bus = AsyncEventBus()
        received = []
        bus.subscribe(EventType.DAO_LOADING, received.append)
        bus.unsubscribe(EventType.DAO_LOADING, received.append)

        bus.publish(EventType.DAO_LOADING, {"dao": "acme"})

        assert received == []

    def test_subscriber_error_counted(self):
        bus = AsyncEventBus()

        def broken(payload):
            raise RuntimeError("boom")

        bus.subscribe(EventType.DAO_LOADING, broken)
        bus.publish(EventType.DAO_LOADING, {})

        assert bus.get_stats()["errors"] == 1


class TestAsyncMode:
    """Tests for the dispatch loop."""

    @pytest.mark.asyncio
    async def test_lifecycle_events_not_coalesced(self):
        bus = AsyncEventBus(debounce_ms=10)
        received = []
        bus.subscribe(EventType.DAO_LOADING, received.append)
        await bus.start()

        bus.publish(EventType.DAO_LOADING, 1)
        bus.publish(EventType.DAO_LOADING, 2)
        await asyncio.sleep(0.05)
        await bus.stop()

        assert received == [1, 2]

    @pytest.mark.asyncio
    async def test_snapshots_coalesced_to_latest(self):
        bus = AsyncEventBus(debounce_ms=50)
        received = []
        bus.subscribe(EventType.SESSION_UPDATED, received.append)
        await bus.start()

        for i in range(5):
            bus.publish(EventType.SESSION_UPDATED, i)
        await asyncio.sleep(0.2)
        await bus.stop()

        assert received == [4]
        assert bus.get_stats()["coalesced"] == 4

    @pytest.mark.asyncio
    async def test_async_subscriber_awaited(self):
        bus = AsyncEventBus(debounce_ms=10)
        received = []

        async def handler(payload):
            received.append(payload)

        bus.subscribe_async(EventType.WRAPPER_READY, handler)
        await bus.start()
        bus.publish(EventType.WRAPPER_READY, {"generation": 1})
        await asyncio.sleep(0.05)
        await bus.stop()

        assert received == [{"generation": 1}]

    @pytest.mark.asyncio
    async def test_stop_flushes_then_shuts_down(self):
        bus = AsyncEventBus(debounce_ms=1000)
        order = []
        bus.subscribe(EventType.SESSION_UPDATED, lambda p: order.append(("update", p)))
        bus.subscribe(EventType.SHUTDOWN, lambda p: order.append(("shutdown", None)))
        await bus.start()

        bus.publish(EventType.SESSION_UPDATED, "a")
        bus.publish(EventType.SESSION_UPDATED, "b")
        await bus.stop()

        assert order == [("update", "b"), ("shutdown", None)]
        assert not bus.is_running

    @pytest.mark.asyncio
    async def test_lifecycle_events_drained_on_stop(self):
        bus = AsyncEventBus(debounce_ms=10)
        received = []
        bus.subscribe(EventType.FATAL_ERROR, received.append)
        await bus.start()

        bus.publish(EventType.FATAL_ERROR, "down")
        await bus.stop()

        assert received == ["down"]
        bus.publish(EventType.FATAL_ERROR, "after")
        assert received == ["down", "after"]
