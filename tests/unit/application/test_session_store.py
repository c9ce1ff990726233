"""Unit tests for SessionStore."""

from daoshell.application.session_store import SessionStore
from daoshell.domain.events import (
    AppsUpdated,
    ConnectivityChanged,
    DaoLoadFailed,
    DaoLoadStarted,
    EventType,
    SystemAppsToggled,
)
from daoshell.domain.exceptions import DaoConnectionError
from daoshell.models.organization import AppInstance


class TestOrdering:
    """Tests for ordered, re-entrant application of events."""

    def test_publish_applies_immediately(self):
        store = SessionStore()
        store.publish(ConnectivityChanged(connected=True))
        assert store.state.connected

    def test_nested_publish_applied_after_current(self):
        store = SessionStore()
        seen = []

        def listener(state):
            seen.append((state.connected, state.system_apps_opened))
            if state.connected and not state.system_apps_opened:
                store.publish(SystemAppsToggled(opened=True))
                # Nested event is queued, not applied inside this listener
                seen.append(("after-nested", store.state.system_apps_opened))

        store.subscribe(listener)
        store.publish(ConnectivityChanged(connected=True))

        assert seen == [
            (True, False),
            ("after-nested", False),
            (True, True),
        ]
        assert store.state.system_apps_opened

    def test_stale_event_dropped_without_notification(self):
        store = SessionStore()
        store.publish(DaoLoadStarted(generation=2, dao="acme"))
        notified = []
        store.subscribe(notified.append)

        store.publish(AppsUpdated(generation=1, apps=(AppInstance("0x1", "a"),)))

        assert notified == []
        assert store.state.apps == ()
        assert store.get_stats()["dropped"] == 1

    def test_listener_error_does_not_stop_others(self):
        store = SessionStore()
        received = []

        def broken(state):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(received.append)
        store.publish(ConnectivityChanged(connected=True))

        assert len(received) == 1

    def test_unsubscribe(self):
        store = SessionStore()
        received = []
        unsubscribe = store.subscribe(received.append)
        unsubscribe()
        unsubscribe()

        store.publish(ConnectivityChanged(connected=True))
        assert received == []
        assert store.get_stats()["listeners"] == 0


class TestBusPublishing:
    """Tests for snapshot fan-out to the event bus."""

    def test_session_updated_per_applied_event(self, event_bus):
        store = SessionStore(event_bus=event_bus)
        store.publish(ConnectivityChanged(connected=True))
        store.publish(ConnectivityChanged(connected=False))

        snapshots = event_bus.get_events_of_type(EventType.SESSION_UPDATED)
        assert [s.connected for s in snapshots] == [True, False]

    def test_fatal_error_published_once(self, event_bus):
        store = SessionStore(event_bus=event_bus)
        store.publish(DaoLoadStarted(generation=1, dao="acme"))
        error = DaoConnectionError("acme", ConnectionError("down"))
        store.publish(DaoLoadFailed(generation=1, error=error))
        store.publish(ConnectivityChanged(connected=True))  # ignored after fatal

        assert event_bus.get_events_of_type(EventType.FATAL_ERROR) == [error]
        assert not store.state.connected
