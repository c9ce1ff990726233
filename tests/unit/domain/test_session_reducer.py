"""Unit tests for the session reducer."""

from dataclasses import replace
from unittest.mock import MagicMock

from daoshell.domain.events import (
    AppIdentifiersUpdated,
    AppsUpdated,
    ConnectivityChanged,
    DaoAddressResolved,
    DaoLoadFailed,
    DaoLoadStarted,
    DaoUnloaded,
    IdentityIntentCleared,
    IdentityIntentOpened,
    InstalledReposUpdated,
    LocatorChanged,
    PermissionsUpdated,
    SignatureBagUpdated,
    SystemAppsToggled,
    TransactionBagUpdated,
    WrapperAttached,
)
from daoshell.domain.exceptions import DaoConnectionError
from daoshell.domain.routing import parse_path
from daoshell.domain.services.session_reducer import is_stale, reduce_session
from daoshell.domain.symbols import LoadStatus
from daoshell.models.organization import AppInstance, DaoAddress
from daoshell.models.requests import IdentityIntent
from daoshell.models.session_state import SessionState


def loaded_state(generation: int = 1) -> SessionState:
    """State with a DAO loading at ``generation``."""
    return reduce_session(SessionState(), DaoLoadStarted(generation=generation, dao="acme"))


class TestLifecycleEvents:
    """Tests for DAO transition events."""

    def test_load_started_resets_and_sets_loading(self):
        state = replace(
            SessionState(generation=1),
            apps=(AppInstance("0x1", "app"),),
            permissions={"0x1": {}},
            permissions_loading=False,
            connected=True,
        )
        state = reduce_session(state, DaoLoadStarted(generation=2, dao="beta"))

        assert state.generation == 2
        assert state.apps == ()
        assert state.permissions == {}
        assert state.permissions_loading
        assert state.dao_status == LoadStatus.LOADING
        assert state.apps_status == LoadStatus.LOADING
        assert state.connected  # session-wide fields survive

    def test_unloaded_resets_to_unloaded(self):
        state = loaded_state()
        state = reduce_session(state, DaoAddressResolved(generation=1, dao_address=DaoAddress("0xdao")))
        state = reduce_session(state, DaoUnloaded(generation=2))

        assert state.generation == 2
        assert state.dao_status == LoadStatus.UNLOADED
        assert state.apps_status == LoadStatus.UNLOADED
        assert state.dao_address == DaoAddress()

    def test_load_failed_is_terminal(self):
        error = DaoConnectionError("acme", ConnectionError("down"))
        state = reduce_session(loaded_state(), DaoLoadFailed(generation=1, error=error))

        assert state.dao_status == LoadStatus.ERROR
        assert state.apps_status == LoadStatus.ERROR
        assert state.fatal_error is error

        after = reduce_session(state, LocatorChanged(locator=parse_path("/beta"), prev_locator=None))
        assert after is state
        after = reduce_session(state, DaoLoadStarted(generation=2, dao="beta"))
        assert after is state

    def test_wrapper_attached(self):
        wrapper = MagicMock()
        state = reduce_session(loaded_state(), WrapperAttached(generation=1, wrapper=wrapper))
        assert state.wrapper is wrapper

    def test_locator_changed_keeps_previous(self):
        first = parse_path("/acme")
        second = parse_path("/beta")
        state = reduce_session(SessionState(), LocatorChanged(locator=second, prev_locator=first))
        assert state.locator is second
        assert state.prev_locator is first


class TestCallbackEvents:
    """Tests for events produced by client callbacks."""

    def test_dao_address_sets_ready(self):
        state = reduce_session(loaded_state(), DaoAddressResolved(generation=1, dao_address=DaoAddress("0xdao", "acme.aragonid.eth")))
        assert state.dao_status == LoadStatus.READY
        assert state.dao_address.domain == "acme.aragonid.eth"

    def test_apps_replaced_wholesale(self):
        p1 = (AppInstance("0x1", "a"), AppInstance("0x2", "b"))
        p2 = (AppInstance("0x3", "c"),)
        state = reduce_session(loaded_state(), AppsUpdated(generation=1, apps=p1))
        state = reduce_session(state, AppsUpdated(generation=1, apps=p2))

        assert state.apps == p2
        assert state.apps_status == LoadStatus.READY

    def test_permissions_clear_loading(self):
        state = reduce_session(loaded_state(), PermissionsUpdated(generation=1, permissions={"0x1": {"ROLE": {}}}))
        assert state.permissions == {"0x1": {"ROLE": {}}}
        assert not state.permissions_loading

    def test_independent_slices(self):
        state = loaded_state()
        state = reduce_session(state, AppIdentifiersUpdated(generation=1, app_identifiers={"0x1": "DAI"}))
        state = reduce_session(state, InstalledReposUpdated(generation=1, repos=(), can_upgrade_org=True))
        state = reduce_session(state, TransactionBagUpdated(generation=1, transaction_bag={"tx": 1}))
        state = reduce_session(state, SignatureBagUpdated(generation=1, signature_bag={"sig": 1}))

        assert state.app_identifiers == {"0x1": "DAI"}
        assert state.can_upgrade_org
        assert state.transaction_bag == {"tx": 1}
        assert state.signature_bag == {"sig": 1}

    def test_identity_intent_open_and_clear(self):
        intent = IdentityIntent("0xabc", "Alice", MagicMock(), MagicMock())
        state = reduce_session(loaded_state(), IdentityIntentOpened(generation=1, intent=intent))
        assert state.identity_intent is intent

        state = reduce_session(state, IdentityIntentCleared())
        assert state.identity_intent is None

    def test_session_wide_events(self):
        state = reduce_session(SessionState(), ConnectivityChanged(connected=True))
        state = reduce_session(state, SystemAppsToggled(opened=True))
        assert state.connected
        assert state.system_apps_opened


class TestStaleEvents:
    """Tests for generation guarding."""

    def test_stale_callback_dropped(self):
        state = loaded_state(generation=2)
        event = AppsUpdated(generation=1, apps=(AppInstance("0x1", "a"),))

        assert is_stale(state, event)
        assert reduce_session(state, event) is state

    def test_stale_wrapper_not_attached(self):
        state = loaded_state(generation=2)
        assert reduce_session(state, WrapperAttached(generation=1, wrapper=MagicMock())) is state

    def test_session_events_never_stale(self):
        state = loaded_state(generation=5)
        assert not is_stale(state, ConnectivityChanged(connected=True))
