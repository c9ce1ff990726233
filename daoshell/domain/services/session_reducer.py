"""
Pure reducer over the session state.

``reduce_session(state, event)`` returns the next state for one event. It
never mutates ``state`` and never performs I/O; side effects (cancelling
clients, rejecting requests) belong to the orchestrator.

Rules:
- Each client callback event replaces exactly one independent slice of
  state, wholesale.
- DAO-scoped events whose generation is not the current one are stale and
  leave the state untouched.
- Once ``fatal_error`` is set, no further event changes the state.
"""

from __future__ import annotations
from dataclasses import replace
from functools import singledispatch

from ..events.session_events import (
    AppIdentifiersUpdated,
    AppsUpdated,
    ConnectivityChanged,
    DaoAddressResolved,
    DaoLoadFailed,
    DaoLoadStarted,
    DaoScopedEvent,
    DaoUnloaded,
    IdentityIntentCleared,
    IdentityIntentOpened,
    InstalledReposUpdated,
    LocatorChanged,
    PermissionsUpdated,
    SessionEvent,
    SignatureBagUpdated,
    SystemAppsToggled,
    TransactionBagUpdated,
    WrapperAttached,
)
from ..symbols import LoadStatus
from ...models.session_state import SessionState


def is_stale(state: SessionState, event: SessionEvent) -> bool:
    """True for DAO-scoped events from a superseded transition."""
    return isinstance(event, DaoScopedEvent) and event.generation != state.generation


def reduce_session(state: SessionState, event: SessionEvent) -> SessionState:
    """Apply one event to the session state."""
    if state.fatal_error is not None:
        return state
    # Transitions open a new generation; every other scoped event must match
    if not isinstance(event, (DaoLoadStarted, DaoUnloaded)) and is_stale(state, event):
        return state
    return _apply(event, state)


@singledispatch
def _apply(event: SessionEvent, state: SessionState) -> SessionState:
    raise TypeError(f"Unhandled session event: {type(event).__name__}")


@_apply.register
def _(event: LocatorChanged, state: SessionState) -> SessionState:
    return replace(state, locator=event.locator, prev_locator=event.prev_locator)


@_apply.register
def _(event: DaoLoadStarted, state: SessionState) -> SessionState:
    return replace(
        state.reset_dao(event.generation),
        dao_status=LoadStatus.LOADING,
        apps_status=LoadStatus.LOADING,
    )


@_apply.register
def _(event: DaoUnloaded, state: SessionState) -> SessionState:
    return state.reset_dao(event.generation)


@_apply.register
def _(event: WrapperAttached, state: SessionState) -> SessionState:
    return replace(state, wrapper=event.wrapper)


@_apply.register
def _(event: DaoLoadFailed, state: SessionState) -> SessionState:
    return replace(
        state,
        dao_status=LoadStatus.ERROR,
        apps_status=LoadStatus.ERROR,
        fatal_error=event.error,
    )


@_apply.register
def _(event: ConnectivityChanged, state: SessionState) -> SessionState:
    return replace(state, connected=event.connected)


@_apply.register
def _(event: SystemAppsToggled, state: SessionState) -> SessionState:
    return replace(state, system_apps_opened=event.opened)


@_apply.register
def _(event: DaoAddressResolved, state: SessionState) -> SessionState:
    return replace(state, dao_status=LoadStatus.READY, dao_address=event.dao_address)


@_apply.register
def _(event: AppsUpdated, state: SessionState) -> SessionState:
    return replace(state, apps=tuple(event.apps), apps_status=LoadStatus.READY)


@_apply.register
def _(event: PermissionsUpdated, state: SessionState) -> SessionState:
    return replace(state, permissions=event.permissions, permissions_loading=False)


@_apply.register
def _(event: AppIdentifiersUpdated, state: SessionState) -> SessionState:
    return replace(state, app_identifiers=event.app_identifiers)


@_apply.register
def _(event: InstalledReposUpdated, state: SessionState) -> SessionState:
    return replace(state, repos=tuple(event.repos), can_upgrade_org=event.can_upgrade_org)


@_apply.register
def _(event: TransactionBagUpdated, state: SessionState) -> SessionState:
    return replace(state, transaction_bag=event.transaction_bag)


@_apply.register
def _(event: SignatureBagUpdated, state: SessionState) -> SessionState:
    return replace(state, signature_bag=event.signature_bag)


@_apply.register
def _(event: IdentityIntentOpened, state: SessionState) -> SessionState:
    return replace(state, identity_intent=event.intent)


@_apply.register
def _(event: IdentityIntentCleared, state: SessionState) -> SessionState:
    return replace(state, identity_intent=None)
