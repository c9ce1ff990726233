"""
Session events consumed by the session reducer.

Every change to the canonical session state is expressed as one of these
immutable events and applied, in publish order, by
:func:`daoshell.domain.services.session_reducer.reduce_session`.

Events produced by an organization client carry the ``generation`` of the
DAO transition that created the client; the reducer drops them once a newer
transition has started.

Usage:
    store.publish(AppsUpdated(generation=3, apps=(app,)))
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING

from ...models.locator import Locator
from ...models.organization import AppInstance, DaoAddress, RepoInfo
from ...models.requests import IdentityIntent

if TYPE_CHECKING:
    from ..interfaces.organization_client import OrganizationClient


@dataclass(frozen=True, slots=True)
class SessionEvent:
    """Base class for all session events."""

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True, slots=True)
class DaoScopedEvent(SessionEvent):
    """Event bound to one DAO transition."""
    generation: int


# =============================================================================
# Lifecycle events (issued by the orchestrator)
# =============================================================================

@dataclass(frozen=True, slots=True)
class LocatorChanged(SessionEvent):
    locator: Locator
    prev_locator: Optional[Locator]


@dataclass(frozen=True, slots=True)
class DaoLoadStarted(DaoScopedEvent):
    """A new DAO is being loaded: reset per-DAO state, statuses to loading."""
    dao: str


@dataclass(frozen=True, slots=True)
class DaoUnloaded(DaoScopedEvent):
    """The shell left the DAO: reset per-DAO state, statuses to unloaded."""


@dataclass(frozen=True, slots=True)
class WrapperAttached(DaoScopedEvent):
    wrapper: "OrganizationClient"


@dataclass(frozen=True, slots=True)
class DaoLoadFailed(DaoScopedEvent):
    error: BaseException


@dataclass(frozen=True, slots=True)
class ConnectivityChanged(SessionEvent):
    connected: bool


@dataclass(frozen=True, slots=True)
class SystemAppsToggled(SessionEvent):
    opened: bool


# =============================================================================
# Client callback events
# =============================================================================

@dataclass(frozen=True, slots=True)
class DaoAddressResolved(DaoScopedEvent):
    dao_address: DaoAddress


@dataclass(frozen=True, slots=True)
class AppsUpdated(DaoScopedEvent):
    apps: Tuple[AppInstance, ...]


@dataclass(frozen=True, slots=True)
class PermissionsUpdated(DaoScopedEvent):
    permissions: Dict[str, Any]


@dataclass(frozen=True, slots=True)
class AppIdentifiersUpdated(DaoScopedEvent):
    app_identifiers: Dict[str, str]


@dataclass(frozen=True, slots=True)
class InstalledReposUpdated(DaoScopedEvent):
    repos: Tuple[RepoInfo, ...]
    can_upgrade_org: bool


@dataclass(frozen=True, slots=True)
class TransactionBagUpdated(DaoScopedEvent):
    transaction_bag: Any


@dataclass(frozen=True, slots=True)
class SignatureBagUpdated(DaoScopedEvent):
    signature_bag: Any


@dataclass(frozen=True, slots=True)
class IdentityIntentOpened(DaoScopedEvent):
    intent: IdentityIntent


@dataclass(frozen=True, slots=True)
class IdentityIntentCleared(SessionEvent):
    pass
