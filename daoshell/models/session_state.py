"""Session state: the canonical snapshot owned by the orchestrator."""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING

from ..domain.symbols import AppMode, LoadStatus
from .locator import Locator
from .organization import AppInstance, DaoAddress, RepoInfo
from .requests import IdentityIntent

if TYPE_CHECKING:
    from ..domain.interfaces.organization_client import OrganizationClient


@dataclass(frozen=True)
class SessionState:
    """
    Immutable snapshot of the shell state.

    A new instance is produced for every applied event; readers never see
    a partially updated state. Collections are replaced wholesale, never
    mutated in place.
    """

    # Per-DAO state, reset on every DAO transition
    dao_address: DaoAddress = field(default_factory=DaoAddress)
    dao_status: LoadStatus = LoadStatus.UNLOADED
    apps_status: LoadStatus = LoadStatus.UNLOADED
    apps: Tuple[AppInstance, ...] = ()
    app_identifiers: Dict[str, str] = field(default_factory=dict)
    permissions: Dict[str, Any] = field(default_factory=dict)
    permissions_loading: bool = True
    repos: Tuple[RepoInfo, ...] = ()
    can_upgrade_org: bool = False
    identity_intent: Optional[IdentityIntent] = None
    transaction_bag: Any = None
    signature_bag: Any = None
    wrapper: Optional["OrganizationClient"] = None

    # Session-wide state, kept across DAO transitions
    generation: int = 0
    locator: Optional[Locator] = None
    prev_locator: Optional[Locator] = None
    connected: bool = False
    fatal_error: Optional[BaseException] = None
    system_apps_opened: bool = False

    def reset_dao(self, generation: int) -> "SessionState":
        """Return a copy with every per-DAO field back to its empty form."""
        empty = SessionState()
        return replace(
            self,
            dao_address=empty.dao_address,
            dao_status=empty.dao_status,
            apps_status=empty.apps_status,
            apps=empty.apps,
            app_identifiers=empty.app_identifiers,
            permissions=empty.permissions,
            permissions_loading=empty.permissions_loading,
            repos=empty.repos,
            can_upgrade_org=empty.can_upgrade_org,
            identity_intent=empty.identity_intent,
            transaction_bag=empty.transaction_bag,
            signature_bag=empty.signature_bag,
            wrapper=None,
            generation=generation,
        )

    @property
    def apps_with_identifiers(self) -> Tuple[AppInstance, ...]:
        """Apps decorated with the identifier published for their proxy."""
        decorated = []
        for app in self.apps:
            identifier = self.app_identifiers.get(app.proxy_address)
            decorated.append(replace(app, identifier=identifier) if identifier else app)
        return tuple(decorated)

    @property
    def onboarding_status(self) -> str:
        """Onboarding screen to show for the current locator."""
        if self.locator is None:
            return "none"
        if self.locator.mode in (AppMode.START, AppMode.SETUP):
            return self.locator.action or "welcome"
        return "none"

    @property
    def has_organization(self) -> bool:
        return self.locator is not None and self.locator.dao is not None

    def raise_if_fatal(self) -> None:
        """Re-raise the terminal error, if any, for the presentation layer."""
        if self.fatal_error is not None:
            raise self.fatal_error
