"""
SessionOrchestrator - Main application coordinator.

Thin coordination layer that:
- Owns the session store and the readiness signal
- Manages lifecycle (start/stop)
- Turns locator changes into DAO transitions
- Exposes the intents of the presentation layer
- Delegates client lifecycle to DaoCoordinator
- Delegates identity flows to IdentityCoordinator
- Delegates history handling to NavigationCoordinator
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

from ...utils.logging_setup import get_logger
from ...utils.trace_context import new_transition
from ...domain.events.event_types import EventType
from ...domain.events.session_events import ConnectivityChanged, SystemAppsToggled
from ...domain.interfaces.event_bus import EventBus
from ...domain.interfaces.history import NavigationHistory
from ...domain.interfaces.organization_client import OrganizationConnector
from ...domain.services.repo_upgrades import RepoUpgradeDetector
from ...models.locator import Locator
from ...models.organization import Identity
from ...models.session_state import SessionState
from ...infrastructure.persistence.preferences_store import SYSTEM_APPS_OPENED_STATE

from ..session_store import SessionStore, StateListener
from ..wrapper_readiness import WrapperReadiness
from .dao_coordinator import DaoCoordinator
from .identity_coordinator import IdentityCoordinator
from .navigation_coordinator import NavigationCoordinator

if TYPE_CHECKING:
    from ...infrastructure.monitoring.connectivity import ConnectivityMonitor
    from ...infrastructure.persistence.preferences_store import PreferencesStore

logger = get_logger(__name__)


class SessionOrchestrator:
    """
    Main session orchestrator - thin coordination layer.

    The session state is only changed through the store; the presentation
    layer reads snapshots and calls the intents below.
    """

    def __init__(
        self,
        history: NavigationHistory,
        connector: OrganizationConnector,
        config: Dict[str, Any],
        event_bus: Optional[EventBus] = None,
        preferences: Optional[PreferencesStore] = None,
        connectivity_monitor: Optional[ConnectivityMonitor] = None,
    ):
        self.history = history
        self.event_bus = event_bus
        self.config = config
        self._preferences = preferences
        self._connectivity_monitor = connectivity_monitor
        self._wallet_account: Optional[str] = config.get("wallet_account")
        self._running = False

        system_apps_opened = False
        if preferences is not None:
            system_apps_opened = preferences.get(SYSTEM_APPS_OPENED_STATE) == "1"

        self.store = SessionStore(
            event_bus=event_bus,
            initial=SessionState(system_apps_opened=system_apps_opened),
        )
        self.readiness = WrapperReadiness(event_bus=event_bus)

        self._identity_coordinator = IdentityCoordinator(
            store=self.store,
            readiness=self.readiness,
            config=config.get("identity", {}),
        )
        self._navigation_coordinator = NavigationCoordinator(
            store=self.store,
            history=history,
            on_locator_change=self._handle_locator_change,
        )
        self._dao_coordinator = DaoCoordinator(
            store=self.store,
            readiness=self.readiness,
            connector=connector,
            upgrade_detector=RepoUpgradeDetector(config.get("known_app_ids", [])),
            config=config.get("providers", {}),
            wallet_account=lambda: self._wallet_account,
            on_identity_intent=self._identity_coordinator.open_intent,
            on_request_path=self._navigation_coordinator.handle_request_path,
            on_teardown=self._identity_coordinator.discard_pending,
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Start following the history and, if configured, connectivity."""
        if self._running:
            logger.warning("SessionOrchestrator already running")
            return
        logger.info("Starting SessionOrchestrator...")
        self._running = True

        start_bus = getattr(self.event_bus, "start", None)
        if start_bus is not None:
            await start_bus()

        self._navigation_coordinator.attach()

        if self._connectivity_monitor is not None:
            await self._connectivity_monitor.start(self.set_connected)

        logger.info("SessionOrchestrator started")

    async def stop(self) -> None:
        """Tear down the client and background work."""
        if not self._running:
            return
        logger.info("Stopping SessionOrchestrator...")
        self._running = False

        self._navigation_coordinator.detach()
        if self._connectivity_monitor is not None:
            await self._connectivity_monitor.stop()
        await self._identity_coordinator.stop()
        await self._dao_coordinator.stop()

        stop_bus = getattr(self.event_bus, "stop", None)
        if stop_bus is not None:
            await stop_bus()

        logger.info("SessionOrchestrator stopped")

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self.store.state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        return self.store.subscribe(listener)

    @property
    def wallet_account(self) -> Optional[str]:
        return self._wallet_account

    @property
    def is_running(self) -> bool:
        return self._running

    def _handle_locator_change(self, locator: Locator, prev_locator: Optional[Locator]) -> None:
        """Decide the DAO transition for a new locator."""
        if self.store.state.fatal_error is not None:
            logger.warning(f"Session failed, ignoring transition to {locator.path}")
            return

        prev_dao = prev_locator.dao if prev_locator is not None else None

        if locator.dao and locator.dao != prev_dao:
            with new_transition():
                self._dao_coordinator.load(locator.dao)
                self._publish_lifecycle(EventType.DAO_LOADING, {"dao": locator.dao})
        elif not locator.dao and prev_dao:
            with new_transition():
                self._dao_coordinator.unload()
                self._publish_lifecycle(EventType.DAO_UNLOADED, {"dao": prev_dao})

    def _publish_lifecycle(self, event_type: EventType, payload: Dict[str, Any]) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event_type, payload)

    # -------------------------------------------------------------------------
    # Intents
    # -------------------------------------------------------------------------

    def navigate(self, path: str) -> None:
        self._navigation_coordinator.navigate(path)

    def navigate_back(self) -> None:
        self._navigation_coordinator.navigate_back()

    def open_preferences_screen(self, screen: str, data: Optional[str] = None) -> None:
        self._navigation_coordinator.open_preferences(screen, data)

    def close_preferences(self) -> None:
        self._navigation_coordinator.close_preferences()

    async def resolve_identity(self, address: str) -> Optional[Identity]:
        return await self._identity_coordinator.resolve_identity(address)

    async def save_identity(self, address: str, label: str) -> Any:
        return await self._identity_coordinator.save(address, label)

    def cancel_identity(self) -> None:
        self._identity_coordinator.cancel()

    async def request_identity_modification(self, address: str) -> Any:
        return await self._identity_coordinator.request_modification(address)

    def set_wallet_account(self, account: Optional[str]) -> None:
        """Record the active wallet account and push it to the live client."""
        if account == self._wallet_account:
            return
        logger.info(f"Wallet account: {account or 'none'}")
        self._wallet_account = account

        wrapper = self.store.state.wrapper
        if wrapper is not None:
            wrapper.set_accounts([account] if account else [])

    def set_connected(self, connected: bool) -> None:
        if connected == self.store.state.connected:
            return
        logger.info(f"Connectivity: {'online' if connected else 'offline'}")
        self.store.publish(ConnectivityChanged(connected=connected))

    def toggle_system_apps(self) -> bool:
        opened = not self.store.state.system_apps_opened
        if self._preferences is not None:
            self._preferences.set(SYSTEM_APPS_OPENED_STATE, "1" if opened else "0")
        self.store.publish(SystemAppsToggled(opened=opened))
        return opened

    def get_stats(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = {
            "store": self.store.get_stats(),
            "dao": self._dao_coordinator.get_stats(),
        }
        get_bus_stats = getattr(self.event_bus, "get_stats", None)
        if get_bus_stats is not None:
            stats["event_bus"] = get_bus_stats()
        return stats
