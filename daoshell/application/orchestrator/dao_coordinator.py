"""
DaoCoordinator - Owns the organization client lifecycle.

Responsibilities:
- Opening a new generation for every DAO load or unload
- Tearing down the previous client (cancel, readiness cleared)
- Constructing the client for the new DAO in a background task
- Binding client callbacks to the generation that created them
- Discarding construction results from superseded generations
"""

from __future__ import annotations
import asyncio
from typing import Any, Callable, Dict, Optional, Sequence, TYPE_CHECKING

from ...utils.logging_setup import get_logger
from ...utils.perf_logger import log_timing_async
from ...domain.exceptions import DaoConnectionError, SessionSupersededError
from ...domain.interfaces.organization_client import (
    ClientCallbacks,
    ConnectionOptions,
    OrganizationConnector,
)
from ...domain.events.session_events import (
    AppIdentifiersUpdated,
    AppsUpdated,
    DaoAddressResolved,
    DaoLoadFailed,
    DaoLoadStarted,
    DaoUnloaded,
    InstalledReposUpdated,
    PermissionsUpdated,
    SignatureBagUpdated,
    TransactionBagUpdated,
    WrapperAttached,
)
from ...domain.services.repo_upgrades import RepoUpgradeDetector
from ...models.organization import AppInstance, DaoAddress, RepoInfo
from ...models.requests import IdentityIntentRequest, PathRequest

if TYPE_CHECKING:
    from ..session_store import SessionStore
    from ..wrapper_readiness import WrapperReadiness

logger = get_logger(__name__)


class DaoCoordinator:
    """
    Coordinates DAO transitions and the organization client they own.

    At most one client is live at a time: the one built for the current
    generation. A construction that completes after a newer transition
    started is cancelled and never attached.
    """

    def __init__(
        self,
        store: SessionStore,
        readiness: WrapperReadiness,
        connector: OrganizationConnector,
        upgrade_detector: RepoUpgradeDetector,
        config: Dict[str, Any],
        wallet_account: Callable[[], Optional[str]],
        on_identity_intent: Callable[[int, IdentityIntentRequest], None],
        on_request_path: Callable[[PathRequest], None],
        on_teardown: Optional[Callable[[], None]] = None,
    ):
        self.store = store
        self.readiness = readiness
        self.connector = connector
        self.upgrade_detector = upgrade_detector

        self._provider: str = config.get("provider", "")
        self._wallet_provider: Optional[str] = config.get("wallet_provider")
        self._connect_warn_ms: float = config.get("connect_warn_ms", 5000.0)

        self._wallet_account = wallet_account
        self._on_identity_intent = on_identity_intent
        self._on_request_path = on_request_path
        self._on_teardown = on_teardown

        self._generation = store.state.generation

        # Background task tracking
        self._background_tasks: set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def load(self, dao: str) -> None:
        """Start loading ``dao``: reset per-DAO state, then connect in the background."""
        generation = self._begin_transition()
        logger.info(f"Init DAO {dao} (generation {generation})")
        self.store.publish(DaoLoadStarted(generation=generation, dao=dao))
        if not self.is_current(generation):
            # A listener started a newer transition while this one was published
            return

        task = asyncio.create_task(self._connect(dao, generation))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    def unload(self) -> None:
        """Leave the current DAO: reset per-DAO state without reconnecting."""
        generation = self._begin_transition()
        logger.info(f"Unload DAO (generation {generation})")
        self.store.publish(DaoUnloaded(generation=generation))

    def _begin_transition(self) -> int:
        self._generation += 1
        self._cancel_owned()

        if self._on_teardown is not None:
            self._on_teardown()
        return self._generation

    def _cancel_owned(self) -> None:
        """Cancel every client this coordinator handed out, then clear readiness."""
        owned = [self.store.state.wrapper, self.readiness.wrapper]
        for wrapper in {id(w): w for w in owned if w is not None}.values():
            logger.debug("Cancelling previous wrapper")
            wrapper.cancel()
        self.readiness.detach()

    async def _connect(self, dao: str, generation: int) -> None:
        options = ConnectionOptions(
            provider=self._provider,
            wallet_provider=self._wallet_provider,
            wallet_account=self._wallet_account(),
            callbacks=self._callbacks_for(generation),
        )

        try:
            async with log_timing_async(
                "dao_connect",
                warn_threshold_ms=self._connect_warn_ms,
                error_threshold_ms=self._connect_warn_ms * 6,
                extra={"dao": dao, "generation": generation},
            ):
                wrapper = await self.connector(dao, options)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if not self.is_current(generation):
                logger.info(f"Ignoring failure of superseded connection to {dao}: {e}")
                return
            logger.error(f"Wrapper init, fatal error: {type(e).__name__}. {e}")
            error = DaoConnectionError(dao, e)
            error.__cause__ = e
            self.store.publish(DaoLoadFailed(generation=generation, error=error))
            return

        if not self.is_current(generation) or self.store.state.fatal_error is not None:
            logger.info(f"Discarding stale wrapper for {dao} (generation {generation})")
            wrapper.cancel()
            return

        account = self._wallet_account()
        if account:
            wrapper.set_accounts([account])

        self.store.publish(WrapperAttached(generation=generation, wrapper=wrapper))
        self.readiness.attach(wrapper, generation)
        logger.info(f"Wrapper attached for {dao}")

    def _callbacks_for(self, generation: int) -> ClientCallbacks:
        """Build the callback set for one generation; stale calls are dropped here."""
        publish = self.store.publish

        def live(name: str) -> bool:
            if self.is_current(generation):
                return True
            logger.debug(f"Dropping {name} from superseded wrapper (generation {generation})")
            return False

        def on_dao_address(dao_address: DaoAddress) -> None:
            if live("dao_address"):
                logger.debug(f"DAO address: {dao_address.address}")
                publish(DaoAddressResolved(generation=generation, dao_address=dao_address))

        def on_web3(web3: Any) -> None:
            if live("web3"):
                logger.debug("Web3 instance received")

        def on_apps(apps: Sequence[AppInstance]) -> None:
            if live("apps"):
                logger.debug(f"Apps: {len(apps)}")
                publish(AppsUpdated(generation=generation, apps=tuple(apps)))

        def on_permissions(permissions: Dict[str, Any]) -> None:
            if live("permissions"):
                publish(PermissionsUpdated(generation=generation, permissions=dict(permissions)))

        def on_forwarders(forwarders: Sequence[Any]) -> None:
            if live("forwarders"):
                logger.debug(f"Forwarders: {len(forwarders)}")

        def on_app_identifiers(app_identifiers: Dict[str, str]) -> None:
            if live("app_identifiers"):
                publish(AppIdentifiersUpdated(generation=generation, app_identifiers=dict(app_identifiers)))

        def on_installed_repos(repos: Sequence[RepoInfo]) -> None:
            if live("installed_repos"):
                repos = tuple(repos)
                publish(InstalledReposUpdated(
                    generation=generation,
                    repos=repos,
                    can_upgrade_org=self.upgrade_detector.can_upgrade_org(repos),
                ))

        def on_transaction(transaction_bag: Any) -> None:
            if live("transaction"):
                publish(TransactionBagUpdated(generation=generation, transaction_bag=transaction_bag))

        def on_signatures(signature_bag: Any) -> None:
            if live("signatures"):
                publish(SignatureBagUpdated(generation=generation, signature_bag=signature_bag))

        def on_identity_intent(request: IdentityIntentRequest) -> None:
            if live("identity_intent"):
                self._on_identity_intent(generation, request)
            else:
                request.reject(SessionSupersededError(request.address))

        def on_request_path(request: PathRequest) -> None:
            if live("request_path"):
                self._on_request_path(request)
            else:
                request.reject(SessionSupersededError(request.app_address))

        return ClientCallbacks(
            on_dao_address=on_dao_address,
            on_web3=on_web3,
            on_apps=on_apps,
            on_permissions=on_permissions,
            on_forwarders=on_forwarders,
            on_app_identifiers=on_app_identifiers,
            on_installed_repos=on_installed_repos,
            on_transaction=on_transaction,
            on_signatures=on_signatures,
            on_identity_intent=on_identity_intent,
            on_request_path=on_request_path,
        )

    async def stop(self) -> None:
        """Cancel the live client and any pending construction."""
        self._cancel_owned()

        for task in list(self._background_tasks):
            task.cancel()
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
        self._background_tasks.clear()

    def get_stats(self) -> Dict[str, Any]:
        return {
            "generation": self._generation,
            "pending_connections": len(self._background_tasks),
            "wrapper_ready": self.readiness.is_ready,
        }
