"""
IdentityCoordinator - Address labels and the identity edit flow.

Responsibilities:
- Resolving address labels, waiting for the client when none is ready
- Opening identity intents requested by app instances (label pre-filled)
- Saving, cancelling and discarding the pending intent
"""

from __future__ import annotations
import asyncio
from typing import Any, Dict, Optional, TYPE_CHECKING

from ...utils.logging_setup import get_logger
from ...utils.perf_logger import log_timing_async
from ...domain.exceptions import (
    IdentityModificationCancelled,
    IdentityWriteError,
    NoOrganizationError,
    RecoverableError,
)
from ...domain.events.session_events import IdentityIntentCleared, IdentityIntentOpened
from ...models.organization import Identity
from ...models.requests import IdentityIntent, IdentityIntentRequest

if TYPE_CHECKING:
    from ..session_store import SessionStore
    from ..wrapper_readiness import WrapperReadiness

logger = get_logger(__name__)


class IdentityCoordinator:
    """
    Coordinates identity lookups and modifications.

    At most one identity intent is pending; a newer request replaces the
    older one.
    """

    def __init__(
        self,
        store: SessionStore,
        readiness: WrapperReadiness,
        config: Dict[str, Any],
    ):
        self.store = store
        self.readiness = readiness
        self._retry_delay_sec: float = config.get("resolve_retry_delay_sec", 0.1)

        self._background_tasks: set[asyncio.Task] = set()

    async def resolve_identity(self, address: str) -> Optional[Identity]:
        """
        Look up the label of ``address``.

        Waits, re-checking every retry delay, until a client is attached.
        Cancel the awaiting task to give up.
        """
        while True:
            wrapper = self.readiness.wrapper
            if wrapper is not None:
                return await wrapper.resolve_address_identity(address)
            logger.debug(f"No wrapper yet, retrying identity of {address}")
            await self.readiness.wait(timeout=self._retry_delay_sec)

    def open_intent(self, generation: int, request: IdentityIntentRequest) -> None:
        """Handle an identity intent from the client of ``generation``."""
        task = asyncio.create_task(self._open_intent(generation, request))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _open_intent(self, generation: int, request: IdentityIntentRequest) -> None:
        label: Optional[str] = None
        try:
            identity = await self.resolve_identity(request.address)
            if identity is not None:
                label = identity.name
        except Exception as e:
            # The edit opens without a pre-filled label
            logger.debug(f"Could not pre-fill identity of {request.address}: {e}")

        if generation != self.store.state.generation:
            logger.info(f"Identity intent for {request.address} outlived its organization")
            request.reject(IdentityModificationCancelled("Organization changed"))
            return

        if self.store.state.identity_intent is not None:
            logger.warning("Replacing pending identity intent")

        intent = IdentityIntent(
            address=request.address,
            label=label,
            resolve=request.resolve,
            reject=request.reject,
        )
        logger.info(f"Identity intent opened for {request.address}")
        self.store.publish(IdentityIntentOpened(generation=generation, intent=intent))

    async def save(self, address: str, label: str) -> Any:
        """
        Store ``label`` for ``address`` and settle the pending intent.

        Raises:
            RecoverableError: No intent is pending.
            NoOrganizationError: No client is attached.
            IdentityWriteError: The client failed to store the label.
        """
        intent = self.store.state.identity_intent
        if intent is None:
            raise RecoverableError("No identity modification in progress")

        wrapper = self.store.state.wrapper
        if wrapper is None:
            error = NoOrganizationError("No organization loaded to store the identity")
            intent.reject(error)
            self._clear_if_pending(intent)
            raise error

        try:
            async with log_timing_async("identity_save", extra={"address": address}):
                result = await wrapper.modify_address_identity(address, {"name": label})
        except Exception as e:
            logger.warning(f"Identity save failed for {address}: {e}")
            error = IdentityWriteError(f"Unable to save identity of {address}: {e}")
            intent.reject(error)
            raise error from e

        intent.resolve(result)
        self._clear_if_pending(intent)
        logger.info(f"Identity saved for {address}")
        return result

    def cancel(self) -> None:
        """Cancel the pending intent, if any."""
        intent = self.store.state.identity_intent
        if intent is None:
            logger.debug("No identity intent to cancel")
            return
        intent.reject(IdentityModificationCancelled())
        self.store.publish(IdentityIntentCleared())
        logger.info(f"Identity intent cancelled for {intent.address}")

    def discard_pending(self) -> None:
        """Reject the pending intent ahead of a DAO transition."""
        intent = self.store.state.identity_intent
        if intent is not None:
            logger.info(f"Discarding identity intent for {intent.address}")
            intent.reject(IdentityModificationCancelled("Organization changed"))

    async def request_modification(self, address: str) -> Any:
        """Ask the client to open the identity edit for ``address``."""
        wrapper = self.store.state.wrapper
        if wrapper is None:
            raise NoOrganizationError("No organization loaded")
        return await wrapper.request_address_identity_modification(address)

    def _clear_if_pending(self, intent: IdentityIntent) -> None:
        if self.store.state.identity_intent is intent:
            self.store.publish(IdentityIntentCleared())

    async def stop(self) -> None:
        for task in list(self._background_tasks):
            task.cancel()
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
        self._background_tasks.clear()
