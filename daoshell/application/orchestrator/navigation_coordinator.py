"""
NavigationCoordinator - Keeps the locator in sync with the history.

Responsibilities:
- Parsing raw history locations into locators
- Normalizing name-service suffixed DAO names in the visible path
- Idempotent navigation, back navigation, preferences screens
- Arbitrating path change requests from app instances
"""

from __future__ import annotations
from typing import Callable, Optional, TYPE_CHECKING

from ...utils.logging_setup import get_logger
from ...domain.exceptions import NavigationRejectedError
from ...domain.events.session_events import LocatorChanged
from ...domain.interfaces.history import HistoryLocation, NavigationHistory
from ...domain.routing import (
    get_app_path,
    get_locator_path,
    get_preferences_search,
    has_ens_suffix,
    parse_path,
)
from ...domain.symbols import ARAGONID_ENS_DOMAIN, AppMode
from ...models.locator import Locator
from ...models.requests import PathRequest

if TYPE_CHECKING:
    from ..session_store import SessionStore

logger = get_logger(__name__)

LocatorChangeHandler = Callable[[Locator, Optional[Locator]], None]


class NavigationCoordinator:
    """
    Reconciles the navigation history with the session locator.

    Every location that was not issued by the coordinator itself for
    normalization is parsed. The locator is stored first, then the DAO
    transition handler runs; a navigation made by a listener meanwhile
    wins over the one in progress.
    """

    def __init__(
        self,
        store: SessionStore,
        history: NavigationHistory,
        on_locator_change: LocatorChangeHandler,
    ):
        self.store = store
        self.history = history
        self._on_locator_change = on_locator_change
        self._unlisten: Optional[Callable[[], None]] = None
        # Latest locator; the store lags behind it while draining nested events
        self._locator: Optional[Locator] = store.state.locator

    def attach(self) -> None:
        """Start following the history, processing the current location first."""
        if self._unlisten is not None:
            return
        self._unlisten = self.history.listen(self.handle_history_change)
        self.handle_history_change(self.history.location)

    def detach(self) -> None:
        if self._unlisten is not None:
            self._unlisten()
            self._unlisten = None

    def handle_history_change(self, location: HistoryLocation) -> None:
        if location.already_parsed:
            logger.debug(f"Skipping normalized location {location.path}")
            return
        self.update_locator(parse_path(location.pathname, location.search))

    def update_locator(self, locator: Locator) -> None:
        prev_locator = self._locator
        self._locator = locator
        logger.info(f"Locator: {locator.path} ({locator.mode.value})")

        self.store.publish(LocatorChanged(locator=locator, prev_locator=prev_locator))
        if self._is_superseded(locator):
            return

        self._on_locator_change(locator, prev_locator)
        if self._is_superseded(locator):
            return

        # Show the short DAO name without re-entering the parser
        if has_ens_suffix(locator.dao):
            self.history.replace(HistoryLocation(
                pathname=locator.pathname.replace(f".{ARAGONID_ENS_DOMAIN}", ""),
                search=locator.search,
                state={"already_parsed": True},
            ))

    def _is_superseded(self, locator: Locator) -> bool:
        """True when a listener navigated elsewhere while ``locator`` was applied."""
        if self._locator is locator:
            return False
        logger.debug(f"Locator {locator.path} superseded by {self._locator.path}")
        return True

    def navigate(self, path: str) -> None:
        """Push ``path`` unless it is already the current path."""
        locator = self._locator
        if locator is not None and path == locator.path:
            logger.debug(f"Already at {path}")
            return
        self.history.push(path)

    def navigate_back(self) -> None:
        if self.store.state.prev_locator is not None:
            self.history.go_back()
        else:
            self.history.replace("/")

    def open_preferences(self, screen: str, data: Optional[str] = None) -> None:
        locator = self._current_locator()
        self.navigate(get_locator_path(locator, search=get_preferences_search(screen, data)))

    def close_preferences(self) -> None:
        locator = self._current_locator()
        self.navigate(get_locator_path(locator, search=""))

    def handle_request_path(self, request: PathRequest) -> None:
        """Let the active app instance change its own sub-path."""
        locator = self.store.state.locator
        if locator is None or request.app_address != locator.instance_id:
            logger.warning(f"Rejected path change from inactive app {request.app_address}")
            request.reject(NavigationRejectedError(request.app_address))
            return

        request.resolve()
        self.history.replace(get_app_path(
            mode=AppMode.ORG,
            dao=locator.dao,
            instance_id=locator.instance_id,
            instance_path=request.path,
        ))

    def _current_locator(self) -> Locator:
        return self.store.state.locator or parse_path("/")
