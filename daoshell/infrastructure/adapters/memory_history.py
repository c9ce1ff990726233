"""
In-memory navigation history.

Mirrors hash-history semantics: a stack of entries with a cursor. A push
drops every entry after the cursor, a replace overwrites the entry under
the cursor, and going back moves the cursor. Listeners are notified
synchronously after each change.
"""

from __future__ import annotations
from typing import Callable, List, Union
from urllib.parse import urlsplit

from ...domain.interfaces.history import HistoryListener, HistoryLocation, NavigationHistory
from ...utils.logging_setup import get_logger

logger = get_logger(__name__)


def location_from_path(path: str) -> HistoryLocation:
    """Split ``/dao/app?x=1`` into a location."""
    parts = urlsplit(path or "/")
    pathname = parts.path or "/"
    if not pathname.startswith("/"):
        pathname = f"/{pathname}"
    search = f"?{parts.query}" if parts.query else ""
    return HistoryLocation(pathname=pathname, search=search)


class MemoryHistory(NavigationHistory):
    """History kept in memory, for the CLI shell and tests."""

    def __init__(self, initial_path: str = "/"):
        self._entries: List[HistoryLocation] = [location_from_path(initial_path)]
        self._index = 0
        self._listeners: List[HistoryListener] = []

    @property
    def location(self) -> HistoryLocation:
        return self._entries[self._index]

    @property
    def entries(self) -> List[HistoryLocation]:
        return list(self._entries)

    @property
    def index(self) -> int:
        return self._index

    def push(self, path: str) -> None:
        location = location_from_path(path)
        del self._entries[self._index + 1:]
        self._entries.append(location)
        self._index += 1
        logger.debug(f"push {location.path}")
        self._notify()

    def replace(self, location: Union[str, HistoryLocation]) -> None:
        if isinstance(location, str):
            location = location_from_path(location)
        self._entries[self._index] = location
        logger.debug(f"replace {location.path}")
        self._notify()

    def go_back(self) -> None:
        if self._index == 0:
            logger.debug("go_back at first entry ignored")
            return
        self._index -= 1
        logger.debug(f"back to {self.location.path}")
        self._notify()

    def listen(self, listener: HistoryListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unlisten() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unlisten

    def _notify(self) -> None:
        location = self.location
        for listener in list(self._listeners):
            listener(location)

