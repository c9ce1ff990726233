"""Navigation history interface (the browser-visible location)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Union


@dataclass(frozen=True)
class HistoryLocation:
    """A raw location as reported by the navigation source."""
    pathname: str = "/"
    search: str = ""
    state: Dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return f"{self.pathname}{self.search}"

    @property
    def already_parsed(self) -> bool:
        return bool(self.state.get("already_parsed"))


HistoryListener = Callable[[HistoryLocation], None]


class NavigationHistory(ABC):
    """
    Source of navigation events and sink for navigation commands.

    Listeners are notified after every push, replace and go_back.
    """

    @property
    @abstractmethod
    def location(self) -> HistoryLocation:
        """Current location."""
        pass

    @abstractmethod
    def push(self, path: str) -> None:
        """Add a new history entry."""
        pass

    @abstractmethod
    def replace(self, location: Union[str, HistoryLocation]) -> None:
        """Replace the current entry without adding one."""
        pass

    @abstractmethod
    def go_back(self) -> None:
        """Pop one history entry."""
        pass

    @abstractmethod
    def listen(self, listener: HistoryListener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Callable removing the listener.
        """
        pass
