"""Locator model: parsed representation of the current location."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..domain.symbols import AppMode


@dataclass(frozen=True)
class Preferences:
    """Preferences screen requested through the query string."""
    screen: str
    data: str = ""


@dataclass(frozen=True)
class Locator:
    """
    Immutable location produced by :func:`daoshell.domain.routing.parse_path`.

    A locator with no ``dao`` implies no active organization session.
    """
    mode: AppMode
    pathname: str = "/"
    search: str = ""
    dao: Optional[str] = None
    instance_id: Optional[str] = None
    instance_path: Optional[str] = None
    action: Optional[str] = None
    preferences: Optional[Preferences] = None

    @property
    def path(self) -> str:
        """Full visible path (pathname plus query)."""
        return f"{self.pathname}{self.search}"
