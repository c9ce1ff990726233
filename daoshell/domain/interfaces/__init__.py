"""Domain interfaces for external collaborators."""

from .event_bus import EventBus
from .history import HistoryListener, HistoryLocation, NavigationHistory
from .organization_client import (
    ClientCallbacks,
    ConnectionOptions,
    OrganizationClient,
    OrganizationConnector,
)

__all__ = [
    "EventBus",
    "HistoryListener",
    "HistoryLocation",
    "NavigationHistory",
    "ClientCallbacks",
    "ConnectionOptions",
    "OrganizationClient",
    "OrganizationConnector",
]
