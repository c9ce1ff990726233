"""Domain events: session reducer events and presentation bus event types."""

from .event_types import EventType, COALESCED_EVENTS
from .session_events import (
    # Base
    SessionEvent,
    DaoScopedEvent,
    # Lifecycle
    LocatorChanged,
    DaoLoadStarted,
    DaoUnloaded,
    WrapperAttached,
    DaoLoadFailed,
    ConnectivityChanged,
    SystemAppsToggled,
    # Client callbacks
    DaoAddressResolved,
    AppsUpdated,
    PermissionsUpdated,
    AppIdentifiersUpdated,
    InstalledReposUpdated,
    TransactionBagUpdated,
    SignatureBagUpdated,
    IdentityIntentOpened,
    IdentityIntentCleared,
)

__all__ = [
    "EventType",
    "COALESCED_EVENTS",
    "SessionEvent",
    "DaoScopedEvent",
    "LocatorChanged",
    "DaoLoadStarted",
    "DaoUnloaded",
    "WrapperAttached",
    "DaoLoadFailed",
    "ConnectivityChanged",
    "SystemAppsToggled",
    "DaoAddressResolved",
    "AppsUpdated",
    "PermissionsUpdated",
    "AppIdentifiersUpdated",
    "InstalledReposUpdated",
    "TransactionBagUpdated",
    "SignatureBagUpdated",
    "IdentityIntentOpened",
    "IdentityIntentCleared",
]
