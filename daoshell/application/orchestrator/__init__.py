"""Session orchestrator and its coordinators."""

from .orchestrator import SessionOrchestrator
from .dao_coordinator import DaoCoordinator
from .identity_coordinator import IdentityCoordinator
from .navigation_coordinator import NavigationCoordinator

__all__ = [
    "SessionOrchestrator",
    "DaoCoordinator",
    "IdentityCoordinator",
    "NavigationCoordinator",
]
