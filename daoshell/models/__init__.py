"""Data models."""

from .locator import Locator, Preferences
from .organization import AppInstance, DaoAddress, Identity, RepoInfo, RepoVersion
from .requests import (
    IdentityIntent,
    IdentityIntentRequest,
    PathRequest,
    PendingRequest,
)
from .session_state import SessionState

__all__ = [
    "Locator",
    "Preferences",
    "AppInstance",
    "DaoAddress",
    "Identity",
    "RepoInfo",
    "RepoVersion",
    "IdentityIntent",
    "IdentityIntentRequest",
    "PathRequest",
    "PendingRequest",
    "SessionState",
]
