"""Shared symbols: app modes, load statuses and name-service constants."""

from __future__ import annotations
from enum import Enum


# Name-service suffix stripped from DAO names in the visible URL
ARAGONID_ENS_DOMAIN = "aragonid.eth"

# Instance shown when a DAO path names no app instance
HOME_INSTANCE_ID = "home"


class AppMode(Enum):
    """Top-level mode of the shell, derived from the path."""
    START = "start"
    SETUP = "setup"
    ORG = "org"


class LoadStatus(Enum):
    """
    Lifecycle of a remotely loaded slice of state.

    Used for both ``dao_status`` (identity resolution) and
    ``apps_status`` (installed application enumeration).
    """
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
