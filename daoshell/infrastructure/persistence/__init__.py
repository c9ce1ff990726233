"""Local persistence."""

from .preferences_store import PreferencesStore, SYSTEM_APPS_OPENED_STATE

__all__ = ["PreferencesStore", "SYSTEM_APPS_OPENED_STATE"]
