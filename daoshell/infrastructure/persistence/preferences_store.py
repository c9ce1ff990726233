"""
Key-value preferences persisted as a JSON file.

Stands in for the browser's local storage: string keys, string values,
read once at startup and written through on every change.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Optional, Union

from ...utils.logging_setup import get_logger

logger = get_logger(__name__)

SYSTEM_APPS_OPENED_STATE = "SYSTEM_APPS_OPENED_STATE"


class PreferencesStore:
    """String preferences backed by a JSON file (or memory when no path)."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self._values: Dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        if self.path is None or not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed preferences file {self.path}")
            return
        self._values = {str(k): str(v) for k, v in data.items()}
        logger.debug(f"Loaded {len(self._values)} preferences from {self.path}")

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._save()

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")
        tmp.replace(self.path)
