"""Local key-value preferences store backed by a single JSON file."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

UNLOCKED_LEVELS_KEY = "SynthWeaver_UnlockedLevels"
ACHIEVEMENTS_KEY = "SynthWeaver_Achievements"
SAVED_PATTERNS_KEY = "SynthWeaver_SavedPatterns"

PREFERENCES_FILENAME = "preferences.json"


class PreferencesStore:
    """Flat key-value blobs persisted as JSON.

    The whole mapping is kept in memory and rewritten on every ``set``.
    Reads of a missing or corrupt file and failed writes are logged and
    otherwise ignored, so callers always fall back to their own defaults.
    """

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = Path(root) if root is not None else None
        self._data: Dict[str, Any] = self._load()

    @property
    def path(self) -> Optional[Path]:
        if self.root is None:
            return None
        return self.root / PREFERENCES_FILENAME

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._save()

    def keys(self):
        return list(self._data)

    def _load(self) -> Dict[str, Any]:
        path = self.path
        if path is None or not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Could not load %s: %s", path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected an object, got %s", path, type(data).__name__)
            return {}
        return data

    def _save(self) -> None:
        path = self.path
        if path is None:
            return
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
        except OSError as exc:
            logger.warning("Could not save %s: %s", path, exc)
            return
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not save %s: %s", path, exc)
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
