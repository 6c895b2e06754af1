"""Level unlock bookkeeping."""

from __future__ import annotations

import logging

from .game import TOTAL_LEVELS
from .storage import UNLOCKED_LEVELS_KEY, PreferencesStore

logger = logging.getLogger(__name__)


class LevelProgress:
    """High-water mark of the levels a player may enter."""

    def __init__(self, store: PreferencesStore, total_levels: int = TOTAL_LEVELS):
        self.store = store
        self.total_levels = total_levels
        self.unlocked_levels = 1
        self._load()

    def unlock_next_level(self, after: int) -> bool:
        if after == self.unlocked_levels and self.unlocked_levels < self.total_levels:
            self.unlocked_levels += 1
            logger.info("Unlocked level %s", self.unlocked_levels)
            self._save()
            return True
        return False

    def is_level_unlocked(self, level: int) -> bool:
        return level <= self.unlocked_levels

    def reset_progress(self) -> None:
        self.unlocked_levels = 1
        self._save()

    def _save(self) -> None:
        self.store.set(UNLOCKED_LEVELS_KEY, self.unlocked_levels)

    def _load(self) -> None:
        saved = self.store.get(UNLOCKED_LEVELS_KEY, 0)
        try:
            saved = int(saved)
        except (TypeError, ValueError):
            logger.warning("Ignoring stored unlock value %r", saved)
            saved = 0
        self.unlocked_levels = min(saved, self.total_levels) if saved > 0 else 1
