"""Campaign flow tying a weave session to the persisted holders."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .achievements import AchievementLog
from .config import WeaverDirectories, resolve_directories
from .gallery import Gallery, SavedPattern
from .game import TOTAL_LEVELS, LevelLoader, WeaveGame
from .progress import LevelProgress
from .storage import PreferencesStore

logger = logging.getLogger(__name__)


class WeaverError(Exception):
    """Base class for campaign errors."""


class LevelLockedError(WeaverError):
    def __init__(self, level: int, unlocked: int):
        super().__init__(f"Level {level} is locked (unlocked up to {unlocked})")
        self.level = level
        self.unlocked = unlocked


class LevelNotCompleteError(WeaverError):
    def __init__(self, level: int):
        super().__init__(f"Level {level} is not complete yet")
        self.level = level


@dataclass
class CompletionResult:
    level: int
    pattern: SavedPattern
    unlocked_next: bool
    achievements: List[str] = field(default_factory=list)
    next_level: Optional[int] = None

    @property
    def finished(self) -> bool:
        return self.next_level is None


class Campaign:
    """Level progression, gallery and achievements around one session."""

    def __init__(
        self,
        directories: Optional[WeaverDirectories] = None,
        *,
        store: Optional[PreferencesStore] = None,
    ):
        self.directories = directories or resolve_directories()
        self.store = store or PreferencesStore(self.directories.data_root)
        self.loader = LevelLoader(self.directories.level_root)
        self.progress = LevelProgress(self.store)
        self.achievements = AchievementLog(self.store)
        self.gallery = Gallery(self.store)
        self.game = WeaveGame(1, loader=self.loader)

    def start_level(self, level: int) -> WeaveGame:
        if not self.progress.is_level_unlocked(level):
            raise LevelLockedError(level, self.progress.unlocked_levels)
        self.game.load_level(level)
        return self.game

    def complete_level(self) -> CompletionResult:
        """Record a solved level and move on to the next one."""

        game = self.game
        level = game.current_level
        if not game.is_level_completed:
            raise LevelNotCompleteError(level)
        pattern = self.gallery.save_pattern(level, game.nodes, game.connections)
        unlocked = self.progress.unlock_next_level(after=level)
        earned = self.achievements.check_level_completion(game)
        next_level = None
        if level < TOTAL_LEVELS:
            game.next_level()
            next_level = game.current_level
        else:
            logger.info("Campaign finished")
        return CompletionResult(
            level=level,
            pattern=pattern,
            unlocked_next=unlocked,
            achievements=earned,
            next_level=next_level,
        )
