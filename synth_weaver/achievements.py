"""Achievement log with persisted unlock state."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Iterator, List, Optional

from .game import TOTAL_LEVELS, NodeType, WeaveGame
from .storage import ACHIEVEMENTS_KEY, PreferencesStore

logger = logging.getLogger(__name__)

AMPLIFIER_THREAD_GOAL = 3
MAZE_LEVELS = (10, 14)
SYMMETRY_LEVEL = 3


@dataclass
class Achievement:
    id: str
    title: str
    description: str
    icon_name: str
    is_unlocked: bool = False
    progress: float = 0.0


def default_achievements() -> List[Achievement]:
    return [
        Achievement("first_weave", "FIRST THREAD", "Complete your first level", "sparkles"),
        Achievement(
            "symmetry_master",
            "SYMMETRY MASTER",
            "Complete level 3 with perfect balance",
            "circle.grid.2x2",
        ),
        Achievement(
            "energy_saver",
            "ENERGY ECONOMIST",
            "Complete a level using minimum path lengths",
            "bolt.shield",
        ),
        Achievement(
            "amplifier_pro",
            "RESONANCE EXPERT",
            "Use an amplifier to connect 3 nodes",
            "waveform.path",
        ),
        Achievement(
            "maze_runner",
            "MAZE RUNNER",
            "Navigate through a complex obstacle course",
            "map",
        ),
        Achievement(
            "weaver_grandmaster",
            "GRANDMASTER",
            f"Complete all {TOTAL_LEVELS} levels",
            "crown",
        ),
    ]


class AchievementLog:
    """Fixed list of achievements; an unlocked record never locks again."""

    def __init__(self, store: PreferencesStore):
        self.store = store
        self.achievements: List[Achievement] = default_achievements()
        self._load()

    def __iter__(self) -> Iterator[Achievement]:
        return iter(self.achievements)

    def __len__(self) -> int:
        return len(self.achievements)

    def get(self, achievement_id: str) -> Optional[Achievement]:
        for achievement in self.achievements:
            if achievement.id == achievement_id:
                return achievement
        return None

    def unlock(self, achievement_id: str) -> bool:
        achievement = self.get(achievement_id)
        if achievement is None or achievement.is_unlocked:
            return False
        achievement.is_unlocked = True
        achievement.progress = 1.0
        logger.info("Achievement unlocked: %s", achievement.title)
        self._save()
        return True

    def update_progress(self, achievement_id: str, progress: float) -> None:
        achievement = self.get(achievement_id)
        if achievement is None or achievement.is_unlocked:
            return
        achievement.progress = max(0.0, min(float(progress), 1.0))
        if achievement.progress >= 1.0:
            self.unlock(achievement_id)
            return
        self._save()

    def check_level_completion(self, game: WeaveGame) -> List[str]:
        """Apply the completion triggers for ``game``'s current level.

        Returns the ids unlocked by this call.
        """

        level = game.current_level
        candidates = ["first_weave"]
        if level == SYMMETRY_LEVEL:
            candidates.append("symmetry_master")
        if any(
            node.current_connections >= AMPLIFIER_THREAD_GOAL
            for node in game.nodes_of_type(NodeType.AMPLIFIER)
        ):
            candidates.append("amplifier_pro")
        if level in MAZE_LEVELS:
            candidates.append("maze_runner")
        if level == TOTAL_LEVELS:
            candidates.append("weaver_grandmaster")
        unlocked = []
        for achievement_id in candidates:
            if self.unlock(achievement_id):
                unlocked.append(achievement_id)
        return unlocked

    @property
    def unlocked_count(self) -> int:
        return sum(1 for achievement in self.achievements if achievement.is_unlocked)

    @property
    def mastery(self) -> int:
        if not self.achievements:
            return 0
        return int(self.unlocked_count / len(self.achievements) * 100)

    def _save(self) -> None:
        self.store.set(ACHIEVEMENTS_KEY, [asdict(a) for a in self.achievements])

    def _load(self) -> None:
        stored = self.store.get(ACHIEVEMENTS_KEY)
        if stored is None:
            return
        try:
            decoded: Dict[str, Dict] = {str(entry["id"]): entry for entry in stored}
        except (KeyError, TypeError) as exc:
            logger.warning("Ignoring stored achievements: %s", exc)
            return
        for achievement in self.achievements:
            entry = decoded.get(achievement.id)
            if entry is None:
                continue
            try:
                is_unlocked = entry["is_unlocked"]
                if not isinstance(is_unlocked, bool):
                    raise TypeError(f"is_unlocked must be a boolean, got {is_unlocked!r}")
                progress = max(0.0, min(float(entry["progress"]), 1.0))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Ignoring stored achievement %s: %s", achievement.id, exc)
                continue
            achievement.is_unlocked = is_unlocked
            achievement.progress = 1.0 if is_unlocked else progress
