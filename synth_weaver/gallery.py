"""Gallery of saved thread patterns, most recent first."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .game import GridPosition, WeaveConnection, WeaveNode
from .storage import SAVED_PATTERNS_KEY, PreferencesStore

logger = logging.getLogger(__name__)


@dataclass
class ConnectionData:
    from_pos: GridPosition
    to_pos: GridPosition
    points: List[Tuple[float, float]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "from_pos": {"x": self.from_pos.x, "y": self.from_pos.y},
            "to_pos": {"x": self.to_pos.x, "y": self.to_pos.y},
            "points": [{"x": x, "y": y} for x, y in self.points],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "ConnectionData":
        return cls(
            from_pos=GridPosition(int(data["from_pos"]["x"]), int(data["from_pos"]["y"])),
            to_pos=GridPosition(int(data["to_pos"]["x"]), int(data["to_pos"]["y"])),
            points=[(float(p["x"]), float(p["y"])) for p in data.get("points", [])],
        )


@dataclass
class SavedPattern:
    level_number: int
    connections: List[ConnectionData]
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": str(self.id),
            "level_number": self.level_number,
            "date": self.date.isoformat(),
            "connections": [connection.to_dict() for connection in self.connections],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "SavedPattern":
        return cls(
            id=uuid.UUID(str(data["id"])),
            level_number=int(data["level_number"]),
            date=datetime.fromisoformat(data["date"]),
            connections=[ConnectionData.from_dict(c) for c in data.get("connections", [])],
        )


class Gallery:
    """Append-only collection of solved patterns, deletable by id."""

    def __init__(self, store: PreferencesStore):
        self.store = store
        self.saved_patterns: List[SavedPattern] = []
        self._load()

    def __iter__(self) -> Iterator[SavedPattern]:
        return iter(self.saved_patterns)

    def __len__(self) -> int:
        return len(self.saved_patterns)

    def get(self, pattern_id: uuid.UUID) -> Optional[SavedPattern]:
        for pattern in self.saved_patterns:
            if pattern.id == pattern_id:
                return pattern
        return None

    def save_pattern(
        self,
        level: int,
        nodes: Iterable[WeaveNode],
        connections: Iterable[WeaveConnection],
    ) -> SavedPattern:
        positions = {node.id: node.position for node in nodes}
        data: List[ConnectionData] = []
        for connection in connections:
            from_pos = positions.get(connection.from_node_id)
            to_pos = positions.get(connection.to_node_id)
            if from_pos is None or to_pos is None:
                continue
            data.append(
                ConnectionData(
                    from_pos=from_pos,
                    to_pos=to_pos,
                    points=list(connection.path_points),
                )
            )
        pattern = SavedPattern(level_number=level, connections=data)
        self.saved_patterns.insert(0, pattern)
        logger.debug("Saved pattern %s for level %s", pattern.id, level)
        self._save()
        return pattern

    def delete_pattern(self, pattern_id) -> None:
        """Remove the pattern with ``pattern_id`` (a UUID or its string form)."""

        try:
            pattern_id = uuid.UUID(str(pattern_id))
        except ValueError:
            logger.warning("Cannot delete pattern with invalid id %r", pattern_id)
            return
        remaining = [p for p in self.saved_patterns if p.id != pattern_id]
        if len(remaining) != len(self.saved_patterns):
            self.saved_patterns = remaining
            self._save()

    def _save(self) -> None:
        self.store.set(SAVED_PATTERNS_KEY, [p.to_dict() for p in self.saved_patterns])

    def _load(self) -> None:
        stored = self.store.get(SAVED_PATTERNS_KEY)
        if stored is None:
            return
        try:
            self.saved_patterns = [SavedPattern.from_dict(entry) for entry in stored]
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Ignoring stored gallery: %s", exc)
