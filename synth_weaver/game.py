"""Core game logic for the thread weaving puzzle."""

from __future__ import annotations

import json
import logging
import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


GRID_SIZE = 8
TOTAL_LEVELS = 16
DEFAULT_ENERGY_BUDGET = 100
DEFAULT_CELL_SIZE = 40.0
# Minimum distance between recorded drag points.
DRAG_POINT_SPACING = 10.0

Point = Tuple[float, float]


def default_level_root() -> Path:
    return Path(__file__).resolve().parent / "levels"


def default_solution_root() -> Path:
    return Path(__file__).resolve().parent / "solutions"


class NodeType(Enum):
    """Roles a node can play on the weaving grid."""

    SOLAR_HEART = "source"
    AURA_RECEIVER = "receiver"
    OBSTACLE = "obstacle"
    AMPLIFIER = "amplifier"

    @staticmethod
    def from_name(name: str) -> "NodeType":
        key = str(name).strip().lower()
        for node_type in NodeType:
            if key in (node_type.value, node_type.name.lower()):
                return node_type
        raise ValueError(f"Unknown node type: {name}")

    @property
    def accepts_threads(self) -> bool:
        return self in (NodeType.AURA_RECEIVER, NodeType.AMPLIFIER)


@dataclass(frozen=True)
class GridPosition:
    x: int
    y: int

    def as_list(self) -> List[int]:
        return [self.x, self.y]

    def center(self, cell_size: float) -> Point:
        return (
            self.x * cell_size + cell_size / 2,
            self.y * cell_size + cell_size / 2,
        )


@dataclass
class WeaveNode:
    """A node placed on the grid; counts the threads attached to it."""

    type: NodeType
    position: GridPosition
    connection_capacity: int
    current_connections: int = 0
    is_active: bool = False
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def has_spare_capacity(self) -> bool:
        return self.current_connections < self.connection_capacity

    @property
    def is_filled(self) -> bool:
        return self.current_connections >= self.connection_capacity


@dataclass
class WeaveConnection:
    """A thread between two nodes. Path points are cosmetic only."""

    from_node_id: uuid.UUID
    to_node_id: uuid.UUID
    path_points: List[Point] = field(default_factory=list)
    strength: float = 1.0
    is_optimal: bool = False
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class NodeSeed:
    """Literal node entry from a level table."""

    type: NodeType
    position: GridPosition
    capacity: int
    active: bool = False

    def spawn(self) -> WeaveNode:
        return WeaveNode(
            type=self.type,
            position=self.position,
            connection_capacity=self.capacity,
            is_active=self.active,
        )


@dataclass
class Level:
    """In-memory representation of a level definition."""

    number: int
    name: str
    width: int = GRID_SIZE
    height: int = GRID_SIZE
    seeds: List[NodeSeed] = field(default_factory=list)

    @property
    def metadata(self) -> Dict[str, object]:
        return {
            "number": self.number,
            "name": self.name,
            "dimensions": f"{self.width}x{self.height}",
            "receivers": sum(
                1 for seed in self.seeds if seed.type is NodeType.AURA_RECEIVER
            ),
        }

    def inside(self, position: GridPosition) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def spawn_nodes(self) -> List[WeaveNode]:
        return [seed.spawn() for seed in self.seeds]


class LevelLoader:
    """Load level tables stored as JSON."""

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root is not None else default_level_root()

    @staticmethod
    def filename(number: int) -> str:
        return f"level_{int(number):02d}.json"

    def available(self) -> List[int]:
        numbers = []
        for path in self.root.glob("level_*.json"):
            try:
                numbers.append(int(path.stem.split("_", 1)[1]))
            except (IndexError, ValueError):
                continue
        return sorted(numbers)

    def load(self, number: int) -> Level:
        path = self.root / self.filename(number)
        if not path.exists():
            raise FileNotFoundError(path)
        data = json.loads(path.read_text())
        return self._parse_level(data)

    def _parse_level(self, data: Dict) -> Level:
        level = Level(
            number=int(data["number"]),
            name=data.get("name", f"Level {data['number']}"),
            width=int(data.get("width", GRID_SIZE)),
            height=int(data.get("height", GRID_SIZE)),
        )
        for node in data.get("nodes", []):
            node_type = NodeType.from_name(node["type"])
            position = GridPosition(*(int(v) for v in node["position"]))
            if not level.inside(position):
                raise ValueError(
                    f"Node at {position.as_list()} lies outside level {level.number}"
                )
            capacity = int(node.get("capacity", 0) or 0)
            if node_type is NodeType.OBSTACLE:
                capacity = 0
            level.seeds.append(
                NodeSeed(
                    type=node_type,
                    position=position,
                    capacity=max(0, capacity),
                    active=bool(node.get("active", node_type is NodeType.SOLAR_HEART)),
                )
            )
        return level


class WeaveGame:
    """Grid session: nodes, threads, drag gesture and completion state."""

    def __init__(
        self,
        level_number: int = 1,
        *,
        loader: Optional[LevelLoader] = None,
    ):
        self.loader = loader or LevelLoader()
        self.level: Optional[Level] = None
        self.nodes: List[WeaveNode] = []
        self.connections: List[WeaveConnection] = []
        self.energy_budget = DEFAULT_ENERGY_BUDGET
        self.is_level_completed = False
        self.current_level = level_number
        self.drag_start_node: Optional[WeaveNode] = None
        self.current_drag_point: Optional[Point] = None
        self.drag_path: List[Point] = []
        self.load_level(level_number)

    # ------------------------------------------------------------------
    # Level handling
    # ------------------------------------------------------------------
    def load_level(self, number: int) -> None:
        """Load a level table and reset the session state."""

        try:
            level = self.loader.load(number)
        except FileNotFoundError:
            if number == 1:
                raise
            logger.warning("Level %s is not available, falling back to level 1", number)
            level = self.loader.load(1)
        self.level = level
        self.current_level = level.number
        self.nodes = level.spawn_nodes()
        self.connections = []
        self.is_level_completed = False
        self.energy_budget = DEFAULT_ENERGY_BUDGET
        self._clear_drag()
        logger.debug("Loaded level %s (%s)", level.number, level.name)

    def reset(self) -> None:
        self.load_level(self.current_level)

    def next_level(self) -> bool:
        if self.current_level < TOTAL_LEVELS:
            self.load_level(self.current_level + 1)
            return True
        return False

    def node_at(self, position: GridPosition) -> Optional[WeaveNode]:
        for node in self.nodes:
            if node.position == position:
                return node
        return None

    def node_by_id(self, node_id: uuid.UUID) -> Optional[WeaveNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def nodes_of_type(self, node_type: NodeType) -> List[WeaveNode]:
        return [node for node in self.nodes if node.type is node_type]

    # ------------------------------------------------------------------
    # Drag gesture
    # ------------------------------------------------------------------
    def start_drag(self, node: WeaveNode, start_point: Point) -> bool:
        if self.is_level_completed:
            return False
        if (
            node.type in (NodeType.SOLAR_HEART, NodeType.AMPLIFIER)
            or node.has_spare_capacity
        ):
            self.drag_start_node = node
            self.drag_path = [_as_point(start_point)]
            return True
        return False

    def update_drag(self, point: Point) -> None:
        if self.is_level_completed:
            return
        point = _as_point(point)
        self.current_drag_point = point
        if self.drag_path:
            last = self.drag_path[-1]
            if math.hypot(point[0] - last[0], point[1] - last[1]) > DRAG_POINT_SPACING:
                self.drag_path.append(point)

    def end_drag(self, point: Point, cell_size: float) -> Optional[WeaveConnection]:
        start_node = self.drag_start_node
        if start_node is None:
            return None
        connection = None
        drop = GridPosition(int(point[0] / cell_size), int(point[1] / cell_size))
        target = self.node_at(drop)
        if (
            target is not None
            and target.id != start_node.id
            and target.type.accepts_threads
            and target.has_spare_capacity
        ):
            connection = self.add_connection(start_node, target, self.drag_path)
            self.check_completion()
        self._clear_drag()
        return connection

    def cancel_drag(self) -> None:
        self._clear_drag()

    def _clear_drag(self) -> None:
        self.drag_start_node = None
        self.current_drag_point = None
        self.drag_path = []

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------
    def add_connection(
        self,
        from_node: WeaveNode,
        to_node: WeaveNode,
        path: Iterable[Point] = (),
    ) -> WeaveConnection:
        connection = WeaveConnection(
            from_node_id=from_node.id,
            to_node_id=to_node.id,
            path_points=[_as_point(p) for p in path],
            strength=1.0,
        )
        self.connections.append(connection)
        for node_id in (from_node.id, to_node.id):
            node = self.node_by_id(node_id)
            if node is not None:
                node.current_connections += 1
        logger.debug(
            "Thread %s -> %s on level %s",
            from_node.position.as_list(),
            to_node.position.as_list(),
            self.current_level,
        )
        return connection

    def connect(
        self,
        from_position: GridPosition,
        to_position: GridPosition,
        *,
        cell_size: float = DEFAULT_CELL_SIZE,
    ) -> Optional[WeaveConnection]:
        """Drag a thread between two cell centres."""

        node = self.node_at(from_position)
        if node is None:
            return None
        if not self.start_drag(node, from_position.center(cell_size)):
            return None
        end_point = to_position.center(cell_size)
        self.update_drag(end_point)
        return self.end_drag(end_point, cell_size)

    def check_completion(self) -> bool:
        receivers = self.nodes_of_type(NodeType.AURA_RECEIVER)
        if receivers and all(node.is_filled for node in receivers):
            if not self.is_level_completed:
                logger.info("Level %s complete", self.current_level)
            self.is_level_completed = True
        return self.is_level_completed

    def max_amplifier_connections(self) -> int:
        return max(
            (node.current_connections for node in self.nodes_of_type(NodeType.AMPLIFIER)),
            default=0,
        )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def snapshot(self) -> Dict[str, object]:
        positions = {node.id: node.position.as_list() for node in self.nodes}
        return {
            "metadata": self.level.metadata if self.level else {},
            "nodes": [
                {
                    "type": node.type.value,
                    "position": node.position.as_list(),
                    "capacity": node.connection_capacity,
                    "connections": node.current_connections,
                    "active": node.is_active,
                }
                for node in self.nodes
            ],
            "connections": [
                {
                    "from": positions.get(connection.from_node_id),
                    "to": positions.get(connection.to_node_id),
                    "points": [list(p) for p in connection.path_points],
                    "strength": connection.strength,
                }
                for connection in self.connections
            ],
            "energy_budget": self.energy_budget,
            "completed": self.is_level_completed,
        }


class SolutionValidator:
    """Replay a reference solution and report whether it completes the level."""

    def __init__(self, level_loader: LevelLoader, solutions_root: Optional[Path] = None):
        self.level_loader = level_loader
        self.solutions_root = (
            Path(solutions_root) if solutions_root is not None else default_solution_root()
        )

    def load_solution(self, number: int) -> Dict:
        path = self.solutions_root / LevelLoader.filename(number)
        if not path.exists():
            raise FileNotFoundError(path)
        return json.loads(path.read_text())

    def apply_solution(self, game: WeaveGame, solution: Dict) -> List[WeaveConnection]:
        made: List[WeaveConnection] = []
        for thread in solution.get("threads", []):
            connection = game.connect(
                GridPosition(*thread["from"]), GridPosition(*thread["to"])
            )
            if connection is not None:
                made.append(connection)
        return made

    def validate(self, number: int) -> bool:
        solution = self.load_solution(number)
        game = WeaveGame(number, loader=self.level_loader)
        made = self.apply_solution(game, solution)
        if len(made) != len(solution.get("threads", [])):
            return False
        return game.is_level_completed == bool(solution.get("expected_complete", True))


def _as_point(point: Iterable[float]) -> Point:
    x, y = point
    return (float(x), float(y))
