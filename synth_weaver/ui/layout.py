"""Layout constants for the weaving board UI."""

from __future__ import annotations

from typing import Dict, Tuple

from ..game import GRID_SIZE, NodeType

# Board metrics
CELL_SIZE: int = 72
BOARD_PADDING: int = 20
WINDOW_SIZE: Tuple[int, int] = (
    GRID_SIZE * CELL_SIZE + 2 * BOARD_PADDING,
    GRID_SIZE * CELL_SIZE + 2 * BOARD_PADDING + 64,
)

# Colors expressed as RGB tuples
BACKGROUND_COLOR: Tuple[int, int, int] = (14, 12, 28)
GRID_LINE_COLOR: Tuple[int, int, int] = (44, 40, 72)
SUN_FIBER_COLOR: Tuple[int, int, int] = (255, 185, 52)
AURA_FIBER_COLOR: Tuple[int, int, int] = (139, 72, 245)
OBSTACLE_COLOR: Tuple[int, int, int] = (52, 50, 62)
AMPLIFIER_COLOR: Tuple[int, int, int] = (80, 220, 230)
DRAG_COLOR: Tuple[int, int, int] = (200, 200, 210)
TEXT_COLOR: Tuple[int, int, int] = (232, 236, 244)

NODE_COLORS: Dict[NodeType, Tuple[int, int, int]] = {
    NodeType.SOLAR_HEART: SUN_FIBER_COLOR,
    NodeType.AURA_RECEIVER: AURA_FIBER_COLOR,
    NodeType.OBSTACLE: OBSTACLE_COLOR,
    NodeType.AMPLIFIER: AMPLIFIER_COLOR,
}


def thread_color(node_type: NodeType) -> Tuple[int, int, int]:
    if node_type is NodeType.SOLAR_HEART:
        return SUN_FIBER_COLOR
    return AURA_FIBER_COLOR
