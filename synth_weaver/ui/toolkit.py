"""Pygame input adapter and flat board renderer.

Mouse gestures on the board are translated into the drag operations of
:class:`synth_weaver.game.WeaveGame`. Rendering stays deterministic so it can
be exercised in automated tests using the SDL ``dummy`` video driver.
"""

from __future__ import annotations

import os
from typing import Iterable, Optional, Tuple

from ..game import GridPosition, WeaveGame
from . import layout

# Pygame is imported lazily so test environments can choose the SDL drivers
# before the first import.
_PYGAME = None


def ensure_pygame():
    global _PYGAME
    if _PYGAME is None:
        os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        _PYGAME = __import__("pygame")
        _PYGAME.display.init()
        _PYGAME.font.init()
    return _PYGAME


class WeaveBoardUI:
    """Board view bound to a single :class:`WeaveGame`."""

    def __init__(
        self,
        game: WeaveGame,
        *,
        cell_size: int = layout.CELL_SIZE,
        surface=None,
        origin: Tuple[int, int] = (0, 0),
    ) -> None:
        pygame = ensure_pygame()
        self.game = game
        self.cell_size = cell_size
        self.origin = origin
        width = self.game.level.width * cell_size
        height = self.game.level.height * cell_size
        self.surface = surface or pygame.Surface((width, height))
        self.font = pygame.font.Font(None, max(12, cell_size // 4))

    # ------------------------------------------------------------------
    # Input handling
    def process_events(self, events: Iterable[object]) -> None:
        pygame = ensure_pygame()
        for event in events:
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.press(self._to_board(event.pos))
            elif event.type == pygame.MOUSEMOTION:
                self.move(self._to_board(event.pos))
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self.release(self._to_board(event.pos))

    def press(self, point: Tuple[float, float]) -> bool:
        cell = self._grid_from_point(point)
        if cell is None:
            return False
        node = self.game.node_at(cell)
        if node is None or self.game.drag_start_node is not None:
            return False
        if not self.game.start_drag(node, point):
            return False
        self.game.update_drag(point)
        return True

    def move(self, point: Tuple[float, float]) -> None:
        if self.game.drag_start_node is not None:
            self.game.update_drag(point)

    def release(self, point: Tuple[float, float]):
        if self._grid_from_point(point) is None:
            self.game.cancel_drag()
            return None
        return self.game.end_drag(point, self.cell_size)

    def _to_board(self, pos: Tuple[int, int]) -> Tuple[float, float]:
        return (float(pos[0] - self.origin[0]), float(pos[1] - self.origin[1]))

    def _grid_from_point(self, point: Tuple[float, float]) -> Optional[GridPosition]:
        if point[0] < 0 or point[1] < 0:
            return None
        cell = GridPosition(int(point[0] // self.cell_size), int(point[1] // self.cell_size))
        if not self.game.level.inside(cell):
            return None
        return cell

    # ------------------------------------------------------------------
    # Rendering helpers
    def render(self):
        self.surface.fill(layout.BACKGROUND_COLOR)
        self._draw_grid()
        self._draw_threads()
        self._draw_nodes()
        return self.surface

    def _draw_grid(self) -> None:
        pygame = ensure_pygame()
        for x in range(self.game.level.width):
            for y in range(self.game.level.height):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size,
                    self.cell_size,
                )
                pygame.draw.rect(self.surface, layout.GRID_LINE_COLOR, rect, 1)

    def _draw_threads(self) -> None:
        pygame = ensure_pygame()
        for connection in self.game.connections:
            from_node = self.game.node_by_id(connection.from_node_id)
            to_node = self.game.node_by_id(connection.to_node_id)
            if from_node is None or to_node is None:
                continue
            points = [from_node.position.center(self.cell_size)]
            points.extend(connection.path_points[1:])
            points.append(to_node.position.center(self.cell_size))
            pygame.draw.lines(
                self.surface, layout.thread_color(from_node.type), False, points, 3
            )
        start = self.game.drag_start_node
        if start is not None and self.game.current_drag_point is not None:
            points = [start.position.center(self.cell_size)]
            points.extend(self.game.drag_path[1:])
            points.append(self.game.current_drag_point)
            pygame.draw.lines(self.surface, layout.DRAG_COLOR, False, points, 2)

    def _draw_nodes(self) -> None:
        pygame = ensure_pygame()
        radius = max(4, self.cell_size // 3)
        for node in self.game.nodes:
            center = node.position.center(self.cell_size)
            color = layout.NODE_COLORS[node.type]
            pygame.draw.circle(self.surface, color, center, radius)
            if node.connection_capacity:
                # Label sits in the cell corner so the node centre keeps its color.
                label = self.font.render(
                    f"{node.current_connections}/{node.connection_capacity}",
                    True,
                    layout.TEXT_COLOR,
                )
                self.surface.blit(
                    label,
                    (
                        node.position.x * self.cell_size + 2,
                        node.position.y * self.cell_size + 2,
                    ),
                )


__all__ = ["WeaveBoardUI", "ensure_pygame"]
