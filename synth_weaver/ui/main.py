"""Command line launcher and interactive window for the weaving puzzle."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from ..campaign import Campaign, LevelLockedError
from ..config import DATA_ENV_VAR, LEVEL_ENV_VAR, WeaverDirectories, resolve_directories
from ..game import LevelLoader, NodeType, WeaveGame
from . import layout
from .toolkit import WeaveBoardUI, ensure_pygame

FINAL_FRAME_MS = 1500


class WeaverApp:
    """Pygame driven application around a :class:`Campaign`."""

    def __init__(self, campaign: Campaign, level: int = 1) -> None:
        pygame = ensure_pygame()
        self.campaign = campaign
        self.screen = pygame.display.set_mode(layout.WINDOW_SIZE)
        pygame.display.set_caption("Synth Weaver")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 28)
        self.campaign.start_level(level)
        self.board = WeaveBoardUI(
            self.campaign.game,
            cell_size=layout.CELL_SIZE,
            origin=(layout.BOARD_PADDING, layout.BOARD_PADDING),
        )
        self.status = ""
        self.running = False

    def handle_key(self, key: int) -> None:
        pygame = ensure_pygame()
        game = self.campaign.game
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_r:
            game.reset()
            self.status = ""
        elif key in (pygame.K_RETURN, pygame.K_n) and game.is_level_completed:
            result = self.campaign.complete_level()
            self.status = ""
            if result.achievements:
                self.status = "Unlocked: " + ", ".join(result.achievements)
            if result.finished:
                self.status = "All levels woven"
                self.running = False

    def draw(self) -> None:
        pygame = ensure_pygame()
        game = self.campaign.game
        self.screen.fill(layout.BACKGROUND_COLOR)
        self.screen.blit(self.board.render(), (layout.BOARD_PADDING, layout.BOARD_PADDING))
        title = f"LEVEL {game.current_level:02d}  {game.level.name}"
        if game.is_level_completed:
            title += "  -  COMPLETE (press N)"
        text = self.font.render(title, True, layout.SUN_FIBER_COLOR)
        self.screen.blit(
            text,
            (layout.BOARD_PADDING, layout.WINDOW_SIZE[1] - 56),
        )
        if self.status:
            status = self.font.render(self.status, True, layout.TEXT_COLOR)
            self.screen.blit(status, (layout.BOARD_PADDING, layout.WINDOW_SIZE[1] - 30))
        pygame.display.flip()

    def run(self) -> None:
        pygame = ensure_pygame()
        self.running = True
        while self.running:
            events = pygame.event.get()
            for event in events:
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self.handle_key(event.key)
            self.board.process_events(events)
            self.draw()
            self.clock.tick(60)
        # Last frame shows the closing status before the window goes away.
        self.draw()
        pygame.time.wait(FINAL_FRAME_MS)
        pygame.quit()


def describe_level(game: WeaveGame) -> str:
    lines = [f"Level {game.current_level:02d}: {game.level.name}"]
    for node in game.nodes:
        line = f"  {node.type.value:<9} ({node.position.x}, {node.position.y})"
        if node.type is not NodeType.OBSTACLE:
            line += f" capacity {node.connection_capacity}"
        lines.append(line)
    return "\n".join(lines)


def bootstrap_directories() -> WeaverDirectories:
    """Return resolved directories and print a short bootstrap message."""

    directories = resolve_directories()
    message = (
        "Synth Weaver bootstrap\n"
        f"  levels: {directories.level_root}\n"
        f"  data:   {directories.data_root}\n"
        f"Set {LEVEL_ENV_VAR} or {DATA_ENV_VAR} to point to custom directories."
    )
    print(message)
    return directories


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Synth Weaver launcher")
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print resolved directories and exit.",
    )
    parser.add_argument(
        "--list-levels",
        action="store_true",
        help="List levels with their unlock state and exit.",
    )
    parser.add_argument("--level", type=int, default=None, help="Level number to show or play.")
    parser.add_argument("--play", action="store_true", help="Open the interactive window.")
    parser.add_argument("--reset", action="store_true", help="Reset level progress.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.info:
        bootstrap_directories()
        return 0

    directories = resolve_directories()
    campaign = Campaign(directories)

    if args.reset:
        campaign.progress.reset_progress()
        print("Progress reset.")

    if args.list_levels:
        loader = LevelLoader(directories.level_root)
        print("Available levels:")
        for number in loader.available():
            level = loader.load(number)
            state = "unlocked" if campaign.progress.is_level_unlocked(number) else "locked"
            print(f"  {number:02d} {level.name} [{state}]")
        return 0

    level = args.level or campaign.progress.unlocked_levels
    try:
        game = campaign.start_level(level)
    except LevelLockedError as exc:
        print(str(exc))
        return 1

    if args.play:
        WeaverApp(campaign, level).run()
        return 0

    print(describe_level(game))
    return 0


def run() -> None:
    """Entry point helper that instantiates and runs the UI."""

    raise SystemExit(main(["--play"]))


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    raise SystemExit(main())
