"""Simple command line demo for the weaving logic."""

import sys

from .game import LevelLoader, SolutionValidator, WeaveGame


def main(level_number: int = 1) -> None:
    level_loader = LevelLoader()
    validator = SolutionValidator(level_loader)

    game = WeaveGame(level_number, loader=level_loader)
    solution = validator.load_solution(game.current_level)
    validator.apply_solution(game, solution)
    results = game.snapshot()

    print("=== Synth Weaver Demo ===")
    print(f"Level: {results['metadata']['number']} ({results['metadata']['name']})")
    print("Node connections:")
    for node in results["nodes"]:
        if node["type"] == "obstacle":
            continue
        print(f"  {node['type']} {tuple(node['position'])}: {node['connections']}/{node['capacity']}")
    print(f"Threads woven: {len(results['connections'])}")
    print(f"Completed: {results['completed']}")


if __name__ == "__main__":
    main(int(sys.argv[1]) if len(sys.argv) > 1 else 1)
