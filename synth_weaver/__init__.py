"""Synth Weaver package."""

from .campaign import Campaign
from .game import GridPosition, Level, LevelLoader, NodeType, SolutionValidator, WeaveGame

__all__ = [
    "Campaign",
    "GridPosition",
    "Level",
    "LevelLoader",
    "NodeType",
    "SolutionValidator",
    "WeaveGame",
]
