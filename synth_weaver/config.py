"""Resolve level and save-data directories from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .game import default_level_root

LEVEL_ENV_VAR = "SYNTH_WEAVER_LEVEL_ROOT"
DATA_ENV_VAR = "SYNTH_WEAVER_DATA_ROOT"


@dataclass(frozen=True)
class WeaverDirectories:
    """Bundle with resolved directories required by the game."""

    level_root: Path
    data_root: Path


def _default_data_root() -> Path:
    return Path.home() / ".synth_weaver"


def _read_directory(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


def resolve_directories(check_exists: bool = True) -> WeaverDirectories:
    """Resolve directories using environment variables.

    Parameters
    ----------
    check_exists:
        When *True*, raise :class:`FileNotFoundError` if the level directory
        does not exist. The data directory is created on first save and is
        never checked.
    """

    level_root = _read_directory(LEVEL_ENV_VAR, default_level_root())
    data_root = _read_directory(DATA_ENV_VAR, _default_data_root())

    if check_exists and not level_root.exists():
        raise FileNotFoundError(f"Level directory does not exist: {level_root}")

    return WeaverDirectories(level_root=level_root, data_root=data_root)
