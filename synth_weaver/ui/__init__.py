"""User interface package for the weaving puzzle."""

from .main import WeaverApp, bootstrap_directories, main, run
from .toolkit import WeaveBoardUI

__all__ = [
    "WeaveBoardUI",
    "WeaverApp",
    "bootstrap_directories",
    "main",
    "run",
]
