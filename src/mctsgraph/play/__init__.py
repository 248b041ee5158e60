"""
Play module: matches between agents and difficulty control.
"""

from .arena import Arena, ArenaResult, play_game
from .difficulty import (
    Difficulty,
    DifficultyConfig,
    DIFFICULTY_PRESETS,
    get_difficulty_config,
)

__all__ = [
    "Arena",
    "ArenaResult",
    "play_game",
    "Difficulty",
    "DifficultyConfig",
    "DIFFICULTY_PRESETS",
    "get_difficulty_config",
]
