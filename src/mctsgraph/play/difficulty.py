"""
Difficulty system for engine opponents.

Difficulty is controlled by two parameters:
1. Iterations: How many MCTS iterations per move (thinking depth)
2. Selection: How the move is picked at the root. Strong levels pick the
   most visited move; weak levels pick by best single playout, which is
   noisy and leads to occasional blunders.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..mcts.search import ActionSelection


class Difficulty(Enum):
    """Preset difficulty levels."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    IMPOSSIBLE = "impossible"


@dataclass
class DifficultyConfig:
    """
    Configuration for engine difficulty.

    Attributes:
        max_iterations: MCTS iterations per move
        selection: Root move selection criterion
        name: Human-readable name
        description: Description for UI
    """
    max_iterations: int
    selection: ActionSelection = ActionSelection.BY_N_VISITS
    name: str = ""
    description: str = ""

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")


# Default presets
DIFFICULTY_PRESETS: dict[Difficulty, DifficultyConfig] = {
    Difficulty.EASY: DifficultyConfig(
        max_iterations=50,
        selection=ActionSelection.BY_BEST_VALUE,
        name="Easy",
        description="Shallow and noisy - makes mistakes often",
    ),
    Difficulty.MEDIUM: DifficultyConfig(
        max_iterations=300,
        selection=ActionSelection.BY_AVG_VALUE,
        name="Medium",
        description="Moderate challenge",
    ),
    Difficulty.HARD: DifficultyConfig(
        max_iterations=2000,
        name="Hard",
        description="Strong play",
    ),
    Difficulty.IMPOSSIBLE: DifficultyConfig(
        max_iterations=10000,
        name="Impossible",
        description="Maximum strength",
    ),
}


# Tic-tac-toe is tiny; a few hundred iterations already play perfectly
GAME_DIFFICULTY_OVERRIDES: dict[str, dict[Difficulty, DifficultyConfig]] = {
    "tictactoe": {
        Difficulty.EASY: DifficultyConfig(
            max_iterations=10,
            selection=ActionSelection.BY_BEST_VALUE,
            name="Easy",
            description="Makes random-looking moves",
        ),
        Difficulty.MEDIUM: DifficultyConfig(
            max_iterations=40,
            selection=ActionSelection.BY_AVG_VALUE,
            name="Medium",
            description="Decent but beatable",
        ),
        Difficulty.HARD: DifficultyConfig(
            max_iterations=200,
            name="Hard",
            description="Strong play",
        ),
        Difficulty.IMPOSSIBLE: DifficultyConfig(
            max_iterations=1000,
            name="Impossible",
            description="Will always draw or win",
        ),
    },
}


def get_difficulty_config(
    difficulty: Difficulty,
    game_name: Optional[str] = None,
) -> DifficultyConfig:
    """
    Get difficulty configuration.

    Args:
        difficulty: Preset difficulty level
        game_name: Optional game name for game-specific tuning

    Returns:
        DifficultyConfig for the specified difficulty
    """
    if game_name and game_name in GAME_DIFFICULTY_OVERRIDES:
        return GAME_DIFFICULTY_OVERRIDES[game_name][difficulty]
    return DIFFICULTY_PRESETS[difficulty]
