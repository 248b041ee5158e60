"""
Game implementations for the search engine.

Each game implements the GameState / Game interfaces from base.py.
"""

from .base import (
    DRAW,
    FIRST_PLAYER,
    SECOND_PLAYER,
    Game,
    GameState,
    other_player,
    register_game,
    get_game,
    list_games,
)
from .zobrist import ZobristTable

# Import games to register them
from . import connect4
from . import tictactoe

__all__ = [
    "DRAW",
    "FIRST_PLAYER",
    "SECOND_PLAYER",
    "Game",
    "GameState",
    "other_player",
    "register_game",
    "get_game",
    "list_games",
    "ZobristTable",
]
