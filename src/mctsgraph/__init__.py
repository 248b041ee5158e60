"""
mctsgraph - Game-agnostic Monte Carlo Tree Search.

Searches any two-player (or single-player) game whose states implement
the GameState interface, on a graph keyed by position hashes so that
transpositions share statistics.

Supported games:
- Tic-Tac-Toe
- Connect 4

Usage:
    from mctsgraph.games import get_game
    from mctsgraph.mcts import Mcts
    from mctsgraph.utils import MCTSConfig

    game = get_game('tictactoe')
    state = game.initial_state()

    agent = Mcts(state, MCTSConfig(max_iterations=500, seed=0))
    action = agent.best_action()
    agent.apply_root_action(action)  # keeps the subtree for the next move
"""

__version__ = "0.1.0"

from . import games
from . import mcts
from . import play
from . import utils

__all__ = [
    "games",
    "mcts",
    "play",
    "utils",
    "__version__",
]
