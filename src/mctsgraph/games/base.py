"""
Abstract base classes for searchable games.

Any game whose states implement the GameState interface can be searched
by the MCTS engine. The engine doesn't need to know anything about the
rules - it just needs each state to:
1. Identify itself with a stable key (for the transposition table)
2. Report whose turn it is and whether the game is over
3. List and apply legal actions
4. Score terminal positions from the point of view of the last mover
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Hashable, Optional
import numpy as np


# Conventional players for two-player games
FIRST_PLAYER = 0
SECOND_PLAYER = 1

# Terminal reward for a drawn game
DRAW = 0.5


def other_player(player: int) -> int:
    """Return the opponent of a two-player game player."""
    return 1 - player


class GameState(ABC):
    """
    Abstract base class for a mutable, cheaply copyable game position.

    Key concepts:
    - Key: hashable identity of the position. Equal positions must give
      equal keys, whatever move order reached them.
    - Rewards live in [0, 1]. Terminal rewards are expressed from the point
      of view of the player who made the terminal move (1 = that player
      won, 0.5 = draw, 0 = that player lost).

    Actions are opaque values: anything hashable and comparable with ==.
    """

    @abstractmethod
    def key(self) -> Hashable:
        """Return the transposition key of this position."""
        pass

    @abstractmethod
    def side_to_move(self) -> Any:
        """Return the player about to act."""
        pass

    @abstractmethod
    def is_terminal(self) -> bool:
        """Return True iff no further action is legal."""
        pass

    @abstractmethod
    def valid_actions(self) -> list:
        """
        Return the legal actions from this position.

        A fresh list is returned on every call; callers may keep or mutate it.
        """
        pass

    @abstractmethod
    def apply_action(self, action: Any) -> bool:
        """
        Play an action in place.

        Args:
            action: Action to play

        Returns:
            True if the action changed the state, False for a no-op
        """
        pass

    @abstractmethod
    def evaluate_terminal(self) -> float:
        """
        Score a terminal position for the player who made the last move.

        Returns:
            Reward in [0, 1]; DRAW (0.5) for a draw
        """
        pass

    @abstractmethod
    def copy(self) -> GameState:
        """Return an independent copy of this state."""
        pass

    def apply_random_action(self, rng: np.random.Generator) -> Optional[Any]:
        """
        Play a uniformly random legal action.

        Args:
            rng: Random generator supplied by the caller

        Returns:
            The action played, or None if there was none
        """
        actions = self.valid_actions()
        if not actions:
            return None
        action = actions[int(rng.integers(len(actions)))]
        self.apply_action(action)
        return action

    def evaluate(self, action: Any) -> float:
        """
        Partial reward earned by playing action from this position.

        Games without intermediate rewards keep the default of 0.
        """
        return 0.0

    def is_trivial(self, action: Any) -> bool:
        """
        Return True if action is a legal no-op not worth exploring.

        Games without pass-like moves keep the default.
        """
        return False

    def render(self) -> str:
        """Render the position as text. Optional."""
        return ""

    def __str__(self) -> str:
        return self.render() or super().__str__()


class Game(ABC):
    """
    Factory for the states of one game.

    A game object owns the resources its states share (e.g. a Zobrist
    table), so they are created once and passed explicitly.
    """

    name: str = ""

    @abstractmethod
    def initial_state(self) -> GameState:
        """Return the starting position."""
        pass

    def parse_action(self, text: str) -> Any:
        """
        Convert user input into an action.

        Default implementation parses an integer.
        """
        return int(text.strip())

    def format_action(self, action: Any) -> str:
        """Convert an action into text for display."""
        return str(action)


# Registry of available games
_GAME_REGISTRY: dict[str, type[Game]] = {}


def register_game(name: str):
    """Decorator to register a game class."""
    def decorator(cls: type[Game]):
        cls.name = name
        _GAME_REGISTRY[name] = cls
        return cls
    return decorator


def get_game(name: str, **kwargs) -> Game:
    """Get a game instance by name."""
    if name not in _GAME_REGISTRY:
        available = ", ".join(_GAME_REGISTRY.keys())
        raise ValueError(f"Unknown game '{name}'. Available: {available}")
    return _GAME_REGISTRY[name](**kwargs)


def list_games() -> list[str]:
    """List all registered games."""
    return list(_GAME_REGISTRY.keys())
