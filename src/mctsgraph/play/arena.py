"""
Arena for evaluating agents through head-to-head matches.

An agent is anything with best_action() and apply_root_action(action);
Mcts and RandomAgent both qualify. Agents are passed as factories taking
the starting state, so every game gets fresh agents.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from ..games.base import DRAW, Game, GameState


class Agent(Protocol):
    def best_action(self) -> Optional[Any]: ...

    def apply_root_action(self, action: Any) -> None: ...


AgentFactory = Callable[[GameState], Agent]


@dataclass
class ArenaResult:
    """Results from arena evaluation."""

    wins: int
    losses: int
    draws: int
    total_games: int
    win_rate: float

    @property
    def score(self) -> float:
        """Win rate counting draws as half."""
        return (self.wins + 0.5 * self.draws) / self.total_games if self.total_games > 0 else 0.0


def play_game(
    game: Game,
    agents: tuple[AgentFactory, AgentFactory],
    max_moves: Optional[int] = None,
    on_move: Optional[Callable[[int, Any, GameState], None]] = None,
) -> tuple[Optional[int], list]:
    """
    Play one game between two agents.

    The first agent plays the side to move in the initial position. Both
    agents are told about every move, so tree agents keep their graphs.

    Args:
        game: Game to play
        agents: (first, second) agent factories
        max_moves: Stop and call it a draw after this many moves
        on_move: Optional callback(agent_index, action, state) after each move

    Returns:
        (winner, moves) where winner is 0, 1, or None for a draw

    Raises:
        ValueError: If an agent has no move or plays a no-op while the game
            is still on
    """
    state = game.initial_state()
    players = [factory(state) for factory in agents]
    owner = {state.side_to_move(): 0}
    moves: list = []
    last_mover = None

    while not state.is_terminal():
        if max_moves is not None and len(moves) >= max_moves:
            return None, moves

        mover = state.side_to_move()
        if mover not in owner:
            owner[mover] = 1
        index = owner[mover]

        action = players[index].best_action()
        if action is None:
            raise ValueError(f"Agent {index} returned no action in a non-terminal position")

        if not state.apply_action(action):
            raise ValueError(f"Agent {index} played a no-op action {action!r}")
        for player in players:
            player.apply_root_action(action)

        moves.append(action)
        last_mover = mover
        if on_move:
            on_move(index, action, state)

    if last_mover is None:
        return None, moves

    value = state.evaluate_terminal()
    if value == DRAW:
        return None, moves
    winner = owner[last_mover]
    return (winner if value > DRAW else 1 - winner), moves


class Arena:
    """
    Arena for agent evaluation matches.

    Args:
        game: Game to play
        num_games: Number of games per evaluation
        alternate_colors: Swap who moves first every other game
        max_moves: Optional move cap per game (reaching it is a draw)
    """

    def __init__(
        self,
        game: Game,
        num_games: int = 10,
        alternate_colors: bool = True,
        max_moves: Optional[int] = None,
    ):
        self.game = game
        self.num_games = num_games
        self.alternate_colors = alternate_colors
        self.max_moves = max_moves

    def evaluate(
        self,
        candidate: AgentFactory,
        opponent: AgentFactory,
        progress_callback: Callable[[int, str], None] = None,
    ) -> ArenaResult:
        """
        Evaluate candidate against opponent.

        Args:
            candidate: Factory for the agent being evaluated
            opponent: Factory for the reference agent
            progress_callback: Optional callback(games_completed, result)

        Returns:
            ArenaResult from candidate's perspective
        """
        wins = 0
        losses = 0
        draws = 0

        for i in range(self.num_games):
            candidate_first = not self.alternate_colors or i % 2 == 0
            if candidate_first:
                winner, _ = play_game(self.game, (candidate, opponent), self.max_moves)
                candidate_index = 0
            else:
                winner, _ = play_game(self.game, (opponent, candidate), self.max_moves)
                candidate_index = 1

            if winner is None:
                draws += 1
                result = "D"
            elif winner == candidate_index:
                wins += 1
                result = "W"
            else:
                losses += 1
                result = "L"

            if progress_callback:
                progress_callback(i + 1, result)

        total = wins + losses + draws
        win_rate = wins / total if total > 0 else 0.0

        return ArenaResult(
            wins=wins,
            losses=losses,
            draws=draws,
            total_games=total,
            win_rate=win_rate,
        )
