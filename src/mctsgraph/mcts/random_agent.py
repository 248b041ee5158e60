"""
Flat Monte Carlo baseline.

Spreads playouts evenly over the root actions (round-robin) and picks the
action with the best mean result. No tree, no reuse between moves. It
shares the Mcts agent interface so the two can be swapped in an arena.
"""

from __future__ import annotations

from typing import Any, Callable, Optional
import time
import numpy as np

from ..games.base import GameState
from ..utils.seed import make_rng


def _check_budget(max_iterations: int, max_time: float) -> None:
    if max_iterations <= 0 and max_time <= 0:
        raise ValueError("At least one of max_iterations and max_time must be positive")


class RandomAgent:
    """
    Random-playout baseline agent.

    Args:
        state: Position to play from (copied)
        max_iterations: Playouts per decision (0 = no limit)
        max_time: Seconds per decision (0 = no limit)
        rng: Random generator
        clock: Time source in seconds
    """

    def __init__(
        self,
        state: GameState,
        max_iterations: int = 1000,
        max_time: float = 0.0,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        _check_budget(max_iterations, max_time)
        self.max_iterations = max_iterations
        self.max_time = max_time
        self.rng = rng if rng is not None else make_rng()
        self.clock = clock

        self._root_state = state.copy()
        self._state = state.copy()
        self.actions_done: list = []
        self.iterations = 0
        self._start = clock()

        self._actions: list = []
        self._totals = np.zeros(0, dtype=np.float64)
        self._visits = np.zeros(0, dtype=np.int64)

    def playout(self, action: Any) -> float:
        """Play action then random moves to the end; score for the root mover."""
        sim = self._root_state.copy()
        player = sim.side_to_move()
        sim.apply_action(action)
        last_mover = player

        while not sim.is_terminal():
            mover = sim.side_to_move()
            if sim.apply_random_action(self.rng) is None:
                break
            last_mover = mover

        score = sim.evaluate_terminal()
        if last_mover != player:
            score = 1.0 - score
        return score

    def best_action(self) -> Optional[Any]:
        """
        Run round-robin playouts and return the best root action.

        Returns:
            The action with the highest mean playout score (first wins
            ties), or None if there is no legal action
        """
        self._actions = self._root_state.valid_actions()
        self._totals = np.zeros(len(self._actions), dtype=np.float64)
        self._visits = np.zeros(len(self._actions), dtype=np.int64)
        if not self._actions:
            return None

        self.init_counters()
        i = 0
        while self.computation_resources():
            self._totals[i] += self.playout(self._actions[i])
            self._visits[i] += 1
            i = (i + 1) % len(self._actions)
            self.iterations += 1

        with np.errstate(divide="ignore", invalid="ignore"):
            means = self._totals / self._visits
            means = np.nan_to_num(means, nan=-1.0)
        return self._actions[int(np.argmax(means))]

    def root_moves_eval(self) -> list[tuple[Any, float, int]]:
        """(action, mean score, playouts) for each root action of the last search."""
        return [
            (action, self._totals[i] / max(self._visits[i], 1), int(self._visits[i]))
            for i, action in enumerate(self._actions)
        ]

    def apply_root_action(self, action: Any) -> None:
        """Commit a real move; the next search starts from the new position."""
        if not self._root_state.apply_action(action):
            raise ValueError(f"Action {action!r} did not change the root state")
        self._state = self._root_state.copy()
        self.actions_done.append(action)

    def computation_resources(self) -> bool:
        time_ok = self.max_time <= 0 or self.time_elapsed() < self.max_time
        iterations_ok = self.max_iterations <= 0 or self.iterations < self.max_iterations
        return time_ok and iterations_ok

    def init_counters(self) -> None:
        self.iterations = 0
        self._start = self.clock()

    def time_elapsed(self) -> float:
        return self.clock() - self._start

    def set_max_iterations(self, n: int) -> None:
        _check_budget(n, self.max_time)
        self.max_iterations = n

    def set_max_time(self, seconds: float) -> None:
        _check_budget(self.max_iterations, seconds)
        self.max_time = seconds

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def root_state(self) -> GameState:
        """The committed position: the start plus every applied root action."""
        return self._root_state
