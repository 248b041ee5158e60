"""
Pluggable selection and rollout policies.

Selection policies score the edges of a node during the tree walk:

    score = policy(exploration_constant, parent_visits)
    best = max(node.children, key=score)

UCB1 on the running average:
    avg(e) + c * sqrt(ln(N_parent) / (n(e) + 1))

Rollout policies pick the next action of a simulated playout. They only
choose; the search applies the action so it can score it first.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Optional
import numpy as np

from .graph import Edge
from ..games.base import GameState


EdgeScore = Callable[[Edge], float]

# Exploration bonus once the time-cutoff policy stops exploring
CUTOFF_EPSILON = 1e-5


class UCB1:
    """Standard UCB1 on running averages."""

    def __call__(self, exploration_constant: float, parent_visits: int) -> EdgeScore:
        log_n = math.log(max(parent_visits, 1))

        def score(edge: Edge) -> float:
            return edge.avg_val + exploration_constant * math.sqrt(
                log_n / (edge.n_visits + 1.0)
            )

        return score


class TimeCutoffUCB1:
    """
    UCB1 that stops exploring once the parent has enough visits.

    Past cutoff visits the exploration term collapses to a tiny constant
    and selection becomes greedy on the running average. Cheaper, and in
    games with long playouts it tends to converge faster.

    Args:
        cutoff: Parent visit count at which exploration stops
    """

    def __init__(self, cutoff: int = 30):
        if cutoff < 1:
            raise ValueError(f"cutoff must be at least 1, got {cutoff}")
        self.cutoff = cutoff

    def __call__(self, exploration_constant: float, parent_visits: int) -> EdgeScore:
        if parent_visits < self.cutoff:
            log_n = math.log(max(parent_visits, 1))

            def score(edge: Edge) -> float:
                bonus = exploration_constant * math.sqrt(log_n / (edge.n_visits + 1.0))
                return edge.avg_val + bonus
        else:
            def score(edge: Edge) -> float:
                return edge.avg_val + CUTOFF_EPSILON

        return score


SELECTION_POLICIES: dict[str, type] = {
    "ucb1": UCB1,
    "time_cutoff": TimeCutoffUCB1,
}


def get_selection_policy(name: str, **kwargs):
    """Get a selection policy instance by name."""
    if name not in SELECTION_POLICIES:
        available = ", ".join(SELECTION_POLICIES.keys())
        raise ValueError(f"Unknown selection policy '{name}'. Available: {available}")
    return SELECTION_POLICIES[name](**kwargs)


class RandomRollout:
    """Uniformly random playout actions."""

    def __init__(self, rng: np.random.Generator):
        self.rng = rng

    def __call__(self, state: GameState) -> Optional[Any]:
        actions = state.valid_actions()
        if not actions:
            return None
        return actions[int(self.rng.integers(len(actions)))]


class WeightedRollout:
    """
    Playout actions sampled in proportion to heuristic weights.

    Args:
        rng: Random generator
        weight_fn: Function (state, actions) -> non-negative weights
    """

    def __init__(
        self,
        rng: np.random.Generator,
        weight_fn: Callable[[GameState, list], Any],
    ):
        self.rng = rng
        self.weight_fn = weight_fn

    def __call__(self, state: GameState) -> Optional[Any]:
        actions = state.valid_actions()
        if not actions:
            return None

        weights = np.asarray(self.weight_fn(state, actions), dtype=np.float64)
        if weights.shape != (len(actions),):
            raise ValueError(
                f"weight_fn returned {weights.shape[0] if weights.ndim else 0} "
                f"weights for {len(actions)} actions"
            )
        if np.any(weights < 0):
            raise ValueError("Rollout weights must be non-negative")

        total = weights.sum()
        if total <= 0:
            # Fallback: uniform over legal actions
            return actions[int(self.rng.integers(len(actions)))]
        return actions[int(self.rng.choice(len(actions), p=weights / total))]
