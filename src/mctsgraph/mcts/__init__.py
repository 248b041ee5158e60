"""
Monte Carlo Tree Search module.
"""

from .graph import Edge, Node, SearchGraph, SearchDepthExceeded
from .policies import (
    UCB1,
    TimeCutoffUCB1,
    RandomRollout,
    WeightedRollout,
    SELECTION_POLICIES,
    get_selection_policy,
)
from .search import (
    Mcts,
    ActionSelection,
    BackpropagationStrategy,
    NPlayers,
    SearchReport,
)
from .random_agent import RandomAgent

__all__ = [
    "Edge",
    "Node",
    "SearchGraph",
    "SearchDepthExceeded",
    "UCB1",
    "TimeCutoffUCB1",
    "RandomRollout",
    "WeightedRollout",
    "SELECTION_POLICIES",
    "get_selection_policy",
    "Mcts",
    "ActionSelection",
    "BackpropagationStrategy",
    "NPlayers",
    "SearchReport",
    "RandomAgent",
]
