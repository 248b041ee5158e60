"""
MCTS search driver over a hash-keyed search graph.

Each iteration:
1. Select: from the root, follow the best edge by the selection policy
   while the node has been visited and has children
2. Expand: give the leaf one edge per legal action, each seeded with the
   mean reward of n_rollouts random playouts
3. Backup: send the leaf's value up the traversal stack, complementing it
   (1 - v) each time the mover changes

Rewards live in [0, 1] and every edge stores them from the point of view
of the player who made its move, so maximising at every ply gives
minimax-like play for both sides.

The driver keeps two states: the root state (the real position) and a
cursor state, re-copied from the root at the start of every iteration.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional, Union
import time
import numpy as np

from .graph import Edge, Node, SearchDepthExceeded, SearchGraph
from .policies import RandomRollout, get_selection_policy
from ..games.base import GameState
from ..utils.config import MCTSConfig
from ..utils.seed import make_rng


class ActionSelection(Enum):
    """Criteria for picking an edge among siblings."""
    BY_UCB = "ucb"
    BY_N_VISITS = "n_visits"
    BY_AVG_VALUE = "avg_value"
    BY_BEST_VALUE = "best_value"


class BackpropagationStrategy(Enum):
    """Value sent up the tree after expanding a leaf."""
    AVG_VALUE = "avg_value"  # Mean running average of the new children
    AVG_BEST_VALUE = "avg_best_value"  # Best running average of the new children
    BEST_VALUE = "best_value"  # Best single reward of the new children


class NPlayers(Enum):
    ONE = 1
    TWO = 2


@dataclass
class SearchReport:
    """Summary of the last search, for logging."""

    iterations: int
    nodes: int
    elapsed: float  # Seconds
    root_visits: int
    best_action: Any = None
    best_avg_val: Optional[float] = None
    best_n_visits: Optional[int] = None


class Mcts:
    """
    Monte Carlo Tree Search agent with a transposition graph.

    Statistics survive across moves: apply_root_action() moves the root
    to the node of the new position, so whatever was learned about that
    subtree while thinking on the previous move is reused.

    Args:
        state: Position to search from (copied)
        config: Search parameters (copied)
        selection: Selection policy; defaults to config.selection
        rollout: Rollout policy; defaults to RandomRollout on rng
        rng: Random generator; defaults to one seeded with config.seed
        clock: Time source in seconds, for the time budget
    """

    def __init__(
        self,
        state: GameState,
        config: Optional[MCTSConfig] = None,
        selection: Optional[Callable] = None,
        rollout: Optional[Callable[[GameState], Any]] = None,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.config = replace(config) if config is not None else MCTSConfig()

        self.rng = rng if rng is not None else make_rng(self.config.seed)
        if selection is None:
            kwargs = {}
            if self.config.selection == "time_cutoff":
                kwargs["cutoff"] = self.config.time_cutoff
            selection = get_selection_policy(self.config.selection, **kwargs)
        self.selection = selection
        self.rollout = rollout if rollout is not None else RandomRollout(self.rng)
        self.clock = clock

        self._root_state = state.copy()
        self._state = state.copy()
        self.graph = SearchGraph(state.key(), max_depth=self.config.max_depth)
        self._current: Node = self.graph.root

        self.actions_done: list = []
        self.iterations = 0
        self._start = clock()

    # --- Public API ---

    def best_action(self, method: ActionSelection = ActionSelection.BY_N_VISITS) -> Optional[Any]:
        """
        Search under the configured budget and return the best root action.

        Returns:
            The chosen action, or None when the root has no children
            (e.g. the position is already terminal)
        """
        self.run()
        self.return_to_root()
        edge = self.get_best_edge(method)
        return None if edge is None else edge.action

    def best_action_sequence(
        self,
        method: ActionSelection = ActionSelection.BY_BEST_VALUE,
    ) -> list:
        """
        Search, then return the committed actions followed by the best line.

        See best_traversal().
        """
        self.run()
        return self.best_traversal(method)

    def run(self) -> None:
        """Iterate until the budget runs out or the root is exhausted."""
        self.init_counters()
        self.return_to_root()
        while self.computation_resources() and not self._root_exhausted():
            self.step()

    def step(self) -> None:
        """Run one select -> expand -> backup iteration."""
        self.return_to_root()
        self.select_leaf()
        self.expand_current_node()
        self.backpropagate()
        self.iterations += 1

    def apply_root_action(self, action: Any) -> None:
        """
        Commit a real move.

        The root moves to the node for the resulting position (kept if it
        was already in the graph), and the action is appended to
        actions_done.
        """
        if not self._root_state.apply_action(action):
            raise ValueError(f"Action {action!r} did not change the root state")
        self.graph.set_root(self._root_state.key())
        self.return_to_root()
        self.actions_done.append(action)

    def return_to_root(self) -> None:
        """Reset the cursor state and node to the root."""
        self.graph.reset_traversal()
        self._current = self.graph.root
        self._state = self._root_state.copy()

    def computation_resources(self) -> bool:
        """True while neither the iteration nor the time budget is spent."""
        cfg = self.config
        time_ok = cfg.max_time <= 0 or self.time_elapsed() < cfg.max_time
        iterations_ok = cfg.max_iterations <= 0 or self.iterations < cfg.max_iterations
        return time_ok and iterations_ok

    def init_counters(self) -> None:
        self.iterations = 0
        self._start = self.clock()

    def time_elapsed(self) -> float:
        """Seconds since the last init_counters()."""
        return self.clock() - self._start

    # --- Search phases ---

    def select_leaf(self) -> None:
        """
        Walk down best-UCB edges to the next node to expand.

        Stops on a node never visited, or on a visited node without
        children (terminal). Nodes passed through gain one visit; the
        leaf gets its visit in expand_current_node().

        If the walk fails (depth overflow or a no-op action) the visits it
        added are taken back and the cursor returns to the root, so the
        graph is left as it was before the iteration.
        """
        passed = []
        try:
            while self._current.n_visits > 0 and self._current.children:
                self._current.n_visits += 1
                passed.append(self._current)
                edge = self.get_best_edge(ActionSelection.BY_UCB)
                self.traverse_edge(edge)
        except (SearchDepthExceeded, ValueError):
            for node in passed:
                node.n_visits -= 1
            self.return_to_root()
            raise

    def traverse_edge(self, edge: Edge) -> None:
        """Apply the edge's action to the cursor and move to its node."""
        if not self._state.apply_action(edge.action):
            raise ValueError(f"Action {edge.action!r} did not change the state")
        self.graph.traversal_push(edge)
        key = self._state.key()
        edge.child_key = key
        self._current = self.graph.get_node(key)

    def get_best_edge(self, method: ActionSelection) -> Optional[Edge]:
        """
        Best child edge of the current node; the first one wins ties.

        Returns:
            The edge, or None if the current node has no children
        """
        children = self._current.children
        if not children:
            return None

        if method is ActionSelection.BY_UCB:
            score = self.selection(self.config.exploration_constant, self._current.n_visits)
        elif method is ActionSelection.BY_N_VISITS:
            score = lambda e: e.n_visits
        elif method is ActionSelection.BY_AVG_VALUE:
            score = lambda e: e.avg_val
        else:
            score = lambda e: e.best_val

        return max(children, key=score)

    def expand_current_node(self) -> None:
        """
        Create one edge per legal action, seeded with playout estimates.

        A terminal node gets no children; either way the node's visit
        count goes up by one.
        """
        player = self._state.side_to_move()
        for action in self._state.valid_actions():
            value = self.simulate_playout(action, self.config.n_rollouts)
            self._current.children.append(
                Edge(action=action, player=player, total_val=value, best_val=value)
            )
        self._current.n_visits += 1

    def simulate_playout(self, action: Any, n_reps: int = 1) -> float:
        """
        Estimate action from the cursor state with random playouts.

        The result is the mean over n_reps playouts of the partial rewards
        collected on the way plus the terminal reward, all from the point
        of view of the player about to move in the cursor state.
        """
        player = self._state.side_to_move()

        if self._state.is_terminal():
            return self._terminal_value()

        start = self._state.copy()
        score = start.evaluate(action) * n_reps
        start.apply_action(action)

        for _ in range(n_reps):
            sim = start.copy()
            sim_score = 0.0
            last_mover = player

            while not sim.is_terminal():
                step_action = self.rollout(sim)
                if step_action is None:
                    break
                mover = sim.side_to_move()
                sim_score += sim.evaluate(step_action)
                if not sim.apply_action(step_action):
                    raise ValueError(
                        f"Rollout action {step_action!r} did not change the state"
                    )
                last_mover = mover

            terminal_value = sim.evaluate_terminal()
            if last_mover != player:
                terminal_value = 1.0 - terminal_value

            score += sim_score + terminal_value

        return score / n_reps

    def backpropagate(self) -> None:
        """Send the leaf's value up the traversal stack."""
        player = self._state.side_to_move()

        if self._state.is_terminal():
            value = self._terminal_value()
        else:
            children = self._current.children
            if not children:
                raise ValueError("Non-terminal state reported no valid actions")

            strategy = self.backpropagation_strategy
            if strategy is BackpropagationStrategy.AVG_BEST_VALUE:
                value = max(e.avg_val for e in children)
            elif strategy is BackpropagationStrategy.AVG_VALUE:
                value = sum(e.avg_val for e in children) / len(children)
            else:
                value = max(e.best_val for e in children)

        self.graph.backpropagate(value, player)

    def best_traversal(self, method: ActionSelection) -> list:
        """
        Follow the best edges from the root as far as the graph goes.

        If the line ends on a node never visited, it is completed with
        random non-trivial actions until the game ends. The result starts
        with the actions already committed through apply_root_action().
        """
        self.return_to_root()
        sequence = list(self.actions_done)

        while self._current.n_visits > 0 and self._current.children:
            edge = self.get_best_edge(method)
            self.traverse_edge(edge)
            sequence.append(edge.action)

        if self._current.n_visits > 0:
            return sequence

        while not self._state.is_terminal():
            candidates = [
                a for a in self._state.valid_actions()
                if not self._state.is_trivial(a)
            ]
            if not candidates:
                break
            action = candidates[int(self.rng.integers(len(candidates)))]
            self._state.apply_action(action)
            sequence.append(action)

        return sequence

    # --- Helpers ---

    def _terminal_value(self) -> float:
        """
        Terminal reward of the cursor state for the side to move.

        evaluate_terminal() scores for the player who made the last move.
        That is the parent edge's player, or, at the root of a two-player
        search where no edge is known, the opponent of the side to move.
        """
        value = self._state.evaluate_terminal()
        parent = self.graph.parent()
        if parent is None:
            if self.n_players is NPlayers.TWO:
                value = 1.0 - value
        elif parent.player != self._state.side_to_move():
            value = 1.0 - value
        return value

    def _root_exhausted(self) -> bool:
        root = self.graph.root
        return root.n_visits > 0 and not root.children

    # --- Introspection ---

    @property
    def state(self) -> GameState:
        """The cursor state."""
        return self._state

    @property
    def root_state(self) -> GameState:
        return self._root_state

    @property
    def current_node(self) -> Node:
        return self._current

    @property
    def n_nodes(self) -> int:
        return len(self.graph)

    @property
    def backpropagation_strategy(self) -> BackpropagationStrategy:
        return BackpropagationStrategy(self.config.backpropagation)

    @property
    def n_players(self) -> NPlayers:
        return NPlayers(self.config.n_players)

    def root_moves_eval(self) -> list[tuple[Any, float, int]]:
        """(action, running average, visits) for every root edge."""
        return [
            (edge.action, edge.avg_val, edge.n_visits)
            for edge in self.graph.root.children
        ]

    def report(self, method: ActionSelection = ActionSelection.BY_N_VISITS) -> SearchReport:
        """Summarise the last search."""
        root = self.graph.root
        report = SearchReport(
            iterations=self.iterations,
            nodes=self.n_nodes,
            elapsed=self.time_elapsed(),
            root_visits=root.n_visits,
        )
        if root.children:
            saved = self._current
            self._current = root
            edge = self.get_best_edge(method)
            self._current = saved
            report.best_action = edge.action
            report.best_avg_val = edge.avg_val
            report.best_n_visits = edge.n_visits
        return report

    def tree_dict(self, max_depth: int = 2) -> dict:
        """Nested view of the graph below the root (see SearchGraph.to_dict)."""
        return self.graph.to_dict(max_depth)

    # --- Configuration ---

    def set_exploration_constant(self, c: float) -> None:
        self.config = replace(self.config, exploration_constant=c)

    def set_backpropagation_strategy(
        self,
        strategy: Union[BackpropagationStrategy, str],
    ) -> None:
        self.config = replace(
            self.config,
            backpropagation=BackpropagationStrategy(strategy).value,
        )

    def set_max_iterations(self, n: int) -> None:
        self.config = replace(self.config, max_iterations=n)

    def set_max_time(self, seconds: float) -> None:
        self.config = replace(self.config, max_time=seconds)

    def set_n_players(self, n_players: Union[NPlayers, int]) -> None:
        self.config = replace(self.config, n_players=NPlayers(n_players).value)

    def set_n_rollouts(self, n: int) -> None:
        self.config = replace(self.config, n_rollouts=n)

    def set_max_depth(self, n: int) -> None:
        """Change the traversal stack bound; the graph keeps its nodes."""
        self.config = replace(self.config, max_depth=n)
        self.graph.max_depth = n

    def __repr__(self) -> str:
        return f"Mcts(nodes={self.n_nodes}, iterations={self.iterations})"
