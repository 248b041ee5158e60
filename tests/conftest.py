"""Toy games shared by the search tests."""

import pytest

from mctsgraph.games import DRAW, GameState
from mctsgraph.games.tictactoe import TicTacToeGame


class TreeGameState(GameState):
    """
    Game defined by an explicit move tree.

    tree maps a position name to {action: next position}; positions
    missing from tree (or with no moves) are terminal. values gives the
    terminal reward for the last mover (DRAW if absent). Two paths that
    lead to the same name are a transposition.
    """

    def __init__(self, tree, values=None, node="root", player=0, n_players=2):
        self.tree = tree
        self.values = values or {}
        self.node = node
        self.player = player
        self.n_players = n_players

    def key(self):
        return self.node

    def side_to_move(self):
        return self.player

    def is_terminal(self):
        return not self.tree.get(self.node)

    def valid_actions(self):
        return list(self.tree.get(self.node, {}))

    def apply_action(self, action):
        moves = self.tree.get(self.node, {})
        if action not in moves:
            return False
        self.node = moves[action]
        if self.n_players == 2:
            self.player = 1 - self.player
        return True

    def evaluate_terminal(self):
        return self.values.get(self.node, DRAW)

    def copy(self):
        return TreeGameState(self.tree, self.values, self.node, self.player, self.n_players)


@pytest.fixture
def make_tree_state():
    """Factory for TreeGameState positions."""
    return TreeGameState


@pytest.fixture
def one_move_win():
    """A single legal move, which wins on the spot."""
    return TreeGameState({"root": {"win": "won"}}, {"won": 1.0})


@pytest.fixture
def all_draws():
    """Two moves per ply, three plies deep; every ending is a draw."""
    tree = {}
    level = ["root"]
    for _ in range(3):
        next_level = []
        for name in level:
            tree[name] = {a: f"{name}/{a}" for a in ("l", "r")}
            next_level.extend(tree[name].values())
        level = next_level
    return TreeGameState(tree)


@pytest.fixture
def transposing():
    """Playing a then b reaches the same position as b then a."""
    tree = {
        "root": {"a": "A", "b": "B"},
        "A": {"b": "AB"},
        "B": {"a": "AB"},
        "AB": {"c": "end"},
    }
    return TreeGameState(tree, {"end": 1.0})


@pytest.fixture
def long_chain():
    """One forced move per ply for 20 plies."""
    tree = {i: {"next": i + 1} for i in range(20)}
    return TreeGameState(tree, node=0)


@pytest.fixture
def tictactoe():
    return TicTacToeGame(seed=0)


@pytest.fixture
def x_wins_next(tictactoe):
    """X (to move) completes the top row by playing 2."""
    state = tictactoe.initial_state()
    for action in (0, 3, 1, 4):
        state.apply_action(action)
    return state
