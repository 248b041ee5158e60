"""Tests for selection and rollout policies."""

import math

import numpy as np
import pytest

from mctsgraph.mcts import (
    Edge,
    RandomRollout,
    TimeCutoffUCB1,
    UCB1,
    WeightedRollout,
    get_selection_policy,
)
from mctsgraph.mcts.policies import CUTOFF_EPSILON


class TestUCB1:
    def test_formula(self):
        edge = Edge(0, 0, total_val=1.0, n_visits=1)
        score = UCB1()(1.0, 10)
        assert score(edge) == pytest.approx(0.5 + math.sqrt(math.log(10) / 2))

    def test_less_visited_scores_higher(self):
        score = UCB1()(0.7, 20)
        often = Edge(0, 0, total_val=5.0, n_visits=9)
        rarely = Edge(1, 0, total_val=0.5, n_visits=0)
        # Same running average (0.5)
        assert score(rarely) > score(often)

    def test_unvisited_parent_is_greedy(self):
        edge = Edge(0, 0, total_val=0.3)
        assert UCB1()(2.0, 0)(edge) == pytest.approx(0.3)

    def test_zero_exploration_is_greedy(self):
        edge = Edge(0, 0, total_val=1.2, n_visits=2)
        assert UCB1()(0.0, 50)(edge) == pytest.approx(0.4)


class TestTimeCutoffUCB1:
    def test_matches_ucb1_before_cutoff(self):
        edge = Edge(0, 0, total_val=1.0, n_visits=3)
        expected = UCB1()(0.7, 9)(edge)
        assert TimeCutoffUCB1(cutoff=10)(0.7, 9)(edge) == pytest.approx(expected)

    def test_greedy_after_cutoff(self):
        edge = Edge(0, 0, total_val=1.0, n_visits=3)
        score = TimeCutoffUCB1(cutoff=10)(0.7, 10)
        assert score(edge) == pytest.approx(0.25 + CUTOFF_EPSILON)

    def test_invalid_cutoff(self):
        with pytest.raises(ValueError):
            TimeCutoffUCB1(cutoff=0)


class TestRegistry:
    def test_lookup(self):
        assert isinstance(get_selection_policy("ucb1"), UCB1)
        policy = get_selection_policy("time_cutoff", cutoff=4)
        assert policy.cutoff == 4

    def test_unknown(self):
        with pytest.raises(ValueError, match="Available"):
            get_selection_policy("thompson")


class TestRandomRollout:
    def test_picks_legal_actions(self, tictactoe):
        state = tictactoe.initial_state()
        state.apply_action(4)
        rollout = RandomRollout(np.random.default_rng(0))
        for _ in range(50):
            assert rollout(state) in state.valid_actions()

    def test_does_not_apply(self, tictactoe):
        state = tictactoe.initial_state()
        RandomRollout(np.random.default_rng(0))(state)
        assert state.key() == tictactoe.initial_state().key()

    def test_terminal_gives_none(self, one_move_win):
        one_move_win.apply_action("win")
        assert RandomRollout(np.random.default_rng(0))(one_move_win) is None

    def test_seeded_is_reproducible(self, tictactoe):
        state = tictactoe.initial_state()
        first = [RandomRollout(np.random.default_rng(3))(state) for _ in range(5)]
        second = [RandomRollout(np.random.default_rng(3))(state) for _ in range(5)]
        assert first == second


class TestWeightedRollout:
    def test_all_weight_on_one_action(self, tictactoe):
        state = tictactoe.initial_state()

        def weights(state, actions):
            return [1.0 if a == 7 else 0.0 for a in actions]

        rollout = WeightedRollout(np.random.default_rng(0), weights)
        assert all(rollout(state) == 7 for _ in range(20))

    def test_zero_weights_fall_back_to_uniform(self, tictactoe):
        state = tictactoe.initial_state()
        rollout = WeightedRollout(np.random.default_rng(0), lambda s, a: np.zeros(len(a)))
        seen = {rollout(state) for _ in range(100)}
        assert seen <= set(range(9))
        assert len(seen) > 1

    def test_wrong_length(self, tictactoe):
        rollout = WeightedRollout(np.random.default_rng(0), lambda s, a: [1.0, 2.0])
        with pytest.raises(ValueError):
            rollout(tictactoe.initial_state())

    def test_negative_weight(self, tictactoe):
        rollout = WeightedRollout(
            np.random.default_rng(0),
            lambda s, a: [-1.0] + [1.0] * (len(a) - 1),
        )
        with pytest.raises(ValueError):
            rollout(tictactoe.initial_state())

    def test_drives_search(self, x_wins_next):
        from mctsgraph.mcts import Mcts
        from mctsgraph.utils import MCTSConfig

        rng = np.random.default_rng(0)
        rollout = WeightedRollout(rng, lambda s, a: np.ones(len(a)))
        mcts = Mcts(x_wins_next, MCTSConfig(max_iterations=200, max_time=0), rollout=rollout, rng=rng)
        assert mcts.best_action() == 2
