"""Tests for configuration, seeding and logging."""

import json

import numpy as np
import pytest

from mctsgraph.mcts import SearchReport
from mctsgraph.utils import (
    ArenaConfig,
    Config,
    Logger,
    MCTSConfig,
    build_tree,
    get_default_config,
    make_rng,
)


class TestMCTSConfig:
    def test_defaults(self):
        config = MCTSConfig()
        assert config.backpropagation == "avg_best_value"
        assert config.selection == "ucb1"
        assert config.n_players == 2

    @pytest.mark.parametrize(
        "field, value",
        [
            ("exploration_constant", -0.1),
            ("max_iterations", -1),
            ("max_time", -1.0),
            ("n_rollouts", 0),
            ("max_depth", 0),
            ("backpropagation", "median"),
            ("selection", "thompson"),
            ("n_players", 3),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            MCTSConfig(**{field: value})

    def test_needs_a_budget(self):
        with pytest.raises(ValueError, match="must be positive"):
            MCTSConfig(max_iterations=0, max_time=0)
        MCTSConfig(max_iterations=0, max_time=2.0)
        MCTSConfig(max_iterations=10, max_time=0)


class TestConfigFile:
    def test_round_trip(self, tmp_path):
        config = Config(
            mcts=MCTSConfig(max_iterations=250, max_time=0, selection="time_cutoff", seed=9),
            arena=ArenaConfig(num_games=4, max_moves=30),
            game="connect4",
            log_dir="runs",
            seed=3,
        )
        path = tmp_path / "config.yaml"
        config.save(str(path))

        assert Config.load(str(path)) == config

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Config.load(str(path)) == get_default_config()

    def test_partial_file(self, tmp_path):
        path = tmp_path / "partial.yaml"
        path.write_text("mcts:\n  max_iterations: 42\nseed: 7\n")
        config = Config.load(str(path))
        assert config.mcts.max_iterations == 42
        assert config.mcts.n_rollouts == MCTSConfig().n_rollouts
        assert config.seed == 7

    def test_invalid_file_values(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("mcts:\n  n_players: 4\n")
        with pytest.raises(ValueError):
            Config.load(str(path))


class TestSeed:
    def test_make_rng_reproducible(self):
        a = make_rng(5).integers(1000, size=10)
        b = make_rng(5).integers(1000, size=10)
        assert np.array_equal(a, b)


class TestLogger:
    def test_writes_json_lines(self, tmp_path):
        logger = Logger(log_dir=str(tmp_path / "logs"), verbose=False)
        report = SearchReport(
            iterations=10, nodes=12, elapsed=0.5, root_visits=10,
            best_action=4, best_avg_val=0.6, best_n_visits=7,
        )
        logger.log_search(report, move=3)
        logger.log_search(report)

        lines = logger.log_file.read_text().splitlines()
        assert len(lines) == 2
        record = json.loads(lines[0])
        assert record["best_action"] == "4"
        assert record["move"] == 3
        assert record["iterations"] == 10
        assert len(logger.history) == 2

    def test_console_only(self):
        logger = Logger(verbose=False)
        logger.log_search(SearchReport(iterations=0, nodes=1, elapsed=0.0, root_visits=0))
        assert logger.log_file is None

    def test_build_tree(self):
        view = {
            "key": "root",
            "n_visits": 3,
            "children": [
                {"action": "a", "player": "0", "avg_val": 0.5, "best_val": 1.0,
                 "n_visits": 2, "node": {"key": "A", "n_visits": 2, "children": []}},
            ],
        }
        tree = build_tree(view)
        assert len(tree.children) == 1
