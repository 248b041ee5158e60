"""
Configuration management for the search engine.

Uses dataclasses for clean configuration with sensible defaults.
Supports loading from YAML files.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional
import yaml


BACKPROPAGATION_STRATEGIES = ("avg_value", "avg_best_value", "best_value")
SELECTION_NAMES = ("ucb1", "time_cutoff")


@dataclass
class MCTSConfig:
    """
    MCTS configuration.

    A budget of 0 (iterations or seconds) means no limit on that axis;
    the search stops at whichever configured limit is reached first.
    """

    exploration_constant: float = 0.7
    max_iterations: int = 1000
    max_time: float = 10.0  # Seconds
    n_rollouts: int = 5  # Playouts per newly expanded edge
    max_depth: int = 128  # Traversal stack bound
    backpropagation: str = "avg_best_value"
    selection: str = "ucb1"
    time_cutoff: int = 30  # Parent visits before "time_cutoff" stops exploring
    n_players: int = 2
    seed: Optional[int] = None

    def __post_init__(self):
        if self.exploration_constant < 0:
            raise ValueError("exploration_constant must be non-negative")
        if self.max_iterations < 0:
            raise ValueError("max_iterations must be non-negative")
        if self.max_time < 0:
            raise ValueError("max_time must be non-negative")
        if self.max_iterations == 0 and self.max_time == 0:
            raise ValueError("At least one of max_iterations and max_time must be positive")
        if self.n_rollouts < 1:
            raise ValueError("n_rollouts must be at least 1")
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        if self.backpropagation not in BACKPROPAGATION_STRATEGIES:
            raise ValueError(
                f"backpropagation must be one of {', '.join(BACKPROPAGATION_STRATEGIES)}"
            )
        if self.selection not in SELECTION_NAMES:
            raise ValueError(f"selection must be one of {', '.join(SELECTION_NAMES)}")
        if self.n_players not in (1, 2):
            raise ValueError("n_players must be 1 or 2")


@dataclass
class ArenaConfig:
    """Arena (agent vs agent) configuration."""

    num_games: int = 10
    alternate_colors: bool = True
    max_moves: Optional[int] = None


@dataclass
class Config:
    """Full configuration."""

    # Component configs
    mcts: MCTSConfig = field(default_factory=MCTSConfig)
    arena: ArenaConfig = field(default_factory=ArenaConfig)

    # Global settings
    game: str = "tictactoe"
    log_dir: Optional[str] = None

    # Random seed
    seed: int = 42

    def save(self, path: str) -> None:
        """Save config to YAML file."""
        with open(path, "w") as f:
            yaml.dump(asdict(self), f, default_flow_style=False)

    @classmethod
    def load(cls, path: str) -> Config:
        """Load config from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        # Parse nested configs
        return cls(
            mcts=MCTSConfig(**data.get("mcts", {})),
            arena=ArenaConfig(**data.get("arena", {})),
            game=data.get("game", "tictactoe"),
            log_dir=data.get("log_dir"),
            seed=data.get("seed", 42),
        )


def get_default_config() -> Config:
    """Get default configuration."""
    return Config()
