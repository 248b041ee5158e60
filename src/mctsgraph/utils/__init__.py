"""Utilities module."""

from .config import (
    Config,
    MCTSConfig,
    ArenaConfig,
    get_default_config,
)
from .seed import set_seed, make_rng
from .logging import (
    Logger,
    console,
    create_progress,
    print_config,
    print_board,
    print_root_moves,
    build_tree,
)

__all__ = [
    "Config",
    "MCTSConfig",
    "ArenaConfig",
    "get_default_config",
    "set_seed",
    "make_rng",
    "Logger",
    "console",
    "create_progress",
    "print_config",
    "print_board",
    "print_root_moves",
    "build_tree",
]
