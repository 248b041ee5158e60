"""
Random seed management for reproducibility.
"""

from __future__ import annotations

import random
from typing import Optional
import numpy as np


def set_seed(seed: int) -> None:
    """
    Set global random seeds for reproducibility.

    Sets seeds for:
    - Python random
    - NumPy legacy global state

    The engine itself draws from per-instance generators (see make_rng);
    this only pins down code that still uses the global state.

    Args:
        seed: Random seed value
    """
    random.seed(seed)
    np.random.seed(seed)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create an independent NumPy generator (fresh entropy if seed is None)."""
    return np.random.default_rng(seed)
