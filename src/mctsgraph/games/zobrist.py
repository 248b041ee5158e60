"""
Zobrist hashing tables.

A Zobrist table assigns a random 64-bit key to every (feature, value) pair
of a position, e.g. (square, piece). The key of a position is the XOR of
the keys of its features, which makes it cheap to update incrementally:
placing or removing a piece is a single XOR.

Tables are plain objects handed to the games that use them, so two engines
in the same process never share hidden hashing state.
"""

from __future__ import annotations

from typing import Optional
import numpy as np


class ZobristTable:
    """
    Fixed-size table of distinct, non-zero random 64-bit keys.

    Args:
        size: Number of keys
        rng: Generator used to draw the keys
        seed: Seed for a fresh generator (ignored when rng is given)
    """

    def __init__(
        self,
        size: int,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        if size <= 0:
            raise ValueError(f"Zobrist table size must be positive, got {size}")
        if rng is None:
            rng = np.random.default_rng(seed)
        self._keys = self._populate(size, rng)

    @staticmethod
    def _populate(size: int, rng: np.random.Generator) -> tuple[int, ...]:
        keys: list[int] = []
        seen: set[int] = {0}
        while len(keys) < size:
            key = int(rng.integers(0, 2**64, dtype=np.uint64))
            if key not in seen:
                seen.add(key)
                keys.append(key)
        return tuple(keys)

    def __getitem__(self, index: int) -> int:
        return self._keys[index]

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self):
        return iter(self._keys)

    def hash_of(self, indices) -> int:
        """XOR of the keys at the given indices."""
        h = 0
        for i in indices:
            h ^= self._keys[i]
        return h
