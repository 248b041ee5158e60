"""
Connect 4 game implementation.

Rules:
- 6 rows x 7 columns board
- Players drop pieces into columns
- First to get 4 in a row (horizontal, vertical, or diagonal) wins
- If board fills up with no winner, it's a draw

Board representation:
- 0 = empty
- player + 1 = that player's piece
Row 0 is the top of the board.
"""

from __future__ import annotations

from typing import Optional
import numpy as np

from .base import (
    DRAW,
    FIRST_PLAYER,
    Game,
    GameState,
    other_player,
    register_game,
)
from .zobrist import ZobristTable


# Board dimensions
ROWS = 6
COLS = 7
WIN_LENGTH = 4

SIDE_KEY_INDEX = ROWS * COLS * 2

# (dr, dc) directions checked through the last placed piece
DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))


class Connect4State(GameState):
    """
    Connect 4 position.

    Actions are column indices (0-6).
    """

    def __init__(self, zobrist: ZobristTable):
        self.zobrist = zobrist
        self.board = np.zeros((ROWS, COLS), dtype=np.int8)
        self.heights = np.zeros(COLS, dtype=np.int8)
        self.player = FIRST_PLAYER
        self.winner: Optional[int] = None
        self.num_moves = 0
        self._key = 0

    def copy(self) -> Connect4State:
        new = Connect4State.__new__(Connect4State)
        new.zobrist = self.zobrist
        new.board = self.board.copy()
        new.heights = self.heights.copy()
        new.player = self.player
        new.winner = self.winner
        new.num_moves = self.num_moves
        new._key = self._key
        return new

    def key(self) -> int:
        return self._key

    def side_to_move(self) -> int:
        return self.player

    def is_full(self) -> bool:
        return self.num_moves == ROWS * COLS

    def is_terminal(self) -> bool:
        return self.winner is not None or self.is_full()

    def valid_actions(self) -> list[int]:
        """Return columns that aren't full."""
        if self.winner is not None:
            return []
        return [c for c in range(COLS) if self.heights[c] < ROWS]

    def apply_action(self, action: int) -> bool:
        """Drop the mover's piece; full columns are no-ops."""
        if action < 0 or action >= COLS:
            raise ValueError(f"Invalid action {action}, must be 0-{COLS - 1}")
        if self.heights[action] >= ROWS or self.winner is not None:
            return False

        row = ROWS - 1 - int(self.heights[action])
        self.board[row, action] = self.player + 1
        self.heights[action] += 1
        self.num_moves += 1
        self._key ^= self.zobrist[(row * COLS + action) * 2 + self.player]
        self._key ^= self.zobrist[SIDE_KEY_INDEX]

        if self._connects(row, action):
            self.winner = self.player
        self.player = other_player(self.player)
        return True

    def evaluate_terminal(self) -> float:
        return DRAW if self.winner is None else 1.0

    def _connects(self, row: int, col: int) -> bool:
        """Check whether the piece at (row, col) completes a line."""
        mark = self.board[row, col]
        for dr, dc in DIRECTIONS:
            count = 1
            for sign in (1, -1):
                r, c = row + sign * dr, col + sign * dc
                while 0 <= r < ROWS and 0 <= c < COLS and self.board[r, c] == mark:
                    count += 1
                    r += sign * dr
                    c += sign * dc
            if count >= WIN_LENGTH:
                return True
        return False

    def render(self) -> str:
        """Render board as ASCII art."""
        symbols = {0: ".", 1: "X", 2: "O"}

        lines = []
        lines.append(" " + " ".join(str(i) for i in range(COLS)))
        lines.append("-" * (COLS * 2 + 1))

        for r in range(ROWS):
            row_str = "|" + "|".join(
                symbols[int(self.board[r, c])] for c in range(COLS)
            ) + "|"
            lines.append(row_str)

        lines.append("-" * (COLS * 2 + 1))
        return "\n".join(lines)


@register_game("connect4")
class Connect4Game(Game):
    """
    Connect 4 factory.

    Args:
        zobrist: Key table shared by the states (created if omitted)
        seed: Seed for a fresh key table
    """

    def __init__(self, zobrist: Optional[ZobristTable] = None, seed: Optional[int] = 0):
        if zobrist is None:
            zobrist = ZobristTable(SIDE_KEY_INDEX + 1, seed=seed)
        self.zobrist = zobrist

    def initial_state(self) -> Connect4State:
        """Return empty board."""
        return Connect4State(self.zobrist)
