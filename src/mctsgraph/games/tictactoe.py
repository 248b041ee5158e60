"""
Tic-Tac-Toe game implementation.

Simple 3x3 game - perfect for testing the search.
With a few hundred iterations per move the engine never loses.

Rules:
- 3x3 board
- Players alternate placing their mark
- First to get 3 in a row (horizontal, vertical, diagonal) wins
- If board fills with no winner, it's a draw
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


BOARD_SIZE = 3
NUM_CELLS = BOARD_SIZE * BOARD_SIZE

# Zobrist layout: one key per (cell, player), then the side-to-move key
SIDE_KEY_INDEX = NUM_CELLS * 2

# Winning lines (indices into flattened board)
WINNING_LINES = (
    # Rows
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    # Columns
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    # Diagonals
    (0, 4, 8),
    (2, 4, 6),
)


class TicTacToeState(GameState):
    """
    Tic-Tac-Toe position.

    Cells hold 0 when empty, otherwise player + 1.
    Actions are cell indices (0-8):
    0 | 1 | 2
    ---------
    3 | 4 | 5
    ---------
    6 | 7 | 8
    """

    def __init__(self, zobrist: ZobristTable):
        self.zobrist = zobrist
        self.board = np.zeros(NUM_CELLS, dtype=np.int8)
        self.player = FIRST_PLAYER
        self.winner: Optional[int] = None
        self._key = 0

    def copy(self) -> TicTacToeState:
        new = TicTacToeState.__new__(TicTacToeState)
        new.zobrist = self.zobrist
        new.board = self.board.copy()
        new.player = self.player
        new.winner = self.winner
        new._key = self._key
        return new

    def key(self) -> int:
        return self._key

    def side_to_move(self) -> int:
        return self.player

    def is_full(self) -> bool:
        return not np.any(self.board == 0)

    def is_draw(self) -> bool:
        return self.winner is None and self.is_full()

    def is_terminal(self) -> bool:
        return self.winner is not None or self.is_full()

    def valid_actions(self) -> list[int]:
        """Return empty cells as actions."""
        if self.winner is not None:
            return []
        return [int(i) for i in np.flatnonzero(self.board == 0)]

    def apply_action(self, action: int) -> bool:
        """
        Place the mover's mark on a cell.

        Occupied cells and moves after the game ended are no-ops.
        """
        if action < 0 or action >= NUM_CELLS:
            raise ValueError(f"Invalid action {action}, must be 0-{NUM_CELLS - 1}")
        if self.board[action] != 0 or self.winner is not None:
            return False

        self.board[action] = self.player + 1
        self._key ^= self.zobrist[action * 2 + self.player]
        self._key ^= self.zobrist[SIDE_KEY_INDEX]

        if self._has_won(self.player):
            self.winner = self.player
        self.player = other_player(self.player)
        return True

    def evaluate_terminal(self) -> float:
        """Only the last mover can have completed a line."""
        return DRAW if self.winner is None else 1.0

    def _has_won(self, player: int) -> bool:
        mark = player + 1
        return any(
            all(self.board[i] == mark for i in line)
            for line in WINNING_LINES
        )

    def render(self) -> str:
        """Render board as ASCII art."""
        symbols = {0: ".", 1: "X", 2: "O"}

        lines = []
        for r in range(BOARD_SIZE):
            row_str = " | ".join(
                symbols[int(self.board[r * BOARD_SIZE + c])]
                for c in range(BOARD_SIZE)
            )
            lines.append(f" {row_str} ")
            if r < BOARD_SIZE - 1:
                lines.append("-----------")

        return "\n".join(lines)


@register_game("tictactoe")
class TicTacToeGame(Game):
    """
    Tic-Tac-Toe factory.

    Args:
        zobrist: Key table shared by the states (created if omitted)
        seed: Seed for a fresh key table
    """

    def __init__(self, zobrist: Optional[ZobristTable] = None, seed: Optional[int] = 0):
        if zobrist is None:
            zobrist = ZobristTable(SIDE_KEY_INDEX + 1, seed=seed)
        self.zobrist = zobrist

    def initial_state(self) -> TicTacToeState:
        """Return empty board."""
        return TicTacToeState(self.zobrist)
