"""Random AI implementation for PushFive.

This agent selects uniformly random legal moves using the per-instance RNG on
the :class:`BaseAI`. It is intended for self-play baselines and tests rather
than for real opponents.
"""

from __future__ import annotations

from ..board import Board
from ..rules.moves import Move
from .base import BaseAI
from .evaluator import evaluate


class RandomAI(BaseAI):
    """AI that selects random valid moves."""

    def select_move(self, board: Board) -> Move | None:
        """Select a random valid move on ``board``.

        Returns:
            A random valid move or ``None`` if no legal moves exist.
        """
        valid_moves = self.get_valid_moves(board)
        if not valid_moves:
            return None

        selected = self.get_random_element(valid_moves)
        self.move_count += 1
        return selected

    def evaluate_position(self, board: Board) -> float:
        """Static evaluation; RandomAI does not use it to choose moves."""
        return evaluate(board, self.color)
