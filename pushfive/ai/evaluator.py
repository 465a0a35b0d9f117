"""Static position evaluation.

Scores a position for one color in ``[0, 1]`` from two signals: the capture
differential and the differential of "threatened" tokens (three of four
sides already closed). There is no lookahead here; all lookahead comes from
the search.
"""

from __future__ import annotations

from ..board import TOKENS_PER_COLOR, Board, Color
from ..rules.engine import RulesEngine

__all__ = [
    "CAPTURE_WEIGHT",
    "THREAT_SIDES",
    "THREAT_WEIGHT",
    "WIN_CAPTURE_COUNT",
    "count_threatened",
    "evaluate",
    "evaluation_breakdown",
]

WIN_CAPTURE_COUNT = TOKENS_PER_COLOR
CAPTURE_WEIGHT = 0.8
THREAT_WEIGHT = 0.2
THREAT_SIDES = 3
# Each differential spans -6..+6.
SCORE_SPAN = 12.0


def count_threatened(board: Board) -> dict[Color, int]:
    """Non-captured tokens of each color one step away from capture."""
    counts = {Color.BLACK: 0, Color.WHITE: 0}
    for (row, col), token in board.tokens():
        if token.is_captured:
            continue
        if board.surrounded_sides(row, col) >= THREAT_SIDES:
            counts[token.color] += 1
    return counts


def evaluate(board: Board, color: Color) -> float:
    """Score the position for ``color``: 1.0 is a win, 0.0 a loss."""
    captured = board.count_captured()
    opponent = color.opponent
    if captured[opponent] >= WIN_CAPTURE_COUNT:
        return 1.0
    if captured[color] >= WIN_CAPTURE_COUNT:
        return 0.0
    if not RulesEngine.has_valid_move(board, color):
        return 0.0

    threatened = count_threatened(board)
    capture_diff = captured[opponent] - captured[color]
    threat_diff = threatened[opponent] - threatened[color]
    weighted = CAPTURE_WEIGHT * capture_diff + THREAT_WEIGHT * threat_diff
    return max(0.0, min(1.0, 0.5 + weighted / SCORE_SPAN))


def evaluation_breakdown(board: Board, color: Color) -> dict[str, float]:
    """Components behind :func:`evaluate`, for logging and the API."""
    captured = board.count_captured()
    threatened = count_threatened(board)
    opponent = color.opponent
    return {
        "total": evaluate(board, color),
        "capture_diff": float(captured[opponent] - captured[color]),
        "threat_diff": float(threatened[opponent] - threatened[color]),
        "own_captured": float(captured[color]),
        "opponent_captured": float(captured[opponent]),
        "own_threatened": float(threatened[color]),
        "opponent_threatened": float(threatened[opponent]),
        "mobility": float(len(RulesEngine.get_valid_moves(board, color))),
    }
