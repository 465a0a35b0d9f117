"""
Incremental apply/undo journal for search.

The search explores thousands of positions per turn on one shared board.
Instead of copying the board for every node, each probe records only the
cells a move can touch and writes them back on undo.

A move can touch:
- the mover's origin and destination,
- every pushed token's origin and destination,
- the orthogonal neighbours of all of those, because a capture check can
  flip ``is_captured`` on any token whose neighbourhood changed.

Usage:
    tracker = StateDiffTracker(board)
    with tracker.probe(move, color) as frame:
        score = evaluate(board, color)
    # board is back to its exact pre-move value here
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from ..board import ORTHOGONAL_OFFSETS, Board, CapturedToken, Cell, Color, Token
from ..errors import InvalidStateError
from ..rules.engine import RulesEngine
from ..rules.moves import Move, PushMove

logger = logging.getLogger(__name__)

__all__ = ["SearchFrame", "StateDiffTracker", "affected_cells"]


def affected_cells(move: Move, size: int) -> list[Cell]:
    """Cells whose value may change when ``move`` is applied.

    Deduplicated, clipped to the board, in first-seen order.
    """
    moved: list[Cell] = [move.from_pos, move.to]
    if isinstance(move, PushMove):
        dr, dc = move.direction.delta
        for row, col in move.pushed_line:
            moved.append((row, col))
            moved.append((row + dr, col + dc))

    seen: set[Cell] = set()
    cells: list[Cell] = []
    for row, col in moved:
        for r, c in ((row, col), *((row + dr, col + dc) for dr, dc in ORTHOGONAL_OFFSETS)):
            if (r, c) in seen or not (0 <= r < size and 0 <= c < size):
                continue
            seen.add((r, c))
            cells.append((r, c))
    return cells


@dataclass(slots=True)
class SearchFrame:
    """Pre-move values needed to undo one applied move.

    ``cells`` maps every affected cell to the token it held before the
    move (``None`` for empty). ``captured`` is the capture list the move
    produced and is what the self-capture filter inspects.
    """

    move: Move
    color: Color
    cells: dict[Cell, Token | None]
    last_captured_tokens: list[CapturedToken]
    last_move_from: Cell | None
    last_move_to: Cell | None
    captured: list[CapturedToken] = field(default_factory=list)

    def has_self_capture(self) -> bool:
        return any(token.color == self.color for token in self.captured)


class StateDiffTracker:
    """LIFO journal of applied search moves over one board.

    Frames only live for the duration of a single search call. The
    tracker is not a game history: undo/redo of real turns is handled by
    :class:`~pushfive.game.GameSession` with full snapshots.
    """

    __slots__ = ["board", "_frames"]

    def __init__(self, board: Board) -> None:
        self.board = board
        self._frames: list[SearchFrame] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def apply(self, move: Move, color: Color) -> SearchFrame:
        """Snapshot the affected cells, apply ``move`` and push the frame."""
        board = self.board
        grid = board.grid
        cells = {
            (row, col): grid[row][col]
            for row, col in affected_cells(move, board.size)
        }
        frame = SearchFrame(
            move=move,
            color=color,
            cells=cells,
            last_captured_tokens=board.last_captured_tokens,
            last_move_from=board.last_move_from,
            last_move_to=board.last_move_to,
        )
        captured = RulesEngine.apply_move(board, move, color)
        frame.captured = captured

        # A capture can only land outside the affected set if the board
        # already held a surrounded, uncaptured token before this move.
        for token in captured:
            if token.cell not in cells:
                current = grid[token.row][token.col]
                cells[token.cell] = Token(
                    color=current.color,
                    is_active=current.is_active,
                    is_captured=False,
                )
                logger.debug(
                    "Capture outside affected cells at %s; journaled separately",
                    token.cell,
                )

        self._frames.append(frame)
        return frame

    def undo(self) -> SearchFrame:
        """Pop the last frame and restore every cell it recorded."""
        if not self._frames:
            raise InvalidStateError("Undo with an empty search journal")
        frame = self._frames.pop()
        grid = self.board.grid
        for (row, col), token in frame.cells.items():
            grid[row][col] = token
        self.board.last_captured_tokens = frame.last_captured_tokens
        self.board.last_move_from = frame.last_move_from
        self.board.last_move_to = frame.last_move_to
        return frame

    @contextmanager
    def probe(self, move: Move, color: Color) -> Iterator[SearchFrame]:
        """Apply ``move`` for the duration of the ``with`` block."""
        frame = self.apply(move, color)
        try:
            yield frame
        finally:
            self.undo()
