"""Push/surround rules for PushFive.

:class:`RulesEngine` is a stateless host for the game rules, operating on a
:class:`~pushfive.board.Board` passed in by the caller:

- move generation for a color (simple steps and pushes),
- move application including push propagation, opponent deactivation and
  the surround-capture check,
- legality checks for moves supplied from outside the engine.

Move application assumes the move came from :meth:`get_valid_moves`. It
still checks the cheap structural preconditions and raises instead of
writing a corrupt board when they do not hold.
"""

from __future__ import annotations

import logging

from ..board import Board, CapturedToken, Cell, Color
from ..errors import InvalidMoveError, RulesViolationError
from .moves import DIRECTION_ORDER, Direction, Move, PushMove, SimpleMove

logger = logging.getLogger(__name__)

__all__ = ["RulesEngine"]


class RulesEngine:
    """Move generation and application for the 5x5 push/surround game."""

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    @staticmethod
    def get_valid_moves(board: Board, color: Color) -> list[Move]:
        """All legal moves for ``color``.

        Origins are visited row-major, directions in up/down/left/right
        order. The search relies on this order being stable.
        """
        moves: list[Move] = []
        size = board.size
        grid = board.grid
        for row in range(size):
            for col in range(size):
                token = grid[row][col]
                if (
                    token is None
                    or token.color != color
                    or not token.is_active
                    or token.is_captured
                ):
                    continue
                for direction in DIRECTION_ORDER:
                    move = RulesEngine._move_in_direction(
                        board, (row, col), direction
                    )
                    if move is not None:
                        moves.append(move)
        return moves

    @staticmethod
    def has_valid_move(board: Board, color: Color) -> bool:
        """True as soon as one legal move for ``color`` is found."""
        size = board.size
        grid = board.grid
        for row in range(size):
            for col in range(size):
                token = grid[row][col]
                if (
                    token is None
                    or token.color != color
                    or not token.is_active
                    or token.is_captured
                ):
                    continue
                for direction in DIRECTION_ORDER:
                    if RulesEngine._move_in_direction(
                        board, (row, col), direction
                    ) is not None:
                        return True
        return False

    @staticmethod
    def _move_in_direction(
        board: Board, origin: Cell, direction: Direction
    ) -> Move | None:
        dest = direction.step(origin)
        if not board.in_bounds(*dest):
            return None
        if board.token_at(*dest) is None:
            return SimpleMove(from_pos=origin, to=dest)
        line = RulesEngine.push_line(board, dest, direction)
        if line is None:
            return None
        return PushMove(
            from_pos=origin,
            to=dest,
            direction=direction,
            pushed_line=line,
        )

    @staticmethod
    def push_line(
        board: Board, start: Cell, direction: Direction
    ) -> tuple[Cell, ...] | None:
        """Maximal occupied run starting at ``start``, if it can be pushed.

        Returns None when the cell past the run is off the board (there is
        never an occupied cell past a maximal run).
        """
        line: list[Cell] = []
        cell = start
        while board.in_bounds(*cell) and board.token_at(*cell) is not None:
            line.append(cell)
            cell = direction.step(cell)
        if not line or not board.in_bounds(*cell):
            return None
        return tuple(line)

    @staticmethod
    def is_legal_move(board: Board, move: Move, color: Color) -> bool:
        return move in RulesEngine.get_valid_moves(board, color)

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    @staticmethod
    def apply_move(
        board: Board, move: Move, color: Color
    ) -> list[CapturedToken]:
        """Apply ``move`` for ``color`` in place and return the captures."""
        mover = board.token_at(*move.from_pos)
        if mover is None:
            raise InvalidMoveError(
                "No token at move origin",
                context={"from": move.from_pos},
            )
        if mover.color != color:
            raise InvalidMoveError(
                f"Token at origin belongs to {mover.color.value}",
                context={"from": move.from_pos, "color": color.value},
            )
        if mover.is_captured or not mover.is_active:
            raise InvalidMoveError(
                "Token at origin cannot move this turn",
                context={
                    "from": move.from_pos,
                    "is_captured": mover.is_captured,
                    "is_active": mover.is_active,
                },
            )

        if isinstance(move, PushMove):
            displaced = RulesEngine._apply_push(board, move, color)
        else:
            RulesEngine._apply_simple(board, move)
            displaced = []

        captured = RulesEngine.detect_captures(board)

        # Only the opponent's pushed tokens lose their next turn.
        for row, col in displaced:
            token = board.grid[row][col]
            if (
                token is not None
                and token.color == color.opponent
                and not token.is_captured
            ):
                board.grid[row][col] = token.with_active(False)

        board.set_last_move(move.from_pos, move.to)
        return captured

    @staticmethod
    def _apply_simple(board: Board, move: SimpleMove) -> None:
        if Direction.between(move.from_pos, move.to) is None:
            raise RulesViolationError(
                "Move destination is not orthogonally adjacent",
                rule_ref="adjacent-step",
                context={"from": move.from_pos, "to": move.to},
            )
        if not board.in_bounds(*move.to):
            raise RulesViolationError(
                "Move destination is off the board",
                rule_ref="adjacent-step",
                context={"to": move.to},
            )
        if board.token_at(*move.to) is not None:
            raise RulesViolationError(
                "Simple move into an occupied cell",
                rule_ref="adjacent-step",
                context={"to": move.to},
            )
        fr, fc = move.from_pos
        tr, tc = move.to
        board.grid[tr][tc] = board.grid[fr][fc]
        board.grid[fr][fc] = None

    @staticmethod
    def _apply_push(
        board: Board, move: PushMove, color: Color
    ) -> list[Cell]:
        """Shift the pushed run and the mover; return displaced opponent cells.

        The returned cells are the final positions of opponent tokens that
        were not already captured when they were pushed.
        """
        if move.direction.step(move.from_pos) != move.to:
            raise RulesViolationError(
                "Push destination does not match push direction",
                rule_ref="push-direction",
                context={"from": move.from_pos, "to": move.to},
            )
        line = RulesEngine.push_line(board, move.to, move.direction)
        if line is None:
            raise RulesViolationError(
                "Push is blocked by the board edge",
                rule_ref="push-blocked",
                context={"to": move.to, "direction": move.direction.value},
            )
        if line != move.pushed_line:
            raise RulesViolationError(
                "Pushed line does not match the board",
                rule_ref="push-line",
                context={
                    "expected": move.pushed_line,
                    "actual": line,
                },
            )

        opponent = color.opponent
        displaced: list[Cell] = []
        # Far end first so no token is overwritten before it moves.
        for cell in reversed(line):
            row, col = cell
            new_row, new_col = move.direction.step(cell)
            token = board.grid[row][col]
            board.grid[new_row][new_col] = token
            board.grid[row][col] = None
            if token is not None and token.color == opponent and not token.is_captured:
                displaced.append((new_row, new_col))

        fr, fc = move.from_pos
        tr, tc = move.to
        board.grid[tr][tc] = board.grid[fr][fc]
        board.grid[fr][fc] = None
        return displaced

    @staticmethod
    def detect_captures(board: Board) -> list[CapturedToken]:
        """Capture every non-captured token that is surrounded.

        Runs over the whole board and applies to both colors, so a move can
        capture the mover's own tokens. The result replaces
        ``board.last_captured_tokens``.
        """
        captured: list[CapturedToken] = []
        grid = board.grid
        for row in range(board.size):
            for col in range(board.size):
                token = grid[row][col]
                if token is None or token.is_captured:
                    continue
                if board.is_surrounded(row, col):
                    grid[row][col] = token.captured()
                    captured.append(CapturedToken(row, col, token.color))
        board.last_captured_tokens = captured
        if captured and logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Captured %d token(s): %s",
                len(captured),
                [(c.row, c.col, c.color.value) for c in captured],
            )
        return captured
