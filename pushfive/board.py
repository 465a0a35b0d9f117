"""Board model for PushFive.

The board is a fixed 5x5 grid of token slots. This module is pure grid
bookkeeping: it knows where tokens are and how many sides of a cell are
closed off, but nothing about which moves are legal or when a token gets
captured. Those rules live in :mod:`pushfive.rules.engine`.

Tokens are immutable values. Every change to a token (capture, activation)
replaces the token stored in its cell, so holding on to a ``Token`` reference
is a complete snapshot of that cell.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from enum import Enum

from .errors import InvalidStateError

__all__ = [
    "BOARD_SIZE",
    "INITIAL_BLACK_CELLS",
    "INITIAL_WHITE_CELLS",
    "ORTHOGONAL_OFFSETS",
    "TOKENS_PER_COLOR",
    "Board",
    "CapturedToken",
    "Cell",
    "Color",
    "Token",
]

BOARD_SIZE = 5
TOKENS_PER_COLOR = 6

# Up, down, left, right.
ORTHOGONAL_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, 0),
    (1, 0),
    (0, -1),
    (0, 1),
)

Cell = tuple[int, int]

# a3, a4, b3, b5, c4, c5
INITIAL_BLACK_CELLS: tuple[Cell, ...] = (
    (2, 0), (1, 0), (2, 1), (0, 1), (1, 2), (0, 2),
)
# c1, c2, d1, d3, e2, e3
INITIAL_WHITE_CELLS: tuple[Cell, ...] = (
    (4, 2), (3, 2), (4, 3), (2, 3), (3, 4), (2, 4),
)


class Color(str, Enum):
    """Token / player color."""
    BLACK = "black"
    WHITE = "white"

    @property
    def opponent(self) -> "Color":
        return Color.WHITE if self is Color.BLACK else Color.BLACK


@dataclass(frozen=True, slots=True)
class Token:
    """A single token on the grid.

    ``is_active`` is False for a token that was pushed by the opponent and
    may not be moved by its owner until that owner's next turn starts.
    ``is_captured`` tokens stay on the grid and can still be pushed, but are
    never selected as movers again.
    """

    color: Color
    is_active: bool = True
    is_captured: bool = False

    def captured(self) -> "Token":
        return replace(self, is_captured=True)

    def with_active(self, active: bool) -> "Token":
        return replace(self, is_active=active)


@dataclass(frozen=True, slots=True)
class CapturedToken:
    """Entry of a capture list produced by a capture check."""

    row: int
    col: int
    color: Color

    @property
    def cell(self) -> Cell:
        return (self.row, self.col)


class Board:
    """5x5 grid of optional tokens plus last-move metadata.

    ``last_move_from``/``last_move_to`` are presentation metadata that the
    search never reads. ``last_captured_tokens`` is the result of the most
    recent capture check.
    """

    __slots__ = [
        "size",
        "grid",
        "last_move_from",
        "last_move_to",
        "last_captured_tokens",
    ]

    def __init__(self, size: int = BOARD_SIZE) -> None:
        self.size: int = size
        self.grid: list[list[Token | None]] = [
            [None] * size for _ in range(size)
        ]
        self.last_move_from: Cell | None = None
        self.last_move_to: Cell | None = None
        self.last_captured_tokens: list[CapturedToken] = []

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def initial(cls) -> "Board":
        """Board with both 6-token starting formations."""
        return cls.from_layout(
            black=INITIAL_BLACK_CELLS,
            white=INITIAL_WHITE_CELLS,
        )

    @classmethod
    def from_layout(
        cls,
        black: Iterable[Cell] = (),
        white: Iterable[Cell] = (),
    ) -> "Board":
        """Board with fresh active tokens on the given cells."""
        board = cls()
        for color, cells in ((Color.BLACK, black), (Color.WHITE, white)):
            for row, col in cells:
                if board.token_at(row, col) is not None:
                    raise InvalidStateError(
                        "Two tokens placed on the same cell",
                        context={"row": row, "col": col},
                    )
                board.set_token_at(row, col, Token(color))
        board.check_token_counts()
        return board

    @classmethod
    def from_tokens(cls, tokens: dict[Cell, Token]) -> "Board":
        board = cls()
        for (row, col), token in tokens.items():
            board.set_token_at(row, col, token)
        board.check_token_counts()
        return board

    def copy(self) -> "Board":
        clone = Board(self.size)
        clone.grid = [list(row) for row in self.grid]
        clone.last_move_from = self.last_move_from
        clone.last_move_to = self.last_move_to
        clone.last_captured_tokens = list(self.last_captured_tokens)
        return clone

    def restore(self, other: "Board") -> None:
        """Overwrite this board in place with the contents of ``other``."""
        self.grid = [list(row) for row in other.grid]
        self.last_move_from = other.last_move_from
        self.last_move_to = other.last_move_to
        self.last_captured_tokens = list(other.last_captured_tokens)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def token_at(self, row: int, col: int) -> Token | None:
        if 0 <= row < self.size and 0 <= col < self.size:
            return self.grid[row][col]
        return None

    def set_token_at(self, row: int, col: int, token: Token | None) -> None:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise InvalidStateError(
                "Cell is off the board",
                context={"row": row, "col": col},
            )
        self.grid[row][col] = token

    def neighbors(self, row: int, col: int) -> Iterator[Cell]:
        """In-bounds orthogonal neighbours of a cell."""
        for dr, dc in ORTHOGONAL_OFFSETS:
            r, c = row + dr, col + dc
            if 0 <= r < self.size and 0 <= c < self.size:
                yield (r, c)

    def surrounded_sides(self, row: int, col: int) -> int:
        """Number of orthogonal sides that are occupied or off the board."""
        sides = 0
        for dr, dc in ORTHOGONAL_OFFSETS:
            r, c = row + dr, col + dc
            if not (0 <= r < self.size and 0 <= c < self.size):
                sides += 1
            elif self.grid[r][c] is not None:
                sides += 1
        return sides

    def is_surrounded(self, row: int, col: int) -> bool:
        return self.surrounded_sides(row, col) == 4

    def cells(self) -> Iterator[Cell]:
        """All cells in row-major order."""
        for row in range(self.size):
            for col in range(self.size):
                yield (row, col)

    def tokens(self) -> Iterator[tuple[Cell, Token]]:
        """Occupied cells with their tokens, in row-major order."""
        for row in range(self.size):
            for col in range(self.size):
                token = self.grid[row][col]
                if token is not None:
                    yield (row, col), token

    def count_captured(self) -> dict[Color, int]:
        counts = {Color.BLACK: 0, Color.WHITE: 0}
        for row in self.grid:
            for token in row:
                if token is not None and token.is_captured:
                    counts[token.color] += 1
        return counts

    def count_tokens(self) -> dict[Color, int]:
        counts = {Color.BLACK: 0, Color.WHITE: 0}
        for _, token in self.tokens():
            counts[token.color] += 1
        return counts

    def check_token_counts(self) -> None:
        """Raise if either color holds more tokens than it starts with."""
        for color, count in self.count_tokens().items():
            if count > TOKENS_PER_COLOR:
                raise InvalidStateError(
                    f"Too many {color.value} tokens on the board",
                    context={"count": count, "limit": TOKENS_PER_COLOR},
                )

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def reset_active(self, color: Color) -> None:
        """Reactivate every non-captured token of ``color``."""
        for row in range(self.size):
            for col in range(self.size):
                token = self.grid[row][col]
                if (
                    token is not None
                    and token.color == color
                    and not token.is_captured
                    and not token.is_active
                ):
                    self.grid[row][col] = token.with_active(True)

    def set_last_move(self, from_pos: Cell | None, to: Cell | None) -> None:
        self.last_move_from = from_pos
        self.last_move_to = to

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> tuple:
        """Hashable value of the full board, metadata included."""
        return (
            tuple(tuple(row) for row in self.grid),
            self.last_move_from,
            self.last_move_to,
            tuple(self.last_captured_tokens),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    __hash__ = None  # mutable

    def render(self) -> str:
        """ASCII dump: B/W active, b/w inactive, x captured, . empty."""
        lines = []
        for row in self.grid:
            chars = []
            for token in row:
                if token is None:
                    chars.append(".")
                elif token.is_captured:
                    chars.append("x")
                else:
                    mark = "B" if token.color is Color.BLACK else "W"
                    chars.append(mark if token.is_active else mark.lower())
            lines.append(" ".join(chars))
        return "\n".join(lines)

    def __repr__(self) -> str:
        counts = self.count_captured()
        return (
            f"Board(size={self.size}, "
            f"captured_black={counts[Color.BLACK]}, "
            f"captured_white={counts[Color.WHITE]})"
        )
