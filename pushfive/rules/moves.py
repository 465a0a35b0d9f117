"""Move types for PushFive.

A move is either a :class:`SimpleMove` onto an empty neighbour or a
:class:`PushMove` into an occupied neighbour that shifts the whole run of
tokens behind it one step further. The two shapes are separate frozen
dataclasses so a simple move can never carry a pushed line.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..board import Cell

__all__ = ["DIRECTION_ORDER", "Direction", "Move", "PushMove", "SimpleMove"]


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]

    def step(self, cell: Cell, times: int = 1) -> Cell:
        dr, dc = _DELTAS[self]
        return (cell[0] + dr * times, cell[1] + dc * times)

    @classmethod
    def between(cls, from_pos: Cell, to: Cell) -> "Direction | None":
        """Direction of a single orthogonal step, or None if not adjacent."""
        offset = (to[0] - from_pos[0], to[1] - from_pos[1])
        for direction, delta in _DELTAS.items():
            if delta == offset:
                return direction
        return None


_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}

# Move generation order; affects tie-breaking in the search.
DIRECTION_ORDER: tuple[Direction, ...] = (
    Direction.UP,
    Direction.DOWN,
    Direction.LEFT,
    Direction.RIGHT,
)


@dataclass(frozen=True, slots=True)
class SimpleMove:
    """Step onto an empty adjacent cell."""

    from_pos: Cell
    to: Cell

    @property
    def direction(self) -> Direction | None:
        return Direction.between(self.from_pos, self.to)

    def __str__(self) -> str:
        return f"{self.from_pos}->{self.to}"


@dataclass(frozen=True, slots=True)
class PushMove:
    """Step into an occupied adjacent cell, shifting the run behind it.

    ``pushed_line`` lists the cells of the contiguous run starting at
    ``to``, nearest first.
    """

    from_pos: Cell
    to: Cell
    direction: Direction
    pushed_line: tuple[Cell, ...]

    @property
    def pushed_destinations(self) -> tuple[Cell, ...]:
        return tuple(self.direction.step(cell) for cell in self.pushed_line)

    def __str__(self) -> str:
        return (
            f"{self.from_pos}->{self.to} push {self.direction.value} "
            f"x{len(self.pushed_line)}"
        )


Move = Union[SimpleMove, PushMove]
