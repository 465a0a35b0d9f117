"""Game rules: move types, generation and application."""

from pushfive.rules.engine import RulesEngine
from pushfive.rules.moves import (
    DIRECTION_ORDER,
    Direction,
    Move,
    PushMove,
    SimpleMove,
)

__all__ = [
    "DIRECTION_ORDER",
    "Direction",
    "Move",
    "PushMove",
    "RulesEngine",
    "SimpleMove",
]
