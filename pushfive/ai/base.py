"""
Base AI Player class for PushFive
Abstract base class that all AI implementations inherit from
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import random

from ..board import Board, Color
from ..models import AIConfig
from ..rules.engine import RulesEngine
from ..rules.moves import Move
from .difficulty import clamp_difficulty


def derive_seed(config: AIConfig, color: Color) -> int:
    """
    Derive a deterministic RNG seed when ``AIConfig.rng_seed`` is not set.

    Mixes the difficulty and the color into a 32-bit value, so two AIs of
    the same strength on opposite sides do not share a random stream.
    Callers that need reproducible games across configurations should pass
    ``rng_seed`` explicitly instead of relying on this fallback.
    """
    color_index = 1 if color is Color.WHITE else 2
    base = (config.difficulty * 1_000_003) ^ (color_index * 97_911)
    return int(base & 0xFFFFFFFF)


class BaseAI(ABC):
    """Abstract base class for all AI implementations"""

    def __init__(self, color: Color, config: AIConfig):
        """
        Initialize AI player

        Args:
            color: The color this AI plays
            config: AI configuration settings
        """
        self.color = color
        self.config = config
        self.difficulty = clamp_difficulty(config.difficulty)
        self.move_count = 0

        # Per-instance RNG used for all stochastic behaviour (tie-breaking,
        # low-difficulty sampling, random baselines). Prefer an explicit
        # rng_seed from AIConfig when provided.
        if self.config.rng_seed is not None:
            self.rng_seed: int = int(self.config.rng_seed)
        else:
            self.rng_seed = derive_seed(self.config, self.color)
        self.rng: random.Random = random.Random(self.rng_seed)

    @abstractmethod
    def select_move(self, board: Board) -> Optional[Move]:
        """
        Select the move to play on ``board``

        Args:
            board: Current board; must be restored before returning

        Returns:
            Selected move or None if no valid moves
        """

    @abstractmethod
    def evaluate_position(self, board: Board) -> float:
        """
        Evaluate the current position from this AI's perspective

        Args:
            board: Current board

        Returns:
            Evaluation score in [0, 1] (higher = better for this AI)
        """

    def get_evaluation_breakdown(self, board: Board) -> Dict[str, float]:
        """
        Get detailed breakdown of position evaluation

        Args:
            board: Current board

        Returns:
            Dictionary with evaluation components
        """
        return {
            "total": self.evaluate_position(board)
        }

    def get_valid_moves(self, board: Board) -> List[Move]:
        """
        Get all valid moves for this AI's color using the rules engine.

        Args:
            board: Current board

        Returns:
            List of valid moves in generation order
        """
        return RulesEngine.get_valid_moves(board, self.color)

    def get_random_element(self, items: List[Any]) -> Optional[Any]:
        """
        Get random element from list using the per-instance RNG.

        Args:
            items: List of items

        Returns:
            Random item or None if list is empty
        """
        if not items:
            return None
        return self.rng.choice(items)

    def __repr__(self) -> str:
        """String representation of AI"""
        return (
            f"{self.__class__.__name__}"
            f"(color={self.color.value}, "
            f"difficulty={self.difficulty})"
        )
