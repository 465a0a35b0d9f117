"""Search, evaluation and difficulty policy for PushFive AI players."""

from pushfive.ai.base import BaseAI
from pushfive.ai.evaluator import count_threatened, evaluate, evaluation_breakdown
from pushfive.ai.minimax_ai import MinimaxAI, SearchStats
from pushfive.ai.random_ai import RandomAI
from pushfive.ai.state_diff import SearchFrame, StateDiffTracker

__all__ = [
    "BaseAI",
    "MinimaxAI",
    "RandomAI",
    "SearchFrame",
    "SearchStats",
    "StateDiffTracker",
    "count_threatened",
    "evaluate",
    "evaluation_breakdown",
]
