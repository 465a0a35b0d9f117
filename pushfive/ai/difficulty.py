"""Difficulty policy: difficulty dial -> search depth and move selection.

Depth uses the stepped table

    difficulty 1-2 -> depth 1
    difficulty 3-4 -> depth 2
    difficulty 5-6 -> depth 3
    difficulty 7-8 -> depth 4
    difficulty 9   -> depth 5

and is then capped when the root has many candidates, so a wide position
costs a shallower search instead of a very slow turn.

Selection after the search is deliberately randomized:
- difficulty <= 3 picks uniformly from the top third of the ranked list;
- higher difficulties pick uniformly among moves within a small
  "equality threshold" of the best score, which shrinks as difficulty
  rises.
"""

from __future__ import annotations

import math
import random
from collections.abc import Sequence

from ..config import MAX_SEARCH_DEPTH, SEARCH_SETTINGS, SearchSettings
from ..rules.moves import Move

__all__ = [
    "LOW_DIFFICULTY_CEILING",
    "MAX_DIFFICULTY",
    "MIN_DIFFICULTY",
    "clamp_difficulty",
    "equality_threshold",
    "resolve_search_depth",
    "select_ranked_move",
]

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 9
# Difficulties at or below this use top-third sampling.
LOW_DIFFICULTY_CEILING = 3

# (highest difficulty, depth) steps; anything above the last step gets
# MAX_SEARCH_DEPTH.
_DEPTH_STEPS: tuple[tuple[int, int], ...] = (
    (2, 1),
    (4, 2),
    (6, 3),
    (8, 4),
)


def clamp_difficulty(difficulty: int) -> int:
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, int(difficulty)))


def resolve_search_depth(
    difficulty: int,
    candidate_count: int,
    settings: SearchSettings = SEARCH_SETTINGS,
) -> int:
    """Search depth for a difficulty and the number of root candidates."""
    difficulty = clamp_difficulty(difficulty)
    depth = MAX_SEARCH_DEPTH
    for ceiling, step_depth in _DEPTH_STEPS:
        if difficulty <= ceiling:
            depth = step_depth
            break
    if candidate_count > settings.branching_throttle:
        depth = min(depth, settings.throttled_depth)
    return max(1, min(MAX_SEARCH_DEPTH, depth))


def equality_threshold(difficulty: int) -> float:
    """Score gap under which two root moves count as equally good."""
    return 0.02 * (10 - clamp_difficulty(difficulty)) / 9


def select_ranked_move(
    ranked: Sequence[tuple[Move, float]],
    difficulty: int,
    rng: random.Random,
) -> Move:
    """Pick a move from a list sorted best-first by score.

    Args:
        ranked: ``(move, score)`` pairs, best first. Must not be empty.
        difficulty: Difficulty dial (clamped).
        rng: Source of randomness for tie-breaking.
    """
    if not ranked:
        raise ValueError("select_ranked_move needs at least one move")
    if len(ranked) == 1:
        return ranked[0][0]

    difficulty = clamp_difficulty(difficulty)
    if difficulty <= LOW_DIFFICULTY_CEILING:
        top_count = min(max(1, math.ceil(len(ranked) / 3)), len(ranked))
        return ranked[rng.randrange(top_count)][0]

    best_score = ranked[0][1]
    threshold = equality_threshold(difficulty)
    top_moves = [move for move, score in ranked if best_score - score <= threshold]
    if len(top_moves) > 1:
        return rng.choice(top_moves)
    return ranked[0][0]
