"""AI-vs-AI self-play.

Plays complete games through :class:`~pushfive.game.GameSession`, so every
move goes through the same legality checks, win conditions and metrics as
an interactive game. Used by ``scripts/run_selfplay.py`` and by tests that
need whole-game coverage.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Any

from .ai.random_ai import RandomAI
from .board import Color
from .game import GameSession
from .metrics import record_game_outcome
from .models import AIConfig
from .rules.moves import Move

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_MAX_MOVES", "REASON_MOVE_LIMIT", "GameRecord", "play_game"]

DEFAULT_MAX_MOVES = 200
REASON_MOVE_LIMIT = "Move limit reached"


@dataclass
class GameRecord:
    """Outcome of one self-play game."""

    winner: Color | None
    reason: str
    moves: list[Move] = field(default_factory=list)
    captured: dict[Color, int] = field(default_factory=dict)
    white_difficulty: int = 0
    black_difficulty: int = 0
    seed: int | None = None
    duration_seconds: float = 0.0

    @property
    def move_count(self) -> int:
        return len(self.moves)

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner.value if self.winner else None,
            "reason": self.reason,
            "move_count": self.move_count,
            "moves": [str(move) for move in self.moves],
            "captured": {color.value: n for color, n in self.captured.items()},
            "white_difficulty": self.white_difficulty,
            "black_difficulty": self.black_difficulty,
            "seed": self.seed,
            "duration_seconds": round(self.duration_seconds, 3),
        }


def play_game(
    white_difficulty: int,
    black_difficulty: int,
    seed: int | None = None,
    max_moves: int = DEFAULT_MAX_MOVES,
    random_colors: Collection[Color] = (),
) -> GameRecord:
    """Play one game from the initial position.

    Args:
        white_difficulty: Minimax difficulty for white
        black_difficulty: Minimax difficulty for black
        seed: RNG seed for both players; None uses per-difficulty defaults
        max_moves: Stop after this many moves and record no winner
        random_colors: Colors played by :class:`RandomAI` instead
    """
    started = time.perf_counter()
    session = GameSession(rng_seed=seed)
    difficulties = {Color.WHITE: white_difficulty, Color.BLACK: black_difficulty}
    random_players = {
        color: RandomAI(color, AIConfig(difficulty=1, rng_seed=seed))
        for color in random_colors
    }

    while session.is_game_active and session.move_count < max_moves:
        player = session.current_player
        baseline = random_players.get(player)
        if baseline is None:
            session.play_ai_turn(difficulties[player])
            continue
        move = baseline.select_move(session.board)
        if move is None:
            # start_turn already ends the game when the mover is stuck.
            break
        session.play(move)

    if session.is_game_active:
        winner, reason = None, REASON_MOVE_LIMIT
        record_game_outcome(None, reason)
    else:
        winner, reason = session.winner, session.win_reason

    record = GameRecord(
        winner=winner,
        reason=reason,
        moves=list(session.move_history),
        captured=session.engine.count_captured(),
        white_difficulty=white_difficulty,
        black_difficulty=black_difficulty,
        seed=seed,
        duration_seconds=time.perf_counter() - started,
    )
    logger.info(
        "Self-play W%d vs B%d: winner=%s reason=%s moves=%d (%.2fs)",
        white_difficulty,
        black_difficulty,
        winner.value if winner else "none",
        reason,
        record.move_count,
        record.duration_seconds,
    )
    return record
