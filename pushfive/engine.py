"""Decision engine facade.

:class:`DecisionEngine` is the single object a game loop or UI needs: it
owns one board and exposes move generation, move application, win checks
and AI move selection over it. The AI search runs on the same board and
leaves it unchanged when it returns.

Searches mutate the board in place while they run, so at most one search
may be in flight per engine. A second search started while the first is
still running (for example from another task while an async search is
suspended between batches) raises :class:`SearchInProgressError`.
"""

from __future__ import annotations

import logging

from .ai.difficulty import clamp_difficulty
from .ai.evaluator import WIN_CAPTURE_COUNT
from .ai.minimax_ai import MinimaxAI, ProgressCallback, SearchStats
from .board import Board, CapturedToken, Color
from .config import DEFAULT_DIFFICULTY, SEARCH_SETTINGS, SearchSettings
from .errors import SearchInProgressError
from .models import AIConfig
from .rules.engine import RulesEngine
from .rules.moves import Move

logger = logging.getLogger(__name__)

__all__ = ["DecisionEngine"]


class DecisionEngine:
    """Rules and AI operations over one owned board."""

    def __init__(
        self,
        board: Board | None = None,
        rng_seed: int | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.rng_seed = rng_seed
        self.settings = settings or SEARCH_SETTINGS
        self.last_search: SearchStats | None = None
        self._searching = False
        # One AI per (color, difficulty) so each keeps its RNG stream
        # across turns.
        self._ais: dict[tuple[Color, int], MinimaxAI] = {}

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def generate_moves(self, color: Color) -> list[Move]:
        return RulesEngine.get_valid_moves(self.board, color)

    def apply_move(self, move: Move, color: Color) -> list[CapturedToken]:
        self._check_idle()
        return RulesEngine.apply_move(self.board, move, color)

    def is_legal_move(self, move: Move, color: Color) -> bool:
        return RulesEngine.is_legal_move(self.board, move, color)

    def count_captured(self) -> dict[Color, int]:
        return self.board.count_captured()

    def reset_active(self, color: Color) -> None:
        self._check_idle()
        self.board.reset_active(color)

    def winner(self, color_to_move: Color) -> Color | None:
        """Winner of the position with ``color_to_move`` on turn, if any."""
        captured = self.board.count_captured()
        if captured[color_to_move] >= WIN_CAPTURE_COUNT:
            return color_to_move.opponent
        if captured[color_to_move.opponent] >= WIN_CAPTURE_COUNT:
            return color_to_move
        if not RulesEngine.has_valid_move(self.board, color_to_move):
            return color_to_move.opponent
        return None

    def is_game_over(self, color_to_move: Color) -> bool:
        return self.winner(color_to_move) is not None

    # ------------------------------------------------------------------
    # AI
    # ------------------------------------------------------------------

    def get_ai(self, color: Color, difficulty: int | None = None) -> MinimaxAI:
        level = clamp_difficulty(
            DEFAULT_DIFFICULTY if difficulty is None else difficulty
        )
        key = (color, level)
        ai = self._ais.get(key)
        if ai is None:
            ai = MinimaxAI(
                color,
                AIConfig(
                    difficulty=level,
                    rng_seed=self.rng_seed,
                    think_time=self.settings.min_think_time_ms,
                ),
                settings=self.settings,
            )
            self._ais[key] = ai
        return ai

    def best_move(
        self,
        color: Color,
        difficulty: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> Move | None:
        """Best move for ``color``; None if it has no legal move.

        Unexpected search failures are logged by the AI and also yield
        None. The board is unchanged on return.
        """
        ai = self.get_ai(color, difficulty)
        self._begin_search()
        try:
            move = ai.select_move(self.board, progress_callback)
        finally:
            self._searching = False
        self.last_search = ai.last_search
        logger.debug("best_move(%s, difficulty=%d) -> %s", color.value, ai.difficulty, move)
        return move

    async def best_move_async(
        self,
        color: Color,
        difficulty: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> Move | None:
        """Like :meth:`best_move`, yielding to the event loop between batches."""
        ai = self.get_ai(color, difficulty)
        self._begin_search()
        try:
            move = await ai.select_move_async(self.board, progress_callback)
        finally:
            self._searching = False
        self.last_search = ai.last_search
        return move

    @property
    def is_searching(self) -> bool:
        return self._searching

    def _begin_search(self) -> None:
        self._check_idle()
        self._searching = True

    def _check_idle(self) -> None:
        if self._searching:
            raise SearchInProgressError(
                "A search is already running on this board"
            )
