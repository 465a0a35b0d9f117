"""Minimax AI implementation for PushFive.

This agent uses depth-limited minimax with alpha-beta pruning over a single
shared board, mutated in place through :class:`StateDiffTracker` and
restored after every probe. No board is copied during the search.

The root driver is written as a generator (:meth:`MinimaxAI.search_steps`)
that scores root candidates in small batches and yields a progress event
between batches. Synchronous callers drain it in one go; the async entry
point awaits between batches so an event loop can keep serving other work.
Control is only ever handed back between independent root candidates, never
inside the recursive descent, so the undo journal is always empty at a yield
point.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass

from ..board import Board, Color
from ..config import SEARCH_SETTINGS, SearchSettings
from ..metrics import record_ai_error, record_search
from ..models import AIConfig, ProgressType, SearchProgress, SearchResult
from ..rules.engine import RulesEngine
from ..rules.moves import Move
from .base import BaseAI
from .difficulty import resolve_search_depth, select_ranked_move
from .evaluator import WIN_CAPTURE_COUNT, evaluate, evaluation_breakdown
from .state_diff import StateDiffTracker

logger = logging.getLogger(__name__)

__all__ = ["MinimaxAI", "ProgressCallback", "SearchStats"]

ProgressCallback = Callable[[SearchProgress], None]


@dataclass(slots=True)
class SearchStats:
    """Summary of the most recent root search."""

    result: SearchResult
    candidates: int
    depth: int | None = None
    nodes_visited: int = 0
    elapsed: float = 0.0
    best_score: float | None = None


class MinimaxAI(BaseAI):
    """AI that uses minimax with alpha-beta pruning.

    Difficulty and depth:
        :func:`~pushfive.ai.difficulty.resolve_search_depth` maps the
        difficulty dial to a depth of 1-5 and lowers it for wide root
        positions. Depth 1 scores each root move with the static evaluator;
        deeper searches run alpha-beta on the opponent's replies.

    Scores:
        Inside the tree, positions are scored in ``[-1, 1]`` from the root
        player's point of view (``2 * evaluate - 1``, negated on the
        opponent's plies). Depth-1 root scores stay on the evaluator's
        ``[0, 1]`` scale; both are only compared within one search.
    """

    def __init__(
        self,
        color: Color,
        config: AIConfig,
        settings: SearchSettings | None = None,
    ) -> None:
        super().__init__(color, config)
        self.settings: SearchSettings = settings or SEARCH_SETTINGS
        self.root_batch_size: int = (
            config.root_batch_size
            if config.root_batch_size is not None
            else self.settings.root_batch_size
        )
        self.nodes_visited: int = 0
        self.last_search: SearchStats | None = None

    # ------------------------------------------------------------------
    # BaseAI interface
    # ------------------------------------------------------------------

    def evaluate_position(self, board: Board) -> float:
        return evaluate(board, self.color)

    def get_evaluation_breakdown(self, board: Board) -> dict[str, float]:
        return evaluation_breakdown(board, self.color)

    def select_move(
        self,
        board: Board,
        progress_callback: ProgressCallback | None = None,
    ) -> Move | None:
        """Best move for this AI's color, or None.

        This is the outermost boundary of the search: any unexpected
        exception is logged, counted, and reported as "no move found".
        The board is always restored, because every probe undoes itself
        while the exception unwinds.
        """
        try:
            move = self.best_move(board, progress_callback)
        except Exception as e:
            logger.error(
                "MinimaxAI(%s, difficulty=%d) search failed: %s",
                self.color.value,
                self.difficulty,
                e,
                exc_info=True,
            )
            record_ai_error(self.difficulty, e)
            return None
        if move is not None:
            self.move_count += 1
        return move

    async def select_move_async(
        self,
        board: Board,
        progress_callback: ProgressCallback | None = None,
    ) -> Move | None:
        """Async counterpart of :meth:`select_move`."""
        try:
            move = await self.best_move_async(board, progress_callback)
        except Exception as e:
            logger.error(
                "MinimaxAI(%s, difficulty=%d) async search failed: %s",
                self.color.value,
                self.difficulty,
                e,
                exc_info=True,
            )
            record_ai_error(self.difficulty, e)
            return None
        if move is not None:
            self.move_count += 1
        return move

    # ------------------------------------------------------------------
    # Root driver
    # ------------------------------------------------------------------

    def best_move(
        self,
        board: Board,
        progress_callback: ProgressCallback | None = None,
    ) -> Move | None:
        """Run the whole search synchronously."""
        steps = self.search_steps(board, progress_callback)
        while True:
            try:
                next(steps)
            except StopIteration as stop:
                return stop.value

    async def best_move_async(
        self,
        board: Board,
        progress_callback: ProgressCallback | None = None,
    ) -> Move | None:
        """Run the search, yielding to the event loop between root batches.

        Cancelling the awaiting task stops the search between two root
        candidates; the board is left exactly as it was passed in.
        """
        steps = self.search_steps(board, progress_callback)
        try:
            while True:
                try:
                    next(steps)
                except StopIteration as stop:
                    return stop.value
                await asyncio.sleep(0)
        finally:
            steps.close()

    def search_steps(
        self,
        board: Board,
        progress_callback: ProgressCallback | None = None,
    ) -> Generator[SearchProgress, None, Move | None]:
        """Root search as a generator of per-batch progress events.

        The selected move (or None) is the generator's return value.
        """
        started = time.perf_counter()
        self.nodes_visited = 0

        def emit(event: SearchProgress) -> None:
            if progress_callback is not None:
                progress_callback(event)

        emit(SearchProgress(type=ProgressType.START, message="AI is thinking..."))

        moves = self.get_valid_moves(board)
        if not moves:
            self._finish(started, SearchResult.NO_MOVES, 0)
            emit(SearchProgress(
                type=ProgressType.END,
                result=SearchResult.NO_MOVES,
                message="AI found no possible moves",
            ))
            return None

        if len(moves) == 1:
            self._finish(started, SearchResult.SINGLE_MOVE, 1)
            emit(SearchProgress(
                type=ProgressType.END,
                result=SearchResult.SINGLE_MOVE,
                message="AI found only one possible move",
            ))
            return moves[0]

        tracker = StateDiffTracker(board)
        candidates = self.filter_suicidal_moves(tracker, moves)
        depth = resolve_search_depth(
            self.difficulty, len(candidates), self.settings
        )
        emit(SearchProgress(
            type=ProgressType.DEPTH,
            depth=depth,
            message=f"AI analyzing at depth {depth}...",
        ))

        scored: list[tuple[Move, float]] = []
        total = len(candidates)
        for batch_start in range(0, total, self.root_batch_size):
            batch = candidates[batch_start:batch_start + self.root_batch_size]
            for move in batch:
                scored.append((move, self._score_root_move(tracker, move, depth)))
            percent = len(scored) * 100 // total
            event = SearchProgress(
                type=ProgressType.PROGRESS,
                depth=depth,
                percent=percent,
                message=f"AI analyzing moves: {percent}%",
            )
            emit(event)
            if len(scored) < total:
                yield event

        # Stable: equal scores keep generation order.
        ranked = sorted(scored, key=lambda item: item[1], reverse=True)
        selected = select_ranked_move(ranked, self.difficulty, self.rng)

        stats = self._finish(
            started,
            SearchResult.MOVE_SELECTED,
            total,
            depth=depth,
            best_score=ranked[0][1],
        )
        logger.debug(
            "MinimaxAI(%s): depth=%d candidates=%d nodes=%d best=%.4f "
            "time=%.3fs selected=%s",
            self.color.value,
            depth,
            total,
            stats.nodes_visited,
            ranked[0][1],
            stats.elapsed,
            selected,
        )
        emit(SearchProgress(
            type=ProgressType.END,
            result=SearchResult.MOVE_SELECTED,
            message="AI move selected",
        ))
        return selected

    def filter_suicidal_moves(
        self, tracker: StateDiffTracker, moves: list[Move]
    ) -> list[Move]:
        """Drop moves that capture one of our own tokens immediately.

        Falls back to the full list when every move is suicidal, since a
        forced suicidal move is still a legal move.
        """
        safe_moves = []
        for move in moves:
            with tracker.probe(move, self.color) as frame:
                if not frame.has_self_capture():
                    safe_moves.append(move)
        return safe_moves if safe_moves else moves

    def _score_root_move(
        self, tracker: StateDiffTracker, move: Move, depth: int
    ) -> float:
        with tracker.probe(move, self.color):
            if depth <= 1:
                self.nodes_visited += 1
                return evaluate(tracker.board, self.color)
            return self._alpha_beta(
                tracker,
                depth - 1,
                self.color.opponent,
                -1.0,
                1.0,
                False,
            )

    def _finish(
        self,
        started: float,
        result: SearchResult,
        candidates: int,
        depth: int | None = None,
        best_score: float | None = None,
    ) -> SearchStats:
        stats = SearchStats(
            result=result,
            candidates=candidates,
            depth=depth,
            nodes_visited=self.nodes_visited,
            elapsed=time.perf_counter() - started,
            best_score=best_score,
        )
        self.last_search = stats
        record_search(
            self.difficulty,
            depth,
            self.nodes_visited,
            stats.elapsed,
            result.value,
        )
        return stats

    # ------------------------------------------------------------------
    # Alpha-beta
    # ------------------------------------------------------------------

    def _alpha_beta(
        self,
        tracker: StateDiffTracker,
        depth: int,
        color: Color,
        alpha: float,
        beta: float,
        maximizing: bool,
    ) -> float:
        """
        Alpha-beta search with ``color`` to move.

        Returns the score from the root player's perspective in ``[-1, 1]``.
        ``maximizing`` is True on the root player's plies.
        """
        self.nodes_visited += 1
        board = tracker.board

        captured = board.count_captured()
        if captured[color.opponent] >= WIN_CAPTURE_COUNT:
            return 1.0 if maximizing else -1.0
        if captured[color] >= WIN_CAPTURE_COUNT:
            return -1.0 if maximizing else 1.0

        if depth == 0:
            # evaluate() is 0.0 when the side to move is immobile, which
            # maps to the same -1 loss the move check below returns.
            score = evaluate(board, color) * 2.0 - 1.0
            return score if maximizing else -score

        moves = RulesEngine.get_valid_moves(board, color)
        if not moves:
            return -1.0 if maximizing else 1.0

        opponent = color.opponent
        if maximizing:
            max_eval = float("-inf")
            for move in moves:
                with tracker.probe(move, color):
                    score = self._alpha_beta(
                        tracker, depth - 1, opponent, alpha, beta, False
                    )
                max_eval = max(max_eval, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break
            return max_eval

        min_eval = float("inf")
        for move in moves:
            with tracker.probe(move, color):
                score = self._alpha_beta(
                    tracker, depth - 1, opponent, alpha, beta, True
                )
            min_eval = min(min_eval, score)
            beta = min(beta, score)
            if beta <= alpha:
                break
        return min_eval
