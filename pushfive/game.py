"""Game session: turn order, win conditions and undo/redo for one match.

A :class:`GameSession` wraps a :class:`~pushfive.engine.DecisionEngine`
and plays real turns on it. Turn history is kept as full board snapshots,
which is cheap at 25 cells and completely separate from the search's
incremental undo journal.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from .ai.evaluator import WIN_CAPTURE_COUNT
from .ai.minimax_ai import ProgressCallback
from .board import Board, CapturedToken, Color
from .config import SearchSettings
from .engine import DecisionEngine
from .errors import GameOverError, InvalidMoveError, InvalidStateError
from .metrics import record_game_outcome
from .models import BoardSnapshot, CapturedCounts, GameStatusSnapshot
from .rules.moves import Move

logger = logging.getLogger(__name__)

__all__ = [
    "REASON_ALL_CAPTURED",
    "REASON_NO_MOVES",
    "GameSession",
]

REASON_ALL_CAPTURED = "All opponent tokens captured"
REASON_NO_MOVES = "No valid moves available"


@dataclass(slots=True)
class _TurnSnapshot:
    board: Board
    current_player: Color
    is_game_active: bool
    winner: Color | None
    win_reason: str
    move_history: list[Move]


class GameSession:
    """One match between two players, white moving first."""

    def __init__(
        self,
        board: Board | None = None,
        first_player: Color = Color.WHITE,
        rng_seed: int | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        self.engine = DecisionEngine(
            board if board is not None else Board.initial(),
            rng_seed=rng_seed,
            settings=settings,
        )
        self.current_player = first_player
        self.is_game_active = True
        self.winner: Color | None = None
        self.win_reason = ""
        self.move_history: list[Move] = []
        self._undo_stack: list[_TurnSnapshot] = []
        self._redo_stack: list[_TurnSnapshot] = []
        self.start_turn()

    @property
    def board(self) -> Board:
        return self.engine.board

    @property
    def move_count(self) -> int:
        return len(self.move_history)

    def start_turn(self) -> None:
        """End the game if the current player has no movable token.

        Tokens pushed by the opponent last turn are still inactive here and
        do not count as movable.
        """
        if not self.engine.generate_moves(self.current_player):
            self._end_game(self.current_player.opponent, REASON_NO_MOVES)

    def valid_moves(self) -> list[Move]:
        if not self.is_game_active:
            return []
        return self.engine.generate_moves(self.current_player)

    def play(self, move: Move) -> list[CapturedToken]:
        """Play ``move`` for the current player and advance the turn."""
        self._check_active()
        player = self.current_player
        if not self.engine.is_legal_move(move, player):
            raise InvalidMoveError(
                f"Illegal move for {player.value}",
                context={"move": str(move)},
            )

        self._undo_stack.append(self._snapshot())
        self._redo_stack.clear()

        # The freeze from a push lasts until the owner's next move is chosen.
        self.engine.reset_active(player)
        captured = self.engine.apply_move(move, player)
        self.move_history.append(move)
        logger.debug(
            "Move %d: %s plays %s, captured %d",
            self.move_count,
            player.value,
            move,
            len(captured),
        )

        counts = self.engine.count_captured()
        if counts[player.opponent] >= WIN_CAPTURE_COUNT:
            self._end_game(player, REASON_ALL_CAPTURED)
            return captured
        if counts[player] >= WIN_CAPTURE_COUNT:
            self._end_game(player.opponent, REASON_ALL_CAPTURED)
            return captured

        self.current_player = player.opponent
        self.start_turn()
        return captured

    def play_ai_turn(
        self,
        difficulty: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> Move | None:
        """Let the AI play the current player's turn.

        A turn where the AI finds no move ends the game in the opponent's
        favor.
        """
        self._check_active()
        move = self.engine.best_move(
            self.current_player, difficulty, progress_callback
        )
        return self._play_ai_move(move)

    async def play_ai_turn_async(
        self,
        difficulty: int | None = None,
        progress_callback: ProgressCallback | None = None,
        min_think_time_ms: int | None = None,
    ) -> Move | None:
        """Async AI turn that lasts at least ``min_think_time_ms``.

        Without an explicit floor the AI's ``config.think_time`` applies.
        The delay only paces the turn for display; the move is chosen
        before it starts.
        """
        self._check_active()
        if min_think_time_ms is None:
            ai = self.engine.get_ai(self.current_player, difficulty)
            min_think_time_ms = ai.config.think_time or 0
        started = time.perf_counter()
        move = await self.engine.best_move_async(
            self.current_player, difficulty, progress_callback
        )
        remaining = min_think_time_ms / 1000.0 - (time.perf_counter() - started)
        if remaining > 0:
            await asyncio.sleep(remaining)
        return self._play_ai_move(move)

    def _play_ai_move(self, move: Move | None) -> Move | None:
        if move is None:
            self._end_game(self.current_player.opponent, REASON_NO_MOVES)
            return None
        self.play(move)
        return move

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def undo(self) -> None:
        if not self._undo_stack:
            raise InvalidStateError("Nothing to undo")
        self._redo_stack.append(self._snapshot())
        self._restore(self._undo_stack.pop())

    def redo(self) -> None:
        if not self._redo_stack:
            raise InvalidStateError("Nothing to redo")
        self._undo_stack.append(self._snapshot())
        self._restore(self._redo_stack.pop())

    def _snapshot(self) -> _TurnSnapshot:
        return _TurnSnapshot(
            board=self.board.copy(),
            current_player=self.current_player,
            is_game_active=self.is_game_active,
            winner=self.winner,
            win_reason=self.win_reason,
            move_history=list(self.move_history),
        )

    def _restore(self, snapshot: _TurnSnapshot) -> None:
        self.board.restore(snapshot.board)
        self.current_player = snapshot.current_player
        self.is_game_active = snapshot.is_game_active
        self.winner = snapshot.winner
        self.win_reason = snapshot.win_reason
        self.move_history = list(snapshot.move_history)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def status(self) -> GameStatusSnapshot:
        return GameStatusSnapshot(
            board=BoardSnapshot.from_board(self.board),
            currentPlayer=self.current_player,
            isGameActive=self.is_game_active,
            winner=self.winner,
            winReason=self.win_reason,
            moveCount=self.move_count,
            capturedCounts=CapturedCounts.from_counts(
                self.engine.count_captured()
            ),
            canUndo=self.can_undo,
            canRedo=self.can_redo,
        )

    def _check_active(self) -> None:
        if not self.is_game_active:
            raise GameOverError(
                "Game is over",
                context={
                    "winner": self.winner.value if self.winner else None,
                    "reason": self.win_reason,
                },
            )

    def _end_game(self, winner: Color, reason: str) -> None:
        self.is_game_active = False
        self.winner = winner
        self.win_reason = reason
        record_game_outcome(winner.value, reason)
        logger.info(
            "Game over after %d moves: %s wins (%s)",
            self.move_count,
            winner.value,
            reason,
        )
