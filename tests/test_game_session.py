"""Tests for GameSession turn flow, win conditions and history."""

import time

import pytest

from pushfive.board import Color
from pushfive.config import SearchSettings
from pushfive.errors import GameOverError, InvalidMoveError, InvalidStateError
from pushfive.game import REASON_ALL_CAPTURED, REASON_NO_MOVES, GameSession
from pushfive.rules import Direction, PushMove, SimpleMove


class TestTurnFlow:
    """Tests for play() and turn alternation."""

    def test_white_moves_first(self) -> None:
        session = GameSession()
        assert session.current_player == Color.WHITE
        assert session.is_game_active
        assert session.move_count == 0

    def test_play_switches_player(self) -> None:
        session = GameSession()
        move = session.valid_moves()[0]
        session.play(move)
        assert session.current_player == Color.BLACK
        assert session.move_history == [move]
        assert session.board.last_move_to == move.to

    def test_out_of_turn_move_rejected(self) -> None:
        session = GameSession()
        black_move = session.engine.generate_moves(Color.BLACK)[0]
        with pytest.raises(InvalidMoveError):
            session.play(black_move)
        assert session.move_count == 0

    def test_pushed_tokens_stay_frozen_for_owner_turn(self, board_factory) -> None:
        board = board_factory(black=[(2, 2), (0, 0)], white=[(2, 1), (4, 4)])
        session = GameSession(board)
        session.play(SimpleMove(from_pos=(4, 4), to=(4, 3)))
        session.play(SimpleMove(from_pos=(0, 0), to=(0, 1)))
        push = PushMove(
            from_pos=(2, 1),
            to=(2, 2),
            direction=Direction.RIGHT,
            pushed_line=((2, 2),),
        )
        session.play(push)
        assert session.current_player == Color.BLACK
        assert session.is_game_active
        assert not session.board.token_at(2, 3).is_active
        movers = {move.from_pos for move in session.valid_moves()}
        assert movers == {(0, 1)}
        with pytest.raises(InvalidMoveError):
            session.play(SimpleMove(from_pos=(2, 3), to=(1, 3)))

    def test_frozen_tokens_reactivate_after_owner_moves(self, board_factory) -> None:
        board = board_factory(black=[(2, 2), (0, 0)], white=[(2, 1), (4, 4)])
        session = GameSession(board)
        session.play(PushMove(
            from_pos=(2, 1),
            to=(2, 2),
            direction=Direction.RIGHT,
            pushed_line=((2, 2),),
        ))
        session.play(SimpleMove(from_pos=(0, 0), to=(0, 1)))
        assert session.board.token_at(2, 3).is_active
        session.play(SimpleMove(from_pos=(4, 4), to=(4, 3)))
        movers = {move.from_pos for move in session.valid_moves()}
        assert (2, 3) in movers

    def test_only_token_frozen_means_no_moves(self, single_push_board) -> None:
        session = GameSession(single_push_board)
        push = session.valid_moves()[-1]
        session.play(push)
        assert not session.is_game_active
        assert session.winner == Color.WHITE
        assert session.win_reason == REASON_NO_MOVES

    def test_undo_restores_frozen_state(self, board_factory) -> None:
        board = board_factory(black=[(2, 2), (0, 0)], white=[(2, 1), (4, 4)])
        session = GameSession(board)
        session.play(PushMove(
            from_pos=(2, 1),
            to=(2, 2),
            direction=Direction.RIGHT,
            pushed_line=((2, 2),),
        ))
        session.play(SimpleMove(from_pos=(0, 0), to=(0, 1)))
        session.undo()
        assert session.current_player == Color.BLACK
        assert not session.board.token_at(2, 3).is_active


class TestGameEnd:
    """Tests for the win conditions."""

    def test_capture_win(self, winning_capture_board) -> None:
        session = GameSession(winning_capture_board)
        session.play(SimpleMove(from_pos=(4, 3), to=(4, 2)))
        assert not session.is_game_active
        assert session.winner == Color.WHITE
        assert session.win_reason == REASON_ALL_CAPTURED
        with pytest.raises(GameOverError):
            session.play(SimpleMove(from_pos=(3, 1), to=(2, 1)))
        assert session.valid_moves() == []

    def test_opponent_without_moves_loses(self, board_factory) -> None:
        board = board_factory(white=[(2, 2)], black=[(0, 0)], captured=[(0, 0)])
        session = GameSession(board)
        session.play(SimpleMove(from_pos=(2, 2), to=(2, 3)))
        assert session.winner == Color.WHITE
        assert session.win_reason == REASON_NO_MOVES

    def test_stuck_first_player_loses_immediately(self, board_factory) -> None:
        board = board_factory(white=[(0, 0)], black=[(4, 4)], captured=[(0, 0)])
        session = GameSession(board)
        assert not session.is_game_active
        assert session.winner == Color.BLACK

    def test_ai_without_move_forfeits(self, monkeypatch) -> None:
        session = GameSession()
        monkeypatch.setattr(session.engine, "best_move", lambda *args, **kwargs: None)
        assert session.play_ai_turn(3) is None
        assert session.winner == Color.BLACK
        assert session.win_reason == REASON_NO_MOVES


class TestHistory:
    """Tests for full-snapshot undo/redo."""

    def test_undo_restores_board_and_turn(self) -> None:
        session = GameSession()
        before = session.board.snapshot()
        session.play(session.valid_moves()[0])
        session.undo()
        assert session.board.snapshot() == before
        assert session.current_player == Color.WHITE
        assert session.move_count == 0
        assert session.can_redo

    def test_redo_replays_move(self) -> None:
        session = GameSession()
        session.play(session.valid_moves()[0])
        after = session.board.snapshot()
        session.undo()
        session.redo()
        assert session.board.snapshot() == after
        assert session.current_player == Color.BLACK

    def test_new_move_clears_redo(self) -> None:
        session = GameSession()
        session.play(session.valid_moves()[0])
        session.undo()
        session.play(session.valid_moves()[1])
        assert not session.can_redo

    def test_undo_reopens_finished_game(self, winning_capture_board) -> None:
        session = GameSession(winning_capture_board)
        session.play(SimpleMove(from_pos=(4, 3), to=(4, 2)))
        session.undo()
        assert session.is_game_active
        assert session.winner is None

    def test_empty_history(self) -> None:
        session = GameSession()
        with pytest.raises(InvalidStateError):
            session.undo()
        with pytest.raises(InvalidStateError):
            session.redo()


class TestAITurns:
    """Tests for AI-driven turns."""

    def test_play_ai_turn(self) -> None:
        session = GameSession(rng_seed=5)
        move = session.play_ai_turn(2)
        assert move is not None
        assert session.move_history == [move]
        assert session.current_player == Color.BLACK

    @pytest.mark.asyncio
    async def test_async_turn_respects_min_think_time(self) -> None:
        session = GameSession(rng_seed=5)
        started = time.perf_counter()
        move = await session.play_ai_turn_async(1, min_think_time_ms=100)
        assert time.perf_counter() - started >= 0.1
        assert move is not None
        assert session.current_player == Color.BLACK

    def test_ai_config_carries_settings_floor(self) -> None:
        session = GameSession(settings=SearchSettings(min_think_time_ms=80))
        assert session.engine.get_ai(Color.WHITE, 2).config.think_time == 80

    @pytest.mark.asyncio
    async def test_async_turn_uses_ai_think_time(self) -> None:
        session = GameSession(rng_seed=5, settings=SearchSettings(min_think_time_ms=0))
        session.engine.get_ai(Color.WHITE, 1).config.think_time = 100
        started = time.perf_counter()
        move = await session.play_ai_turn_async(1)
        assert time.perf_counter() - started >= 0.1
        assert move is not None

    @pytest.mark.asyncio
    async def test_think_time_does_not_change_move(self) -> None:
        fast = GameSession(rng_seed=8)
        slow = GameSession(rng_seed=8)
        fast_move = await fast.play_ai_turn_async(3, min_think_time_ms=0)
        slow_move = await slow.play_ai_turn_async(3, min_think_time_ms=50)
        assert fast_move == slow_move


class TestStatus:
    """Tests for the pydantic status snapshot."""

    def test_status_snapshot(self) -> None:
        session = GameSession()
        session.play(session.valid_moves()[0])
        status = session.status()
        assert status.current_player == Color.BLACK
        assert status.move_count == 1
        assert status.can_undo and not status.can_redo
        dumped = status.model_dump(by_alias=True)
        assert dumped["currentPlayer"] == Color.BLACK
        assert dumped["capturedCounts"] == {"black": 0, "white": 0}
        assert len(dumped["board"]["tokens"]) == 12
