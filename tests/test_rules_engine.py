"""Tests for move generation, push propagation and surround capture."""

import random

import pytest

from pushfive.board import Board, CapturedToken, Color, Token
from pushfive.errors import InvalidMoveError, RulesViolationError
from pushfive.rules import Direction, PushMove, RulesEngine, SimpleMove


def _random_positions(seed: int, plies: int):
    """Yield (board, color_to_move) along a random playout."""
    rng = random.Random(seed)
    board = Board.initial()
    color = Color.WHITE
    for _ in range(plies):
        board.reset_active(color)
        moves = RulesEngine.get_valid_moves(board, color)
        if not moves:
            return
        yield board.copy(), color
        RulesEngine.apply_move(board, rng.choice(moves), color)
        color = color.opponent


class TestGeneration:
    """Tests for get_valid_moves."""

    def test_generation_order(self) -> None:
        board = Board.from_layout(white=[(2, 2)])
        moves = RulesEngine.get_valid_moves(board, Color.WHITE)
        assert moves == [
            SimpleMove(from_pos=(2, 2), to=(1, 2)),
            SimpleMove(from_pos=(2, 2), to=(3, 2)),
            SimpleMove(from_pos=(2, 2), to=(2, 1)),
            SimpleMove(from_pos=(2, 2), to=(2, 3)),
        ]

    def test_corner_token_has_two_moves(self) -> None:
        board = Board.from_layout(black=[(0, 0)])
        assert len(RulesEngine.get_valid_moves(board, Color.BLACK)) == 2

    def test_single_push_is_generated(self, single_push_board) -> None:
        moves = RulesEngine.get_valid_moves(single_push_board, Color.WHITE)
        assert PushMove(
            from_pos=(2, 1),
            to=(2, 2),
            direction=Direction.RIGHT,
            pushed_line=((2, 2),),
        ) in moves

    def test_push_against_edge_is_not_generated(self) -> None:
        board = Board.from_layout(black=[(2, 4)], white=[(2, 3)])
        moves = RulesEngine.get_valid_moves(board, Color.WHITE)
        assert all(move.to != (2, 4) for move in moves)

    def test_push_line_covers_whole_run(self) -> None:
        board = Board.from_layout(black=[(2, 1), (2, 3)], white=[(2, 0), (2, 2)])
        line = RulesEngine.push_line(board, (2, 1), Direction.RIGHT)
        assert line == ((2, 1), (2, 2), (2, 3))

    def test_inactive_tokens_do_not_move(self, board_factory) -> None:
        board = board_factory(white=[(2, 2)], inactive=[(2, 2)])
        assert RulesEngine.get_valid_moves(board, Color.WHITE) == []
        assert not RulesEngine.has_valid_move(board, Color.WHITE)

    def test_captured_tokens_do_not_move(self, board_factory) -> None:
        board = board_factory(black=[(2, 2)], captured=[(2, 2)])
        assert RulesEngine.get_valid_moves(board, Color.BLACK) == []

    def test_movers_are_active_tokens_of_color(self, initial_board) -> None:
        for color in Color:
            for move in RulesEngine.get_valid_moves(initial_board, color):
                token = initial_board.token_at(*move.from_pos)
                assert token.color == color
                assert token.is_active and not token.is_captured

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_has_valid_move_agrees_with_generation(self, seed) -> None:
        for board, color in _random_positions(seed, plies=20):
            for side in Color:
                expected = bool(RulesEngine.get_valid_moves(board, side))
                assert RulesEngine.has_valid_move(board, side) == expected


class TestLegalityClosure:
    """Every generated move applies cleanly and conserves tokens."""

    @pytest.mark.parametrize("seed", [3, 7, 11])
    def test_generated_moves_apply(self, seed) -> None:
        for board, color in _random_positions(seed, plies=30):
            before = board.count_tokens()
            for move in RulesEngine.get_valid_moves(board, color):
                trial = board.copy()
                assert RulesEngine.is_legal_move(trial, move, color)
                RulesEngine.apply_move(trial, move, color)
                assert trial.count_tokens() == before


class TestPush:
    """Tests for push application and deactivation."""

    def test_single_push(self, single_push_board) -> None:
        move = PushMove(
            from_pos=(2, 1),
            to=(2, 2),
            direction=Direction.RIGHT,
            pushed_line=((2, 2),),
        )
        captured = RulesEngine.apply_move(single_push_board, move, Color.WHITE)

        assert captured == []
        assert single_push_board.token_at(2, 1) is None
        assert single_push_board.token_at(2, 2).color == Color.WHITE
        pushed = single_push_board.token_at(2, 3)
        assert pushed.color == Color.BLACK
        assert pushed.is_active is False

    def test_own_pushed_tokens_stay_active(self) -> None:
        board = Board.from_layout(black=[(2, 1)], white=[(2, 0), (2, 2)])
        move = PushMove(
            from_pos=(2, 0),
            to=(2, 1),
            direction=Direction.RIGHT,
            pushed_line=((2, 1), (2, 2)),
        )
        RulesEngine.apply_move(board, move, Color.WHITE)

        assert board.token_at(2, 1).color == Color.WHITE
        assert board.token_at(2, 2).color == Color.BLACK
        assert not board.token_at(2, 2).is_active
        assert board.token_at(2, 3).color == Color.WHITE
        assert board.token_at(2, 3).is_active

    def test_captured_tokens_can_be_pushed(self, board_factory) -> None:
        board = board_factory(white=[(2, 0)], black=[(2, 1)], captured=[(2, 1)])
        move = PushMove(
            from_pos=(2, 0),
            to=(2, 1),
            direction=Direction.RIGHT,
            pushed_line=((2, 1),),
        )
        RulesEngine.apply_move(board, move, Color.WHITE)
        pushed = board.token_at(2, 2)
        assert pushed.is_captured
        assert pushed.is_active

    def test_last_move_recorded(self, single_push_board) -> None:
        move = RulesEngine.get_valid_moves(single_push_board, Color.WHITE)[-1]
        RulesEngine.apply_move(single_push_board, move, Color.WHITE)
        assert single_push_board.last_move_from == move.from_pos
        assert single_push_board.last_move_to == move.to


class TestCapture:
    """Tests for the whole-board surround check."""

    def test_edge_capture(self, edge_capture_board) -> None:
        move = SimpleMove(from_pos=(4, 3), to=(4, 2))
        captured = RulesEngine.apply_move(edge_capture_board, move, Color.WHITE)

        assert captured == [CapturedToken(4, 1, Color.BLACK)]
        assert edge_capture_board.token_at(4, 1).is_captured
        assert edge_capture_board.last_captured_tokens == captured
        assert edge_capture_board.count_captured()[Color.BLACK] == 1

    def test_self_capture(self, self_capture_board) -> None:
        move = SimpleMove(from_pos=(1, 1), to=(1, 0))
        captured = RulesEngine.apply_move(self_capture_board, move, Color.BLACK)
        assert captured == [CapturedToken(0, 0, Color.BLACK)]

    def test_capture_applies_to_both_colors(self) -> None:
        # (1,0) is the last open side of both black (0,0) and white (1,1).
        board = Board.from_layout(
            black=[(0, 0), (2, 0), (1, 2), (2, 1)],
            white=[(0, 1), (1, 1)],
        )
        move = SimpleMove(from_pos=(2, 0), to=(1, 0))
        captured = RulesEngine.apply_move(board, move, Color.BLACK)
        assert captured == [
            CapturedToken(0, 0, Color.BLACK),
            CapturedToken(1, 1, Color.WHITE),
        ]

    def test_already_captured_not_reported_again(self, edge_capture_board) -> None:
        RulesEngine.apply_move(
            edge_capture_board, SimpleMove(from_pos=(4, 3), to=(4, 2)), Color.WHITE
        )
        captured = RulesEngine.apply_move(
            edge_capture_board, SimpleMove(from_pos=(3, 1), to=(2, 1)), Color.WHITE
        )
        assert captured == []
        assert edge_capture_board.token_at(4, 1).is_captured


class TestRejectedMoves:
    """Malformed moves raise before the board is touched."""

    def test_empty_origin(self, single_push_board) -> None:
        before = single_push_board.copy()
        with pytest.raises(InvalidMoveError):
            RulesEngine.apply_move(
                single_push_board, SimpleMove(from_pos=(0, 0), to=(0, 1)), Color.WHITE
            )
        assert single_push_board == before

    def test_wrong_color(self, single_push_board) -> None:
        with pytest.raises(InvalidMoveError):
            RulesEngine.apply_move(
                single_push_board, SimpleMove(from_pos=(2, 2), to=(1, 2)), Color.WHITE
            )

    def test_inactive_mover(self, board_factory) -> None:
        board = board_factory(white=[(2, 2)], inactive=[(2, 2)])
        with pytest.raises(InvalidMoveError):
            RulesEngine.apply_move(board, SimpleMove(from_pos=(2, 2), to=(1, 2)), Color.WHITE)

    def test_simple_move_into_occupied_cell(self, single_push_board) -> None:
        with pytest.raises(RulesViolationError) as excinfo:
            RulesEngine.apply_move(
                single_push_board, SimpleMove(from_pos=(2, 1), to=(2, 2)), Color.WHITE
            )
        assert excinfo.value.rule_ref == "adjacent-step"

    def test_non_adjacent_step(self) -> None:
        board = Board.from_layout(white=[(0, 0)])
        with pytest.raises(RulesViolationError):
            RulesEngine.apply_move(board, SimpleMove(from_pos=(0, 0), to=(0, 2)), Color.WHITE)

    def test_blocked_push(self) -> None:
        board = Board.from_layout(black=[(2, 4)], white=[(2, 3)])
        before = board.copy()
        move = PushMove(
            from_pos=(2, 3),
            to=(2, 4),
            direction=Direction.RIGHT,
            pushed_line=((2, 4),),
        )
        with pytest.raises(RulesViolationError) as excinfo:
            RulesEngine.apply_move(board, move, Color.WHITE)
        assert excinfo.value.rule_ref == "push-blocked"
        assert board == before

    def test_stale_pushed_line(self) -> None:
        board = Board.from_layout(black=[(2, 1), (2, 2)], white=[(2, 0)])
        move = PushMove(
            from_pos=(2, 0),
            to=(2, 1),
            direction=Direction.RIGHT,
            pushed_line=((2, 1),),
        )
        with pytest.raises(RulesViolationError) as excinfo:
            RulesEngine.apply_move(board, move, Color.WHITE)
        assert excinfo.value.rule_ref == "push-line"

    def test_is_legal_move_rejects_foreign_move(self, initial_board) -> None:
        assert not RulesEngine.is_legal_move(
            initial_board, SimpleMove(from_pos=(2, 2), to=(2, 1)), Color.WHITE
        )

    def test_token_immutability(self) -> None:
        token = Token(Color.WHITE)
        with pytest.raises(AttributeError):
            token.is_active = False  # type: ignore[misc]
