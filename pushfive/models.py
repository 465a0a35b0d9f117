"""
Pydantic Models for PushFive
Wire representations of boards, moves and AI requests, plus conversions to
the engine's internal types.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .board import Board, CapturedToken, Cell, Color, Token
from .errors import InvalidMoveError, InvalidStateError
from .rules.moves import Direction, Move, PushMove, SimpleMove

__all__ = [
    "AIConfig",
    "ApplyMoveRequest",
    "ApplyMoveResponse",
    "BoardSnapshot",
    "CapturedCounts",
    "CapturedTokenModel",
    "CellModel",
    "Color",
    "EvaluationRequest",
    "EvaluationResponse",
    "GameStatusSnapshot",
    "MoveModel",
    "MoveRequest",
    "MoveResponse",
    "MoveType",
    "ProgressType",
    "SearchProgress",
    "SearchResult",
    "TokenModel",
    "ValidMovesRequest",
    "ValidMovesResponse",
]


class MoveType(str, Enum):
    """Move shape on the wire"""
    MOVE = "move"
    PUSH = "push"


class ProgressType(str, Enum):
    """Search progress event type"""
    START = "start"
    DEPTH = "depth"
    PROGRESS = "progress"
    END = "end"


class SearchResult(str, Enum):
    """How a search ended"""
    NO_MOVES = "no_moves"
    SINGLE_MOVE = "single_move"
    MOVE_SELECTED = "move_selected"


class CellModel(BaseModel):
    """Board cell (row 0 is the top edge)"""
    row: int = Field(ge=0, le=4)
    col: int = Field(ge=0, le=4)

    class Config:
        frozen = True

    def to_cell(self) -> Cell:
        return (self.row, self.col)

    @classmethod
    def from_cell(cls, cell: Cell) -> "CellModel":
        return cls(row=cell[0], col=cell[1])


class TokenModel(BaseModel):
    """Token on a cell"""
    row: int = Field(ge=0, le=4)
    col: int = Field(ge=0, le=4)
    color: Color
    is_active: bool = Field(True, alias="isActive")
    is_captured: bool = Field(False, alias="isCaptured")

    class Config:
        populate_by_name = True


class CapturedTokenModel(BaseModel):
    """Token captured by a move"""
    row: int
    col: int
    color: Color

    @classmethod
    def from_captured(cls, token: CapturedToken) -> "CapturedTokenModel":
        return cls(row=token.row, col=token.col, color=token.color)


class CapturedCounts(BaseModel):
    """Captured token count per color"""
    black: int
    white: int

    @classmethod
    def from_counts(cls, counts: Dict[Color, int]) -> "CapturedCounts":
        return cls(black=counts[Color.BLACK], white=counts[Color.WHITE])


class BoardSnapshot(BaseModel):
    """Complete board position"""
    tokens: List[TokenModel] = Field(default_factory=list)
    last_move_from: Optional[CellModel] = Field(None, alias="lastMoveFrom")
    last_move_to: Optional[CellModel] = Field(None, alias="lastMoveTo")

    class Config:
        populate_by_name = True

    def to_board(self) -> Board:
        cells = [(t.row, t.col) for t in self.tokens]
        duplicates = sorted({cell for cell in cells if cells.count(cell) > 1})
        if duplicates:
            raise InvalidStateError(
                "More than one token on a cell",
                context={"cells": duplicates},
            )
        board = Board.from_tokens({
            (t.row, t.col): Token(
                color=t.color,
                is_active=t.is_active,
                is_captured=t.is_captured,
            )
            for t in self.tokens
        })
        if self.last_move_from is not None:
            board.last_move_from = self.last_move_from.to_cell()
        if self.last_move_to is not None:
            board.last_move_to = self.last_move_to.to_cell()
        return board

    @classmethod
    def from_board(cls, board: Board) -> "BoardSnapshot":
        return cls(
            tokens=[
                TokenModel(
                    row=row,
                    col=col,
                    color=token.color,
                    isActive=token.is_active,
                    isCaptured=token.is_captured,
                )
                for (row, col), token in board.tokens()
            ],
            lastMoveFrom=(
                CellModel.from_cell(board.last_move_from)
                if board.last_move_from is not None else None
            ),
            lastMoveTo=(
                CellModel.from_cell(board.last_move_to)
                if board.last_move_to is not None else None
            ),
        )


class MoveModel(BaseModel):
    """Move representation.

    - ``type`` is ``move`` for a step onto an empty cell and ``push`` for a
      step into an occupied cell.
    - For pushes, ``direction`` and ``pushed_line`` (nearest cell first)
      carry the run being displaced.
    """
    type: MoveType
    from_pos: CellModel = Field(alias="from")
    to: CellModel
    direction: Optional[Direction] = None
    pushed_line: List[CellModel] = Field(default_factory=list, alias="pushedLine")

    class Config:
        populate_by_name = True

    def to_move(self) -> Move:
        if self.type == MoveType.MOVE:
            if self.pushed_line:
                raise InvalidMoveError("Simple move cannot carry a pushed line")
            return SimpleMove(from_pos=self.from_pos.to_cell(), to=self.to.to_cell())
        direction = self.direction or Direction.between(
            self.from_pos.to_cell(), self.to.to_cell()
        )
        if direction is None:
            raise InvalidMoveError(
                "Push move needs a direction",
                context={"from": self.from_pos.to_cell(), "to": self.to.to_cell()},
            )
        if not self.pushed_line:
            raise InvalidMoveError("Push move needs a pushed line")
        return PushMove(
            from_pos=self.from_pos.to_cell(),
            to=self.to.to_cell(),
            direction=direction,
            pushed_line=tuple(cell.to_cell() for cell in self.pushed_line),
        )

    @classmethod
    def from_move(cls, move: Move) -> "MoveModel":
        if isinstance(move, PushMove):
            return cls(
                type=MoveType.PUSH,
                **{"from": CellModel.from_cell(move.from_pos)},
                to=CellModel.from_cell(move.to),
                direction=move.direction,
                pushedLine=[CellModel.from_cell(c) for c in move.pushed_line],
            )
        return cls(
            type=MoveType.MOVE,
            **{"from": CellModel.from_cell(move.from_pos)},
            to=CellModel.from_cell(move.to),
            direction=move.direction,
        )


class AIConfig(BaseModel):
    """AI configuration.

    ``difficulty`` is clamped into 1..9 by the AI rather than rejected, so
    out-of-range values from older clients still map to a defined level.
    ``think_time`` is the minimum duration in milliseconds of an async game
    turn; it paces the turn and never changes which move is chosen.
    """
    difficulty: int = 5
    rng_seed: Optional[int] = Field(None, alias="rngSeed")
    think_time: Optional[int] = Field(None, ge=0, alias="thinkTime")
    root_batch_size: Optional[int] = Field(None, ge=1, alias="rootBatchSize")

    class Config:
        populate_by_name = True


class SearchProgress(BaseModel):
    """Progress event emitted by the search for status display"""
    type: ProgressType
    message: str = ""
    depth: Optional[int] = None
    percent: Optional[int] = None
    result: Optional[SearchResult] = None


class MoveRequest(BaseModel):
    """Request model for AI move selection"""
    board: BoardSnapshot
    color: Color
    difficulty: int = Field(ge=1, le=9, default=5)
    seed: Optional[int] = Field(
        None,
        ge=0,
        le=0x7FFFFFFF,
        description="Optional RNG seed for deterministic AI behavior"
    )


class MoveResponse(BaseModel):
    """Response model for AI move selection"""
    move: Optional[MoveModel]
    evaluation: float
    thinking_time_ms: int
    difficulty: int
    search_depth: Optional[int] = None
    nodes_visited: int = 0
    progress: List[SearchProgress] = Field(default_factory=list)


class EvaluationRequest(BaseModel):
    """Request model for position evaluation"""
    board: BoardSnapshot
    color: Color


class EvaluationResponse(BaseModel):
    """Response model for position evaluation"""
    score: float
    breakdown: Dict[str, float]


class ValidMovesRequest(BaseModel):
    """Request model for move generation"""
    board: BoardSnapshot
    color: Color


class ValidMovesResponse(BaseModel):
    """Response model for move generation"""
    moves: List[MoveModel]


class ApplyMoveRequest(BaseModel):
    """Request model for applying one move"""
    board: BoardSnapshot
    move: MoveModel
    color: Color
    reset_active: bool = Field(False, alias="resetActive")

    class Config:
        populate_by_name = True


class ApplyMoveResponse(BaseModel):
    """Response model for applying one move"""
    board: BoardSnapshot
    captured: List[CapturedTokenModel]
    captured_counts: CapturedCounts = Field(alias="capturedCounts")
    game_over: bool = Field(alias="gameOver")
    winner: Optional[Color] = None

    class Config:
        populate_by_name = True


class GameStatusSnapshot(BaseModel):
    """State of a game session"""
    board: BoardSnapshot
    current_player: Color = Field(alias="currentPlayer")
    is_game_active: bool = Field(alias="isGameActive")
    winner: Optional[Color] = None
    win_reason: str = Field("", alias="winReason")
    move_count: int = Field(0, alias="moveCount")
    captured_counts: CapturedCounts = Field(alias="capturedCounts")
    can_undo: bool = Field(False, alias="canUndo")
    can_redo: bool = Field(False, alias="canRedo")

    class Config:
        populate_by_name = True
