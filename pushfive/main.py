"""
PushFive AI Service - FastAPI Application
Provides move generation, move application, AI move selection and position
evaluation endpoints for a local game UI
"""

import logging
import os
import time
from typing import List

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .ai.evaluator import evaluate, evaluation_breakdown
from .board import Board
from .config import CORS_ORIGINS, LOG_LEVEL
from .engine import DecisionEngine
from .errors import (
    GameOverError,
    InvalidMoveError,
    PushFiveError,
    SearchInProgressError,
)
from .models import (
    ApplyMoveRequest,
    ApplyMoveResponse,
    BoardSnapshot,
    CapturedCounts,
    CapturedTokenModel,
    EvaluationRequest,
    EvaluationResponse,
    MoveModel,
    MoveRequest,
    MoveResponse,
    SearchProgress,
    ValidMovesRequest,
    ValidMovesResponse,
)
from .rules.engine import RulesEngine

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="PushFive AI Service",
    description="Rules and AI move selection service for PushFive",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _http_error(e: PushFiveError) -> HTTPException:
    """Map an engine error to a 400 (bad input) or 409 (wrong state)."""
    status_code = 409 if isinstance(e, (SearchInProgressError, GameOverError)) else 400
    return HTTPException(status_code=status_code, detail=e.to_dict())


def _load_board(snapshot: BoardSnapshot) -> Board:
    return snapshot.to_board()


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "service": "PushFive AI Service",
        "status": "running",
        "version": "1.0.0"
    }


@app.get("/health")
async def health_check():
    """Health check for container orchestration"""
    return {"status": "healthy"}


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint for local/dev observability."""
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.post("/rules/moves", response_model=ValidMovesResponse)
async def get_valid_moves(request: ValidMovesRequest):
    """List every legal move for ``request.color`` in generation order."""
    try:
        board = _load_board(request.board)
        moves = RulesEngine.get_valid_moves(board, request.color)
        return ValidMovesResponse(moves=[MoveModel.from_move(m) for m in moves])
    except PushFiveError as e:
        logger.warning("Rejected move generation request: %s", e)
        raise _http_error(e)


@app.post("/rules/apply", response_model=ApplyMoveResponse)
async def apply_move(request: ApplyMoveRequest):
    """
    Apply one move and report captures and the resulting game state.

    The move must be legal for ``request.color`` on the given board, with
    frozen tokens still frozen. With ``resetActive`` the mover's tokens are
    reactivated once the move is accepted, as a game session does.
    """
    try:
        board = _load_board(request.board)
        engine = DecisionEngine(board)
        move = request.move.to_move()
        if not engine.is_legal_move(move, request.color):
            raise InvalidMoveError(
                f"Illegal move for {request.color.value}",
                context={"move": str(move)},
            )
        if request.reset_active:
            engine.reset_active(request.color)
        captured = engine.apply_move(move, request.color)

        # Tokens pushed by this move stay frozen for the next player's turn.
        winner = engine.winner(request.color.opponent)

        return ApplyMoveResponse(
            board=BoardSnapshot.from_board(board),
            captured=[CapturedTokenModel.from_captured(c) for c in captured],
            capturedCounts=CapturedCounts.from_counts(engine.count_captured()),
            gameOver=winner is not None,
            winner=winner,
        )
    except PushFiveError as e:
        logger.warning("Rejected move application: %s", e)
        raise _http_error(e)


@app.post("/ai/move", response_model=MoveResponse)
async def get_ai_move(request: MoveRequest):
    """
    Get AI-selected move for the given board.

    Args:
        request: MoveRequest containing the board, color and difficulty.

    Returns:
        MoveResponse with selected move (None when the color cannot move),
        static evaluation and search statistics.
    """
    start_time = time.time()
    try:
        board = _load_board(request.board)
        engine = DecisionEngine(board, rng_seed=request.seed)
        progress: List[SearchProgress] = []

        move = await engine.best_move_async(
            request.color,
            request.difficulty,
            progress_callback=progress.append,
        )
        thinking_time = int((time.time() - start_time) * 1000)
        evaluation = evaluate(board, request.color)
        stats = engine.last_search

        logger.info(
            "AI move: color=%s difficulty=%d move=%s eval=%.3f time=%dms",
            request.color.value,
            request.difficulty,
            move,
            evaluation,
            thinking_time,
        )

        return MoveResponse(
            move=MoveModel.from_move(move) if move is not None else None,
            evaluation=evaluation,
            thinking_time_ms=thinking_time,
            difficulty=request.difficulty,
            search_depth=stats.depth if stats is not None else None,
            nodes_visited=stats.nodes_visited if stats is not None else 0,
            progress=progress,
        )
    except PushFiveError as e:
        logger.warning("Rejected AI move request: %s", e)
        raise _http_error(e)
    except Exception as e:
        logger.error("Error generating AI move: %s", str(e), exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/ai/evaluate", response_model=EvaluationResponse)
async def evaluate_position(request: EvaluationRequest):
    """
    Evaluate a position from one color's perspective

    Args:
        request: EvaluationRequest with board and color

    Returns:
        EvaluationResponse with score in [0, 1] and breakdown
    """
    try:
        board = _load_board(request.board)
        return EvaluationResponse(
            score=evaluate(board, request.color),
            breakdown=evaluation_breakdown(board, request.color),
        )
    except PushFiveError as e:
        logger.warning("Rejected evaluation request: %s", e)
        raise _http_error(e)


if __name__ == "__main__":
    import uvicorn

    port_str = os.getenv("PUSHFIVE_SERVICE_PORT", "8001")
    try:
        port = int(port_str)
    except ValueError:
        port = 8001

    uvicorn.run(app, host="0.0.0.0", port=port)
