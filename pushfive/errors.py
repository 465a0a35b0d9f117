"""
PushFive Error Hierarchy

Unified exception hierarchy for consistent error handling across the engine,
the game session and the HTTP service. All custom exceptions inherit from
PushFiveError for easy catching and filtering.

Usage:
    from pushfive.errors import RulesViolationError, InvalidMoveError

    try:
        RulesEngine.apply_move(board, move, color)
    except RulesViolationError as e:
        logger.warning(f"Invalid move: {e.message}, rule: {e.rule_ref}")
"""

from typing import Any

__all__ = [
    # Base error
    "PushFiveError",
    # Game rules errors
    "GameOverError",
    "InvalidMoveError",
    "InvalidStateError",
    "RulesViolationError",
    # AI errors
    "AIError",
    "SearchInProgressError",
    # Validation errors
    "ConfigurationError",
]


class PushFiveError(Exception):
    """Base exception for all PushFive errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "PUSHFIVE_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Game Rules Errors
# =============================================================================


class RulesViolationError(PushFiveError):
    """Move that breaks the push/surround rules.

    Raised when a move's geometry is impossible on the current board, for
    example a push whose run ends against the edge or another token.

    Attributes:
        rule_ref: Short name of the violated rule (e.g. "push-blocked")
    """
    code: str = "RULES_VIOLATION"

    def __init__(
        self,
        message: str,
        rule_ref: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.rule_ref = rule_ref
        if rule_ref:
            self.context["rule_ref"] = rule_ref


class InvalidStateError(PushFiveError):
    """Corrupted or unexpected board state.

    Raised when the board is in a configuration that should not be
    reachable through normal play, or when the undo journal is misused.
    """
    code: str = "INVALID_STATE"


class InvalidMoveError(PushFiveError):
    """Move that cannot be applied to the current board.

    Raised when the origin cell does not hold a movable token of the
    moving color (empty, wrong color, captured or inactive).
    """
    code: str = "INVALID_MOVE"


class GameOverError(PushFiveError):
    """Action attempted on a finished game."""
    code: str = "GAME_OVER"


# =============================================================================
# AI Errors
# =============================================================================


class AIError(PushFiveError):
    """Base class for AI-related errors."""
    code: str = "AI_ERROR"


class SearchInProgressError(AIError):
    """A second search was started on a board that is already being searched.

    The search mutates the board in place through the undo journal, so
    searches over one board must be serialized by the caller.
    """
    code: str = "SEARCH_IN_PROGRESS"


# =============================================================================
# Validation Errors
# =============================================================================


class ConfigurationError(PushFiveError):
    """Invalid configuration value (usually from the environment)."""
    code: str = "CONFIGURATION_ERROR"
