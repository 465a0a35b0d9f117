"""
Shared pytest fixtures for PushFive tests.

Board fixtures are function-scoped so tests can mutate them freely. The
named positions below are reused across the rules, search and service
tests.
"""

from pathlib import Path
import sys
from typing import Callable, Dict, Iterable, Optional

import pytest

# Ensure the repository root is on sys.path so `import pushfive` works when
# running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from pushfive.ai.minimax_ai import MinimaxAI  # noqa: E402
from pushfive.board import Board, Cell, Color, Token  # noqa: E402
from pushfive.config import SearchSettings  # noqa: E402
from pushfive.models import AIConfig  # noqa: E402


# =============================================================================
# POSITIONS
# =============================================================================


@pytest.fixture
def initial_board() -> Board:
    """Standard starting position."""
    return Board.initial()


@pytest.fixture
def single_push_board() -> Board:
    """White at (2,1) next to black at (2,2) with (2,3) empty."""
    return Board.from_layout(black=[(2, 2)], white=[(2, 1)])


@pytest.fixture
def edge_capture_board() -> Board:
    """Black at (4,1) on the bottom edge; white (4,3)->(4,2) captures it."""
    return Board.from_layout(black=[(4, 1)], white=[(4, 0), (3, 1), (4, 3)])


@pytest.fixture
def winning_capture_board() -> Board:
    """Edge capture position where black already has five tokens captured.

    White's only winning move is (4,3) -> (4,2).
    """
    tokens: Dict[Cell, Token] = {
        (4, 1): Token(Color.BLACK),
        (4, 0): Token(Color.WHITE),
        (3, 1): Token(Color.WHITE),
        (4, 3): Token(Color.WHITE),
    }
    for cell in [(0, 0), (0, 2), (0, 4), (2, 2), (2, 4)]:
        tokens[cell] = Token(Color.BLACK, is_captured=True)
    return Board.from_tokens(tokens)


@pytest.fixture
def self_capture_board() -> Board:
    """Black (1,1)->(1,0) closes the last open side of its own token at (0,0)."""
    return Board.from_layout(black=[(0, 0), (1, 1)], white=[(0, 1)])


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def search_settings() -> SearchSettings:
    """Default search settings, independent of the process environment."""
    return SearchSettings()


@pytest.fixture
def board_factory() -> Callable[..., Board]:
    """Factory for boards with explicit token flags."""

    def _create_board(
        black: Iterable[Cell] = (),
        white: Iterable[Cell] = (),
        captured: Iterable[Cell] = (),
        inactive: Iterable[Cell] = (),
    ) -> Board:
        captured_cells = set(captured)
        inactive_cells = set(inactive)
        tokens: Dict[Cell, Token] = {}
        for color, cells in ((Color.BLACK, black), (Color.WHITE, white)):
            for cell in cells:
                tokens[cell] = Token(
                    color,
                    is_active=cell not in inactive_cells,
                    is_captured=cell in captured_cells,
                )
        return Board.from_tokens(tokens)

    return _create_board


@pytest.fixture
def ai_factory(search_settings) -> Callable[..., MinimaxAI]:
    """Factory for seeded MinimaxAI instances."""

    def _create_ai(
        color: Color = Color.WHITE,
        difficulty: int = 5,
        seed: Optional[int] = 0,
        root_batch_size: Optional[int] = None,
    ) -> MinimaxAI:
        config = AIConfig(
            difficulty=difficulty,
            rngSeed=seed,
            rootBatchSize=root_batch_size,
        )
        return MinimaxAI(color, config, settings=search_settings)

    return _create_ai
