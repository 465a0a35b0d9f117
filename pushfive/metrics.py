"""Prometheus metrics for the PushFive engine and service.

This module centralises counters and histograms so that the search, the
HTTP handlers and the self-play tooling can record lightweight telemetry
without each caller managing its own metric instances. Metrics are labeled
by difficulty and search depth so they can be filtered in local/dev
Prometheus setups.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Histogram

__all__ = [
    "AI_ERRORS",
    "AI_MOVE_LATENCY",
    "AI_MOVE_REQUESTS",
    "AI_SEARCH_NODES",
    "GAME_OUTCOMES",
    "record_ai_error",
    "record_game_outcome",
    "record_search",
]


AI_MOVE_REQUESTS: Final[Counter] = Counter(
    "pushfive_ai_move_requests_total",
    "Total number of AI move requests, labeled by difficulty and outcome.",
    labelnames=("difficulty", "outcome"),
)

AI_MOVE_LATENCY: Final[Histogram] = Histogram(
    "pushfive_ai_move_latency_seconds",
    "Wall-clock duration of AI move searches in seconds, by difficulty.",
    labelnames=("difficulty",),
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0),
)

AI_SEARCH_NODES: Final[Histogram] = Histogram(
    "pushfive_ai_search_nodes",
    "Alpha-beta nodes visited per AI move, by resolved search depth.",
    labelnames=("depth",),
    buckets=(10, 100, 1_000, 5_000, 20_000, 100_000, 500_000),
)

AI_ERRORS: Final[Counter] = Counter(
    "pushfive_ai_errors_total",
    "Unexpected exceptions caught at the AI move boundary.",
    labelnames=("error_type",),
)

GAME_OUTCOMES: Final[Counter] = Counter(
    "pushfive_game_outcomes_total",
    "Finished games, labeled by winner and reason.",
    labelnames=("winner", "reason"),
)


def _difficulty_label(difficulty: int) -> str:
    """Metric label for a difficulty level."""
    return str(difficulty)


def record_search(
    difficulty: int,
    depth: int | None,
    nodes_visited: int,
    duration_seconds: float,
    outcome: str,
) -> None:
    """Record one completed root search.

    Args:
        difficulty: Clamped difficulty used for the search
        depth: Resolved search depth, or None when no search ran
        nodes_visited: Alpha-beta nodes visited
        duration_seconds: Wall-clock time of the search
        outcome: Search result label (no_moves, single_move, move_selected)
    """
    label = _difficulty_label(difficulty)
    AI_MOVE_REQUESTS.labels(label, outcome).inc()
    AI_MOVE_LATENCY.labels(label).observe(duration_seconds)
    if depth is not None:
        AI_SEARCH_NODES.labels(str(depth)).observe(nodes_visited)


def record_ai_error(difficulty: int, error: BaseException) -> None:
    """Record an exception swallowed at the AI boundary."""
    AI_ERRORS.labels(type(error).__name__).inc()
    AI_MOVE_REQUESTS.labels(_difficulty_label(difficulty), "error").inc()


def record_game_outcome(winner: str | None, reason: str) -> None:
    """Record a finished game."""
    GAME_OUTCOMES.labels(winner or "none", reason).inc()
