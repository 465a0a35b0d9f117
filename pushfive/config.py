"""Runtime configuration for the PushFive engine and service.

Settings are read from the environment once at import time, mirroring how
the service reads its other ``PUSHFIVE_*`` flags. Search-affecting values
are collected into :class:`SearchSettings` so callers (and tests) can pass
an explicit instance instead of relying on the process environment.

Environment variables:
    PUSHFIVE_ROOT_BATCH_SIZE     Root candidates scored between yields (3)
    PUSHFIVE_BRANCHING_THROTTLE  Candidate count above which depth is capped (12)
    PUSHFIVE_THROTTLED_DEPTH     Depth cap applied above the throttle (4)
    PUSHFIVE_MIN_THINK_TIME_MS   Minimum AI turn duration for pacing (500)
    PUSHFIVE_DEFAULT_DIFFICULTY  Difficulty used when a caller omits one (5)
    PUSHFIVE_LOG_LEVEL           Logging level for the service and scripts
    CORS_ORIGINS                 Comma separated origins for the HTTP service
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigurationError

# Hard ceiling on search depth regardless of difficulty or overrides.
MAX_SEARCH_DEPTH = 5


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer",
            context={"value": raw},
        ) from e
    if value < minimum:
        raise ConfigurationError(
            f"{name} must be >= {minimum}",
            context={"value": value},
        )
    return value


@dataclass(frozen=True)
class SearchSettings:
    """Tunables for the root search driver and the difficulty policy."""

    root_batch_size: int = 3
    branching_throttle: int = 12
    throttled_depth: int = 4
    min_think_time_ms: int = 500

    def __post_init__(self) -> None:
        if self.root_batch_size < 1:
            raise ConfigurationError(
                "root_batch_size must be at least 1",
                context={"value": self.root_batch_size},
            )
        if not 1 <= self.throttled_depth <= MAX_SEARCH_DEPTH:
            raise ConfigurationError(
                f"throttled_depth must be within 1..{MAX_SEARCH_DEPTH}",
                context={"value": self.throttled_depth},
            )

    @classmethod
    def from_env(cls) -> "SearchSettings":
        return cls(
            root_batch_size=_env_int("PUSHFIVE_ROOT_BATCH_SIZE", 3, minimum=1),
            branching_throttle=_env_int("PUSHFIVE_BRANCHING_THROTTLE", 12),
            throttled_depth=_env_int("PUSHFIVE_THROTTLED_DEPTH", 4, minimum=1),
            min_think_time_ms=_env_int("PUSHFIVE_MIN_THINK_TIME_MS", 500),
        )


DEFAULT_DIFFICULTY = _env_int("PUSHFIVE_DEFAULT_DIFFICULTY", 5, minimum=1)
LOG_LEVEL = os.getenv("PUSHFIVE_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

SEARCH_SETTINGS = SearchSettings.from_env()
