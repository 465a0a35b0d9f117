#!/usr/bin/env python3
"""
Run AI-vs-AI self-play games and print a summary.

Each game is played from the initial position through the normal game
session, so outcomes are also recorded in the process metrics. Optionally
writes one JSON line per game.

Usage:

  python scripts/run_selfplay.py --white 5 --black 3 --games 10 --seed 42
  python scripts/run_selfplay.py --white 7 --random-black --output games.jsonl
"""

from __future__ import annotations

import argparse
import json
import logging
from collections import Counter
from pathlib import Path
from typing import Optional

from pushfive.board import Color
from pushfive.config import LOG_LEVEL
from pushfive.selfplay import DEFAULT_MAX_MOVES, GameRecord, play_game

logger = logging.getLogger("run_selfplay")


def format_summary(records: list[GameRecord]) -> str:
    wins = Counter(r.winner.value if r.winner else "none" for r in records)
    total_moves = sum(r.move_count for r in records)
    avg_moves = total_moves / len(records) if records else 0.0
    return (
        f"games={len(records)} white={wins['white']} black={wins['black']} "
        f"unfinished={wins['none']} avg_moves={avg_moves:.1f}"
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--white", type=int, default=5, help="White difficulty 1-9 (default: 5).")
    parser.add_argument("--black", type=int, default=5, help="Black difficulty 1-9 (default: 5).")
    parser.add_argument("--games", type=int, default=1, help="Number of games (default: 1).")
    parser.add_argument("--seed", type=int, default=None, help="Base RNG seed; game i uses seed + i.")
    parser.add_argument(
        "--max-moves",
        type=int,
        default=DEFAULT_MAX_MOVES,
        help=f"Move limit per game (default: {DEFAULT_MAX_MOVES}).",
    )
    parser.add_argument("--random-white", action="store_true", help="Play white with the random baseline.")
    parser.add_argument("--random-black", action="store_true", help="Play black with the random baseline.")
    parser.add_argument("--output", type=Path, default=None, help="Write one JSON record per game.")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default: PUSHFIVE_LOG_LEVEL).")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    random_colors = []
    if args.random_white:
        random_colors.append(Color.WHITE)
    if args.random_black:
        random_colors.append(Color.BLACK)

    records: list[GameRecord] = []
    for i in range(args.games):
        seed = args.seed + i if args.seed is not None else None
        record = play_game(
            args.white,
            args.black,
            seed=seed,
            max_moves=args.max_moves,
            random_colors=random_colors,
        )
        records.append(record)
        logger.info(
            "Game %d/%d: winner=%s reason=%s moves=%d",
            i + 1,
            args.games,
            record.winner.value if record.winner else "none",
            record.reason,
            record.move_count,
        )

    if args.output is not None:
        with args.output.open("w", encoding="utf-8") as f:
            for record in records:
                f.write(json.dumps(record.to_dict()) + "\n")
        logger.info("Wrote %d game(s) to %s", len(records), args.output)

    print(format_summary(records))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
