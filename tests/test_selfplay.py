"""Tests for AI-vs-AI self-play and its CLI wrapper."""

import importlib.util
import json
from pathlib import Path

from prometheus_client import REGISTRY

from pushfive.board import Color
from pushfive.selfplay import REASON_MOVE_LIMIT, GameRecord, play_game

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "run_selfplay.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("run_selfplay", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestPlayGame:
    """Tests for play_game."""

    def test_move_limit(self) -> None:
        record = play_game(1, 1, seed=3, max_moves=6)
        assert record.move_count <= 6
        if record.winner is None:
            assert record.reason == REASON_MOVE_LIMIT
            assert record.move_count == 6

    def test_same_seed_same_game(self) -> None:
        first = play_game(2, 1, seed=21, max_moves=8)
        second = play_game(2, 1, seed=21, max_moves=8)
        assert first.moves == second.moves
        assert first.winner == second.winner

    def test_random_baseline(self) -> None:
        record = play_game(1, 1, seed=4, max_moves=40, random_colors=(Color.WHITE, Color.BLACK))
        assert 0 < record.move_count <= 40
        assert set(record.captured) == {Color.BLACK, Color.WHITE}

    def test_unfinished_game_is_counted(self) -> None:
        labels = {"winner": "none", "reason": REASON_MOVE_LIMIT}
        before = REGISTRY.get_sample_value("pushfive_game_outcomes_total", labels) or 0.0
        record = play_game(1, 1, seed=0, max_moves=1)
        assert record.winner is None
        assert REGISTRY.get_sample_value("pushfive_game_outcomes_total", labels) == before + 1

    def test_record_serializes(self) -> None:
        record = GameRecord(winner=Color.WHITE, reason="x", captured={Color.BLACK: 6, Color.WHITE: 1})
        data = record.to_dict()
        assert data["winner"] == "white"
        assert data["captured"] == {"black": 6, "white": 1}
        json.dumps(data)


class TestScript:
    """Tests for scripts/run_selfplay.py."""

    def test_writes_jsonl(self, tmp_path, capsys) -> None:
        script = _load_script()
        output = tmp_path / "games.jsonl"
        code = script.main([
            "--white", "1",
            "--black", "1",
            "--games", "2",
            "--seed", "0",
            "--max-moves", "4",
            "--output", str(output),
            "--log-level", "warning",
        ])
        assert code == 0
        lines = output.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["seed"] == 0
        assert json.loads(lines[1])["seed"] == 1
        assert "games=2" in capsys.readouterr().out
