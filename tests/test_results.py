"""Tests for typetrainer.core.results – results file persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from typetrainer.core.results import ResultStore
from typetrainer.core.session import SessionSummary


def _summary(wpm: int = 40) -> SessionSummary:
    return SessionSummary(
        date="2024-05-01T12:00:00",
        duration=30.0,
        content={"file": "drill.txt", "random": False},
        settings={"blind_mode": False},
        counters={"correct": 100, "fault": 3, "backspace": 2},
        wpm=wpm,
    )


@pytest.fixture()
def store(tmp_path: Path) -> ResultStore:
    return ResultStore(tmp_path / "data" / "results.jsonl")


# ---------------------------------------------------------------------------
# ResultStore – append
# ---------------------------------------------------------------------------

class TestAppend:
    def test_creates_file_and_parent(self, store: ResultStore):
        assert store.append(_summary()) is True
        assert store.file_path.exists()

    def test_one_json_object_per_line(self, store: ResultStore):
        store.append(_summary(40))
        store.append(_summary(50))
        lines = store.file_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert json.loads(lines[1])["wpm"] == 50

    def test_write_failure_returns_false(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x", encoding="utf-8")
        store = ResultStore(blocker / "results.jsonl")
        assert store.append(_summary()) is False
        assert "Could not save results" in caplog.text


# ---------------------------------------------------------------------------
# ResultStore – load
# ---------------------------------------------------------------------------

class TestLoad:
    def test_missing_file(self, store: ResultStore):
        assert store.load() == []

    def test_round_trip(self, store: ResultStore):
        store.append(_summary())
        records = store.load()
        assert records == [_summary().to_dict()]

    def test_skips_corrupt_lines(self, store: ResultStore):
        store.append(_summary(40))
        with store.file_path.open("a", encoding="utf-8") as f:
            f.write("NOT VALID JSON\n\n")
        store.append(_summary(60))
        assert [r["wpm"] for r in store.load()] == [40, 60]

    def test_skips_non_objects(self, store: ResultStore):
        store.file_path.parent.mkdir(parents=True)
        store.file_path.write_text("[1, 2]\n", encoding="utf-8")
        assert store.load() == []
