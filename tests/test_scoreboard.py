from __future__ import annotations

import datetime
import json
from pathlib import Path

from tapdash.scoreboard import JsonFileStore, MemoryStore, ScoreBoard, ScoreEntry, state_dir


def _when(day: int) -> datetime.datetime:
    return datetime.datetime(2026, 1, day, tzinfo=datetime.timezone.utc)


def test_board_is_sorted_descending_and_capped() -> None:
    board = ScoreBoard(MemoryStore())
    for day, score in enumerate([40, 10, 90, 30, 70, 20, 60, 50, 80, 100, 5, 110], start=1):
        board.record(score, when=_when(day))

    scores = [e.score for e in board.load()]
    assert scores == [110, 100, 90, 80, 70, 60, 50, 40, 30, 20]


def test_equal_scores_keep_insertion_order() -> None:
    board = ScoreBoard(MemoryStore())
    board.record(50, when=_when(1))
    board.record(50, when=_when(2))
    board.record(70, when=_when(3))

    assert [(e.score, e.date[:10]) for e in board.load()] == [
        (70, "2026-01-03"),
        (50, "2026-01-01"),
        (50, "2026-01-02"),
    ]


def test_board_persists_across_reload(tmp_path: Path) -> None:
    ScoreBoard(JsonFileStore(tmp_path)).record(120, when=_when(5))

    reloaded = ScoreBoard(JsonFileStore(tmp_path)).load()
    assert reloaded == [ScoreEntry(score=120, date=_when(5).isoformat())]
    assert json.loads((tmp_path / "tapdash_lb.json").read_text(encoding="utf-8")) == [
        {"score": 120, "date": _when(5).isoformat()}
    ]


def test_save_of_load_is_a_fixed_point(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)
    board = ScoreBoard(store)
    for day, score in enumerate([30, 80, 80, 10], start=1):
        board.record(score, when=_when(day))

    blob = store.get("tapdash_lb")
    assert board.save(board.load()) is True
    assert store.get("tapdash_lb") == blob
    assert board.load() == board.load()


def test_corrupt_or_foreign_blobs_load_as_empty() -> None:
    store = MemoryStore()
    board = ScoreBoard(store)
    for blob in ("{not json", '{"score": 5}', "42", ""):
        store.set("tapdash_lb", blob)
        assert board.load() == []


def test_malformed_entries_are_dropped_and_rest_normalized() -> None:
    store = MemoryStore()
    store.set("tapdash_lb", json.dumps([
        {"score": 10, "date": "2026-01-01T00:00:00+00:00"},
        {"score": "lots", "date": "x"},
        {"score": True, "date": "x"},
        "junk",
        {"score": 90, "date": "2026-01-02T00:00:00+00:00"},
    ]))

    assert [e.score for e in ScoreBoard(store).load()] == [90, 10]


def test_missing_file_loads_as_empty(tmp_path: Path) -> None:
    assert ScoreBoard(JsonFileStore(tmp_path / "nowhere")).load() == []


def test_clear_removes_everything(tmp_path: Path) -> None:
    board = ScoreBoard(JsonFileStore(tmp_path))
    board.record(30, when=_when(1))

    assert board.clear() is True
    assert board.load() == []
    assert board.clear() is True


def test_failed_write_leaves_stored_board_intact() -> None:
    class FlakyStore(MemoryStore):
        fail = False

        def set(self, key: str, value: str) -> None:
            if self.fail:
                raise OSError("read-only")
            super().set(key, value)

    store = FlakyStore()
    board = ScoreBoard(store)
    board.record(40, when=_when(1))
    store.fail = True

    assert board.record(90, when=_when(2)) is False
    assert [e.score for e in board.load()] == [40]


def test_state_dir_env_override(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("TAPDASH_STATE_DIR", str(tmp_path / "state"))

    assert state_dir() == tmp_path / "state"
    store = JsonFileStore()
    ScoreBoard(store).record(15, when=_when(1))
    assert (tmp_path / "state" / "tapdash_lb.json").exists()
    assert not list((tmp_path / "state").glob("*.tmp"))


def test_undecodable_file_loads_as_empty_and_is_replaced_on_record(tmp_path: Path) -> None:
    (tmp_path / "tapdash_lb.json").write_bytes(b"\xff\xfe[garbage")
    board = ScoreBoard(JsonFileStore(tmp_path))

    assert board.load() == []
    assert board.record(60, when=_when(1)) is True
    assert [e.score for e in board.load()] == [60]


def test_unreadable_store_loads_as_empty() -> None:
    class UnreadableStore(MemoryStore):
        def get(self, key: str) -> str | None:
            raise OSError("permission denied")

    board = ScoreBoard(UnreadableStore())

    assert board.load() == []
    assert board.record(20, when=_when(1)) is True


def test_score_too_low_for_full_board_is_not_recorded() -> None:
    store = MemoryStore()
    board = ScoreBoard(store)
    for day in range(1, 11):
        board.record(100 + day, when=_when(day))
    blob = store.get("tapdash_lb")

    assert board.record(5, when=_when(11)) is False
    assert store.get("tapdash_lb") == blob
    assert len(board.load()) == 10


def test_failed_replace_leaves_no_temp_file(tmp_path: Path, monkeypatch) -> None:
    def _refuse(self, target):
        raise OSError("cross-device link")

    monkeypatch.setattr(Path, "replace", _refuse)
    board = ScoreBoard(JsonFileStore(tmp_path))

    assert board.record(30, when=_when(1)) is False
    assert list(tmp_path.iterdir()) == []
