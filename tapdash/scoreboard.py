"""High-score persistence: a tiny key-value blob store plus the ranked board."""

from __future__ import annotations

import datetime
import json
import os
import secrets
from dataclasses import dataclass
from pathlib import Path

from .constants import (
    LEADERBOARD_KEY, LEADERBOARD_CAPACITY, STATE_DIR_ENV, DEFAULT_STATE_DIR
)


def state_dir() -> Path:
    """
    Directory for small persistent state.

    Override for tests/dev via `TAPDASH_STATE_DIR`.
    """
    override = os.environ.get(STATE_DIR_ENV)
    if override:
        return Path(override)
    return Path(DEFAULT_STATE_DIR)


class MemoryStore:
    """Dict-backed blob store."""

    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value

    def remove(self, key: str) -> None:
        self._blobs.pop(key, None)


class JsonFileStore:
    """
    Blob store keeping one ``<key>.json`` file per key.

    Writes go to a unique temp file that is then renamed over the target, so
    a reader never observes a half-written blob.
    """

    def __init__(self, directory: str | Path | None = None) -> None:
        self.directory = Path(directory) if directory is not None else state_dir()

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        p = self.path_for(key)
        if not p.exists():
            return None
        return p.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        p = self.path_for(key)
        tmp = p.with_name(f"{p.name}.{os.getpid()}.{secrets.token_hex(6)}.tmp")
        try:
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(p)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        p = self.path_for(key)
        if p.exists():
            p.unlink()


@dataclass(frozen=True)
class ScoreEntry:
    score: int
    date: str

    def to_dict(self) -> dict:
        return {"score": self.score, "date": self.date}

    @classmethod
    def from_dict(cls, raw: object) -> ScoreEntry | None:
        if not isinstance(raw, dict):
            return None
        score = raw.get("score")
        date = raw.get("date")
        if isinstance(score, bool) or not isinstance(score, int):
            return None
        if not isinstance(date, str):
            return None
        return cls(score=score, date=date)


class ScoreBoard:
    """
    Ranked list of past solo scores, best first, capped at ``capacity``.

    Storage problems never reach the caller: unreadable data loads as an
    empty board and failed writes are reported as ``False``.
    """

    def __init__(self, store: MemoryStore | JsonFileStore, key: str = LEADERBOARD_KEY,
                 capacity: int = LEADERBOARD_CAPACITY) -> None:
        self.store = store
        self.key = key
        self.capacity = capacity

    def rank(self, entries: list[ScoreEntry]) -> list[ScoreEntry]:
        # sorted() is stable, so equal scores keep insertion order
        return sorted(entries, key=lambda e: e.score, reverse=True)[:self.capacity]

    def load(self) -> list[ScoreEntry]:
        try:
            blob = self.store.get(self.key)
        except (OSError, ValueError) as e:  # UnicodeDecodeError is a ValueError
            print(f"Failed to read leaderboard: {e}")
            return []
        if not blob:
            return []
        try:
            payload = json.loads(blob)
        except ValueError:
            return []
        if not isinstance(payload, list):
            return []

        entries = [ScoreEntry.from_dict(raw) for raw in payload]
        return self.rank([e for e in entries if e is not None])

    def save(self, entries: list[ScoreEntry]) -> bool:
        blob = json.dumps([e.to_dict() for e in self.rank(entries)])
        try:
            self.store.set(self.key, blob)
        except OSError as e:
            print(f"Failed to save leaderboard: {e}")
            return False
        return True

    def clear(self) -> bool:
        try:
            self.store.remove(self.key)
        except OSError as e:
            print(f"Failed to clear leaderboard: {e}")
            return False
        return True

    def record(self, score: int, when: datetime.datetime | None = None) -> bool:
        """
        Append a score, re-rank, truncate and persist as one step.

        Parameters
        ----------
        score : int
            Final score of the round.
        when : datetime.datetime, optional
            Timestamp for the entry; defaults to now (UTC).

        Returns
        -------
        bool
            True if the entry made the board and the board was persisted.
            A score too low for a full board is not written at all; on a
            failed write the stored board is left exactly as it was.
        """
        when = when or datetime.datetime.now(datetime.timezone.utc)
        entry = ScoreEntry(score=score, date=when.isoformat())
        ranked = self.rank(self.load() + [entry])
        if not any(e is entry for e in ranked):
            return False
        return self.save(ranked)
