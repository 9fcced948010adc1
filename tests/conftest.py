from __future__ import annotations

import random

import pytest

from tapdash.models import Cue, RoundSnapshot
from tapdash.round import RoundController
from tapdash.scoreboard import MemoryStore, ScoreBoard


class Recorder:
    """Collects everything the controller pushes across its outer boundaries."""

    def __init__(self) -> None:
        self.snapshots: list[RoundSnapshot] = []
        self.cues: list[Cue] = []

    def on_change(self, snapshot: RoundSnapshot) -> None:
        self.snapshots.append(snapshot)

    def on_cue(self, cue: Cue) -> None:
        self.cues.append(cue)


@pytest.fixture
def scoreboard() -> ScoreBoard:
    return ScoreBoard(MemoryStore())


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def controller(scoreboard: ScoreBoard, recorder: Recorder) -> RoundController:
    # hazard_chance=0 keeps every spawn a normal target unless a test flips it
    return RoundController(
        scoreboard=scoreboard,
        rng=random.Random(7),
        on_change=recorder.on_change,
        on_cue=recorder.on_cue,
        hazard_chance=0.0,
    )
