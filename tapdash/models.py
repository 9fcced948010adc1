"""Lightweight data models shared by the round core and the front-end."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Phase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    ENDED = "ended"


class Mode(Enum):
    SOLO = "solo"
    VERSUS = "versus"


class TapOutcome(Enum):
    MISS = "miss"
    HIT = "hit"
    HAZARD = "hazard"


class Cue(Enum):
    """Named audio cues emitted by the round controller."""
    ROUND_START = "round_start"
    HIT = "hit"
    HAZARD = "hazard"
    ROUND_END = "round_end"


@dataclass(frozen=True)
class Target:
    """
    A single tappable, time-limited target living in one player slot.

    Attributes
    ----------
    id : int
        Monotonic token; identity checks on expiry compare against it.
    is_hazard : bool
        True for a bomb that costs points when tapped.
    lifetime_ms : float
        How long the target stays up if nobody taps it.
    spawned_at_ms : float
        Game-clock time the target appeared.
    x, y : float
        Position as a percentage (0-100) of the slot's tap area.
    """
    id: int
    is_hazard: bool
    lifetime_ms: float
    spawned_at_ms: float
    x: float
    y: float

    def progress(self, now_ms: float) -> float:
        """Remaining life as a fraction in [0, 1]."""
        if self.lifetime_ms <= 0:
            return 0.0
        remaining = self.lifetime_ms - (now_ms - self.spawned_at_ms)
        return max(0.0, min(1.0, remaining / self.lifetime_ms))


@dataclass(frozen=True)
class SlotSnapshot:
    slot_id: str
    score: int
    target: Target | None


@dataclass(frozen=True)
class RoundSnapshot:
    """Read-only view of the round handed to the presentation layer."""
    phase: Phase
    mode: Mode
    seconds_remaining: int
    slots: tuple[SlotSnapshot, ...]
    winner: str | None = None

    def slot(self, slot_id: str) -> SlotSnapshot | None:
        for s in self.slots:
            if s.slot_id == slot_id:
                return s
        return None
