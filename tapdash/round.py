"""Round controller: timing, spawn cadence, taps and end-of-round settlement."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable

from .constants import ROUND_SECONDS, SPAWN_INTERVAL_MS, TICK_INTERVAL_MS, SLOT_IDS
from .logger import GameLogger
from .models import Cue, Mode, Phase, RoundSnapshot, TapOutcome, Target
from .player import PlayerSlot
from .scheduler import Scheduler, TimerGroup
from .scoreboard import ScoreBoard
from .spawner import TargetSpawner


@dataclass
class RoundState:
    phase: Phase = Phase.IDLE
    seconds_remaining: int = ROUND_SECONDS
    mode: Mode = Mode.SOLO
    active_slots: tuple[str, ...] = ()


class RoundController:
    """
    Owns one round at a time: Idle -> Running -> Ended -> (return to menu) Idle.

    Notes
    - All timers of a round (countdown, spawn triggers, target expiries) are
      created through one ``TimerGroup`` and die together on ``end`` or
      ``teardown``.
    - Invalid transitions are silent no-ops returning ``False``.
    - ``_ended`` is only reset by ``start``; it keeps settlement to one run
      even if the countdown and an external ``end`` race.
    """

    def __init__(self, scoreboard: ScoreBoard | None = None,
                 scheduler: Scheduler | None = None,
                 rng: random.Random | None = None,
                 logger: GameLogger | None = None,
                 on_change: Callable[[RoundSnapshot], None] | None = None,
                 on_cue: Callable[[Cue], None] | None = None,
                 round_seconds: int = ROUND_SECONDS,
                 spawn_interval_ms: float = SPAWN_INTERVAL_MS,
                 **spawner_options) -> None:
        self.scoreboard = scoreboard
        self.scheduler = scheduler or Scheduler()
        self.logger = logger
        self.on_change = on_change
        self.on_cue = on_cue
        self.round_seconds = round_seconds
        self.spawn_interval_ms = spawn_interval_ms

        self.state = RoundState(seconds_remaining=round_seconds)
        self.slots: dict[str, PlayerSlot] = {slot_id: PlayerSlot() for slot_id in SLOT_IDS}
        self.timers = TimerGroup(self.scheduler)
        self.spawner = TargetSpawner(self.slots, self.timers, rng=rng,
                                     on_expire=self._on_expire, **spawner_options)
        self._ended = False

    # --------------------------------- Queries --------------------------------------

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def winner(self) -> str | None:
        """'P1', 'P2' or 'TIE' for a finished versus round, else None."""
        if self.state.phase is not Phase.ENDED or self.state.mode is not Mode.VERSUS:
            return None
        p1 = self.slots["p1"].score
        p2 = self.slots["p2"].score
        if p1 > p2:
            return "P1"
        if p2 > p1:
            return "P2"
        return "TIE"

    def snapshot(self) -> RoundSnapshot:
        return RoundSnapshot(
            phase=self.state.phase,
            mode=self.state.mode,
            seconds_remaining=self.state.seconds_remaining,
            slots=tuple(self.slots[s].snapshot(s) for s in SLOT_IDS),
            winner=self.winner(),
        )

    def pending_timers(self) -> int:
        return len(self.timers)

    # ------------------------------- Transitions ------------------------------------

    def start(self, mode: Mode = Mode.SOLO) -> bool:
        """
        Begin a new round.

        Parameters
        ----------
        mode : Mode
            SOLO plays slot p1 only; VERSUS plays p1 and p2 under one timer.

        Returns
        -------
        bool
            False if a round is already running.
        """
        if self.state.phase is Phase.RUNNING:
            return False

        # Leftovers from a torn-down or ended round must not leak into this one
        self.timers.cancel_all()
        self.spawner.cancel_all()
        for slot in self.slots.values():
            slot.reset()

        active = ("p1", "p2") if mode is Mode.VERSUS else ("p1",)
        self.state = RoundState(
            phase=Phase.RUNNING,
            seconds_remaining=self.round_seconds,
            mode=mode,
            active_slots=active,
        )
        self._ended = False

        self.timers.call_every(TICK_INTERVAL_MS, self._tick)
        for slot_id in active:
            self.timers.call_every(self.spawn_interval_ms, lambda s=slot_id: self._spawn(s))

        self._cue(Cue.ROUND_START)
        if self.logger:
            self.logger.log_round_start(mode)
        self._notify()
        return True

    def end(self) -> bool:
        """
        Stop the round, cancel every outstanding timer and settle scores.

        Returns
        -------
        bool
            False if there was no running round to end.
        """
        if self._ended or self.state.phase is not Phase.RUNNING:
            return False
        self._ended = True

        self.timers.cancel_all()
        self.spawner.cancel_all()
        for slot in self.slots.values():
            slot.target = None

        self.state.phase = Phase.ENDED
        self._cue(Cue.ROUND_END)

        recorded = self._settle()
        if self.logger:
            scores = {s: self.slots[s].score for s in self.state.active_slots}
            self.logger.log_round_end(self.state.mode, scores, self.winner(), recorded)
        self._notify()
        return True

    def return_to_menu(self) -> bool:
        if self.state.phase is not Phase.ENDED:
            return False
        for slot in self.slots.values():
            slot.reset()
        self.state = RoundState(seconds_remaining=self.round_seconds, mode=self.state.mode)
        self._notify()
        return True

    def teardown(self) -> None:
        """Cancel everything unconditionally; used when the host goes away."""
        self.timers.cancel_all()
        self.spawner.cancel_all()
        for slot in self.slots.values():
            slot.reset()
        self.state = RoundState(seconds_remaining=self.round_seconds, mode=self.state.mode)
        self._notify()

    # --------------------------------- Input ----------------------------------------

    def tap(self, slot_id: str) -> TapOutcome:
        """
        Resolve a tap on ``slot_id``'s current target.

        Tapping an empty slot, an inactive slot or outside a running round is
        a MISS and changes nothing.
        """
        if self.state.phase is not Phase.RUNNING or slot_id not in self.state.active_slots:
            return TapOutcome.MISS

        slot = self.slots[slot_id]
        if slot.target is None:
            return TapOutcome.MISS

        self.spawner.cancel_expiry(slot_id)
        outcome = slot.resolve_tap()

        self._cue(Cue.HAZARD if outcome is TapOutcome.HAZARD else Cue.HIT)
        if self.logger:
            self.logger.log_tap(slot_id, outcome, slot.score)
        self._notify()
        return outcome

    def update(self, now_ms: float) -> int:
        """Advance round timers to the host's game clock."""
        return self.scheduler.advance(now_ms)

    # ----------------------------- Timer callbacks ----------------------------------

    def _tick(self) -> None:
        if self.state.phase is not Phase.RUNNING:
            return
        if self.state.seconds_remaining <= 1:
            self.state.seconds_remaining = 0
            self.end()
            return
        self.state.seconds_remaining -= 1
        self._notify()

    def _spawn(self, slot_id: str) -> None:
        if self.state.phase is not Phase.RUNNING:
            return
        self.spawner.spawn(slot_id)
        self._notify()

    def _on_expire(self, slot_id: str, target: Target) -> None:
        if self.logger:
            self.logger.log_expire(slot_id, target)
        self._notify()

    # -------------------------------- Settlement ------------------------------------

    def _settle(self) -> bool:
        """Record a solo score above zero; returns whether it was persisted."""
        if self.state.mode is not Mode.SOLO or self.scoreboard is None:
            return False
        score = self.slots["p1"].score
        if score <= 0:
            return False
        return self.scoreboard.record(score)

    # --------------------------------- Outputs --------------------------------------

    def _cue(self, cue: Cue) -> None:
        if self.on_cue:
            self.on_cue(cue)

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self.snapshot())
