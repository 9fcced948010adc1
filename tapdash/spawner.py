from __future__ import annotations

import itertools
import random
from typing import Callable

from .constants import (
    HAZARD_CHANCE, TARGET_BASE_LIFE_MS, TARGET_LIFE_JITTER_MS, SAFE_X_RANGE, SAFE_Y_RANGE
)
from .models import Target
from .player import PlayerSlot
from .scheduler import Timer, TimerGroup


class TargetSpawner:
    """
    Creates, places and expires the single live target of each player slot.

    Notes
    - Every spawn schedules exactly one expiry bound to the new target's id.
    - A newer spawn in the same slot cancels the older expiry; the id check in
      ``_expire`` covers any timer that still slips through.
    """

    def __init__(self, slots: dict[str, PlayerSlot], timers: TimerGroup,
                 rng: random.Random | None = None,
                 hazard_chance: float = HAZARD_CHANCE,
                 base_life_ms: float = TARGET_BASE_LIFE_MS,
                 life_jitter_ms: float = TARGET_LIFE_JITTER_MS,
                 on_expire: Callable[[str, Target], None] | None = None) -> None:
        self.slots = slots
        self.timers = timers
        self.rng = rng or random.Random()
        self.hazard_chance = hazard_chance
        self.base_life_ms = base_life_ms
        self.life_jitter_ms = life_jitter_ms
        self.on_expire = on_expire
        self._ids = itertools.count(1)
        self._expiry: dict[str, Timer] = {}

    def roll_lifetime(self) -> float:
        return self.base_life_ms + self.rng.random() * self.life_jitter_ms

    def roll_position(self) -> tuple[float, float]:
        x = self.rng.uniform(*SAFE_X_RANGE)
        y = self.rng.uniform(*SAFE_Y_RANGE)
        return x, y

    def spawn(self, slot_id: str) -> Target:
        """
        Place a new target in ``slot_id``, replacing whatever was there.

        Parameters
        ----------
        slot_id : str
            Slot to spawn into ("p1" or "p2").

        Returns
        -------
        Target
            The target now occupying the slot.
        """
        self.cancel_expiry(slot_id)

        is_hazard = self.rng.random() < self.hazard_chance
        lifetime = self.roll_lifetime()
        x, y = self.roll_position()
        target = Target(
            id=next(self._ids),
            is_hazard=is_hazard,
            lifetime_ms=lifetime,
            spawned_at_ms=self.timers.scheduler.now_ms,
            x=x,
            y=y,
        )
        self.slots[slot_id].place(target)

        self._expiry[slot_id] = self.timers.call_later(
            lifetime, lambda: self._expire(slot_id, target.id)
        )
        return target

    def _expire(self, slot_id: str, target_id: int) -> None:
        timer = self._expiry.get(slot_id)
        if timer is not None and not timer.active:
            del self._expiry[slot_id]

        slot = self.slots[slot_id]
        expired = slot.target
        if slot.clear_if(target_id) and self.on_expire:
            self.on_expire(slot_id, expired)

    def cancel_expiry(self, slot_id: str) -> None:
        timer = self._expiry.pop(slot_id, None)
        if timer is not None:
            timer.cancel()

    def cancel_all(self) -> None:
        for slot_id in list(self._expiry):
            self.cancel_expiry(slot_id)

    def pending(self) -> int:
        """Number of expiries that can still fire."""
        return sum(1 for t in self._expiry.values() if t.active)
