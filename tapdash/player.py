"""Per-player slot state: score plus the one live target."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import HIT_REWARD, HAZARD_PENALTY
from .models import SlotSnapshot, TapOutcome, Target


@dataclass
class PlayerSlot:
    """
    Score and current target for one player.

    Only the methods below mutate a slot; the score never drops below 0.
    """
    score: int = 0
    target: Target | None = None

    def reset(self) -> None:
        self.score = 0
        self.target = None

    def place(self, target: Target) -> None:
        """Overwrite the current target with a freshly spawned one."""
        self.target = target

    def clear_if(self, target_id: int) -> bool:
        """
        Clear the target only if it is still the one identified by ``target_id``.

        Returns
        -------
        bool
            True if the slot was cleared, False for a stale request.
        """
        if self.target is None or self.target.id != target_id:
            return False
        self.target = None
        return True

    def resolve_tap(self, reward: int = HIT_REWARD, penalty: int = HAZARD_PENALTY) -> TapOutcome:
        """
        Resolve a tap against the current target.

        The target is cleared before the score changes, so a second tap on
        the same target always lands on an empty slot.
        """
        target = self.target
        if target is None:
            return TapOutcome.MISS

        self.target = None
        if target.is_hazard:
            self.score = max(0, self.score - penalty)
            return TapOutcome.HAZARD
        self.score += reward
        return TapOutcome.HIT

    def snapshot(self, slot_id: str) -> SlotSnapshot:
        return SlotSnapshot(slot_id=slot_id, score=self.score, target=self.target)
