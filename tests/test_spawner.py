from __future__ import annotations

import random

from tapdash.player import PlayerSlot
from tapdash.scheduler import Scheduler, TimerGroup
from tapdash.spawner import TargetSpawner


def _spawner(**options) -> tuple[TargetSpawner, Scheduler, dict[str, PlayerSlot]]:
    sched = Scheduler()
    slots = {"p1": PlayerSlot(), "p2": PlayerSlot()}
    spawner = TargetSpawner(slots, TimerGroup(sched), rng=random.Random(3), **options)
    return spawner, sched, slots


def test_spawn_stays_inside_safe_rectangle_and_lifetime_range() -> None:
    spawner, _, _ = _spawner()
    for _ in range(200):
        target = spawner.spawn("p1")
        assert 15 <= target.x <= 85
        assert 20 <= target.y <= 80
        assert 900 <= target.lifetime_ms <= 1200


def test_spawn_ids_are_unique_and_increasing() -> None:
    spawner, _, _ = _spawner()
    ids = [spawner.spawn(slot).id for slot in ("p1", "p2", "p1", "p1")]

    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


def test_hazard_chance_extremes() -> None:
    never, _, _ = _spawner(hazard_chance=0.0)
    always, _, _ = _spawner(hazard_chance=1.0)

    assert not any(never.spawn("p1").is_hazard for _ in range(50))
    assert all(always.spawn("p1").is_hazard for _ in range(50))


def test_hazard_rate_roughly_matches_default_chance() -> None:
    spawner, _, _ = _spawner()
    hazards = sum(spawner.spawn("p1").is_hazard for _ in range(5000))

    assert 0.08 < hazards / 5000 < 0.16


def test_untapped_target_expires_at_its_lifetime() -> None:
    spawner, sched, slots = _spawner(base_life_ms=1000, life_jitter_ms=0)
    target = spawner.spawn("p1")

    sched.advance(999)
    assert slots["p1"].target == target
    sched.advance(1000)
    assert slots["p1"].target is None
    assert spawner.pending() == 0


def test_respawn_cancels_previous_expiry() -> None:
    spawner, sched, slots = _spawner(base_life_ms=1000, life_jitter_ms=0)
    spawner.spawn("p1")
    sched.advance(500)
    second = spawner.spawn("p1")

    # first target's deadline passes; the second must survive it
    sched.advance(1200)
    assert slots["p1"].target == second
    assert spawner.pending() == 1

    sched.advance(1500)
    assert slots["p1"].target is None


def test_expiry_of_resolved_target_never_clears_a_later_one() -> None:
    spawner, sched, slots = _spawner(base_life_ms=1000, life_jitter_ms=0)
    spawner.spawn("p1")
    sched.advance(100)
    spawner.cancel_expiry("p1")
    slots["p1"].resolve_tap()

    sched.advance(400)
    later = spawner.spawn("p1")
    sched.advance(1100)
    assert slots["p1"].target == later


def test_slots_expire_independently() -> None:
    spawner, sched, slots = _spawner(base_life_ms=1000, life_jitter_ms=0)
    spawner.spawn("p1")
    sched.advance(300)
    p2_target = spawner.spawn("p2")

    sched.advance(1000)
    assert slots["p1"].target is None
    assert slots["p2"].target == p2_target


def test_on_expire_reports_the_expired_target() -> None:
    expired = []
    spawner, sched, _ = _spawner(base_life_ms=1000, life_jitter_ms=0,
                                 on_expire=lambda slot_id, t: expired.append((slot_id, t.id)))
    target = spawner.spawn("p2")
    sched.advance(1000)

    assert expired == [("p2", target.id)]


def test_cancel_all_drops_every_pending_expiry() -> None:
    spawner, sched, slots = _spawner()
    spawner.spawn("p1")
    spawner.spawn("p2")
    spawner.cancel_all()

    assert spawner.pending() == 0
    assert sched.pending() == 0
    sched.advance(5000)
    assert slots["p1"].target is not None
