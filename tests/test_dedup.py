"""Tests for the dedup guard."""

import asyncio

from mc_bridge.bridge.dedup import DedupGuard, PULL_DIRECTION, PUSH_DIRECTION, dedup_key
from tests.helpers import ManualClock


def test_key_is_direction_tagged():
    assert dedup_key(PUSH_DIRECTION, "abc") == "mc-to-crm:abc"
    assert dedup_key(PULL_DIRECTION, "abc") == "crm-to-mc:abc"
    assert dedup_key(PUSH_DIRECTION, "abc") != dedup_key(PULL_DIRECTION, "abc")


def test_marked_key_is_recent_within_window(dedup, clock):
    dedup.mark("mc-to-crm:1")
    assert dedup.was_recent("mc-to-crm:1")

    clock.advance(29.9)
    assert dedup.was_recent("mc-to-crm:1")


def test_unmarked_key_is_not_recent(dedup):
    assert not dedup.was_recent("mc-to-crm:missing")


def test_key_expires_after_window(dedup, clock):
    dedup.mark("crm-to-mc:1")
    clock.advance(30.0 + 0.001)

    assert not dedup.was_recent("crm-to-mc:1")
    # Lazy eviction removed the entry.
    assert len(dedup) == 0


def test_directions_do_not_collide(dedup):
    dedup.mark(dedup_key(PUSH_DIRECTION, "same-id"))
    assert not dedup.was_recent(dedup_key(PULL_DIRECTION, "same-id"))


def test_remark_restarts_window(dedup, clock):
    dedup.mark("k")
    clock.advance(25)
    dedup.mark("k")
    clock.advance(25)
    assert dedup.was_recent("k")


def test_sweep_evicts_only_expired_entries(dedup, clock):
    dedup.mark("old-1")
    dedup.mark("old-2")
    clock.advance(20)
    dedup.mark("fresh")
    clock.advance(15)

    assert dedup.sweep() == 2
    assert len(dedup) == 1
    assert dedup.was_recent("fresh")


def test_discard_and_clear(dedup):
    dedup.mark("a")
    dedup.mark("b")
    dedup.discard("a")
    dedup.discard("never-marked")
    assert not dedup.was_recent("a")
    assert len(dedup) == 1

    dedup.clear()
    assert len(dedup) == 0


def test_background_sweeper_bounds_memory():
    clock = ManualClock()
    guard = DedupGuard(window=30.0, sweep_interval=0.01, clock=clock)
    guard.mark("stale")
    clock.advance(31)

    async def scenario():
        sweeper = asyncio.ensure_future(guard.run_sweeper())
        await asyncio.sleep(0.05)
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass

    asyncio.run(scenario())
    # Evicted without any lookup.
    assert len(guard) == 0
