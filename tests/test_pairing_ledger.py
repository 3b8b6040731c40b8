"""
Tests for the in-memory pairing ledger and the pairing history tracker.
"""

import sys
import os
import asyncio
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from golf_scheduler.models import Participant, Group, Schedule, TimeSlot
from golf_scheduler.services.pairing_ledger import InMemoryPairingLedger, pair_key
from golf_scheduler.services.pairing_tracker import PairingHistoryTracker


def make_player(pid):
    return Participant(id=pid, first_name=pid.upper(), last_name="Golfer", season_id="season_1")


def make_schedule(*slot_groups):
    schedule = Schedule(occurrence_id="week_1")
    for time_slot, pids in slot_groups:
        schedule.add_group(Group(players=[make_player(p) for p in pids], time_slot=time_slot))
    return schedule


def test_pair_key_is_order_independent():
    assert pair_key("b", "a") == ("a", "b")
    assert pair_key("a", "b") == ("a", "b")


def test_count_is_symmetric():
    async def run():
        ledger = InMemoryPairingLedger()
        await ledger.increment("s1", "b", "a")
        return await ledger.count("s1", "a", "b"), await ledger.count("s1", "b", "a")

    assert asyncio.run(run()) == (1, 1)


def test_self_pair_and_unknown_pairs():
    async def run():
        ledger = InMemoryPairingLedger()
        assert await ledger.count("s1", "a", "a") == 0
        assert await ledger.count("s1", "a", "z") == 0
        with pytest.raises(ValueError):
            await ledger.increment("s1", "a", "a")
        with pytest.raises(ValueError):
            await ledger.increment("s1", "", "a")

    asyncio.run(run())


def test_seasons_are_independent_and_reset():
    async def run():
        ledger = InMemoryPairingLedger({"s1": {("a", "b"): 3}, "s2": {("b", "a"): 1}})
        assert await ledger.count("s1", "b", "a") == 3
        assert await ledger.count("s2", "a", "b") == 1

        await ledger.reset("s1")
        assert await ledger.count("s1", "a", "b") == 0
        assert await ledger.count("s2", "a", "b") == 1

    asyncio.run(run())


def test_seed_counts_must_be_non_negative():
    with pytest.raises(ValueError):
        InMemoryPairingLedger({"s1": {("a", "b"): -1}})


def test_all_pairings_sorted_by_count():
    async def run():
        ledger = InMemoryPairingLedger({"s1": {("a", "b"): 1, ("c", "a"): 4, ("a", "d"): 2, ("b", "c"): 9}})
        return await ledger.all_pairings_for("s1", "a")

    assert asyncio.run(run()) == [("c", 4), ("d", 2), ("b", 1)]


def test_concurrent_increments_are_not_lost():
    async def run():
        ledger = InMemoryPairingLedger()
        await asyncio.gather(*(ledger.increment("s1", "a", "b") for _ in range(50)))
        return await ledger.count("s1", "a", "b")

    assert asyncio.run(run()) == 50


def test_tracking_twice_adds_two():
    """Recording the same schedule twice adds exactly two to every intra-group pair."""
    schedule = make_schedule(
        (TimeSlot.EARLY, ["a", "b", "c", "d"]),
        (TimeSlot.LATE, ["e", "f"]),
    )

    async def run():
        ledger = InMemoryPairingLedger()
        tracker = PairingHistoryTracker(ledger)
        first = await tracker.track_schedule_pairings("s1", schedule)
        second = await tracker.track_schedule_pairings("s1", schedule)
        return ledger, first, second

    ledger, first, second = asyncio.run(run())

    assert first == second == 7
    counts = ledger.snapshot("s1")
    assert len(counts) == 7
    assert all(value == 2 for value in counts.values())
    assert ("a", "e") not in counts


def test_snapshot_and_metrics():
    players = [make_player(p) for p in "abcd"]

    async def run():
        ledger = InMemoryPairingLedger({"s1": {("a", "b"): 2, ("c", "d"): 1}})
        tracker = PairingHistoryTracker(ledger)
        snapshot = await tracker.take_snapshot("s1", players)
        metrics = await tracker.calculate_pairing_metrics("s1", players)
        score = await tracker.score_group("s1", players)
        return snapshot, metrics, score

    snapshot, metrics, score = asyncio.run(run())

    assert snapshot.counts == {("a", "b"): 2, ("c", "d"): 1}
    assert snapshot.count("b", "a") == 2
    assert snapshot.score(players) == 3
    assert score == 3
    assert metrics.min_pairings == 0
    assert metrics.max_pairings == 2
    assert metrics.average_pairings == pytest.approx(0.5)
    assert len(metrics.pairing_counts) == 6


def test_metrics_for_single_player():
    async def run():
        tracker = PairingHistoryTracker(InMemoryPairingLedger())
        return await tracker.calculate_pairing_metrics("s1", [make_player("a")])

    metrics = asyncio.run(run())
    assert metrics.pairing_counts == {}
    assert metrics.max_pairings == 0


def test_reads_do_not_create_seasons():
    async def run():
        ledger = InMemoryPairingLedger()
        await ledger.count("ghost", "a", "b")
        await ledger.all_pairings_for("ghost", "a")
        return ledger

    ledger = asyncio.run(run())
    assert "ghost" not in ledger._pairings
