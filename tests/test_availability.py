"""
Tests for availability resolution.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from golf_scheduler.models import Participant, AvailabilityRecord
from golf_scheduler.services.availability import (
    AvailabilityResolver, REASON_NO_DATA, REASON_UNAVAILABLE
)


def make_player(pid, season="season_1"):
    return Participant(id=pid, first_name=pid.upper(), last_name="Golfer", season_id=season)


def test_only_explicit_true_is_available():
    """A player with no answer is never treated as available."""
    roster = [make_player("a"), make_player("b"), make_player("c")]
    record = AvailabilityRecord({"a": True, "b": False})

    resolution = AvailabilityResolver().resolve(roster, record)

    assert [p.id for p in resolution.available] == ["a"]
    assert [p.id for p in resolution.unavailable] == ["b"]
    assert [p.id for p in resolution.missing_data] == ["c"]

    reasons = {e.participant.id: (e.reason, e.availability_status) for e in resolution.excluded}
    assert reasons == {"b": (REASON_UNAVAILABLE, False), "c": (REASON_NO_DATA, None)}


def test_empty_record_excludes_everyone():
    roster = [make_player(f"p{i}") for i in range(6)]

    resolution = AvailabilityResolver().resolve(roster, AvailabilityRecord())

    assert resolution.available == []
    assert len(resolution.missing_data) == 6
    assert resolution.coverage.coverage_percentage == 0
    assert resolution.coverage.issues[0].startswith("Low availability data coverage")
    assert "Set availability data for 6 players with missing data" in resolution.recommendations


def test_resolution_is_deterministic_and_keeps_roster_order():
    roster = [make_player(pid) for pid in ["d", "b", "a", "c"]]
    record = AvailabilityRecord({"a": True, "b": True, "c": True, "d": True})
    resolver = AvailabilityResolver()

    first = resolver.available_participants(roster, record)
    second = resolver.available_participants(roster, record)

    assert [p.id for p in first] == ["d", "b", "a", "c"]
    assert [p.id for p in first] == [p.id for p in second]


def test_duplicate_roster_entries_are_dropped():
    roster = [make_player("a"), make_player("b"), make_player("a")]
    record = AvailabilityRecord({"a": True, "b": True})

    resolution = AvailabilityResolver().resolve(roster, record)

    assert [p.id for p in resolution.available] == ["a", "b"]
    assert resolution.coverage.total_players == 2


def test_filtering_decisions_are_recorded():
    roster = [make_player("a"), make_player("b")]
    record = AvailabilityRecord({"a": True})

    resolution = AvailabilityResolver().resolve(roster, record)

    decisions = {d.participant_id: d.decision for d in resolution.decisions}
    assert decisions == {"a": "included", "b": "excluded"}
    assert resolution.decisions[1].reason == "No availability data for this occurrence"


def test_coverage_thresholds():
    resolver = AvailabilityResolver()
    roster = [make_player(pid) for pid in "abcd"]

    partial = resolver.check_coverage(roster, AvailabilityRecord({"a": True, "b": False, "c": True}))
    assert partial.coverage_percentage == 75
    assert partial.issues == ["Incomplete availability data: 1 players missing availability data"]

    full = resolver.check_coverage(roster, AvailabilityRecord({pid: True for pid in "abcd"}))
    assert full.coverage_percentage == 100
    assert full.is_complete

    empty = resolver.check_coverage([], AvailabilityRecord())
    assert empty.total_players == 0
    assert empty.issues == []


def test_recommendations_for_small_turnout():
    roster = [make_player(pid) for pid in "abcde"]
    record = AvailabilityRecord({"a": True, "b": True, "c": False, "d": False})

    resolution = AvailabilityResolver().resolve(roster, record)

    assert not resolution.has_enough_players
    assert "Set availability data for 1 players with missing data" in resolution.recommendations
    assert "Expect a partial group for this occurrence" in resolution.recommendations
