"""
Tests for time slot assignment.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from golf_scheduler.models import Participant, TimeSlot
from golf_scheduler.services.balancer import TimeSlotBalancer


def make_player(pid, preference):
    return Participant(
        id=pid, first_name=pid.upper(), last_name="Golfer",
        season_id="season_1", time_preference=preference,
    )


def ids(players):
    return [p.id for p in players]


def test_one_each_plus_two_either():
    """Early and late players keep their slot; two either players split evenly."""
    players = [
        make_player("a", "early"), make_player("b", "late"),
        make_player("c", "either"), make_player("d", "either"),
    ]

    assignment = TimeSlotBalancer().assign(players)

    assert ids(assignment.early) == ["a", "c"]
    assert ids(assignment.late) == ["b", "d"]


def test_either_players_fill_the_smaller_slot():
    players = [make_player(f"e{i}", "early") for i in range(3)]
    players.append(make_player("l0", "late"))
    players += [make_player(f"x{i}", "either") for i in range(4)]

    assignment = TimeSlotBalancer().assign(players)

    # deficit 2, four either players: ceil(6 / 2) = 3 go late
    assert ids(assignment.late) == ["l0", "x0", "x1", "x2"]
    assert ids(assignment.early) == ["e0", "e1", "e2", "x3"]


def test_share_is_capped_at_either_count():
    players = [make_player(f"e{i}", "early") for i in range(6)]
    players.append(make_player("x0", "either"))

    assignment = TimeSlotBalancer().assign(players)

    assert len(assignment.early) == 6
    assert ids(assignment.late) == ["x0"]


def test_balancing_disabled_splits_either_in_half():
    players = [make_player(f"e{i}", "early") for i in range(4)]
    players += [make_player(f"x{i}", "either") for i in range(3)]

    assignment = TimeSlotBalancer(balance_time_slots=False).assign(players)

    assert ids(assignment.early) == ["e0", "e1", "e2", "e3", "x0"]
    assert ids(assignment.late) == ["x1", "x2"]


def test_every_player_is_assigned_once():
    preferences = ["early", "late", "either", "either", "late", "either", "early", "either", "either"]
    players = [make_player(f"p{i}", pref) for i, pref in enumerate(preferences)]

    assignment = TimeSlotBalancer().assign(players)

    assert assignment.total == len(players)
    assert sorted(ids(assignment.early) + ids(assignment.late)) == sorted(ids(players))
    assert all(p.time_preference.value != "late" for p in assignment.players_for(TimeSlot.EARLY))
    assert all(p.time_preference.value != "early" for p in assignment.players_for(TimeSlot.LATE))


def test_no_players():
    assignment = TimeSlotBalancer().assign([])
    assert assignment.early == []
    assert assignment.late == []
