"""
Time slot assignment: splits the night's players between the early and late slots.
"""

import math
from dataclasses import dataclass, field
from typing import List

from golf_scheduler.models import Participant, TimePreference, TimeSlot
from golf_scheduler.core.config import BALANCE_TIME_SLOTS
from golf_scheduler.core.exceptions import ScheduleConsistencyError
from golf_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class SlotAssignment:
    early: List[Participant] = field(default_factory=list)
    late: List[Participant] = field(default_factory=list)

    def players_for(self, time_slot: TimeSlot) -> List[Participant]:
        if time_slot == TimeSlot.EARLY:
            return self.early
        return self.late

    @property
    def total(self) -> int:
        return len(self.early) + len(self.late)


class TimeSlotBalancer:
    """
    Assigns players to slots by stated preference.

    Early and late players always land in their slot. "Either" players are
    handed out in roster order to even out the two slots: the smaller slot
    gets ceil((deficit + either) / 2) of them, capped at the number available.
    """

    def __init__(self, balance_time_slots: bool = BALANCE_TIME_SLOTS):
        self.balance_time_slots = balance_time_slots

    def assign(self, players: List[Participant]) -> SlotAssignment:
        early = [p for p in players if p.time_preference == TimePreference.EARLY]
        late = [p for p in players if p.time_preference == TimePreference.LATE]
        either = [p for p in players if p.time_preference == TimePreference.EITHER]

        categorized = len(early) + len(late) + len(either)
        if categorized != len(players):
            raise ScheduleConsistencyError(
                f"Player categorization failed: {categorized} categorized vs {len(players)} total",
                step="categorize_preferences",
                details={"total": len(players), "categorized": categorized},
            )

        assignment = SlotAssignment(early=list(early), late=list(late))
        self._distribute_either(assignment, either)

        if assignment.total != len(players):
            raise ScheduleConsistencyError(
                f"Time slot assignment failed: {assignment.total} assigned vs {len(players)} total",
                step="assign_time_slots",
                details={
                    "total": len(players),
                    "early": len(assignment.early),
                    "late": len(assignment.late),
                },
            )

        logger.debug(
            "Slot assignment: %d early-pref, %d late-pref, %d either -> %d early, %d late",
            len(early), len(late), len(either), len(assignment.early), len(assignment.late),
        )
        return assignment

    def _distribute_either(self, assignment: SlotAssignment, either: List[Participant]):
        if not either:
            return

        early_count = len(assignment.early)
        late_count = len(assignment.late)

        if not self.balance_time_slots or early_count == late_count:
            half = len(either) // 2
            assignment.early.extend(either[:half])
            assignment.late.extend(either[half:])
            return

        if early_count < late_count:
            smaller, larger = assignment.early, assignment.late
        else:
            smaller, larger = assignment.late, assignment.early

        deficit = len(larger) - len(smaller)
        to_smaller = min(math.ceil((deficit + len(either)) / 2), len(either))
        smaller.extend(either[:to_smaller])
        larger.extend(either[to_smaller:])
