"""
Schedule assembly: collects formed groups into the schedule for one occurrence.
"""

from typing import Dict, Iterable, Optional

from golf_scheduler.models import Group, Schedule, TimeSlot
from golf_scheduler.core.exceptions import ScheduleInputError, ScheduleConsistencyError
from golf_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)


class ScheduleAssembler:
    """
    Builds one Schedule, a group at a time.

    Each group is routed to the slot list matching its tag and renumbered to
    the next position in that slot. A player can only be scheduled once.
    """

    def __init__(self, occurrence_id: str):
        if not isinstance(occurrence_id, str) or not occurrence_id.strip():
            raise ScheduleInputError("Occurrence ID is required and cannot be empty")
        self.schedule = Schedule(occurrence_id=occurrence_id)
        self._scheduled: Dict[str, Group] = {}

    def add_group(self, group: Group, time_slot: Optional[TimeSlot] = None) -> Group:
        """
        Append a group to its slot.

        Args:
            group: The group to add
            time_slot: Slot the caller expects the group to belong to; must match its tag

        Returns:
            The group, with its position set to its index within the slot
        """
        if not isinstance(group, Group):
            raise ScheduleInputError(f"Expected a Group, got {type(group).__name__}")
        if time_slot is not None and group.time_slot != time_slot:
            raise ScheduleInputError(
                f"Group {group.id} is tagged {group.time_slot.value} but was added to the {time_slot.value} slot"
            )

        for player in group.players:
            if player.id in self._scheduled:
                raise ScheduleInputError(
                    f"Player {player} is already scheduled in group {self._scheduled[player.id].id}"
                )

        group.position = len(self.schedule.groups_for(group.time_slot))
        self.schedule.add_group(group)
        for player in group.players:
            self._scheduled[player.id] = group
        return group

    def add_groups(self, groups: Iterable[Group], time_slot: Optional[TimeSlot] = None) -> int:
        added = 0
        for group in groups:
            self.add_group(group, time_slot)
            added += 1
        return added

    def verify(self, expected_early: int, expected_late: int, expected_player_ids: Iterable[str]):
        """
        Check the assembled schedule against what the generator produced.

        Raises:
            ScheduleConsistencyError: if group counts or the scheduled player set differ
        """
        actual_early = len(self.schedule.early)
        actual_late = len(self.schedule.late)
        details = {
            "expected_early": expected_early,
            "actual_early": actual_early,
            "expected_late": expected_late,
            "actual_late": actual_late,
        }

        if actual_early + actual_late != expected_early + expected_late:
            raise ScheduleConsistencyError(
                f"Schedule assembly failed: expected {expected_early + expected_late} groups, "
                f"got {actual_early + actual_late}",
                step="assemble_schedule",
                details=details,
            )
        if actual_early != expected_early:
            raise ScheduleConsistencyError(
                f"Early slot mismatch: expected {expected_early}, got {actual_early}",
                step="assemble_schedule",
                details=details,
            )
        if actual_late != expected_late:
            raise ScheduleConsistencyError(
                f"Late slot mismatch: expected {expected_late}, got {actual_late}",
                step="assemble_schedule",
                details=details,
            )

        expected = set(expected_player_ids)
        scheduled = set(self._scheduled)
        if scheduled != expected:
            raise ScheduleConsistencyError(
                "Scheduled players do not match the players handed to the generator",
                step="assemble_schedule",
                details={
                    "missing": sorted(expected - scheduled),
                    "unexpected": sorted(scheduled - expected),
                },
            )

        logger.debug(
            "Assembled schedule %s: %d early groups, %d late groups, %d players",
            self.schedule.id, actual_early, actual_late, len(scheduled),
        )

    def build(self) -> Schedule:
        return self.schedule
