"""
Schedule validation module for the Golf League Foursome Scheduler.
Validates schedules against availability, uniqueness and time preference rules.
"""

from typing import List, Dict, Optional, Iterable
from collections import Counter

from golf_scheduler.models import (
    Schedule, Participant, AvailabilityProvider,
    ScheduleViolation, ScheduleValidationResult,
    NOT_IN_AVAILABLE_SET, DUPLICATE_ASSIGNMENT, PREFERENCE_CONFLICT,
    AVAILABILITY_NO_DATA, AVAILABILITY_UNAVAILABLE,
)
from golf_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)


class ScheduleValidator:
    """
    Validates foursome schedules before they are finalized.

    Every problem is reported as a ScheduleViolation; nothing here raises.
    Availability violations block finalization.
    """

    def validate_schedule(self, schedule: Schedule, available_players: Iterable[Participant],
                          availability: Optional[AvailabilityProvider] = None) -> ScheduleValidationResult:
        """
        Validate a complete schedule.

        Args:
            schedule: The schedule to validate
            available_players: Players that were resolved as available
            availability: The occurrence's availability answers, when known

        Returns:
            ScheduleValidationResult with all violations found
        """
        result = ScheduleValidationResult(is_valid=True)
        available_players = list(available_players)
        names = self._name_lookup(schedule, available_players)

        self._check_available_set(schedule, available_players, names, result)
        if availability is not None:
            self._check_availability(schedule, availability, names, result)
        self._check_duplicates(schedule, names, result)
        self._check_time_preferences(schedule, result)

        if result.is_valid:
            logger.info("Schedule %s is valid (%d groups)", schedule.id, schedule.group_count())
        else:
            logger.warning(
                "Schedule %s has %d violations (%d availability)",
                schedule.id, len(result.violations), len(result.availability_violations),
            )
            for violation in result.violations[:10]:  # Show first 10
                logger.warning("  - %s: %s", violation.violation_type, violation.description)

        return result

    def check_availability(self, schedule: Schedule, availability: AvailabilityProvider,
                           roster: Iterable[Participant] = ()) -> ScheduleValidationResult:
        """Report only the scheduled players whose availability is not explicitly True."""
        result = ScheduleValidationResult(is_valid=True)
        names = self._name_lookup(schedule, list(roster))
        self._check_availability(schedule, availability, names, result)
        return result

    def _name_lookup(self, schedule: Schedule, players: List[Participant]) -> Dict[str, str]:
        names = {p.id: p.full_name for p in players}
        for player in schedule.participants():
            names.setdefault(player.id, player.full_name)
        return names

    def _check_available_set(self, schedule: Schedule, available_players: List[Participant],
                             names: Dict[str, str], result: ScheduleValidationResult):
        """Every scheduled player must come from the available set."""
        available_ids = {p.id for p in available_players}
        reported = set()

        for group in schedule.all_groups:
            for player in group.players:
                if player.id in available_ids or player.id in reported:
                    continue
                reported.add(player.id)
                result.add_violation(ScheduleViolation(
                    violation_type=NOT_IN_AVAILABLE_SET,
                    description=f"Player {names[player.id]} ({player.id}) is in schedule but not in available players",
                    participant_id=player.id,
                    participant_name=names[player.id],
                    time_slot=group.time_slot,
                    group_position=group.position,
                ))

    def _check_availability(self, schedule: Schedule, availability: AvailabilityProvider,
                            names: Dict[str, str], result: ScheduleValidationResult):
        """Every scheduled player must be explicitly marked available."""
        reported = set()

        for group in schedule.all_groups:
            for player in group.players:
                if player.id in reported or availability.is_available(player.id):
                    continue
                reported.add(player.id)
                name = names.get(player.id, player.id)

                if not availability.has_entry(player.id):
                    result.add_violation(ScheduleViolation(
                        violation_type=AVAILABILITY_NO_DATA,
                        description=f"Player {name} ({player.id}) is scheduled but has no availability data",
                        participant_id=player.id,
                        participant_name=name,
                        time_slot=group.time_slot,
                        group_position=group.position,
                        availability_status=None,
                    ))
                else:
                    status = availability.status_of(player.id)
                    result.add_violation(ScheduleViolation(
                        violation_type=AVAILABILITY_UNAVAILABLE,
                        description=f"Player {name} ({player.id}) is scheduled but is marked as unavailable (status: {status})",
                        participant_id=player.id,
                        participant_name=name,
                        time_slot=group.time_slot,
                        group_position=group.position,
                        availability_status=status,
                    ))

    def _check_duplicates(self, schedule: Schedule, names: Dict[str, str],
                          result: ScheduleValidationResult):
        """Each player may appear in at most one group."""
        counts = Counter(schedule.participant_ids())

        for player_id, count in counts.items():
            if count > 1:
                result.add_violation(ScheduleViolation(
                    violation_type=DUPLICATE_ASSIGNMENT,
                    description=f"Player {names[player_id]} ({player_id}) appears {count} times in schedule",
                    participant_id=player_id,
                    participant_name=names[player_id],
                ))

    def _check_time_preferences(self, schedule: Schedule, result: ScheduleValidationResult):
        """Early-preference players stay out of the late slot and vice versa."""
        for group in schedule.all_groups:
            for player in group.players:
                if group.time_slot.conflicts_with(player.time_preference):
                    result.add_violation(ScheduleViolation(
                        violation_type=PREFERENCE_CONFLICT,
                        description=(
                            f"Player {player.full_name} ({player.id}) has {player.time_preference.value} "
                            f"preference but is scheduled in the {group.time_slot.value} slot"
                        ),
                        participant_id=player.id,
                        participant_name=player.full_name,
                        time_slot=group.time_slot,
                        group_position=group.position,
                    ))
