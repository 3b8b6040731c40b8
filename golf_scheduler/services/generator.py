"""
Schedule generator: the entry point that turns a night's players into foursomes.

Pipeline:
1. Resolve availability (only explicit "yes" answers play)
2. Split players between the early and late slots
3. Form groups per slot, minimizing repeat pairings when a ledger is attached
4. Assemble and verify the schedule
Finalization validates the schedule and records its pairings in the ledger.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Dict, Any

from golf_scheduler.models import (
    Participant, Schedule, Occurrence, TimeSlot, AvailabilityProvider, AvailabilityRecord,
    GenerationTrace, GenerationResult, ScheduleValidationResult,
)
from golf_scheduler.services.availability import AvailabilityResolver
from golf_scheduler.services.balancer import TimeSlotBalancer
from golf_scheduler.services.optimizer import FoursomeOptimizer
from golf_scheduler.services.assembler import ScheduleAssembler
from golf_scheduler.services.validator import ScheduleValidator
from golf_scheduler.services.pairing_ledger import PairingLedger
from golf_scheduler.services.pairing_tracker import PairingHistoryTracker, PairingSnapshot
from golf_scheduler.core.config import (
    GROUP_SIZE, BALANCE_TIME_SLOTS, OPTIMIZE_PAIRINGS, OPTIMIZATION_STRATEGY,
    MAX_EXHAUSTIVE_POOL_SIZE
)
from golf_scheduler.core.exceptions import (
    SchedulingError, ScheduleInputError, FinalizationRefusedError
)
from golf_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ScheduleGeneratorOptions:
    balance_time_slots: bool = BALANCE_TIME_SLOTS
    optimize_pairings: bool = OPTIMIZE_PAIRINGS
    strategy: str = OPTIMIZATION_STRATEGY
    max_exhaustive_pool_size: int = MAX_EXHAUSTIVE_POOL_SIZE


class ScheduleGenerator:
    """
    Generates, validates and finalizes foursome schedules.

    Ledger reads happen once per slot, awaited in sequence, and ledger writes
    happen only in finalize(). A failed generation leaves the ledger untouched.
    """

    def __init__(self, options: Optional[ScheduleGeneratorOptions] = None,
                 ledger: Optional[PairingLedger] = None):
        """
        Args:
            options: Generation switches; defaults come from config
            ledger: Pairing history; without it groups are formed in order
        """
        self.options = options or ScheduleGeneratorOptions()
        self.tracker = PairingHistoryTracker(ledger) if ledger is not None else None
        self.resolver = AvailabilityResolver()
        self.balancer = TimeSlotBalancer(self.options.balance_time_slots)
        self.optimizer = FoursomeOptimizer(
            optimize_pairings=self.options.optimize_pairings,
            strategy=self.options.strategy,
            max_exhaustive_pool_size=self.options.max_exhaustive_pool_size,
        )
        self.validator = ScheduleValidator()

    async def generate_for_occurrence(self, occurrence: Occurrence,
                                      roster: Sequence[Participant]) -> GenerationResult:
        """Resolve the occurrence's availability against the roster, then generate."""
        trace = GenerationTrace(occurrence_id=occurrence.id, season_id=occurrence.season_id)
        self._step(trace, "Starting schedule generation for occurrence", {
            "occurrence_number": occurrence.number,
            "total_players": len(roster),
        })

        resolution = self.resolver.resolve(roster, occurrence.availability)
        trace.filtering_decisions.extend(resolution.decisions)
        trace.warnings.extend(resolution.coverage.issues)
        trace.warnings.extend(resolution.recommendations)
        self._step(trace, "Player filtering completed", {
            "total_players": resolution.coverage.total_players,
            "available_players": len(resolution.available),
            "missing_data": len(resolution.missing_data),
            "unavailable": len(resolution.unavailable),
            "coverage_percentage": resolution.coverage.coverage_percentage,
        })

        return await self._run(occurrence.id, resolution.available, occurrence.season_id, trace)

    async def generate(self, occurrence_id: str, participants: Sequence[Participant],
                       season_id: Optional[str] = None) -> GenerationResult:
        """
        Generate a schedule from players already resolved as available.

        Args:
            occurrence_id: The occurrence being scheduled
            participants: Available players, all from one season
            season_id: Season for pairing history; defaults to the players' season

        Returns:
            GenerationResult with the schedule and the ordered generation trace

        Raises:
            ScheduleInputError: occurrence id or players break the input contract
            ScheduleConsistencyError: an internal invariant broke while building
        """
        trace = GenerationTrace(occurrence_id=occurrence_id, season_id=season_id)
        return await self._run(occurrence_id, participants, season_id, trace)

    async def _run(self, occurrence_id, participants, season_id,
                   trace: GenerationTrace) -> GenerationResult:
        try:
            schedule = await self._build_schedule(occurrence_id, participants, season_id, trace)
        except SchedulingError as error:
            self._step(trace, "Schedule generation failed", getattr(error, "details", {}),
                       success=False, error=str(error))
            trace.mark_complete()
            error.trace = trace
            raise

        self._step(trace, "Schedule generation completed", {
            "early_groups": len(schedule.early),
            "late_groups": len(schedule.late),
            "total_scheduled_players": schedule.total_participant_count(),
        })
        trace.mark_complete()
        return GenerationResult(schedule=schedule, trace=trace)

    async def _build_schedule(self, occurrence_id, participants, season_id,
                              trace: GenerationTrace) -> Schedule:
        players = self._check_inputs(occurrence_id, participants, season_id)
        effective_season = season_id or (players[0].season_id if players else None)
        trace.season_id = effective_season

        self._step(trace, "Starting schedule generation with available players", {
            "occurrence_id": occurrence_id,
            "available_player_count": len(players),
            "season_id": effective_season,
        })

        assembler = ScheduleAssembler(occurrence_id)
        if not players:
            self._step(trace, "No available players - returning empty schedule", {
                "guidance": "Check availability data and make sure players are marked as available",
            })
            return assembler.build()

        if len(players) < GROUP_SIZE:
            warning = (
                f"Only {len(players)} available players; a full group needs {GROUP_SIZE}, "
                f"so a partial group will be created"
            )
            trace.warnings.append(warning)
            logger.warning(warning)

        assignment = self.balancer.assign(players)
        self._step(trace, "Time slot assignment completed", {
            "early_players": len(assignment.early),
            "late_players": len(assignment.late),
        })

        slot_groups = {}
        for time_slot in (TimeSlot.EARLY, TimeSlot.LATE):
            pool = assignment.players_for(time_slot)
            snapshot = await self._pairing_snapshot(effective_season, pool)
            groups = self.optimizer.create_groups(pool, time_slot, snapshot)
            slot_groups[time_slot] = groups
            self._step(trace, f"Groups created for {time_slot.value} slot", {
                "player_count": len(pool),
                "group_count": len(groups),
                "optimized": snapshot is not None and self.options.optimize_pairings,
                "pairing_scores": [snapshot.score(g.players) for g in groups] if snapshot else [],
            })

        for time_slot, groups in slot_groups.items():
            assembler.add_groups(groups, time_slot)
        assembler.verify(
            expected_early=len(slot_groups[TimeSlot.EARLY]),
            expected_late=len(slot_groups[TimeSlot.LATE]),
            expected_player_ids=[p.id for p in players],
        )

        schedule = assembler.build()
        self._step(trace, "Schedule assembly completed", {
            "schedule_id": schedule.id,
            "early_groups": len(schedule.early),
            "late_groups": len(schedule.late),
            "total_players": schedule.total_participant_count(),
        })
        return schedule

    def _check_inputs(self, occurrence_id, participants, season_id) -> List[Participant]:
        if not isinstance(occurrence_id, str) or not occurrence_id.strip():
            raise ScheduleInputError("Occurrence ID is required and cannot be empty")
        if not isinstance(participants, (list, tuple)):
            raise ScheduleInputError(
                f"Available players must be a list (got {type(participants).__name__})"
            )

        players = list(participants)
        seen = set()
        for index, player in enumerate(players):
            if not isinstance(player, Participant):
                raise ScheduleInputError(f"Invalid player data at index {index}: {player!r}")
            if player.id in seen:
                raise ScheduleInputError(f"Duplicate player ID found: {player.id}")
            seen.add(player.id)

        seasons = {p.season_id for p in players}
        if len(seasons) > 1:
            raise ScheduleInputError(
                f"All players must be from the same season (found {sorted(seasons)})"
            )
        if season_id and seasons and season_id not in seasons:
            raise ScheduleInputError(
                f"Players belong to season {seasons.pop()}, not {season_id}"
            )
        return players

    async def _pairing_snapshot(self, season_id: Optional[str],
                                pool: List[Participant]) -> Optional[PairingSnapshot]:
        if not self.options.optimize_pairings or self.tracker is None or not season_id:
            return None
        return await self.tracker.take_snapshot(season_id, pool)

    def validate(self, schedule: Schedule, available_players: Sequence[Participant],
                 availability: Optional[AvailabilityProvider] = None) -> ScheduleValidationResult:
        return self.validator.validate_schedule(schedule, available_players, availability)

    async def finalize(self, schedule: Schedule, season_id: str,
                       availability: Optional[AvailabilityProvider],
                       available_players: Sequence[Participant],
                       strict: bool = True) -> int:
        """
        Commit a schedule's pairings to the ledger.

        Every scheduled player must be in the resolved set and explicitly
        marked available; those checks always refuse finalization. A missing
        availability record counts as no answer for everyone. With strict=True
        any other violation refuses it too; strict=False leaves that call to
        the caller.

        Args:
            schedule: The schedule to commit
            season_id: Season whose ledger is updated
            availability: The occurrence's availability answers
            available_players: Players resolved as available for the occurrence
            strict: Refuse on preference and duplicate violations as well

        Returns:
            Number of pair increments written

        Raises:
            FinalizationRefusedError: validation blocked finalization (nothing written)
        """
        if not isinstance(season_id, str) or not season_id.strip():
            raise ScheduleInputError("Season ID is required to finalize a schedule")
        if self.tracker is None:
            raise ScheduleInputError("A pairing ledger is required to finalize a schedule")
        if available_players is None:
            raise ScheduleInputError("The resolved available players are required to finalize a schedule")

        if availability is None:
            availability = AvailabilityRecord()
        result = self.validate(schedule, available_players, availability)

        if result.blocks_finalization:
            offenders = ", ".join(
                f"{v.participant_name} ({v.participant_id}, {v.violation_type}, status: {v.availability_status})"
                for v in result.blocking_violations
            )
            message = f"Cannot finalize schedule {schedule.id}: players not confirmed available: {offenders}"
            logger.error(message)
            raise FinalizationRefusedError(message, result)

        if strict and not result.is_valid:
            message = f"Cannot finalize schedule {schedule.id}: " + "; ".join(result.errors)
            logger.error(message)
            raise FinalizationRefusedError(message, result)

        return await self.tracker.track_schedule_pairings(season_id, schedule)

    def _step(self, trace: GenerationTrace, step: str, details: Optional[Dict[str, Any]] = None,
              success: bool = True, error: Optional[str] = None):
        trace.record(step, details, success, error)
        if success:
            logger.debug("%s: %s", step, details or {})
        else:
            logger.error("%s: %s", step, error)
