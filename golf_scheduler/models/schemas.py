"""
Serializable views of schedules, validation results and generation traces.
"""

from pydantic import BaseModel
from typing import List, Dict, Any, Optional

from golf_scheduler.models.models import (
    Participant, Group, Schedule, ScheduleViolation, ScheduleValidationResult,
    GenerationStep, FilteringDecision, GenerationTrace,
)


class ParticipantView(BaseModel):
    """A scheduled player."""
    id: str
    name: str
    time_preference: str
    handedness: str


class GroupView(BaseModel):
    """One foursome."""
    id: str
    time_slot: str
    position: int
    players: List[ParticipantView]


class ScheduleView(BaseModel):
    """A full schedule for one occurrence."""
    id: str
    occurrence_id: str
    early: List[GroupView]
    late: List[GroupView]
    total_players: int
    created_at: str
    last_modified: str


class ViolationView(BaseModel):
    violation_type: str
    description: str
    participant_id: Optional[str] = None
    participant_name: Optional[str] = None
    time_slot: Optional[str] = None
    group_position: Optional[int] = None
    availability_status: Optional[bool] = None


class ValidationView(BaseModel):
    """Validation outcome for a schedule."""
    is_valid: bool
    blocks_finalization: bool
    violations: List[ViolationView]


class StepView(BaseModel):
    step: str
    success: bool
    details: Dict[str, Any]
    error: Optional[str] = None
    timestamp: str


class FilteringDecisionView(BaseModel):
    participant_id: str
    participant_name: str
    availability_status: Optional[bool] = None
    decision: str
    reason: str


class TraceView(BaseModel):
    """Ordered record of a generation run."""
    occurrence_id: str
    season_id: Optional[str] = None
    steps: List[StepView]
    filtering_decisions: List[FilteringDecisionView]
    warnings: List[str]
    errors: List[str]
    duration_seconds: Optional[float] = None


def participant_view(participant: Participant) -> ParticipantView:
    return ParticipantView(
        id=participant.id,
        name=participant.full_name,
        time_preference=participant.time_preference.value,
        handedness=participant.handedness.value,
    )


def group_view(group: Group) -> GroupView:
    return GroupView(
        id=group.id,
        time_slot=group.time_slot.value,
        position=group.position,
        players=[participant_view(p) for p in group.players],
    )


def schedule_view(schedule: Schedule) -> ScheduleView:
    return ScheduleView(
        id=schedule.id,
        occurrence_id=schedule.occurrence_id,
        early=[group_view(g) for g in schedule.early],
        late=[group_view(g) for g in schedule.late],
        total_players=schedule.total_participant_count(),
        created_at=schedule.created_at.isoformat(),
        last_modified=schedule.last_modified.isoformat(),
    )


def violation_view(violation: ScheduleViolation) -> ViolationView:
    return ViolationView(
        violation_type=violation.violation_type,
        description=violation.description,
        participant_id=violation.participant_id,
        participant_name=violation.participant_name,
        time_slot=violation.time_slot.value if violation.time_slot else None,
        group_position=violation.group_position,
        availability_status=violation.availability_status,
    )


def validation_view(result: ScheduleValidationResult) -> ValidationView:
    return ValidationView(
        is_valid=result.is_valid,
        blocks_finalization=result.blocks_finalization,
        violations=[violation_view(v) for v in result.violations],
    )


def _step_view(step: GenerationStep) -> StepView:
    return StepView(
        step=step.step,
        success=step.success,
        details=step.details,
        error=step.error,
        timestamp=step.timestamp.isoformat(),
    )


def _decision_view(decision: FilteringDecision) -> FilteringDecisionView:
    return FilteringDecisionView(
        participant_id=decision.participant_id,
        participant_name=decision.participant_name,
        availability_status=decision.availability_status,
        decision=decision.decision,
        reason=decision.reason,
    )


def trace_view(trace: GenerationTrace) -> TraceView:
    return TraceView(
        occurrence_id=trace.occurrence_id,
        season_id=trace.season_id,
        steps=[_step_view(s) for s in trace.steps],
        filtering_decisions=[_decision_view(d) for d in trace.filtering_decisions],
        warnings=list(trace.warnings),
        errors=list(trace.errors),
        duration_seconds=trace.duration_seconds,
    )
