"""
Data models for the scheduling system.
"""

from .availability import AvailabilityProvider, AvailabilityRecord
from .models import (
    Handedness,
    TimePreference,
    TimeSlot,
    Participant,
    Group,
    Schedule,
    Occurrence,
    ScheduleViolation,
    ScheduleValidationResult,
    GenerationStep,
    FilteringDecision,
    GenerationTrace,
    GenerationResult,
    NOT_IN_AVAILABLE_SET,
    DUPLICATE_ASSIGNMENT,
    PREFERENCE_CONFLICT,
    AVAILABILITY_NO_DATA,
    AVAILABILITY_UNAVAILABLE,
    BLOCKING_VIOLATIONS,
)
from .schemas import (
    ParticipantView,
    GroupView,
    ScheduleView,
    ViolationView,
    ValidationView,
    TraceView,
    schedule_view,
    validation_view,
    trace_view,
)

__all__ = [
    "AvailabilityProvider",
    "AvailabilityRecord",
    "Handedness",
    "TimePreference",
    "TimeSlot",
    "Participant",
    "Group",
    "Schedule",
    "Occurrence",
    "ScheduleViolation",
    "ScheduleValidationResult",
    "GenerationStep",
    "FilteringDecision",
    "GenerationTrace",
    "GenerationResult",
    "NOT_IN_AVAILABLE_SET",
    "DUPLICATE_ASSIGNMENT",
    "PREFERENCE_CONFLICT",
    "AVAILABILITY_NO_DATA",
    "AVAILABILITY_UNAVAILABLE",
    "BLOCKING_VIOLATIONS",
    "ParticipantView",
    "GroupView",
    "ScheduleView",
    "ViolationView",
    "ValidationView",
    "TraceView",
    "schedule_view",
    "validation_view",
    "trace_view",
]
