"""
Data models for the Golf League Foursome Scheduler.
Defines all data structures used throughout the application.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from typing import List, Optional, Dict, Any, Iterator, Tuple
from enum import Enum
import itertools
import uuid

from golf_scheduler.core.config import GROUP_SIZE
from golf_scheduler.core.exceptions import ScheduleInputError
from golf_scheduler.models.availability import AvailabilityRecord


def generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class Handedness(Enum):
    LEFT = "left"
    RIGHT = "right"

class TimePreference(Enum):
    EARLY = "early"
    LATE = "late"
    EITHER = "either"

class TimeSlot(Enum):
    EARLY = "early"
    LATE = "late"

    def conflicts_with(self, preference: TimePreference) -> bool:
        """True when a player with this preference must not be placed in this slot."""
        if preference == TimePreference.EITHER:
            return False
        return preference.value != self.value


def _coerce_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ScheduleInputError(f"{field_name} must be one of: {allowed} (got {value!r})")


def _require_text(value, field_name: str):
    if not isinstance(value, str) or not value.strip():
        raise ScheduleInputError(f"{field_name} is required and cannot be empty")


@dataclass
class Participant:
    id: str
    first_name: str
    last_name: str
    season_id: str
    time_preference: TimePreference = TimePreference.EITHER
    handedness: Handedness = Handedness.RIGHT
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        _require_text(self.id, "Player ID")
        _require_text(self.first_name, "First name")
        _require_text(self.last_name, "Last name")
        _require_text(self.season_id, "Season ID")
        self.time_preference = _coerce_enum(TimePreference, self.time_preference, "Time preference")
        self.handedness = _coerce_enum(Handedness, self.handedness, "Handedness")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __str__(self):
        return f"{self.full_name} ({self.id})"

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Participant):
            return self.id == other.id
        return False


@dataclass
class Group:
    """A foursome: one to four players teeing off together in one time slot."""
    players: List[Participant]
    time_slot: TimeSlot
    position: int = 0
    id: str = field(default_factory=lambda: generate_id("group"))

    def __post_init__(self):
        self.players = list(self.players)
        self.time_slot = _coerce_enum(TimeSlot, self.time_slot, "Time slot")

        if not 1 <= len(self.players) <= GROUP_SIZE:
            raise ScheduleInputError(
                f"A group must hold between 1 and {GROUP_SIZE} players (got {len(self.players)})"
            )
        ids = [p.id for p in self.players]
        if len(set(ids)) != len(ids):
            raise ScheduleInputError(f"Group contains duplicate players: {ids}")
        seasons = {p.season_id for p in self.players}
        if len(seasons) > 1:
            raise ScheduleInputError(f"Group mixes players from several seasons: {sorted(seasons)}")
        if self.position < 0:
            raise ScheduleInputError(f"Group position must be non-negative (got {self.position})")

    def __str__(self):
        names = ", ".join(p.full_name for p in self.players)
        return f"{self.time_slot.value} #{self.position + 1}: {names}"

    @property
    def season_id(self) -> str:
        return self.players[0].season_id

    @property
    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    @property
    def size(self) -> int:
        return len(self.players)

    def is_complete(self) -> bool:
        return len(self.players) == GROUP_SIZE

    def contains(self, participant_id: str) -> bool:
        return any(p.id == participant_id for p in self.players)

    def pairs(self) -> Iterator[Tuple[Participant, Participant]]:
        """Every unordered pair of players inside the group."""
        return itertools.combinations(self.players, 2)


@dataclass
class Schedule:
    occurrence_id: str
    early: List[Group] = field(default_factory=list)
    late: List[Group] = field(default_factory=list)
    id: str = field(default_factory=lambda: generate_id("schedule"))
    created_at: datetime = field(default_factory=datetime.now)
    last_modified: datetime = field(default_factory=datetime.now)

    def groups_for(self, time_slot: TimeSlot) -> List[Group]:
        if time_slot == TimeSlot.EARLY:
            return self.early
        return self.late

    @property
    def all_groups(self) -> List[Group]:
        return self.early + self.late

    def add_group(self, group: Group):
        self.groups_for(group.time_slot).append(group)
        self.touch()

    def touch(self):
        self.last_modified = datetime.now()

    def participant_ids(self) -> List[str]:
        """Scheduled player ids in slot order; a duplicated player shows up twice."""
        return [pid for group in self.all_groups for pid in group.player_ids]

    def participants(self) -> List[Participant]:
        return [p for group in self.all_groups for p in group.players]

    def total_participant_count(self) -> int:
        return sum(group.size for group in self.all_groups)

    def group_count(self) -> int:
        return len(self.early) + len(self.late)

    def find_group(self, participant_id: str) -> Optional[Group]:
        for group in self.all_groups:
            if group.contains(participant_id):
                return group
        return None

    def is_empty(self) -> bool:
        return self.group_count() == 0


@dataclass
class Occurrence:
    """One scheduled night of the league (a week) and its availability answers."""
    id: str
    season_id: str
    number: int = 1
    date: Optional[date] = None
    availability: AvailabilityRecord = field(default_factory=AvailabilityRecord)


# Violation types reported by the validator
NOT_IN_AVAILABLE_SET = "not_in_available_set"
DUPLICATE_ASSIGNMENT = "duplicate_assignment"
PREFERENCE_CONFLICT = "preference_conflict"
AVAILABILITY_NO_DATA = "availability_no_data"
AVAILABILITY_UNAVAILABLE = "availability_unavailable"

AVAILABILITY_VIOLATIONS = (AVAILABILITY_NO_DATA, AVAILABILITY_UNAVAILABLE)
# Violations no caller may override at finalization
BLOCKING_VIOLATIONS = AVAILABILITY_VIOLATIONS + (NOT_IN_AVAILABLE_SET,)


@dataclass
class ScheduleViolation:
    violation_type: str
    description: str
    participant_id: Optional[str] = None
    participant_name: Optional[str] = None
    time_slot: Optional[TimeSlot] = None
    group_position: Optional[int] = None
    availability_status: Optional[bool] = None

    @property
    def is_availability_violation(self) -> bool:
        return self.violation_type in AVAILABILITY_VIOLATIONS


@dataclass
class ScheduleValidationResult:
    is_valid: bool = True
    violations: List[ScheduleViolation] = field(default_factory=list)

    def add_violation(self, violation: ScheduleViolation):
        self.violations.append(violation)
        self.is_valid = False

    @property
    def errors(self) -> List[str]:
        return [v.description for v in self.violations]

    @property
    def availability_violations(self) -> List[ScheduleViolation]:
        return [v for v in self.violations if v.is_availability_violation]

    @property
    def blocking_violations(self) -> List[ScheduleViolation]:
        return [v for v in self.violations if v.violation_type in BLOCKING_VIOLATIONS]

    @property
    def blocks_finalization(self) -> bool:
        return bool(self.blocking_violations)

    def violations_of(self, violation_type: str) -> List[ScheduleViolation]:
        return [v for v in self.violations if v.violation_type == violation_type]

    def get_summary(self) -> str:
        summary = f"Schedule Valid: {self.is_valid}\n"
        summary += f"Violations: {len(self.violations)}\n"
        summary += f"Availability Violations: {len(self.availability_violations)}\n"
        for violation in self.violations:
            summary += f"  - {violation.violation_type}: {violation.description}\n"
        return summary


@dataclass
class GenerationStep:
    step: str
    success: bool = True
    details: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class FilteringDecision:
    participant_id: str
    participant_name: str
    availability_status: Optional[bool]
    decision: str  # "included" or "excluded"
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class GenerationTrace:
    """Ordered record of what happened during one generation run."""
    occurrence_id: str
    season_id: Optional[str] = None
    steps: List[GenerationStep] = field(default_factory=list)
    filtering_decisions: List[FilteringDecision] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    def record(self, step: str, details: Optional[Dict[str, Any]] = None,
               success: bool = True, error: Optional[str] = None) -> GenerationStep:
        entry = GenerationStep(step=step, success=success, details=dict(details or {}), error=error)
        self.steps.append(entry)
        if error:
            self.errors.append(error)
        return entry

    def mark_complete(self):
        self.finished_at = datetime.now()

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def failed_steps(self) -> List[GenerationStep]:
        return [s for s in self.steps if not s.success]


@dataclass
class GenerationResult:
    schedule: Schedule
    trace: GenerationTrace
