"""
Exception hierarchy for schedule generation and finalization.
"""

from typing import Any, Dict, Optional


class SchedulingError(Exception):
    """Base class for every error raised by the scheduling engine."""

    # Set by the generator to the trace of the failed run
    trace = None


class ScheduleInputError(SchedulingError, ValueError):
    """Caller supplied input that breaks a generation precondition."""


class ScheduleConsistencyError(SchedulingError, RuntimeError):
    """An internal invariant was broken while building a schedule."""

    def __init__(self, message: str, step: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.step = step
        self.details = details or {}

    def __str__(self):
        return f"[{self.step}] {self.args[0]}"


class FinalizationRefusedError(SchedulingError):
    """Finalization was blocked by validation findings."""

    def __init__(self, message: str, result):
        super().__init__(message)
        self.result = result
