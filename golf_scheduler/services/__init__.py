"""
Services for availability resolution, group formation, validation, and pairing history.
"""

from .availability import AvailabilityResolver, AvailabilityResolution, AvailabilityCoverage
from .balancer import TimeSlotBalancer, SlotAssignment
from .optimizer import FoursomeOptimizer
from .assembler import ScheduleAssembler
from .validator import ScheduleValidator
from .pairing_ledger import PairingLedger, InMemoryPairingLedger, pair_key
from .pairing_tracker import PairingHistoryTracker, PairingSnapshot, PairingMetrics
from .generator import ScheduleGenerator, ScheduleGeneratorOptions

__all__ = [
    "AvailabilityResolver",
    "AvailabilityResolution",
    "AvailabilityCoverage",
    "TimeSlotBalancer",
    "SlotAssignment",
    "FoursomeOptimizer",
    "ScheduleAssembler",
    "ScheduleValidator",
    "PairingLedger",
    "InMemoryPairingLedger",
    "pair_key",
    "PairingHistoryTracker",
    "PairingSnapshot",
    "PairingMetrics",
    "ScheduleGenerator",
    "ScheduleGeneratorOptions",
]
