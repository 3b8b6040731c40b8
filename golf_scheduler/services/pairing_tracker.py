"""
Pairing history tracking: records finalized schedules in the ledger and reads
pairing counts back out for the optimizer.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Sequence
import itertools

from golf_scheduler.models import Participant, Group, Schedule
from golf_scheduler.services.pairing_ledger import PairingLedger, pair_key
from golf_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class PairingSnapshot:
    """Pairing counts between a fixed set of players, read once from the ledger."""
    season_id: str
    counts: Dict[Tuple[str, str], int] = field(default_factory=dict)

    def count(self, participant_a: str, participant_b: str) -> int:
        if participant_a == participant_b:
            return 0
        return self.counts.get(pair_key(participant_a, participant_b), 0)

    def score(self, players: Sequence[Participant]) -> int:
        """Sum of pairing counts over every pair in the group (lower is better)."""
        return sum(self.count(a.id, b.id) for a, b in itertools.combinations(players, 2))


@dataclass
class PairingMetrics:
    pairing_counts: Dict[Tuple[str, str], int] = field(default_factory=dict)
    min_pairings: int = 0
    max_pairings: int = 0
    average_pairings: float = 0.0


class PairingHistoryTracker:
    def __init__(self, ledger: PairingLedger):
        self.ledger = ledger

    async def track_schedule_pairings(self, season_id: str, schedule: Schedule) -> int:
        """
        Record every intra-group pair of a schedule in the ledger.

        Calls are awaited one after another. Tracking the same schedule twice
        adds two to every pair.

        Returns:
            Number of pair increments written
        """
        written = 0
        for group in schedule.all_groups:
            written += await self.track_group_pairings(season_id, group)
        logger.info(
            "Tracked %d pairings from schedule %s (season %s)", written, schedule.id, season_id
        )
        return written

    async def track_group_pairings(self, season_id: str, group: Group) -> int:
        written = 0
        for a, b in group.pairs():
            await self.ledger.increment(season_id, a.id, b.id)
            written += 1
        return written

    async def get_pairing_count(self, season_id: str, participant_a: str, participant_b: str) -> int:
        return await self.ledger.count(season_id, participant_a, participant_b)

    async def get_all_pairings_for_player(self, season_id: str, participant_id: str) -> List[Tuple[str, int]]:
        return await self.ledger.all_pairings_for(season_id, participant_id)

    async def take_snapshot(self, season_id: str, players: Sequence[Participant]) -> PairingSnapshot:
        """Read the pairing count for every pair of the given players."""
        snapshot = PairingSnapshot(season_id=season_id)
        for a, b in itertools.combinations(players, 2):
            value = await self.ledger.count(season_id, a.id, b.id)
            if value:
                snapshot.counts[pair_key(a.id, b.id)] = value
        return snapshot

    async def score_group(self, season_id: str, players: Sequence[Participant]) -> int:
        snapshot = await self.take_snapshot(season_id, players)
        return snapshot.score(players)

    async def calculate_pairing_metrics(self, season_id: str, players: Sequence[Participant]) -> PairingMetrics:
        pairing_counts = {}
        for a, b in itertools.combinations(players, 2):
            pairing_counts[pair_key(a.id, b.id)] = await self.ledger.count(season_id, a.id, b.id)

        counts = list(pairing_counts.values())
        if not counts:
            return PairingMetrics()

        return PairingMetrics(
            pairing_counts=pairing_counts,
            min_pairings=min(counts),
            max_pairings=max(counts),
            average_pairings=sum(counts) / len(counts),
        )

    async def reset_pairing_history(self, season_id: str):
        await self.ledger.reset(season_id)
