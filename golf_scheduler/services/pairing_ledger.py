"""
Pairing history ledger: how often two players have shared a group in a season.

All operations are coroutines so storage-backed ledgers can do real I/O.
Increments are read-modify-write, so every ledger serializes them per season.
"""

import asyncio
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, List, Tuple

from golf_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)


def pair_key(participant_a: str, participant_b: str) -> Tuple[str, str]:
    """Order-independent key for a pair of player ids (smaller id first)."""
    if participant_a <= participant_b:
        return participant_a, participant_b
    return participant_b, participant_a


def validate_pair(participant_a: str, participant_b: str):
    if not participant_a or not participant_a.strip():
        raise ValueError("First player ID is required")
    if not participant_b or not participant_b.strip():
        raise ValueError("Second player ID is required")
    if participant_a == participant_b:
        raise ValueError("Cannot pair a player with themselves")


class PairingLedger(ABC):
    """Season-scoped pairing counters."""

    def __init__(self):
        self._season_locks: Dict[str, asyncio.Lock] = {}

    def season_lock(self, season_id: str) -> asyncio.Lock:
        lock = self._season_locks.get(season_id)
        if lock is None:
            lock = asyncio.Lock()
            self._season_locks[season_id] = lock
        return lock

    @abstractmethod
    async def count(self, season_id: str, participant_a: str, participant_b: str) -> int:
        """Times the two players have shared a group this season (0 for a self-pair)."""

    @abstractmethod
    async def increment(self, season_id: str, participant_a: str, participant_b: str) -> int:
        """Record one more shared group and return the new count."""

    @abstractmethod
    async def reset(self, season_id: str):
        """Forget every pairing for the season."""

    @abstractmethod
    async def all_pairings_for(self, season_id: str, participant_id: str) -> List[Tuple[str, int]]:
        """(partner id, count) for every recorded partner, most frequent first."""


class InMemoryPairingLedger(PairingLedger):
    """Dictionary-backed ledger, used in tests and single-process deployments."""

    def __init__(self, pairings: Dict[str, Dict[Tuple[str, str], int]] = None):
        super().__init__()
        self._pairings: Dict[str, Dict[Tuple[str, str], int]] = defaultdict(dict)
        for season_id, counts in (pairings or {}).items():
            for (a, b), value in counts.items():
                if not isinstance(value, int) or value < 0:
                    raise ValueError(
                        f"Pairing count must be a non-negative integer, got: {value} for {a}-{b}"
                    )
                self._pairings[season_id][pair_key(a, b)] = value

    async def count(self, season_id: str, participant_a: str, participant_b: str) -> int:
        if participant_a == participant_b:
            return 0
        return self._pairings.get(season_id, {}).get(pair_key(participant_a, participant_b), 0)

    async def increment(self, season_id: str, participant_a: str, participant_b: str) -> int:
        validate_pair(participant_a, participant_b)
        async with self.season_lock(season_id):
            key = pair_key(participant_a, participant_b)
            current = self._pairings[season_id].get(key, 0)
            self._pairings[season_id][key] = current + 1
            return current + 1

    async def reset(self, season_id: str):
        async with self.season_lock(season_id):
            self._pairings.pop(season_id, None)
        logger.info("Reset pairing history for season %s", season_id)

    async def all_pairings_for(self, season_id: str, participant_id: str) -> List[Tuple[str, int]]:
        result = []
        for (a, b), value in self._pairings.get(season_id, {}).items():
            if a == participant_id:
                result.append((b, value))
            elif b == participant_id:
                result.append((a, value))
        return sorted(result, key=lambda item: item[1], reverse=True)

    def snapshot(self, season_id: str) -> Dict[Tuple[str, str], int]:
        return dict(self._pairings.get(season_id, {}))
