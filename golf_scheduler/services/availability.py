"""
Availability resolution for the Golf League Foursome Scheduler.
Filters a season roster down to the players explicitly available for one occurrence.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Iterable

from golf_scheduler.models import AvailabilityProvider, Participant, FilteringDecision
from golf_scheduler.core.config import (
    MIN_PLAYERS_FOR_FULL_GROUP, LOW_COVERAGE_PERCENT, FULL_COVERAGE_PERCENT
)
from golf_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)

REASON_NO_DATA = "no_data"
REASON_UNAVAILABLE = "unavailable"


@dataclass
class ExcludedParticipant:
    participant: Participant
    reason: str  # REASON_NO_DATA or REASON_UNAVAILABLE
    availability_status: Optional[bool] = None


@dataclass
class AvailabilityCoverage:
    """How much of the roster has answered for this occurrence."""
    total_players: int = 0
    players_with_data: int = 0
    players_without_data: int = 0
    coverage_percentage: int = 0
    issues: List[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.issues


@dataclass
class AvailabilityResolution:
    available: List[Participant] = field(default_factory=list)
    excluded: List[ExcludedParticipant] = field(default_factory=list)
    coverage: AvailabilityCoverage = field(default_factory=AvailabilityCoverage)
    decisions: List[FilteringDecision] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def missing_data(self) -> List[Participant]:
        return [e.participant for e in self.excluded if e.reason == REASON_NO_DATA]

    @property
    def unavailable(self) -> List[Participant]:
        return [e.participant for e in self.excluded if e.reason == REASON_UNAVAILABLE]

    @property
    def has_enough_players(self) -> bool:
        return len(self.available) >= MIN_PLAYERS_FOR_FULL_GROUP


class AvailabilityResolver:
    """
    Resolves which roster players may be scheduled for an occurrence.

    Only an explicit True counts as available. Players without an answer and
    players who answered False are excluded with a distinguishable reason.
    """

    def resolve(self, roster: Iterable[Participant],
                availability: AvailabilityProvider) -> AvailabilityResolution:
        """
        Filter a roster by availability.

        Args:
            roster: All players in the season, in roster order
            availability: Tri-state availability answers for the occurrence

        Returns:
            AvailabilityResolution with the available players (roster order,
            deduplicated by id) and the reasons for every exclusion
        """
        resolution = AvailabilityResolution()
        players = self._deduplicate(roster)

        for player in players:
            status = availability.status_of(player.id)

            if availability.is_available(player.id):
                resolution.available.append(player)
                resolution.decisions.append(FilteringDecision(
                    participant_id=player.id,
                    participant_name=player.full_name,
                    availability_status=status,
                    decision="included",
                    reason="Player explicitly marked as available",
                ))
            elif not availability.has_entry(player.id):
                resolution.excluded.append(ExcludedParticipant(player, REASON_NO_DATA, None))
                resolution.decisions.append(FilteringDecision(
                    participant_id=player.id,
                    participant_name=player.full_name,
                    availability_status=None,
                    decision="excluded",
                    reason="No availability data for this occurrence",
                ))
            else:
                resolution.excluded.append(ExcludedParticipant(player, REASON_UNAVAILABLE, status))
                resolution.decisions.append(FilteringDecision(
                    participant_id=player.id,
                    participant_name=player.full_name,
                    availability_status=status,
                    decision="excluded",
                    reason=f"Player marked as unavailable (status: {status})",
                ))

        resolution.coverage = self.check_coverage(players, availability)
        if not resolution.has_enough_players:
            resolution.recommendations = self._insufficient_player_guidance(resolution, len(players))

        logger.info(
            "Resolved availability: %d available, %d without data, %d unavailable",
            len(resolution.available), len(resolution.missing_data), len(resolution.unavailable),
        )
        for issue in resolution.coverage.issues:
            logger.warning(issue)

        return resolution

    def available_participants(self, roster: Iterable[Participant],
                               availability: AvailabilityProvider) -> List[Participant]:
        return self.resolve(roster, availability).available

    def check_coverage(self, roster: List[Participant],
                       availability: AvailabilityProvider) -> AvailabilityCoverage:
        """Measure how many roster players have any availability answer."""
        with_data = sum(1 for p in roster if availability.has_entry(p.id))
        total = len(roster)
        percentage = round(with_data / total * 100) if total else 0

        coverage = AvailabilityCoverage(
            total_players=total,
            players_with_data=with_data,
            players_without_data=total - with_data,
            coverage_percentage=percentage,
        )
        if total == 0:
            return coverage

        if percentage < LOW_COVERAGE_PERCENT:
            coverage.issues.append(
                f"Low availability data coverage: {percentage}% of players have availability data"
            )
        elif percentage < FULL_COVERAGE_PERCENT:
            coverage.issues.append(
                f"Incomplete availability data: {coverage.players_without_data} players missing availability data"
            )
        return coverage

    def _deduplicate(self, roster: Iterable[Participant]) -> List[Participant]:
        seen = set()
        players = []
        for player in roster:
            if player.id in seen:
                logger.debug("Dropping duplicate roster entry for %s", player.id)
                continue
            seen.add(player.id)
            players.append(player)
        return players

    def _insufficient_player_guidance(self, resolution: AvailabilityResolution,
                                      total_players: int) -> List[str]:
        recommendations = []
        missing = len(resolution.missing_data)
        unavailable = len(resolution.unavailable)
        available = len(resolution.available)

        if missing > 0:
            recommendations.append(f"Set availability data for {missing} players with missing data")
        if unavailable > 0 and available + missing >= MIN_PLAYERS_FOR_FULL_GROUP:
            recommendations.append(
                f"Consider contacting {unavailable} unavailable players to confirm their status"
            )
        if total_players < MIN_PLAYERS_FOR_FULL_GROUP:
            recommendations.append(
                f"Add more players to the season (current: {total_players}, "
                f"minimum needed: {MIN_PLAYERS_FOR_FULL_GROUP})"
            )
        if 0 < available < MIN_PLAYERS_FOR_FULL_GROUP:
            recommendations.append("Expect a partial group for this occurrence")
        return recommendations
