"""
Foursome optimizer: forms groups of up to four players for one time slot.

Without pairing history the pool is chunked in order. With a pairing snapshot
the optimizer repeatedly pulls out the four players who have played together
least, until fewer than four remain.

Picking the best four from n players means scoring C(n, 4) candidates, which
grows as n^4 / 24. Pools up to MAX_EXHAUSTIVE_POOL_SIZE are enumerated;
larger pools are handed to the OR-Tools CP-SAT solver, with a greedy
least-paired heuristic if the solver comes back empty. A pool with no shared
history yields its first four players on every path; otherwise, among
equally scored groups, the solver may pick a different one than enumeration.
"""

from ortools.sat.python import cp_model
from typing import List, Optional, Tuple, Iterator, Sequence

from golf_scheduler.models import Participant, Group, TimeSlot
from golf_scheduler.services.pairing_tracker import PairingSnapshot
from golf_scheduler.core.config import (
    GROUP_SIZE, OPTIMIZE_PAIRINGS, OPTIMIZATION_STRATEGY, OPTIMIZATION_STRATEGIES,
    MAX_EXHAUSTIVE_POOL_SIZE, CP_SAT_TIME_LIMIT_SECONDS, CP_SAT_WORKERS
)
from golf_scheduler.core.exceptions import ScheduleConsistencyError
from golf_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)


def iter_combinations(n: int, k: int) -> Iterator[Tuple[int, ...]]:
    """
    Yield every k-combination of range(n) in lexicographic order.

    Works on a single index array that is advanced in place.
    """
    if k < 0 or k > n:
        return
    indices = list(range(k))
    yield tuple(indices)
    while True:
        # Rightmost index that can still move right
        i = k - 1
        while i >= 0 and indices[i] == i + n - k:
            i -= 1
        if i < 0:
            return
        indices[i] += 1
        for j in range(i + 1, k):
            indices[j] = indices[j - 1] + 1
        yield tuple(indices)


class FoursomeOptimizer:
    """
    Builds the ordered list of groups for one time slot.

    Groups are positioned 0..k-1 in the order they are formed; every player
    of the pool lands in exactly one group.
    """

    def __init__(self, optimize_pairings: bool = OPTIMIZE_PAIRINGS,
                 strategy: str = OPTIMIZATION_STRATEGY,
                 max_exhaustive_pool_size: int = MAX_EXHAUSTIVE_POOL_SIZE,
                 time_limit_seconds: float = CP_SAT_TIME_LIMIT_SECONDS,
                 num_workers: int = CP_SAT_WORKERS):
        if strategy not in OPTIMIZATION_STRATEGIES:
            raise ValueError(
                f"Unknown optimization strategy {strategy!r}; expected one of {OPTIMIZATION_STRATEGIES}"
            )
        self.optimize_pairings = optimize_pairings
        self.strategy = strategy
        self.max_exhaustive_pool_size = max_exhaustive_pool_size
        self.time_limit_seconds = time_limit_seconds
        self.num_workers = num_workers

    def create_groups(self, players: Sequence[Participant], time_slot: TimeSlot,
                      snapshot: Optional[PairingSnapshot] = None) -> List[Group]:
        """
        Form the groups for a time slot.

        Args:
            players: The slot's pool, in assignment order
            time_slot: Slot tag stamped on every group
            snapshot: Pairing counts for the pool; None selects in-order chunking

        Returns:
            Groups covering every player exactly once
        """
        players = list(players)
        self._check_pool(players, time_slot)

        if not players:
            return []

        if self.optimize_pairings and snapshot is not None:
            logger.debug("Optimizing %d %s players (season %s)", len(players), time_slot.value, snapshot.season_id)
            groups = self._optimized_groups(players, time_slot, snapshot)
        else:
            groups = self._chunked_groups(players, time_slot)

        covered = sum(group.size for group in groups)
        if covered != len(players):
            raise ScheduleConsistencyError(
                f"Groups cover {covered} players but the {time_slot.value} pool has {len(players)}",
                step="create_groups",
                details={"time_slot": time_slot.value, "pool": len(players), "covered": covered},
            )
        return groups

    def _check_pool(self, players: List[Participant], time_slot: TimeSlot):
        seen = set()
        for index, player in enumerate(players):
            if player.id in seen:
                raise ScheduleConsistencyError(
                    f"Duplicate player ID found in {time_slot.value} pool: {player.id}",
                    step="create_groups",
                    details={"player_id": player.id, "index": index},
                )
            seen.add(player.id)

    def _chunked_groups(self, players: List[Participant], time_slot: TimeSlot) -> List[Group]:
        groups = []
        for position, start in enumerate(range(0, len(players), GROUP_SIZE)):
            groups.append(Group(
                players=players[start:start + GROUP_SIZE],
                time_slot=time_slot,
                position=position,
            ))
        return groups

    def _optimized_groups(self, players: List[Participant], time_slot: TimeSlot,
                          snapshot: PairingSnapshot) -> List[Group]:
        groups = []
        remaining = list(players)

        while len(remaining) >= GROUP_SIZE:
            chosen, score = self.optimal_group(remaining, snapshot)
            self._check_candidate(chosen, remaining)

            groups.append(Group(players=chosen, time_slot=time_slot, position=len(groups)))
            logger.debug(
                "Formed %s group %d with score %d: %s",
                time_slot.value, len(groups), score, ", ".join(p.full_name for p in chosen),
            )

            chosen_ids = {p.id for p in chosen}
            before = len(remaining)
            remaining = [p for p in remaining if p.id not in chosen_ids]
            if len(remaining) != before - len(chosen):
                raise ScheduleConsistencyError(
                    f"Player removal failed: expected {before - len(chosen)} remaining, got {len(remaining)}",
                    step="remove_grouped_players",
                    details={"before": before, "after": len(remaining), "group_size": len(chosen)},
                )

        if remaining:
            groups.append(Group(players=remaining, time_slot=time_slot, position=len(groups)))
        return groups

    def _check_candidate(self, chosen: List[Participant], remaining: List[Participant]):
        if not chosen:
            raise ScheduleConsistencyError(
                "Optimizer returned an empty group",
                step="select_group",
                details={"remaining": len(remaining)},
            )
        if len(chosen) > GROUP_SIZE:
            raise ScheduleConsistencyError(
                f"Optimizer returned too many players: {len(chosen)}",
                step="select_group",
                details={"group_size": len(chosen)},
            )
        remaining_ids = {p.id for p in remaining}
        for player in chosen:
            if player.id not in remaining_ids:
                raise ScheduleConsistencyError(
                    f"Player {player.id} in optimal group is not in remaining players",
                    step="select_group",
                    details={"player_id": player.id, "player_name": player.full_name},
                )

    def score_group(self, players: Sequence[Participant], snapshot: PairingSnapshot) -> int:
        return snapshot.score(players)

    def optimal_group(self, pool: Sequence[Participant],
                      snapshot: PairingSnapshot) -> Tuple[List[Participant], int]:
        """
        Choose the four players of the pool with the lowest pairing score.

        Returns:
            (players in pool order, score). A pool of four or fewer is returned whole.
        """
        pool = list(pool)
        if len(pool) <= GROUP_SIZE:
            return pool, snapshot.score(pool)

        strategy = self.strategy
        if strategy == "auto":
            strategy = "exhaustive" if len(pool) <= self.max_exhaustive_pool_size else "cp_sat"

        if strategy == "exhaustive":
            return self._exhaustive_best(pool, snapshot)

        if strategy == "cp_sat":
            result = self._cp_sat_best(pool, snapshot)
            if result is not None:
                return result
            logger.warning("CP-SAT found no group for a pool of %d; using greedy selection", len(pool))

        return self._greedy_best(pool, snapshot)

    def _weight_matrix(self, pool: List[Participant], snapshot: PairingSnapshot) -> List[List[int]]:
        n = len(pool)
        weights = [[0] * n for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                value = snapshot.count(pool[i].id, pool[j].id)
                weights[i][j] = value
                weights[j][i] = value
        return weights

    def _exhaustive_best(self, pool: List[Participant],
                         snapshot: PairingSnapshot) -> Tuple[List[Participant], int]:
        """First minimum over every 4-combination, in lexicographic index order."""
        weights = self._weight_matrix(pool, snapshot)
        best_indices = None
        best_score = None

        for a, b, c, d in iter_combinations(len(pool), GROUP_SIZE):
            score = (weights[a][b] + weights[a][c] + weights[a][d]
                     + weights[b][c] + weights[b][d] + weights[c][d])
            if best_score is None or score < best_score:
                best_score = score
                best_indices = (a, b, c, d)
                if score == 0:
                    break

        return [pool[i] for i in best_indices], best_score

    def _cp_sat_best(self, pool: List[Participant],
                     snapshot: PairingSnapshot) -> Optional[Tuple[List[Participant], int]]:
        """Pick four players with CP-SAT: choose exactly four, minimize shared-pair weight."""
        weights = self._weight_matrix(pool, snapshot)
        n = len(pool)

        model = cp_model.CpModel()
        chosen = [model.NewBoolVar(f"chosen_{i}") for i in range(n)]
        model.Add(sum(chosen) == GROUP_SIZE)

        objective_terms = []
        for i in range(n):
            for j in range(i + 1, n):
                if weights[i][j] == 0:
                    continue
                together = model.NewBoolVar(f"together_{i}_{j}")
                model.Add(together >= chosen[i] + chosen[j] - 1)
                objective_terms.append(weights[i][j] * together)

        if not objective_terms:
            # No history in this pool: every four ties, so take the first four
            return pool[:GROUP_SIZE], 0

        model.Minimize(sum(objective_terms))
        for i in range(n):
            model.AddHint(chosen[i], 1 if i < GROUP_SIZE else 0)

        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = self.time_limit_seconds
        solver.parameters.num_workers = self.num_workers
        solver.parameters.random_seed = 0
        solver.parameters.log_search_progress = False

        status = solver.Solve(model)
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            logger.info("CP-SAT status %s for pool of %d", solver.StatusName(status), n)
            return None

        selected = [pool[i] for i in range(n) if solver.Value(chosen[i])]
        if len(selected) != GROUP_SIZE:
            return None
        return selected, snapshot.score(selected)

    def _greedy_best(self, pool: List[Participant],
                     snapshot: PairingSnapshot) -> Tuple[List[Participant], int]:
        """Seed with the first player, then keep adding whoever adds the least pairing weight."""
        weights = self._weight_matrix(pool, snapshot)
        selected = [0]
        candidates = list(range(1, len(pool)))

        while len(selected) < GROUP_SIZE:
            best = min(candidates, key=lambda c: sum(weights[c][s] for s in selected))
            selected.append(best)
            candidates.remove(best)

        selected.sort()
        players = [pool[i] for i in selected]
        return players, snapshot.score(players)
