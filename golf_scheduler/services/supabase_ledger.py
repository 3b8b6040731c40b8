"""
Supabase-backed pairing history ledger.

Rows live in the PAIRING_HISTORY_TABLE table:

    season_id | player_a_id | player_b_id | count

with player_a_id < player_b_id and a unique key on (season_id, player_a_id, player_b_id).
"""

from typing import List, Optional, Tuple

from supabase import AsyncClient, acreate_client

from golf_scheduler.services.pairing_ledger import PairingLedger, pair_key, validate_pair
from golf_scheduler.core.config import SUPABASE_URL, SUPABASE_KEY, PAIRING_HISTORY_TABLE
from golf_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)


class SupabasePairingLedger(PairingLedger):
    def __init__(self, client: AsyncClient, table: str = PAIRING_HISTORY_TABLE):
        super().__init__()
        self.client = client
        self.table = table

    @classmethod
    async def connect(cls, url: Optional[str] = None, key: Optional[str] = None,
                      table: str = PAIRING_HISTORY_TABLE) -> "SupabasePairingLedger":
        url = url or SUPABASE_URL
        key = key or SUPABASE_KEY
        if not url or not key:
            raise ValueError(
                "Supabase credentials not found. Please set SUPABASE_URL and SUPABASE_KEY"
            )
        client = await acreate_client(url, key)
        return cls(client, table)

    async def count(self, season_id: str, participant_a: str, participant_b: str) -> int:
        if participant_a == participant_b:
            return 0
        first, second = pair_key(participant_a, participant_b)
        response = await (
            self.client.table(self.table)
            .select("count")
            .eq("season_id", season_id)
            .eq("player_a_id", first)
            .eq("player_b_id", second)
            .execute()
        )
        if not response.data:
            return 0
        return int(response.data[0]["count"])

    async def increment(self, season_id: str, participant_a: str, participant_b: str) -> int:
        validate_pair(participant_a, participant_b)
        first, second = pair_key(participant_a, participant_b)

        # Read then write: only safe while the season lock is held
        async with self.season_lock(season_id):
            current = await self.count(season_id, first, second)
            new_count = current + 1
            await (
                self.client.table(self.table)
                .upsert(
                    {
                        "season_id": season_id,
                        "player_a_id": first,
                        "player_b_id": second,
                        "count": new_count,
                    },
                    on_conflict="season_id,player_a_id,player_b_id",
                )
                .execute()
            )
        logger.debug("Pairing %s-%s in season %s now %d", first, second, season_id, new_count)
        return new_count

    async def reset(self, season_id: str):
        async with self.season_lock(season_id):
            await self.client.table(self.table).delete().eq("season_id", season_id).execute()
        logger.info("Reset pairing history for season %s", season_id)

    async def all_pairings_for(self, season_id: str, participant_id: str) -> List[Tuple[str, int]]:
        response = await (
            self.client.table(self.table)
            .select("player_a_id, player_b_id, count")
            .eq("season_id", season_id)
            .or_(f"player_a_id.eq.{participant_id},player_b_id.eq.{participant_id}")
            .execute()
        )
        result = []
        for row in response.data:
            partner = row["player_b_id"] if row["player_a_id"] == participant_id else row["player_a_id"]
            result.append((partner, int(row["count"])))
        return sorted(result, key=lambda item: item[1], reverse=True)
