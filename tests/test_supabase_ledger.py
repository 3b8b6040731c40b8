"""
Tests for the Supabase pairing ledger, run against an in-process fake client.
"""

import sys
import os
import asyncio
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from golf_scheduler.services import supabase_ledger
from golf_scheduler.services.supabase_ledger import SupabasePairingLedger


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Just enough of the postgrest query builder for the ledger."""

    def __init__(self, rows):
        self.rows = rows
        self.operation = None
        self.filters = []
        self.or_filter = None
        self.payload = None
        self.on_conflict = None

    def select(self, columns):
        self.operation = "select"
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def upsert(self, payload, on_conflict=None):
        self.operation = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def or_(self, expression):
        self.or_filter = expression
        return self

    def _matches(self, row):
        if not all(row[column] == value for column, value in self.filters):
            return False
        if self.or_filter:
            options = [part.split(".eq.") for part in self.or_filter.split(",")]
            return any(row[column] == value for column, value in options)
        return True

    async def execute(self):
        if self.operation == "upsert":
            keys = self.on_conflict.split(",")
            for row in self.rows:
                if all(row[k] == self.payload[k] for k in keys):
                    row.update(self.payload)
                    return FakeResponse([dict(row)])
            self.rows.append(dict(self.payload))
            return FakeResponse([dict(self.payload)])

        matched = [row for row in self.rows if self._matches(row)]
        if self.operation == "delete":
            for row in matched:
                self.rows.remove(row)
        return FakeResponse([dict(row) for row in matched])


class FakeSupabaseClient:
    def __init__(self):
        self.rows = []
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return FakeQuery(self.rows)


def test_increment_stores_ordered_pair():
    client = FakeSupabaseClient()
    ledger = SupabasePairingLedger(client, table="pairings")

    async def run():
        assert await ledger.increment("s1", "zoe", "amy") == 1
        assert await ledger.increment("s1", "amy", "zoe") == 2
        return await ledger.count("s1", "zoe", "amy")

    assert asyncio.run(run()) == 2
    assert client.rows == [{"season_id": "s1", "player_a_id": "amy", "player_b_id": "zoe", "count": 2}]
    assert set(client.tables) == {"pairings"}


def test_count_defaults_to_zero():
    ledger = SupabasePairingLedger(FakeSupabaseClient())

    async def run():
        return await ledger.count("s1", "a", "b"), await ledger.count("s1", "a", "a")

    assert asyncio.run(run()) == (0, 0)


def test_reset_only_touches_one_season():
    client = FakeSupabaseClient()
    ledger = SupabasePairingLedger(client)

    async def run():
        await ledger.increment("s1", "a", "b")
        await ledger.increment("s2", "a", "b")
        await ledger.reset("s1")
        return await ledger.count("s1", "a", "b"), await ledger.count("s2", "a", "b")

    assert asyncio.run(run()) == (0, 1)


def test_all_pairings_for_player():
    client = FakeSupabaseClient()
    client.rows.extend([
        {"season_id": "s1", "player_a_id": "a", "player_b_id": "b", "count": 1},
        {"season_id": "s1", "player_a_id": "a", "player_b_id": "c", "count": 3},
        {"season_id": "s1", "player_a_id": "b", "player_b_id": "c", "count": 7},
        {"season_id": "s2", "player_a_id": "a", "player_b_id": "d", "count": 5},
    ])
    ledger = SupabasePairingLedger(client)

    assert asyncio.run(ledger.all_pairings_for("s1", "c")) == [("b", 7), ("a", 3)]


def test_concurrent_increments_are_serialized():
    client = FakeSupabaseClient()
    ledger = SupabasePairingLedger(client)

    async def run():
        await asyncio.gather(*(ledger.increment("s1", "a", "b") for _ in range(20)))
        return await ledger.count("s1", "a", "b")

    assert asyncio.run(run()) == 20


def test_connect_requires_credentials(monkeypatch):
    monkeypatch.setattr(supabase_ledger, "SUPABASE_URL", "")
    monkeypatch.setattr(supabase_ledger, "SUPABASE_KEY", "")

    with pytest.raises(ValueError):
        asyncio.run(SupabasePairingLedger.connect())
