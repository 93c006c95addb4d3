"""Tests for sample data seeding."""

import pytest

from a2a_sandbox.storage import MemoryStorage, SQLiteStorage, get_seed_summary, seed_database
from a2a_sandbox.storage.seed import SEED_AGENTS, SEED_SCHEDULES
from tests.fixtures import TEST_DATE


class TestSeedDatabase:
    """Test seed_database."""

    @pytest.mark.asyncio
    async def test_seeds_roster_and_calendar(self):
        """Test five agents and nine schedule entries are inserted."""
        storage = MemoryStorage()

        assert await seed_database(storage, today=TEST_DATE) is True
        assert await get_seed_summary(storage) == {"agents": 5, "schedules": 9}
        assert [a.id for a in await storage.list_agents()] == [
            "alice",
            "bob",
            "carol",
            "pro-kun",
            "con-kun",
        ]

    @pytest.mark.asyncio
    async def test_idempotent(self):
        """Test a second call inserts nothing."""
        storage = MemoryStorage()
        await seed_database(storage, today=TEST_DATE)

        assert await seed_database(storage, today=TEST_DATE) is False
        assert await storage.count_schedules() == len(SEED_SCHEDULES)

    @pytest.mark.asyncio
    async def test_schedules_on_given_date(self, seeded_storage):
        """Test entries land on the requested date with their privacy flags."""
        carol = await seeded_storage.list_schedules("carol", TEST_DATE)
        assert [(s.title, s.startTime, s.isPrivate) for s in carol] == [
            ("Morning Yoga", "08:00", True),
            ("Strategy Meeting", "13:00", False),
            ("Interview", "16:00", False),
        ]

    @pytest.mark.asyncio
    async def test_endpoints(self, seeded_storage):
        """Test agent rows point at their JSON-RPC endpoints."""
        agent = await seeded_storage.get_agent("pro-kun")
        assert agent.endpoint == "/api/agents/pro-kun"
        assert agent.avatarColor == SEED_AGENTS[3]["avatarColor"]

    @pytest.mark.asyncio
    async def test_sqlite_reset_and_reseed(self, tmp_path):
        """Test a reset store can be seeded again."""
        storage = SQLiteStorage(tmp_path / "seed.db")
        await seed_database(storage, today=TEST_DATE)

        await storage.reset()
        assert await seed_database(storage, today=TEST_DATE) is True
        assert await get_seed_summary(storage) == {"agents": 5, "schedules": 9}
