"""Shared pytest fixtures."""

import pytest

from a2a_sandbox.agents import ScheduleSkills
from a2a_sandbox.config import Settings
from a2a_sandbox.protocols.a2a.task_store import TaskStore
from a2a_sandbox.storage import MemoryStorage, seed_database
from tests.fixtures.factories import TEST_DATE


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment: memory storage, no LLM."""
    return Settings(
        storage_backend="memory",
        llm_enabled=False,
        seed_on_startup=True,
        base_url="http://testserver",
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def task_store(storage: MemoryStorage) -> TaskStore:
    return TaskStore(storage)


@pytest.fixture
def skills(storage: MemoryStorage) -> ScheduleSkills:
    return ScheduleSkills(storage)


@pytest.fixture
async def seeded_storage(storage: MemoryStorage) -> MemoryStorage:
    """Storage seeded with the sample roster, schedules placed on TEST_DATE."""
    await seed_database(storage, today=TEST_DATE)
    return storage
