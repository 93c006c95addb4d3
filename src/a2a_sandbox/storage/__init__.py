"""Persistence layer: the storage contract and its backends."""

from a2a_sandbox.storage.base import StorageBackend
from a2a_sandbox.storage.memory import MemoryStorage
from a2a_sandbox.storage.models import AgentRecord, Schedule, TaskRecord
from a2a_sandbox.storage.seed import get_seed_summary, seed_database
from a2a_sandbox.storage.sqlite import SQLiteStorage

__all__ = [
    "AgentRecord",
    "MemoryStorage",
    "SQLiteStorage",
    "Schedule",
    "StorageBackend",
    "TaskRecord",
    "get_seed_summary",
    "seed_database",
]
