"""Persistence contract consumed by the task store and the agent skills."""

from abc import ABC, abstractmethod
from typing import Any

from a2a_sandbox.protocols.a2a.models import Artifact, Message, TaskState, TaskStatus
from a2a_sandbox.storage.models import AgentRecord, Schedule, TaskRecord


class StorageBackend(ABC):
    """Durable storage for tasks, messages, artifacts, schedules and agents.

    Implementations must keep messages and artifacts in insertion order and
    must write a task's status together with its ``updatedAt`` marker.
    """

    # -- tasks --------------------------------------------------------------

    @abstractmethod
    async def insert_task(self, record: TaskRecord) -> TaskRecord:
        """Insert a new task row."""

    @abstractmethod
    async def get_task(self, task_id: str) -> TaskRecord | None:
        """Point lookup by id."""

    @abstractmethod
    async def update_task(
        self,
        task_id: str,
        updated_at: str,
        status: TaskStatus | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> TaskRecord | None:
        """Replace status and/or metadata in place. Returns None if missing."""

    @abstractmethod
    async def delete_task(self, task_id: str) -> bool:
        """Delete a task with its messages and artifacts."""

    @abstractmethod
    async def list_tasks(
        self,
        context_id: str | None = None,
        state: TaskState | None = None,
    ) -> list[TaskRecord]:
        """List tasks, newest first."""

    # -- messages / artifacts ----------------------------------------------

    @abstractmethod
    async def append_message(self, task_id: str, message: Message, timestamp: str) -> None:
        """Append to history and bump the task's ``updatedAt``."""

    @abstractmethod
    async def list_messages(self, task_id: str, limit: int | None = None) -> list[Message]:
        """Messages oldest first; with ``limit``, only the most recent ones."""

    @abstractmethod
    async def append_artifact(self, task_id: str, artifact: Artifact, timestamp: str) -> None:
        """Append an artifact (id already assigned) and bump ``updatedAt``."""

    @abstractmethod
    async def list_artifacts(self, task_id: str) -> list[Artifact]:
        """Artifacts oldest first."""

    # -- schedules ------------------------------------------------------------

    @abstractmethod
    async def insert_schedule(self, schedule: Schedule) -> Schedule:
        """Insert a schedule entry."""

    @abstractmethod
    async def get_schedule(self, schedule_id: str) -> Schedule | None:
        """Point lookup by id."""

    @abstractmethod
    async def list_schedules(self, agent_id: str, event_date: str) -> list[Schedule]:
        """One agent's entries for one date, ordered by start time."""

    @abstractmethod
    async def list_agent_schedules(self, agent_id: str) -> list[Schedule]:
        """All of one agent's entries, ordered by date then start time."""

    @abstractmethod
    async def count_schedules(self) -> int:
        """Total number of schedule entries."""

    # -- agents ---------------------------------------------------------------

    @abstractmethod
    async def insert_agent(self, agent: AgentRecord) -> AgentRecord:
        """Insert a roster entry."""

    @abstractmethod
    async def get_agent(self, agent_id: str) -> AgentRecord | None:
        """Point lookup by id."""

    @abstractmethod
    async def list_agents(self, active_only: bool = True) -> list[AgentRecord]:
        """Roster entries in insertion order."""

    @abstractmethod
    async def count_agents(self) -> int:
        """Number of roster entries."""

    # -- lifecycle ------------------------------------------------------------

    @abstractmethod
    async def reset(self) -> None:
        """Drop all stored data."""

    async def close(self) -> None:
        """Release resources held by the backend."""
        return None
