"""Task management for A2A protocol."""

import asyncio
import weakref
from typing import Any

from a2a_sandbox.errors import InvalidStateTransitionError, TaskNotFoundError
from a2a_sandbox.logging import get_logger
from a2a_sandbox.protocols.a2a.models import (
    Artifact,
    Message,
    Task,
    TaskState,
    TaskStatus,
)
from a2a_sandbox.protocols.a2a.states import can_transition
from a2a_sandbox.storage.base import StorageBackend
from a2a_sandbox.storage.models import TaskRecord
from a2a_sandbox.utils.ids import generate_artifact_id, generate_task_id
from a2a_sandbox.utils.timeutils import current_timestamp

logger = get_logger(__name__)


class TaskStore:
    """Manages task lifecycle on top of a storage backend.

    The store validates state transitions but does not serialize callers;
    code that mutates a task should hold :meth:`lock` for that task. Locks
    are weakly held and disappear once no caller references them.
    """

    def __init__(self, storage: StorageBackend):
        """Initialize task store.

        Args:
            storage: Backend holding tasks, messages and artifacts
        """
        self.storage = storage
        self._task_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock(self, task_id: str) -> asyncio.Lock:
        """Per-task mutex serializing mutations of one task."""
        lock = self._task_locks.get(task_id)
        if lock is None:
            lock = asyncio.Lock()
            self._task_locks[task_id] = lock
        return lock

    async def has_task(self, task_id: str) -> bool:
        """Check whether a task exists without hydrating it."""
        return await self.storage.get_task(task_id) is not None

    async def create_task(
        self,
        id: str | None = None,
        context_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Task:
        """Create a new task in the ``submitted`` state.

        Args:
            id: Task identifier (generated when absent)
            context_id: Context identifier grouping related tasks
            metadata: Optional task metadata

        Returns:
            Created task
        """
        now = current_timestamp()
        record = TaskRecord(
            id=id or generate_task_id(),
            contextId=context_id,
            status=TaskStatus(state=TaskState.SUBMITTED, timestamp=now),
            metadata=dict(metadata or {}),
            createdAt=now,
            updatedAt=now,
        )
        await self.storage.insert_task(record)

        logger.info("Task created", task_id=record.id, context_id=context_id)
        return Task(
            id=record.id,
            contextId=record.contextId,
            status=record.status,
            metadata=record.metadata,
        )

    async def get_task(self, task_id: str, history_length: int | None = None) -> Task | None:
        """Get a fully hydrated task.

        Args:
            task_id: Task identifier
            history_length: Keep only the most recent N history entries

        Returns:
            Task if found, None otherwise
        """
        record = await self.storage.get_task(task_id)
        if record is None:
            return None

        history = await self.storage.list_messages(task_id, history_length)
        artifacts = await self.storage.list_artifacts(task_id)
        return Task(
            id=record.id,
            contextId=record.contextId,
            status=record.status,
            history=history,
            artifacts=artifacts,
            metadata=record.metadata,
        )

    async def update_task(
        self,
        task_id: str,
        status: TaskStatus | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Task:
        """Replace the status and/or shallow-merge metadata.

        Args:
            task_id: Task identifier
            status: New status (replaces the current one wholesale)
            metadata: Keys to merge into the existing metadata

        Returns:
            Updated task

        Raises:
            TaskNotFoundError: If the task does not exist
            InvalidStateTransitionError: If the state change is not allowed
        """
        record = await self.storage.get_task(task_id)
        if record is None:
            raise TaskNotFoundError(task_id)

        now = current_timestamp()
        if status is not None:
            current = record.status.state
            if not can_transition(current, status.state):
                raise InvalidStateTransitionError(task_id, current.value, status.state.value)
            if status.timestamp is None:
                status = status.model_copy(update={"timestamp": now})

        merged = None
        if metadata is not None:
            merged = {**record.metadata, **metadata}

        await self.storage.update_task(task_id, now, status=status, metadata=merged)

        if status is not None:
            logger.info(
                "Task status updated",
                task_id=task_id,
                previous=record.status.state.value,
                state=status.state.value,
            )
        task = await self.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def delete_task(self, task_id: str) -> bool:
        """Delete a task together with its messages and artifacts."""
        deleted = await self.storage.delete_task(task_id)
        self._task_locks.pop(task_id, None)
        if deleted:
            logger.info("Task deleted", task_id=task_id)
        return deleted

    async def add_message(self, task_id: str, message: Message) -> None:
        """Append a message to task history.

        Raises:
            TaskNotFoundError: If the task does not exist
        """
        if await self.storage.get_task(task_id) is None:
            raise TaskNotFoundError(task_id)

        await self.storage.append_message(task_id, message, current_timestamp())
        logger.debug("Message added to task", task_id=task_id, role=message.role.value)

    async def add_artifact(self, task_id: str, artifact: Artifact) -> Artifact:
        """Append an artifact, assigning an id when it has none.

        Raises:
            TaskNotFoundError: If the task does not exist
        """
        if await self.storage.get_task(task_id) is None:
            raise TaskNotFoundError(task_id)

        if artifact.id is None:
            artifact = artifact.model_copy(update={"id": generate_artifact_id()})
        await self.storage.append_artifact(task_id, artifact, current_timestamp())

        logger.info("Task artifact added", task_id=task_id, artifact_id=artifact.id)
        return artifact

    async def get_messages(self, task_id: str, limit: int | None = None) -> list[Message]:
        """Messages oldest first; ``limit`` keeps only the most recent ones."""
        return await self.storage.list_messages(task_id, limit)

    async def get_artifacts(self, task_id: str) -> list[Artifact]:
        """Artifacts oldest first."""
        return await self.storage.list_artifacts(task_id)

    async def list_tasks(
        self,
        context_id: str | None = None,
        state: TaskState | None = None,
    ) -> list[Task]:
        """List tasks, newest first, without history or artifacts.

        Args:
            context_id: Filter by context ID
            state: Filter by task state
        """
        records = await self.storage.list_tasks(context_id=context_id, state=state)
        return [
            Task(
                id=record.id,
                contextId=record.contextId,
                status=record.status,
                metadata=record.metadata,
            )
            for record in records
        ]
