"""In-process storage backend."""

from collections import defaultdict
from typing import Any

from a2a_sandbox.logging import get_logger
from a2a_sandbox.protocols.a2a.models import Artifact, Message, TaskState, TaskStatus
from a2a_sandbox.storage.base import StorageBackend
from a2a_sandbox.storage.models import AgentRecord, Schedule, TaskRecord

logger = get_logger(__name__)


class MemoryStorage(StorageBackend):
    """Dict-backed storage.

    Every method completes without suspending, so each call is atomic with
    respect to other coroutines on the event loop.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, TaskRecord] = {}
        self._messages: dict[str, list[Message]] = defaultdict(list)
        self._artifacts: dict[str, list[Artifact]] = defaultdict(list)
        self._schedules: dict[str, Schedule] = {}
        self._agents: dict[str, AgentRecord] = {}

    async def insert_task(self, record: TaskRecord) -> TaskRecord:
        self._tasks[record.id] = record.model_copy(deep=True)
        return record

    async def get_task(self, task_id: str) -> TaskRecord | None:
        record = self._tasks.get(task_id)
        return record.model_copy(deep=True) if record else None

    async def update_task(
        self,
        task_id: str,
        updated_at: str,
        status: TaskStatus | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> TaskRecord | None:
        record = self._tasks.get(task_id)
        if record is None:
            return None
        changes: dict[str, Any] = {"updatedAt": updated_at}
        if status is not None:
            changes["status"] = status
        if metadata is not None:
            changes["metadata"] = metadata
        record = record.model_copy(update=changes, deep=True)
        self._tasks[task_id] = record
        return record.model_copy(deep=True)

    async def delete_task(self, task_id: str) -> bool:
        self._messages.pop(task_id, None)
        self._artifacts.pop(task_id, None)
        return self._tasks.pop(task_id, None) is not None

    async def list_tasks(
        self,
        context_id: str | None = None,
        state: TaskState | None = None,
    ) -> list[TaskRecord]:
        # dicts keep insertion order; reversed gives newest first
        records = [
            record.model_copy(deep=True)
            for record in reversed(self._tasks.values())
            if (context_id is None or record.contextId == context_id)
            and (state is None or record.status.state == state)
        ]
        return records

    async def append_message(self, task_id: str, message: Message, timestamp: str) -> None:
        self._messages[task_id].append(message)
        self._touch(task_id, timestamp)

    async def list_messages(self, task_id: str, limit: int | None = None) -> list[Message]:
        messages = list(self._messages.get(task_id, []))
        if limit is not None:
            messages = messages[-limit:] if limit > 0 else []
        return messages

    async def append_artifact(self, task_id: str, artifact: Artifact, timestamp: str) -> None:
        self._artifacts[task_id].append(artifact.model_copy(deep=True))
        self._touch(task_id, timestamp)

    async def list_artifacts(self, task_id: str) -> list[Artifact]:
        return [a.model_copy(deep=True) for a in self._artifacts.get(task_id, [])]

    async def insert_schedule(self, schedule: Schedule) -> Schedule:
        self._schedules[schedule.id] = schedule.model_copy()
        return schedule

    async def get_schedule(self, schedule_id: str) -> Schedule | None:
        schedule = self._schedules.get(schedule_id)
        return schedule.model_copy() if schedule else None

    async def list_schedules(self, agent_id: str, event_date: str) -> list[Schedule]:
        matches = [
            s.model_copy()
            for s in self._schedules.values()
            if s.agentId == agent_id and s.eventDate == event_date
        ]
        return sorted(matches, key=lambda s: s.startTime)

    async def list_agent_schedules(self, agent_id: str) -> list[Schedule]:
        matches = [s.model_copy() for s in self._schedules.values() if s.agentId == agent_id]
        return sorted(matches, key=lambda s: (s.eventDate, s.startTime))

    async def count_schedules(self) -> int:
        return len(self._schedules)

    async def insert_agent(self, agent: AgentRecord) -> AgentRecord:
        self._agents[agent.id] = agent.model_copy()
        return agent

    async def get_agent(self, agent_id: str) -> AgentRecord | None:
        agent = self._agents.get(agent_id)
        return agent.model_copy() if agent else None

    async def list_agents(self, active_only: bool = True) -> list[AgentRecord]:
        return [
            a.model_copy() for a in self._agents.values() if a.isActive or not active_only
        ]

    async def count_agents(self) -> int:
        return len(self._agents)

    async def reset(self) -> None:
        self._tasks.clear()
        self._messages.clear()
        self._artifacts.clear()
        self._schedules.clear()
        self._agents.clear()
        logger.info("Memory storage reset")

    def _touch(self, task_id: str, timestamp: str) -> None:
        record = self._tasks.get(task_id)
        if record is not None:
            self._tasks[task_id] = record.model_copy(update={"updatedAt": timestamp})
