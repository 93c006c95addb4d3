"""SQLite storage backend.

Blocking ``sqlite3`` calls run in a worker thread via ``asyncio.to_thread``;
each operation opens its own connection.
"""

from __future__ import annotations

import asyncio
import json
import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import TypeAdapter

from a2a_sandbox.errors import StorageError
from a2a_sandbox.errors.codes import ErrorCode
from a2a_sandbox.logging import get_logger
from a2a_sandbox.protocols.a2a.models import (
    Artifact,
    Message,
    Part,
    TaskState,
    TaskStatus,
)
from a2a_sandbox.storage.base import StorageBackend
from a2a_sandbox.storage.models import AgentRecord, Schedule, TaskRecord

logger = get_logger(__name__)

_parts_adapter: TypeAdapter[list[Part]] = TypeAdapter(list[Part])

SCHEMA = """
CREATE TABLE IF NOT EXISTS agents (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    endpoint TEXT NOT NULL,
    avatar_color TEXT DEFAULT '#6366f1',
    is_active INTEGER DEFAULT 1,
    created_at TEXT NOT NULL,
    seq INTEGER
);

CREATE TABLE IF NOT EXISTS schedules (
    id TEXT PRIMARY KEY,
    agent_id TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT,
    start_time TEXT NOT NULL,
    end_time TEXT NOT NULL,
    event_date TEXT NOT NULL,
    is_private INTEGER DEFAULT 1,
    visibility TEXT DEFAULT 'busy',
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_schedules_agent_date ON schedules(agent_id, event_date);

CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    context_id TEXT,
    state TEXT NOT NULL,
    status TEXT NOT NULL,
    metadata TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    seq INTEGER
);
CREATE INDEX IF NOT EXISTS idx_tasks_context ON tasks(context_id);

CREATE TABLE IF NOT EXISTS messages (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id TEXT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
    role TEXT NOT NULL,
    content TEXT NOT NULL,
    metadata TEXT,
    timestamp TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_messages_task ON messages(task_id, seq);

CREATE TABLE IF NOT EXISTS artifacts (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL,
    task_id TEXT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
    body TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_artifacts_task ON artifacts(task_id, seq);
"""

DROP_ALL = """
DROP TABLE IF EXISTS artifacts;
DROP TABLE IF EXISTS messages;
DROP TABLE IF EXISTS tasks;
DROP TABLE IF EXISTS schedules;
DROP TABLE IF EXISTS agents;
"""


def _row_to_task(row: sqlite3.Row) -> TaskRecord:
    return TaskRecord(
        id=row["id"],
        contextId=row["context_id"],
        status=TaskStatus.model_validate_json(row["status"]),
        metadata=json.loads(row["metadata"]) if row["metadata"] else {},
        createdAt=row["created_at"],
        updatedAt=row["updated_at"],
    )


def _row_to_message(row: sqlite3.Row) -> Message:
    return Message(
        role=row["role"],
        parts=_parts_adapter.validate_json(row["content"]),
        metadata=json.loads(row["metadata"]) if row["metadata"] else None,
    )


def _row_to_schedule(row: sqlite3.Row) -> Schedule:
    return Schedule(
        id=row["id"],
        agentId=row["agent_id"],
        title=row["title"],
        description=row["description"],
        startTime=row["start_time"],
        endTime=row["end_time"],
        eventDate=row["event_date"],
        isPrivate=bool(row["is_private"]),
        visibility=row["visibility"],
        createdAt=row["created_at"],
    )


def _row_to_agent(row: sqlite3.Row) -> AgentRecord:
    return AgentRecord(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        endpoint=row["endpoint"],
        avatarColor=row["avatar_color"],
        isActive=bool(row["is_active"]),
        createdAt=row["created_at"],
    )


class SQLiteStorage(StorageBackend):
    """SQLite-backed storage."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = str(path)
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA)
            conn.commit()
        logger.info("SQLite storage opened", path=self.path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.path)
        except sqlite3.Error as e:
            raise StorageError(
                f"Cannot open database: {e}", details={"path": self.path}
            ) from e
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    async def _run(self, fn: Any, *args: Any, write: bool = True) -> Any:
        try:
            return await asyncio.to_thread(fn, *args)
        except sqlite3.Error as e:
            logger.error("SQLite operation failed", operation=fn.__name__, error=str(e))
            raise StorageError(
                f"Storage operation failed: {e}",
                code=ErrorCode.STORAGE_WRITE_ERROR if write else ErrorCode.STORAGE_READ_ERROR,
                details={"operation": fn.__name__},
            ) from e

    # -- tasks ----------------------------------------------------------------

    async def insert_task(self, record: TaskRecord) -> TaskRecord:
        def _insert() -> None:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO tasks (id, context_id, state, status, metadata,
                                       created_at, updated_at, seq)
                    VALUES (?, ?, ?, ?, ?, ?, ?,
                            (SELECT COALESCE(MAX(seq), 0) + 1 FROM tasks))
                    """,
                    (
                        record.id,
                        record.contextId,
                        record.status.state.value,
                        record.status.model_dump_json(exclude_none=True),
                        json.dumps(record.metadata),
                        record.createdAt,
                        record.updatedAt,
                    ),
                )
                conn.commit()

        await self._run(_insert)
        return record

    async def get_task(self, task_id: str) -> TaskRecord | None:
        def _get() -> TaskRecord | None:
            with self._connect() as conn:
                row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
                return _row_to_task(row) if row else None

        return await self._run(_get, write=False)

    async def update_task(
        self,
        task_id: str,
        updated_at: str,
        status: TaskStatus | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> TaskRecord | None:
        def _update() -> TaskRecord | None:
            fields = ["updated_at = ?"]
            values: list[Any] = [updated_at]
            if status is not None:
                fields += ["state = ?", "status = ?"]
                values += [status.state.value, status.model_dump_json(exclude_none=True)]
            if metadata is not None:
                fields.append("metadata = ?")
                values.append(json.dumps(metadata))
            values.append(task_id)
            with self._connect() as conn:
                # state and updated_at change in one statement
                cur = conn.execute(
                    f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?", values
                )
                conn.commit()
                if cur.rowcount == 0:
                    return None
                row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
                return _row_to_task(row)

        return await self._run(_update)

    async def delete_task(self, task_id: str) -> bool:
        def _delete() -> bool:
            with self._connect() as conn:
                conn.execute("DELETE FROM messages WHERE task_id = ?", (task_id,))
                conn.execute("DELETE FROM artifacts WHERE task_id = ?", (task_id,))
                cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
                conn.commit()
                return cur.rowcount > 0

        return await self._run(_delete)

    async def list_tasks(
        self,
        context_id: str | None = None,
        state: TaskState | None = None,
    ) -> list[TaskRecord]:
        def _list() -> list[TaskRecord]:
            clauses: list[str] = []
            values: list[Any] = []
            if context_id is not None:
                clauses.append("context_id = ?")
                values.append(context_id)
            if state is not None:
                clauses.append("state = ?")
                values.append(TaskState(state).value)
            where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
            with self._connect() as conn:
                rows = conn.execute(
                    f"SELECT * FROM tasks {where} ORDER BY seq DESC", values
                ).fetchall()
                return [_row_to_task(row) for row in rows]

        return await self._run(_list, write=False)

    # -- messages / artifacts -------------------------------------------------

    async def append_message(self, task_id: str, message: Message, timestamp: str) -> None:
        content = _parts_adapter.dump_json(message.parts, exclude_none=True).decode()
        metadata = json.dumps(message.metadata) if message.metadata is not None else None

        def _append() -> None:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO messages (task_id, role, content, metadata, timestamp)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (task_id, message.role.value, content, metadata, timestamp),
                )
                conn.execute(
                    "UPDATE tasks SET updated_at = ? WHERE id = ?", (timestamp, task_id)
                )
                conn.commit()

        await self._run(_append)

    async def list_messages(self, task_id: str, limit: int | None = None) -> list[Message]:
        def _list() -> list[Message]:
            with self._connect() as conn:
                if limit is None:
                    rows = conn.execute(
                        "SELECT * FROM messages WHERE task_id = ? ORDER BY seq ASC",
                        (task_id,),
                    ).fetchall()
                else:
                    # newest `limit` rows, flipped back to chronological order
                    rows = conn.execute(
                        "SELECT * FROM messages WHERE task_id = ? ORDER BY seq DESC LIMIT ?",
                        (task_id, limit),
                    ).fetchall()
                    rows = list(reversed(rows))
                return [_row_to_message(row) for row in rows]

        return await self._run(_list, write=False)

    async def append_artifact(self, task_id: str, artifact: Artifact, timestamp: str) -> None:
        body = artifact.model_dump_json(exclude_none=True)

        def _append() -> None:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO artifacts (id, task_id, body, created_at) VALUES (?, ?, ?, ?)",
                    (artifact.id, task_id, body, timestamp),
                )
                conn.execute(
                    "UPDATE tasks SET updated_at = ? WHERE id = ?", (timestamp, task_id)
                )
                conn.commit()

        await self._run(_append)

    async def list_artifacts(self, task_id: str) -> list[Artifact]:
        def _list() -> list[Artifact]:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT body FROM artifacts WHERE task_id = ? ORDER BY seq ASC",
                    (task_id,),
                ).fetchall()
                return [Artifact.model_validate_json(row["body"]) for row in rows]

        return await self._run(_list, write=False)

    # -- schedules ------------------------------------------------------------

    async def insert_schedule(self, schedule: Schedule) -> Schedule:
        def _insert() -> None:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO schedules (id, agent_id, title, description, start_time,
                                           end_time, event_date, is_private, visibility,
                                           created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        schedule.id,
                        schedule.agentId,
                        schedule.title,
                        schedule.description,
                        schedule.startTime,
                        schedule.endTime,
                        schedule.eventDate,
                        1 if schedule.isPrivate else 0,
                        schedule.visibility,
                        schedule.createdAt,
                    ),
                )
                conn.commit()

        await self._run(_insert)
        return schedule

    async def get_schedule(self, schedule_id: str) -> Schedule | None:
        def _get() -> Schedule | None:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM schedules WHERE id = ?", (schedule_id,)
                ).fetchone()
                return _row_to_schedule(row) if row else None

        return await self._run(_get, write=False)

    async def list_schedules(self, agent_id: str, event_date: str) -> list[Schedule]:
        def _list() -> list[Schedule]:
            with self._connect() as conn:
                rows = conn.execute(
                    """
                    SELECT * FROM schedules WHERE agent_id = ? AND event_date = ?
                    ORDER BY start_time
                    """,
                    (agent_id, event_date),
                ).fetchall()
                return [_row_to_schedule(row) for row in rows]

        return await self._run(_list, write=False)

    async def list_agent_schedules(self, agent_id: str) -> list[Schedule]:
        def _list() -> list[Schedule]:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT * FROM schedules WHERE agent_id = ? ORDER BY event_date, start_time",
                    (agent_id,),
                ).fetchall()
                return [_row_to_schedule(row) for row in rows]

        return await self._run(_list, write=False)

    async def count_schedules(self) -> int:
        def _count() -> int:
            with self._connect() as conn:
                return conn.execute("SELECT COUNT(*) FROM schedules").fetchone()[0]

        return await self._run(_count, write=False)

    # -- agents ---------------------------------------------------------------

    async def insert_agent(self, agent: AgentRecord) -> AgentRecord:
        def _insert() -> None:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO agents (id, name, description, endpoint, avatar_color,
                                        is_active, created_at, seq)
                    VALUES (?, ?, ?, ?, ?, ?, ?,
                            (SELECT COALESCE(MAX(seq), 0) + 1 FROM agents))
                    """,
                    (
                        agent.id,
                        agent.name,
                        agent.description,
                        agent.endpoint,
                        agent.avatarColor,
                        1 if agent.isActive else 0,
                        agent.createdAt,
                    ),
                )
                conn.commit()

        await self._run(_insert)
        return agent

    async def get_agent(self, agent_id: str) -> AgentRecord | None:
        def _get() -> AgentRecord | None:
            with self._connect() as conn:
                row = conn.execute("SELECT * FROM agents WHERE id = ?", (agent_id,)).fetchone()
                return _row_to_agent(row) if row else None

        return await self._run(_get, write=False)

    async def list_agents(self, active_only: bool = True) -> list[AgentRecord]:
        def _list() -> list[AgentRecord]:
            query = "SELECT * FROM agents"
            if active_only:
                query += " WHERE is_active = 1"
            with self._connect() as conn:
                rows = conn.execute(query + " ORDER BY seq").fetchall()
                return [_row_to_agent(row) for row in rows]

        return await self._run(_list, write=False)

    async def count_agents(self) -> int:
        def _count() -> int:
            with self._connect() as conn:
                return conn.execute("SELECT COUNT(*) FROM agents").fetchone()[0]

        return await self._run(_count, write=False)

    async def reset(self) -> None:
        def _reset() -> None:
            with self._connect() as conn:
                conn.executescript(DROP_ALL)
                conn.executescript(SCHEMA)
                conn.commit()

        await self._run(_reset)
        logger.info("SQLite storage reset", path=self.path)
