"""Tests for the storage backends."""

import sqlite3

import pytest

from a2a_sandbox.errors import ErrorCode, StorageError
from a2a_sandbox.protocols.a2a.models import (
    Artifact,
    DataPart,
    Message,
    MessageRole,
    TaskState,
    TaskStatus,
    TextPart,
)
from a2a_sandbox.storage import (
    AgentRecord,
    MemoryStorage,
    SQLiteStorage,
    StorageBackend,
    TaskRecord,
)
from tests.fixtures import TEST_DATE, make_schedule, user_text


@pytest.fixture(params=["memory", "sqlite"])
def backend(request, tmp_path) -> StorageBackend:
    if request.param == "memory":
        return MemoryStorage()
    return SQLiteStorage(tmp_path / "a2a.db")


def task_record(task_id: str, context_id: str | None = None) -> TaskRecord:
    return TaskRecord(
        id=task_id,
        contextId=context_id,
        status=TaskStatus(state=TaskState.SUBMITTED),
        metadata={"agentId": "alice"},
    )


class TestTasks:
    """Test task rows on every backend."""

    @pytest.mark.asyncio
    async def test_insert_and_get(self, backend):
        """Test a task round-trips through the backend."""
        await backend.insert_task(task_record("task_1", "ctx_1"))

        record = await backend.get_task("task_1")
        assert record.contextId == "ctx_1"
        assert record.status.state == TaskState.SUBMITTED
        assert record.metadata == {"agentId": "alice"}
        assert await backend.get_task("missing") is None

    @pytest.mark.asyncio
    async def test_update(self, backend):
        """Test status and metadata updates."""
        await backend.insert_task(task_record("task_1"))

        status = TaskStatus(
            state=TaskState.WORKING,
            message=user_text("working on it"),
            timestamp="2024-01-15T10:00:00+00:00",
        )
        record = await backend.update_task(
            "task_1", "2024-01-15T10:00:00+00:00", status=status, metadata={"x": 1}
        )

        assert record.status == status
        assert record.metadata == {"x": 1}
        assert record.updatedAt == "2024-01-15T10:00:00+00:00"
        assert await backend.update_task("missing", "t") is None

    @pytest.mark.asyncio
    async def test_list_newest_first(self, backend):
        """Test listing order and filters."""
        for task_id, context_id in (("t1", "a"), ("t2", "b"), ("t3", "a")):
            await backend.insert_task(task_record(task_id, context_id))
        await backend.update_task("t1", "t", status=TaskStatus(state=TaskState.WORKING))

        assert [r.id for r in await backend.list_tasks()] == ["t3", "t2", "t1"]
        assert [r.id for r in await backend.list_tasks(context_id="a")] == ["t3", "t1"]
        assert [r.id for r in await backend.list_tasks(state=TaskState.WORKING)] == ["t1"]

    @pytest.mark.asyncio
    async def test_returned_records_are_detached(self, backend):
        """Test mutating a returned record does not change storage."""
        await backend.insert_task(task_record("task_1"))
        record = await backend.get_task("task_1")
        record.metadata["agentId"] = "mallory"

        assert (await backend.get_task("task_1")).metadata == {"agentId": "alice"}

    @pytest.mark.asyncio
    async def test_delete_cascades(self, backend):
        """Test deleting a task removes its messages and artifacts."""
        await backend.insert_task(task_record("task_1"))
        await backend.append_message("task_1", user_text("hi"), "t")
        await backend.append_artifact(
            "task_1", Artifact(id="art_1", parts=[TextPart(text="x")]), "t"
        )

        assert await backend.delete_task("task_1") is True
        assert await backend.list_messages("task_1") == []
        assert await backend.list_artifacts("task_1") == []
        assert await backend.delete_task("task_1") is False


class TestMessages:
    """Test history storage."""

    @pytest.mark.asyncio
    async def test_messages_round_trip(self, backend):
        """Test mixed parts and metadata survive storage."""
        await backend.insert_task(task_record("task_1"))
        message = Message(
            role=MessageRole.AGENT,
            parts=[TextPart(text="Busy"), DataPart(data={"available": False})],
            metadata={"source": "test"},
        )
        await backend.append_message("task_1", message, "t")

        assert await backend.list_messages("task_1") == [message]

    @pytest.mark.asyncio
    async def test_limit_keeps_most_recent(self, backend):
        """Test limits return the newest messages oldest first."""
        await backend.insert_task(task_record("task_1"))
        for text in ("a", "b", "c", "d"):
            await backend.append_message("task_1", user_text(text), "t")

        recent = await backend.list_messages("task_1", limit=2)
        assert [m.parts[0].text for m in recent] == ["c", "d"]
        assert await backend.list_messages("task_1", limit=0) == []

    @pytest.mark.asyncio
    async def test_append_touches_task(self, backend):
        """Test appends move updatedAt forward."""
        await backend.insert_task(task_record("task_1"))
        await backend.append_message("task_1", user_text("hi"), "2030-01-01T00:00:00+00:00")

        record = await backend.get_task("task_1")
        assert record.updatedAt == "2030-01-01T00:00:00+00:00"


class TestSchedules:
    """Test calendar storage."""

    @pytest.mark.asyncio
    async def test_list_by_day_sorted(self, backend):
        """Test entries are filtered by agent and date and sorted by start."""
        await backend.insert_schedule(make_schedule("alice", "11:30", "12:30"))
        await backend.insert_schedule(make_schedule("alice", "09:00", "09:30"))
        await backend.insert_schedule(make_schedule("alice", "10:00", "11:00", date="2024-01-16"))
        await backend.insert_schedule(make_schedule("bob", "10:00", "11:00"))

        day = await backend.list_schedules("alice", TEST_DATE)
        assert [s.startTime for s in day] == ["09:00", "11:30"]

        everything = await backend.list_agent_schedules("alice")
        assert [(s.eventDate, s.startTime) for s in everything] == [
            (TEST_DATE, "09:00"),
            (TEST_DATE, "11:30"),
            ("2024-01-16", "10:00"),
        ]
        assert await backend.count_schedules() == 4

    @pytest.mark.asyncio
    async def test_schedule_fields(self, backend):
        """Test private flags and descriptions are stored."""
        entry = make_schedule("bob", "12:00", "13:00", is_private=True, description="Lunch")
        await backend.insert_schedule(entry)

        stored = await backend.get_schedule(entry.id)
        assert stored == entry
        assert await backend.get_schedule("missing") is None


class TestAgents:
    """Test the roster table."""

    @pytest.mark.asyncio
    async def test_insert_and_list(self, backend):
        """Test active filtering and insertion order."""
        await backend.insert_agent(AgentRecord(id="alice", name="Alice", endpoint="/a"))
        await backend.insert_agent(
            AgentRecord(id="zed", name="Zed", endpoint="/z", isActive=False)
        )
        await backend.insert_agent(AgentRecord(id="bob", name="Bob", endpoint="/b"))

        assert [a.id for a in await backend.list_agents()] == ["alice", "bob"]
        assert [a.id for a in await backend.list_agents(active_only=False)] == [
            "alice",
            "zed",
            "bob",
        ]
        assert (await backend.get_agent("alice")).name == "Alice"
        assert await backend.count_agents() == 3

    @pytest.mark.asyncio
    async def test_reset(self, backend):
        """Test reset empties every table."""
        await backend.insert_agent(AgentRecord(id="alice", name="Alice", endpoint="/a"))
        await backend.insert_schedule(make_schedule("alice", "09:00", "10:00"))
        await backend.insert_task(task_record("task_1"))

        await backend.reset()

        assert await backend.count_agents() == 0
        assert await backend.count_schedules() == 0
        assert await backend.list_tasks() == []


class TestSQLiteStorage:
    """Test SQLite specifics."""

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path):
        """Test the database directory is created on open."""
        path = tmp_path / "nested" / "dir" / "a2a.db"
        storage = SQLiteStorage(path)

        assert path.exists()
        assert await storage.count_agents() == 0

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path):
        """Test data survives reopening the file."""
        path = tmp_path / "a2a.db"
        await SQLiteStorage(path).insert_task(task_record("task_1"))

        reopened = SQLiteStorage(path)
        assert (await reopened.get_task("task_1")).id == "task_1"

    @pytest.mark.asyncio
    async def test_duplicate_id_raises_storage_error(self, tmp_path):
        """Test constraint violations surface as StorageError."""
        storage = SQLiteStorage(tmp_path / "a2a.db")
        await storage.insert_task(task_record("task_1"))

        with pytest.raises(StorageError) as exc_info:
            await storage.insert_task(task_record("task_1"))
        assert exc_info.value.code == ErrorCode.STORAGE_WRITE_ERROR

    @pytest.mark.asyncio
    async def test_failed_read_reports_read_error(self, tmp_path):
        """Test failing queries are reported with the read code."""
        path = tmp_path / "a2a.db"
        storage = SQLiteStorage(path)
        conn = sqlite3.connect(path)
        conn.execute("DROP TABLE artifacts")
        conn.commit()
        conn.close()

        with pytest.raises(StorageError) as exc_info:
            await storage.list_artifacts("task_1")
        assert exc_info.value.code == ErrorCode.STORAGE_READ_ERROR
        assert exc_info.value.details == {"operation": "_list"}
