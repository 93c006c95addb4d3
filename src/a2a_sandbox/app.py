"""Application state shared by the HTTP server and the CLI.

Example:
    ```python
    from a2a_sandbox.app import get_app_state

    state = get_app_state()
    await state.initialize()
    handler = state.handler_for("alice")
    response = await handler.handle(
        {"jsonrpc": "2.0", "id": 1, "method": "tasks/get", "params": {"id": "task_x"}}
    )
    ```
"""

from __future__ import annotations

import asyncio

from a2a_sandbox.agents import AgentRegistry, ScheduleSkills, build_default_registry
from a2a_sandbox.config import Settings, get_settings
from a2a_sandbox.llm import LanguageModel, LLMClient
from a2a_sandbox.logging import get_logger
from a2a_sandbox.protocols.a2a.jsonrpc import JsonRpcHandler
from a2a_sandbox.protocols.a2a.task_store import TaskStore
from a2a_sandbox.storage import (
    MemoryStorage,
    SQLiteStorage,
    StorageBackend,
    get_seed_summary,
    seed_database,
)

logger = get_logger(__name__)


def create_storage(settings: Settings) -> StorageBackend:
    """Build the storage backend selected by ``storage_backend``."""
    if settings.storage_backend == "sqlite":
        return SQLiteStorage(settings.sqlite_path)
    return MemoryStorage()


def create_llm(settings: Settings) -> LanguageModel | None:
    """Build the language model client, or None when disabled."""
    if not settings.llm_enabled:
        return None
    return LLMClient(
        settings.llm_base_url,
        timeout=settings.llm_timeout,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )


class AppState:
    """Everything a request needs: storage, task store, agents and LLM.

    Args:
        settings: Configuration to build from
        storage: Backend to use instead of the configured one
        llm: Language model to use instead of the configured one
        registry: Agent registry to use instead of the built-in roster
    """

    def __init__(
        self,
        settings: Settings | None = None,
        storage: StorageBackend | None = None,
        llm: LanguageModel | None = None,
        registry: AgentRegistry | None = None,
    ):
        self.settings = settings or get_settings()
        self.storage = storage if storage is not None else create_storage(self.settings)
        self.llm = llm if llm is not None else create_llm(self.settings)
        self.task_store = TaskStore(self.storage)
        self.skills = ScheduleSkills(
            self.storage,
            work_start=self.settings.working_hours_start,
            work_end=self.settings.working_hours_end,
        )
        if registry is None:
            registry = build_default_registry(
                self.skills, llm=self.llm, base_url=self.settings.base_url
            )
        self.registry = registry
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Seed the store on first use when ``seed_on_startup`` is set."""
        if self._initialized:
            return
        async with self._init_lock:
            if self._initialized:
                return
            if self.settings.seed_on_startup:
                await seed_database(self.storage)
            self._initialized = True
        logger.info(
            "Application state initialized",
            storage_backend=self.settings.storage_backend,
            agents=len(self.registry),
            llm_enabled=self.llm is not None,
        )

    async def reset(self) -> dict[str, int]:
        """Drop all data and seed again."""
        async with self._init_lock:
            await self.storage.reset()
            await seed_database(self.storage)
            self._initialized = True
        return await get_seed_summary(self.storage)

    def handler_for(self, agent_id: str) -> JsonRpcHandler:
        """JSON-RPC handler bound to one agent.

        Raises:
            AgentNotFoundError: If the agent is not registered
        """
        return JsonRpcHandler(self.registry.require(agent_id), agent_id, self.task_store)

    async def close(self) -> None:
        if self.llm is not None:
            await self.llm.close()
        await self.storage.close()
        logger.info("Application state closed")


_app_state: AppState | None = None


def get_app_state() -> AppState:
    """Get the process-wide state, building it on first call."""
    global _app_state

    if _app_state is None:
        _app_state = AppState()
    return _app_state


def reset_app_state() -> None:
    """Forget the process-wide state; the next lookup builds a fresh one."""
    global _app_state
    _app_state = None
