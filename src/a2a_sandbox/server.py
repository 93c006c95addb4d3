"""HTTP surface: agent discovery, the per-agent JSON-RPC endpoint and REST views.

Example:
    ```python
    import uvicorn

    from a2a_sandbox.server import create_app

    uvicorn.run(create_app(), host="0.0.0.0", port=3000)
    ```
"""

from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import Body, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from a2a_sandbox import __version__
from a2a_sandbox.app import AppState, get_app_state
from a2a_sandbox.errors import (
    AgentNotFoundError,
    ErrorCode,
    ExecutionError,
    InvalidStateTransitionError,
    SandboxError,
    TaskNotFoundError,
    format_error,
)
from a2a_sandbox.logging import get_logger
from a2a_sandbox.privacy import PrivacyContext, filter_schedules, log_privacy_action
from a2a_sandbox.protocols.a2a.jsonrpc import (
    JsonRpcErrorCode,
    JsonRpcException,
    create_error_response,
    create_parse_error_response,
)
from a2a_sandbox.protocols.a2a.messages import create_text_message
from a2a_sandbox.protocols.a2a.models import (
    Message,
    MessageRole,
    TaskState,
    TaskStatus,
    to_wire,
)
from a2a_sandbox.storage import Schedule, get_seed_summary, seed_database
from a2a_sandbox.storage.models import Visibility
from a2a_sandbox.utils import generate_schedule_id, resolve_date

logger = get_logger(__name__)

TIME_PATTERN = r"^\d{2}:\d{2}$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class ScheduleCreateRequest(BaseModel):
    """Body of ``POST /api/agents/{id}/schedule``."""

    title: str = Field(min_length=1)
    startTime: str = Field(pattern=TIME_PATTERN)
    endTime: str = Field(pattern=TIME_PATTERN)
    eventDate: str | None = Field(None, pattern=DATE_PATTERN)
    description: str | None = None
    isPrivate: bool = False
    visibility: Visibility = "busy"


class TaskCreateRequest(BaseModel):
    """Body of ``POST /api/tasks``; a bare string message becomes a user text message."""

    agentId: str
    message: str | Message
    contextId: str | None = None
    metadata: dict[str, Any] | None = None


class TaskUpdateRequest(BaseModel):
    """Body of ``PATCH /api/tasks/{id}``."""

    state: TaskState


class DbInitRequest(BaseModel):
    reset: bool = False


def _status_for(error: SandboxError) -> int:
    if isinstance(error, (AgentNotFoundError, TaskNotFoundError)):
        return 404
    if isinstance(error, (InvalidStateTransitionError, ExecutionError)):
        return 400
    return 500


def create_app(state: AppState | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        state: Application state to serve (defaults to the process-wide one)

    Returns:
        Configured FastAPI application
    """
    app_state = state or get_app_state()

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # noqa: ARG001
        logger.info("Starting A2A sandbox server", version=__version__)
        await app_state.initialize()
        yield
        logger.info("Shutting down A2A sandbox server")
        await app_state.close()

    app = FastAPI(
        title="A2A Sandbox",
        description="Agent-to-Agent protocol sandbox with scheduling and debate agents",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.a2a = app_state

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_discovery(app, app_state)
    _register_agent_endpoints(app, app_state)
    _register_task_endpoints(app, app_state)
    _register_db_endpoints(app, app_state)
    _register_exception_handlers(app)

    return app


def _register_discovery(app: FastAPI, state: AppState) -> None:
    @app.get("/health", tags=["System"])
    async def health() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "agents": len(state.registry),
        }

    @app.get("/.well-known/agent.json", tags=["Discovery"])
    async def well_known_agent_card(agent: str | None = Query(None)) -> Any:
        """One agent's card with ``?agent=<id>``, otherwise every card."""
        if agent:
            card = state.registry.get_agent_card(agent)
            if card is None:
                raise AgentNotFoundError(agent)
            return to_wire(card)

        return {
            "agents": to_wire(state.registry.get_agent_cards()),
            "description": "A2A Protocol Sandbox - Scheduling and Debate Agents",
            "version": __version__,
        }


def _register_agent_endpoints(app: FastAPI, state: AppState) -> None:
    @app.get("/api/agents", tags=["Agents"])
    async def list_agents() -> dict[str, Any]:
        """Roster rows merged with their card capabilities and skills."""
        await state.initialize()
        agents = []
        for record in await state.storage.list_agents():
            card = state.registry.get_agent_card(record.id)
            agents.append(
                {
                    **record.model_dump(exclude={"createdAt"}),
                    "capabilities": card.capabilities.model_dump() if card else None,
                    "skills": (
                        [
                            {"id": s.id, "name": s.name, "description": s.description}
                            for s in card.skills
                        ]
                        if card
                        else None
                    ),
                }
            )
        return {"agents": agents, "total": len(agents)}

    @app.get("/api/agents/{agent_id}", tags=["Agents"])
    async def get_agent(agent_id: str) -> dict[str, Any]:
        await state.initialize()
        record = await state.storage.get_agent(agent_id)
        if record is None:
            raise AgentNotFoundError(agent_id)

        card = state.registry.get_agent_card(agent_id)
        return {
            **record.model_dump(exclude={"createdAt"}),
            "agentCard": to_wire(card),
        }

    @app.post("/api/agents/{agent_id}", tags=["A2A"])
    async def agent_rpc(agent_id: str, request: Request) -> JSONResponse:
        """JSON-RPC endpoint for ``tasks/send``, ``tasks/get`` and ``tasks/cancel``."""
        await state.initialize()
        if not state.registry.has(agent_id):
            response = create_error_response(
                None, JsonRpcErrorCode.TASK_NOT_FOUND, f"Agent not found: {agent_id}"
            )
            return JSONResponse(response.to_dict(), status_code=404)

        try:
            body = await request.json()
        except ValueError:
            logger.warning("Unparseable JSON-RPC body", agent_id=agent_id)
            return JSONResponse(create_parse_error_response().to_dict(), status_code=400)

        response = await state.handler_for(agent_id).handle(body)
        return JSONResponse(response.to_dict())

    @app.get("/api/agents/{agent_id}/schedule", tags=["Agents"])
    async def get_schedule(
        agent_id: str,
        date: str | None = Query(None),
        public: bool = Query(False),
    ) -> dict[str, Any]:
        """Owner view of a day's schedule, or the privacy-filtered view with ``public=true``."""
        await state.initialize()
        record = await state.storage.get_agent(agent_id)
        if record is None:
            raise AgentNotFoundError(agent_id)

        event_date = resolve_date(date)
        schedules = await state.storage.list_schedules(agent_id, event_date)

        if public:
            filtered = filter_schedules(schedules, PrivacyContext(requester_type="external"))
            log_privacy_action(
                action="filter",
                agent_id=agent_id,
                data_type="schedule",
                date=event_date,
            )
            schedule: list[Any] = to_wire(filtered)
        else:
            schedule = to_wire(schedules)

        return {
            "agentId": agent_id,
            "agentName": record.name,
            "date": event_date,
            "schedule": schedule,
            "privacyFiltered": public,
        }

    @app.post("/api/agents/{agent_id}/schedule", tags=["Agents"])
    async def create_schedule(agent_id: str, body: ScheduleCreateRequest) -> dict[str, Any]:
        await state.initialize()
        if await state.storage.get_agent(agent_id) is None:
            raise AgentNotFoundError(agent_id)
        if body.startTime >= body.endTime:
            raise ExecutionError(
                "startTime must be before endTime",
                code=ErrorCode.VALIDATION_ERROR,
                details={"startTime": body.startTime, "endTime": body.endTime},
            )

        schedule = await state.storage.insert_schedule(
            Schedule(
                id=generate_schedule_id(),
                agentId=agent_id,
                title=body.title,
                description=body.description,
                startTime=body.startTime,
                endTime=body.endTime,
                eventDate=resolve_date(body.eventDate),
                isPrivate=body.isPrivate,
                visibility=body.visibility,
            )
        )
        logger.info("Schedule created", agent_id=agent_id, schedule_id=schedule.id)
        return {"success": True, "schedule": to_wire(schedule)}

    @app.get("/api/schedule/common", tags=["Agents"])
    async def common_availability(
        agents: str = Query(..., description="Comma-separated agent ids"),
        date: str | None = Query(None),
    ) -> dict[str, Any]:
        """Time ranges free for every listed agent."""
        await state.initialize()
        agent_ids = [a.strip() for a in agents.split(",") if a.strip()]
        if not agent_ids:
            raise ExecutionError(
                "At least one agent id is required", code=ErrorCode.VALIDATION_ERROR
            )
        for agent_id in agent_ids:
            if await state.storage.get_agent(agent_id) is None:
                raise AgentNotFoundError(agent_id)

        event_date = resolve_date(date)
        slots = await state.skills.common_free_slots(agent_ids, event_date)
        log_privacy_action(
            action="filter",
            agent_id=",".join(agent_ids),
            data_type="availability",
            date=event_date,
        )
        return {"agents": agent_ids, "date": event_date, "freeSlots": to_wire(slots)}


def _register_task_endpoints(app: FastAPI, state: AppState) -> None:
    @app.get("/api/tasks", tags=["Tasks"])
    async def list_tasks(
        context_id: str | None = Query(None, alias="contextId"),
        task_state: TaskState | None = Query(None, alias="state"),
    ) -> dict[str, Any]:
        await state.initialize()
        tasks = await state.task_store.list_tasks(context_id=context_id, state=task_state)
        return {"tasks": to_wire(tasks), "total": len(tasks)}

    @app.post("/api/tasks", tags=["Tasks"])
    async def create_task(body: TaskCreateRequest) -> JSONResponse:
        """Send a message to an agent as a new task, outside of JSON-RPC."""
        await state.initialize()
        handler = state.handler_for(body.agentId)

        message = (
            create_text_message(MessageRole.USER, body.message)
            if isinstance(body.message, str)
            else body.message
        )
        params: dict[str, Any] = {"message": message.model_dump(mode="json", exclude_none=True)}
        if body.contextId:
            params["contextId"] = body.contextId
        if body.metadata:
            params["metadata"] = body.metadata

        try:
            task = await handler.send_task(params)
        except JsonRpcException as e:
            return JSONResponse(
                {"error": "JsonRpcException", "code": int(e.code), "message": e.message},
                status_code=400,
            )
        return JSONResponse({"success": True, "task": to_wire(task)})

    @app.get("/api/tasks/{task_id}", tags=["Tasks"])
    async def get_task(
        task_id: str,
        history_length: int | None = Query(None, alias="historyLength", ge=0),
    ) -> dict[str, Any]:
        await state.initialize()
        task = await state.task_store.get_task(task_id, history_length=history_length)
        if task is None:
            raise TaskNotFoundError(task_id)
        return {"task": to_wire(task)}

    @app.patch("/api/tasks/{task_id}", tags=["Tasks"])
    async def update_task(task_id: str, body: TaskUpdateRequest) -> dict[str, Any]:
        """Move a task to another state; terminal tasks are rejected."""
        await state.initialize()
        if not await state.task_store.has_task(task_id):
            raise TaskNotFoundError(task_id)
        async with state.task_store.lock(task_id):
            task = await state.task_store.update_task(
                task_id, status=TaskStatus(state=body.state)
            )
        return {"success": True, "task": to_wire(task)}

    @app.delete("/api/tasks/{task_id}", tags=["Tasks"])
    async def delete_task(task_id: str) -> dict[str, Any]:
        await state.initialize()
        if not await state.task_store.delete_task(task_id):
            raise TaskNotFoundError(task_id)
        return {"success": True, "message": "Task deleted successfully"}


def _register_db_endpoints(app: FastAPI, state: AppState) -> None:
    @app.get("/api/db/init", tags=["System"])
    async def db_status() -> dict[str, Any]:
        summary = await get_seed_summary(state.storage)
        return {"initialized": summary["agents"] > 0, **summary}

    @app.post("/api/db/init", tags=["System"])
    async def db_init(body: DbInitRequest | None = Body(None)) -> dict[str, Any]:
        """Seed the store, or wipe and re-seed it with ``{"reset": true}``."""
        if body is not None and body.reset:
            summary = await state.reset()
            return {
                "success": True,
                "message": "Database reset and seeded successfully",
                **summary,
            }

        seeded = await seed_database(state.storage)
        message = (
            "Database initialized and seeded successfully"
            if seeded
            else "Database already initialized"
        )
        return {
            "success": True,
            "message": message,
            **(await get_seed_summary(state.storage)),
        }


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SandboxError)
    async def sandbox_error_handler(request: Request, exc: SandboxError) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=str(exc))
        return JSONResponse(format_error(exc), status_code=status_code)


def run_server(host: str | None = None, port: int | None = None, log_level: str = "info") -> None:
    """Run the server with uvicorn using configured defaults.

    Args:
        host: Host to bind to
        port: Port to bind to
        log_level: uvicorn log level
    """
    settings = get_app_state().settings
    uvicorn.run(
        create_app(),
        host=host or settings.http_host,
        port=port or settings.http_port,
        log_level=log_level,
    )
