"""JSON-RPC 2.0 dispatcher for the A2A task methods.

Implements ``tasks/send``, ``tasks/get`` and ``tasks/cancel`` on top of a
:class:`TaskStore` and a single :class:`AgentExecutor`.
"""

from enum import IntEnum
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from a2a_sandbox.agents.base import AgentExecutor
from a2a_sandbox.logging import get_logger, task_log_context
from a2a_sandbox.protocols.a2a.messages import create_text_message
from a2a_sandbox.protocols.a2a.models import (
    ExecutionContext,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    MessageRole,
    Task,
    TaskCancelParams,
    TaskGetParams,
    TaskSendParams,
    TaskState,
    TaskStatus,
)
from a2a_sandbox.protocols.a2a.states import EXECUTOR_RESULT_STATES, is_terminal
from a2a_sandbox.protocols.a2a.task_store import TaskStore
from a2a_sandbox.utils.ids import generate_context_id, generate_task_id

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class JsonRpcErrorCode(IntEnum):
    """JSON-RPC and A2A error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    TASK_NOT_FOUND = -32000
    TASK_NOT_CANCELABLE = -32001
    PUSH_NOTIFICATION_NOT_SUPPORTED = -32002
    UNSUPPORTED_OPERATION = -32003


class JsonRpcException(Exception):
    """Raised inside a method handler to answer with a JSON-RPC error."""

    def __init__(self, code: JsonRpcErrorCode, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_error(self) -> JsonRpcError:
        return JsonRpcError(code=int(self.code), message=self.message, data=self.data)


def create_error_response(
    request_id: str | int | float | None,
    code: JsonRpcErrorCode | int,
    message: str,
    data: Any = None,
) -> JsonRpcResponse:
    """Build an error envelope."""
    return JsonRpcResponse(
        id=request_id,
        error=JsonRpcError(code=int(code), message=message, data=data),
    )


def create_success_response(request_id: str | int | float, result: Any) -> JsonRpcResponse:
    """Build a success envelope."""
    return JsonRpcResponse(id=request_id, result=result)


def create_parse_error_response() -> JsonRpcResponse:
    """Envelope for a request body that is not valid JSON."""
    return create_error_response(
        None, JsonRpcErrorCode.PARSE_ERROR, "Parse error: failed to parse request body"
    )


def validate_request(body: Any) -> JsonRpcRequest | JsonRpcError:
    """Check the envelope shape of an untyped request body.

    Returns:
        The parsed request, or an Invalid Request error describing the problem
    """

    def invalid(reason: str) -> JsonRpcError:
        return JsonRpcError(
            code=int(JsonRpcErrorCode.INVALID_REQUEST),
            message=f"Invalid request: {reason}",
        )

    if not isinstance(body, dict):
        return invalid("not an object")
    if body.get("jsonrpc") != "2.0":
        return invalid('jsonrpc must be "2.0"')
    if not isinstance(body.get("method"), str):
        return invalid("method must be a string")
    request_id = body.get("id")
    # bool is an int subclass but not a JSON number
    if isinstance(request_id, bool) or not isinstance(request_id, (str, int, float)):
        return invalid("id must be a string or number")
    params = body.get("params")
    if params is not None and not isinstance(params, dict):
        return invalid("params must be an object")

    return JsonRpcRequest(id=request_id, method=body["method"], params=params)


def _validation_details(error: ValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": ".".join(str(p) for p in item["loc"]), "msg": item["msg"]}
        for item in error.errors()
    ]


def _parse_params(model: type[M], params: dict[str, Any], required: str) -> M:
    if params.get(required) is None:
        raise JsonRpcException(
            JsonRpcErrorCode.INVALID_PARAMS, f"Missing required parameter: {required}"
        )
    try:
        return model.model_validate(params)
    except ValidationError as e:
        raise JsonRpcException(
            JsonRpcErrorCode.INVALID_PARAMS,
            "Invalid params",
            data=_validation_details(e),
        ) from e


def _failed_status(text: str) -> TaskStatus:
    return TaskStatus(
        state=TaskState.FAILED,
        message=create_text_message(MessageRole.AGENT, text),
    )


class JsonRpcHandler:
    """Routes JSON-RPC requests for one agent.

    The handler holds no task state of its own; every mutation goes through
    the task store while holding that task's lock.
    """

    def __init__(self, executor: AgentExecutor, agent_id: str, task_store: TaskStore):
        """Initialize handler.

        Args:
            executor: Agent executing ``tasks/send`` messages
            agent_id: Identifier tagged into new tasks' metadata
            task_store: Task persistence
        """
        self.executor = executor
        self.agent_id = agent_id
        self.task_store = task_store

    async def handle(self, body: Any) -> JsonRpcResponse:
        """Handle an untyped JSON-RPC request body.

        Never raises: every failure is expressed as an error envelope.
        """
        validated = validate_request(body)
        if isinstance(validated, JsonRpcError):
            logger.warning("Invalid JSON-RPC request", reason=validated.message)
            return JsonRpcResponse(id=None, error=validated)

        request = validated
        params = request.params or {}
        logger.debug(
            "JSON-RPC request received",
            agent_id=self.agent_id,
            method=request.method,
            request_id=request.id,
        )

        try:
            if request.method == "tasks/send":
                result = await self.send_task(params)
            elif request.method == "tasks/get":
                result = await self.get_task(params)
            elif request.method == "tasks/cancel":
                result = await self.cancel_task(params)
            else:
                raise JsonRpcException(
                    JsonRpcErrorCode.METHOD_NOT_FOUND,
                    f"Method not found: {request.method}",
                )
        except JsonRpcException as e:
            logger.info(
                "JSON-RPC request rejected",
                agent_id=self.agent_id,
                method=request.method,
                code=int(e.code),
                reason=e.message,
            )
            return JsonRpcResponse(id=request.id, error=e.to_error())
        except Exception as e:
            logger.error(
                "JSON-RPC handler error",
                agent_id=self.agent_id,
                method=request.method,
                error=str(e),
                exc_info=True,
            )
            return create_error_response(
                request.id, JsonRpcErrorCode.INTERNAL_ERROR, "Internal error", data=str(e)
            )

        return create_success_response(request.id, result)

    async def send_task(self, params: dict[str, Any]) -> Task:
        """Run the ``tasks/send`` pipeline.

        Creates the task on first contact, appends the user message, runs the
        executor and persists its status, agent message and artifacts.

        Args:
            params: Raw ``tasks/send`` parameters

        Returns:
            The hydrated task after execution

        Raises:
            JsonRpcException: For invalid params or a send to a terminal task
        """
        send = _parse_params(TaskSendParams, params, "message")
        task_id = send.id or generate_task_id()

        with task_log_context(task_id, self.agent_id):
            async with self.task_store.lock(task_id):
                task = await self.task_store.get_task(task_id)
                if task is None:
                    context_id = send.contextId or generate_context_id()
                    await self.task_store.create_task(
                        id=task_id,
                        context_id=context_id,
                        metadata={**(send.metadata or {}), "agentId": self.agent_id},
                    )
                else:
                    if is_terminal(task.status.state):
                        raise JsonRpcException(
                            JsonRpcErrorCode.UNSUPPORTED_OPERATION,
                            f"Task is already in terminal state: {task.status.state.value}",
                        )
                    context_id = task.contextId or send.contextId

                await self.task_store.add_message(task_id, send.message)
                task = await self.task_store.update_task(
                    task_id, status=TaskStatus(state=TaskState.WORKING)
                )
                history = await self.task_store.get_messages(task_id, send.historyLength)
                context = ExecutionContext(
                    taskId=task_id,
                    contextId=context_id,
                    history=history,
                    metadata=send.metadata,
                )

                try:
                    response = await self.executor.execute(task, send.message, context)
                except Exception as e:
                    await self.task_store.update_task(task_id, status=_failed_status(f"Error: {e}"))
                    raise

                status = response.status
                if status.state not in EXECUTOR_RESULT_STATES:
                    logger.warning(
                        "Executor returned a state it may not produce",
                        task_id=task_id,
                        state=status.state.value,
                    )
                    status = _failed_status(
                        f"Error: Agent returned unsupported state: {status.state.value}"
                    )

                await self.task_store.update_task(task_id, status=status)
                if status.message is not None:
                    await self.task_store.add_message(task_id, status.message)
                for artifact in response.artifacts or []:
                    await self.task_store.add_artifact(task_id, artifact)

                result = await self.task_store.get_task(task_id, history_length=send.historyLength)

        logger.info(
            "Task processed",
            agent_id=self.agent_id,
            task_id=task_id,
            state=status.state.value,
        )
        return result

    async def get_task(self, params: dict[str, Any]) -> Task:
        """Load a task for ``tasks/get``.

        Raises:
            JsonRpcException: Missing id or unknown task
        """
        get = _parse_params(TaskGetParams, params, "id")
        task = await self.task_store.get_task(get.id, history_length=get.historyLength)
        if task is None:
            raise JsonRpcException(JsonRpcErrorCode.TASK_NOT_FOUND, f"Task not found: {get.id}")
        return task

    async def cancel_task(self, params: dict[str, Any]) -> Task:
        """Mark a task canceled for ``tasks/cancel``.

        Cancelling an already-canceled task returns it unchanged.

        Raises:
            JsonRpcException: Missing id, unknown task, or a completed/failed task
        """
        cancel = _parse_params(TaskCancelParams, params, "id")

        with task_log_context(cancel.id, self.agent_id):
            if not await self.task_store.has_task(cancel.id):
                raise JsonRpcException(
                    JsonRpcErrorCode.TASK_NOT_FOUND, f"Task not found: {cancel.id}"
                )
            async with self.task_store.lock(cancel.id):
                task = await self.task_store.get_task(cancel.id)
                if task is None:
                    raise JsonRpcException(
                        JsonRpcErrorCode.TASK_NOT_FOUND, f"Task not found: {cancel.id}"
                    )

                state = task.status.state
                if state == TaskState.CANCELED:
                    return task
                if is_terminal(state):
                    raise JsonRpcException(
                        JsonRpcErrorCode.TASK_NOT_CANCELABLE,
                        f"Task cannot be canceled: already {state.value}",
                    )

                task = await self.task_store.update_task(
                    cancel.id,
                    status=TaskStatus(
                        state=TaskState.CANCELED,
                        message=create_text_message(
                            MessageRole.AGENT, "Task was canceled by request."
                        ),
                    ),
                )

        logger.info("Task canceled", agent_id=self.agent_id, task_id=cancel.id)
        return task
