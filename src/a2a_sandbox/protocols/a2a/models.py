"""A2A Protocol data models.

Implements the task, message, artifact and agent card structures exchanged
over the JSON-RPC surface. Field names follow the wire format (camelCase).
"""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Message Parts
# ============================================================================


class MessageRole(str, Enum):
    """Role of message sender."""

    USER = "user"
    AGENT = "agent"


class TextPart(BaseModel):
    """Text content part."""

    type: Literal["text"] = "text"
    text: str


class FileContent(BaseModel):
    """File payload, inline (base64) or by reference."""

    name: str | None = None
    mimeType: str
    bytes: str | None = None  # base64 encoded
    uri: str | None = None


class FilePart(BaseModel):
    """File content part."""

    type: Literal["file"] = "file"
    file: FileContent


class DataPart(BaseModel):
    """Structured data part."""

    type: Literal["data"] = "data"
    data: dict[str, Any]


Part = Annotated[TextPart | FilePart | DataPart, Field(discriminator="type")]


class Message(BaseModel):
    """A2A Message object."""

    model_config = ConfigDict(frozen=True)

    role: MessageRole
    parts: list[Part]
    metadata: dict[str, Any] | None = None


# ============================================================================
# Task Management
# ============================================================================


class TaskState(str, Enum):
    """Task lifecycle states."""

    SUBMITTED = "submitted"
    WORKING = "working"
    INPUT_REQUIRED = "input-required"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELED = "canceled"


TERMINAL_STATES = frozenset({TaskState.COMPLETED, TaskState.FAILED, TaskState.CANCELED})


class TaskStatus(BaseModel):
    """Task status object."""

    state: TaskState
    message: Message | None = None
    timestamp: str | None = None


class Artifact(BaseModel):
    """Named output produced by an agent.

    ``index``/``append``/``lastChunk`` belong to chunked delivery; they are
    stored and returned untouched.
    """

    id: str | None = None
    name: str | None = None
    description: str | None = None
    mimeType: str = "text/plain"
    parts: list[Part]
    index: int | None = None
    append: bool | None = None
    lastChunk: bool | None = None
    metadata: dict[str, Any] | None = None


class Task(BaseModel):
    """A2A Task object."""

    id: str
    contextId: str | None = None
    status: TaskStatus
    history: list[Message] = Field(default_factory=list)
    artifacts: list[Artifact] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# Agent Card
# ============================================================================

InputMode = Literal["text", "file", "data"]
OutputMode = Literal["text", "file", "data"]


class AgentCapabilities(BaseModel):
    """Agent capabilities flags."""

    streaming: bool = False
    pushNotifications: bool = False
    stateTransitionHistory: bool = True


class AgentProvider(BaseModel):
    """Agent provider information."""

    organization: str
    url: str | None = None


class AgentSkill(BaseModel):
    """Agent skill/capability description.

    ``inputSchema``/``outputSchema`` are JSON-Schema-like documentation hints;
    they are not enforced.
    """

    id: str
    name: str
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    inputModes: list[InputMode] = Field(default_factory=lambda: ["text"])
    outputModes: list[OutputMode] = Field(default_factory=lambda: ["text"])
    inputSchema: dict[str, Any] | None = None
    outputSchema: dict[str, Any] | None = None


class AgentCard(BaseModel):
    """Agent Card - declares agent capabilities and metadata.

    Derived from an agent's configuration on every request; never stored.
    """

    name: str
    description: str | None = None
    url: str
    provider: AgentProvider | None = None
    version: str = "1.0.0"
    documentationUrl: str | None = None
    capabilities: AgentCapabilities = Field(default_factory=AgentCapabilities)
    defaultInputModes: list[InputMode] = Field(default_factory=lambda: ["text"])
    defaultOutputModes: list[OutputMode] = Field(default_factory=lambda: ["text"])
    skills: list[AgentSkill] = Field(default_factory=list)
    protocolVersions: list[str] = Field(default_factory=lambda: ["1.0"])


# ============================================================================
# JSON-RPC Envelopes
# ============================================================================


class JsonRpcError(BaseModel):
    """JSON-RPC error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request envelope."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | float
    method: str
    params: dict[str, Any] | None = None


class JsonRpcResponse(BaseModel):
    """JSON-RPC 2.0 response envelope (exactly one of result/error)."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | float | None
    result: Any = None
    error: JsonRpcError | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire representation: ``result`` on success, ``error`` otherwise."""
        body: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            body["error"] = self.error.model_dump(mode="json", exclude_none=True)
        else:
            body["result"] = to_wire(self.result)
        return body


# ============================================================================
# Method Parameters
# ============================================================================


class PushNotificationConfig(BaseModel):
    """Push notification target (accepted, never delivered)."""

    url: str
    token: str | None = None


class TaskSendParams(BaseModel):
    """Parameters of ``tasks/send``."""

    id: str | None = None
    contextId: str | None = None
    message: Message
    pushNotification: PushNotificationConfig | None = None
    historyLength: int | None = Field(None, ge=0)
    metadata: dict[str, Any] | None = None


class TaskGetParams(BaseModel):
    """Parameters of ``tasks/get``."""

    id: str
    historyLength: int | None = Field(None, ge=0)


class TaskCancelParams(BaseModel):
    """Parameters of ``tasks/cancel``."""

    id: str


# ============================================================================
# Executor Contract
# ============================================================================


class ExecutionContext(BaseModel):
    """What an executor knows about the task it is running for."""

    taskId: str
    contextId: str | None = None
    history: list[Message] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None


class AgentResponse(BaseModel):
    """Executor result: new status plus optional artifacts."""

    status: TaskStatus
    artifacts: list[Artifact] | None = None


def to_wire(value: Any) -> Any:
    """Dump models (or lists of models) to JSON-compatible data, dropping unset optionals."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, list):
        return [to_wire(item) for item in value]
    return value
