"""A2A (Agent-to-Agent) protocol engine.

Data model and task state machine. The task store and JSON-RPC handler live
in ``a2a_sandbox.protocols.a2a.task_store`` and
``a2a_sandbox.protocols.a2a.jsonrpc``.
"""

from a2a_sandbox.protocols.a2a.models import (
    TERMINAL_STATES,
    AgentCard,
    AgentSkill,
    Artifact,
    DataPart,
    FilePart,
    Message,
    MessageRole,
    Part,
    Task,
    TaskState,
    TaskStatus,
    TextPart,
)
from a2a_sandbox.protocols.a2a.states import can_transition, is_terminal

__all__ = [
    "TERMINAL_STATES",
    "AgentCard",
    "AgentSkill",
    "Artifact",
    "DataPart",
    "FilePart",
    "Message",
    "MessageRole",
    "Part",
    "Task",
    "TaskState",
    "TaskStatus",
    "TextPart",
    "can_transition",
    "is_terminal",
]
