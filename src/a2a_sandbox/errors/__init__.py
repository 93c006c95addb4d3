"""A2A sandbox error handling system."""

from a2a_sandbox.errors.base import (
    AgentNotFoundError,
    ConfigurationError,
    ExecutionError,
    InvalidStateTransitionError,
    LLMUnavailableError,
    SandboxError,
    StorageError,
    TaskNotFoundError,
)
from a2a_sandbox.errors.codes import ErrorCode
from a2a_sandbox.errors.handlers import format_error

__all__ = [
    "AgentNotFoundError",
    "ConfigurationError",
    "ErrorCode",
    "ExecutionError",
    "InvalidStateTransitionError",
    "LLMUnavailableError",
    "SandboxError",
    "StorageError",
    "TaskNotFoundError",
    "format_error",
]
