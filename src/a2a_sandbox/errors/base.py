"""Base exception classes for the A2A sandbox."""

from typing import Any

from a2a_sandbox.errors.codes import ErrorCode


class SandboxError(Exception):
    """Base exception for all sandbox errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize error.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error string."""
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "code": str(self.code),
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(SandboxError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class StorageError(SandboxError):
    """Persistence-layer errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.STORAGE_NOT_AVAILABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class TaskNotFoundError(SandboxError):
    """Raised when a task id does not resolve to a stored task."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            f"Task not found: {task_id}",
            ErrorCode.TASK_NOT_FOUND,
            {"task_id": task_id},
        )
        self.task_id = task_id


class InvalidStateTransitionError(SandboxError):
    """Raised when a task status update violates the state graph."""

    def __init__(self, task_id: str, current: str, requested: str) -> None:
        terminal = current in ("completed", "failed", "canceled")
        if terminal:
            message = f"Task is already in terminal state: {current}"
            code = ErrorCode.TASK_TERMINAL
        else:
            message = f"Invalid state transition: {current} -> {requested}"
            code = ErrorCode.TASK_INVALID_TRANSITION
        super().__init__(
            message,
            code,
            {"task_id": task_id, "current": current, "requested": requested},
        )
        self.task_id = task_id
        self.current = current
        self.requested = requested
        self.terminal = terminal


class AgentNotFoundError(SandboxError):
    """Raised when an agent id is not registered."""

    def __init__(self, agent_id: str) -> None:
        super().__init__(
            f"Agent not found: {agent_id}",
            ErrorCode.AGENT_NOT_FOUND,
            {"agent_id": agent_id},
        )
        self.agent_id = agent_id


class ExecutionError(SandboxError):
    """Execution-related errors inside an agent skill."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.AGENT_EXECUTION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class LLMUnavailableError(SandboxError):
    """The language-model collaborator could not produce a reply."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_UNAVAILABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
