"""Error codes for the A2A sandbox."""

from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes."""

    # Configuration errors (1xxx)
    CONFIG_INVALID = "A2A-1002"

    # Storage errors (2xxx)
    STORAGE_NOT_AVAILABLE = "A2A-2001"
    STORAGE_READ_ERROR = "A2A-2002"
    STORAGE_WRITE_ERROR = "A2A-2003"

    # Task errors (3xxx)
    TASK_NOT_FOUND = "A2A-3001"
    TASK_INVALID_TRANSITION = "A2A-3002"
    TASK_TERMINAL = "A2A-3003"

    # Agent errors (4xxx)
    AGENT_NOT_FOUND = "A2A-4001"
    AGENT_EXECUTION_FAILED = "A2A-4002"
    VALIDATION_ERROR = "A2A-4003"

    # Collaborator errors (5xxx)
    LLM_UNAVAILABLE = "A2A-5001"
    LLM_TIMEOUT = "A2A-5002"

    # Unknown error
    UNKNOWN = "A2A-9999"

    def __str__(self) -> str:
        """Return the error code value."""
        return self.value
