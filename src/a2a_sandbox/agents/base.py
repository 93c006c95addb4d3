"""Base executor interface for A2A agents."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from a2a_sandbox.config import get_settings
from a2a_sandbox.protocols.a2a.agent_card import create_agent_card, get_skills
from a2a_sandbox.protocols.a2a.models import (
    AgentCard,
    AgentResponse,
    DataPart,
    ExecutionContext,
    Message,
    MessageRole,
    Part,
    Task,
    TaskState,
    TaskStatus,
    TextPart,
)


class AgentConfig(BaseModel):
    """Static configuration an executor and its agent card derive from."""

    id: str = Field(..., description="Unique agent identifier")
    name: str = Field(..., description="Display name")
    description: str | None = Field(None, description="Agent description")
    personality: str | None = Field(None, description="System prompt persona text")
    skills: list[str] = Field(default_factory=list, description="Enabled skill ids")
    use_llm: bool = Field(default=False, description="Route unclear requests to the LLM")
    card_name: str | None = Field(None, description="Card name (defaults to name)")


class AgentExecutor(ABC):
    """Base class for all agent executors.

    An executor interprets one incoming message for a task and returns the
    task's next status plus optional artifacts. Executors report business
    failures as a ``failed`` status rather than raising.
    """

    def __init__(self, config: AgentConfig, base_url: str | None = None) -> None:
        """Initialize executor.

        Args:
            config: Agent configuration
            base_url: Public base URL for the card (defaults to settings)
        """
        self.config = config
        self.base_url = base_url

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @abstractmethod
    async def execute(
        self,
        task: Task,
        message: Message,
        context: ExecutionContext,
    ) -> AgentResponse:
        """Process a message for a task.

        Args:
            task: Task the message belongs to
            message: Incoming user message
            context: Task id, context id, history and request metadata

        Returns:
            New status and optional artifacts
        """
        pass

    def get_agent_card(self) -> AgentCard:
        """Derive the agent card from the current configuration."""
        base_url = self.base_url or get_settings().base_url
        return create_agent_card(
            name=self.config.card_name or self.config.name,
            description=self.config.description,
            url=f"{base_url}/api/agents/{self.config.id}",
            skills=get_skills(self.config.skills),
        )


def agent_message(text: str, data: dict[str, Any] | None = None) -> Message:
    """Agent-authored message: a text part, then an optional data part."""
    parts: list[Part] = [TextPart(text=text)]
    if data is not None:
        parts.append(DataPart(data=data))
    return Message(role=MessageRole.AGENT, parts=parts)


def completed_response(text: str, data: dict[str, Any] | None = None) -> AgentResponse:
    return AgentResponse(
        status=TaskStatus(state=TaskState.COMPLETED, message=agent_message(text, data))
    )


def failed_response(text: str, data: dict[str, Any] | None = None) -> AgentResponse:
    return AgentResponse(
        status=TaskStatus(state=TaskState.FAILED, message=agent_message(text, data))
    )


def error_response(error: str) -> AgentResponse:
    """Failed response whose text is ``Error: <error>``."""
    return failed_response(f"Error: {error}")


def input_required_response(text: str) -> AgentResponse:
    return AgentResponse(
        status=TaskStatus(state=TaskState.INPUT_REQUIRED, message=agent_message(text))
    )
