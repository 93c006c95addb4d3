"""Fake collaborators for testing."""

from __future__ import annotations

from typing import Any

from a2a_sandbox.agents.base import AgentConfig, AgentExecutor
from a2a_sandbox.errors import LLMUnavailableError
from a2a_sandbox.llm import ChatMessage, LanguageModel
from a2a_sandbox.protocols.a2a.messages import create_text_message
from a2a_sandbox.protocols.a2a.models import (
    AgentResponse,
    DataPart,
    ExecutionContext,
    Message,
    MessageRole,
    Task,
    TextPart,
)


class FakeLanguageModel(LanguageModel):
    """In-memory language model returning canned replies."""

    def __init__(
        self,
        replies: list[str] | None = None,
        available: bool = True,
        error: Exception | None = None,
    ) -> None:
        self.replies = list(replies or ["Fake reply"])
        self.available = available
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def is_available(self) -> bool:
        return self.available

    async def complete(
        self,
        messages: list[ChatMessage],
        temperature: float | None = None,
        max_tokens: int | None = None,
        stop: list[str] | None = None,
    ) -> str:
        self.calls.append(
            {"messages": messages, "temperature": temperature, "max_tokens": max_tokens}
        )
        if self.error is not None:
            raise self.error
        if not self.available:
            raise LLMUnavailableError("Fake LLM unavailable")
        return self.replies[min(len(self.calls), len(self.replies)) - 1]

    async def close(self) -> None:
        self.closed = True


class ScriptedExecutor(AgentExecutor):
    """Executor that replays a fixed response, or raises a fixed error."""

    def __init__(
        self,
        response: AgentResponse | None = None,
        error: Exception | None = None,
        agent_id: str = "scripted",
    ) -> None:
        super().__init__(AgentConfig(id=agent_id, name="Scripted"), base_url="http://test")
        self.response = response
        self.error = error
        self.calls: list[tuple[Task, Message, ExecutionContext]] = []

    async def execute(
        self,
        task: Task,
        message: Message,
        context: ExecutionContext,
    ) -> AgentResponse:
        self.calls.append((task, message, context))
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


def user_text(text: str) -> Message:
    """User message with a single text part."""
    return create_text_message(MessageRole.USER, text)


def user_action(action: str, **params: Any) -> Message:
    """User message carrying a structured ``{"action", "params"}`` data part."""
    return Message(
        role=MessageRole.USER,
        parts=[DataPart(data={"action": action, "params": params})],
    )


def text_of(message: Message | None) -> str:
    """Text of the first text part (empty when absent)."""
    if message is None:
        return ""
    return next((p.text for p in message.parts if isinstance(p, TextPart)), "")


def data_of(message: Message | None) -> dict[str, Any]:
    """Payload of the first data part (empty when absent)."""
    if message is None:
        return {}
    return next((p.data for p in message.parts if isinstance(p, DataPart)), {})
