"""Language-model collaborator."""

from a2a_sandbox.llm.client import ChatMessage, LanguageModel, LLMClient
from a2a_sandbox.llm.prompts import (
    build_debate_system_prompt,
    build_debate_user_prompt,
    create_agent_system_prompt,
)

__all__ = [
    "ChatMessage",
    "LLMClient",
    "LanguageModel",
    "build_debate_system_prompt",
    "build_debate_user_prompt",
    "create_agent_system_prompt",
]
