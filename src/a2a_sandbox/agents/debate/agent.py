"""Debate agent arguing a fixed stance on any topic."""

from typing import Any, Literal

from a2a_sandbox.agents.base import (
    AgentConfig,
    AgentExecutor,
    completed_response,
    error_response,
)
from a2a_sandbox.agents.debate.templates import Stance, generate_argument
from a2a_sandbox.errors import LLMUnavailableError
from a2a_sandbox.llm import (
    ChatMessage,
    LanguageModel,
    build_debate_system_prompt,
    build_debate_user_prompt,
)
from a2a_sandbox.logging import get_logger
from a2a_sandbox.protocols.a2a.messages import extract_data_content, extract_text_content
from a2a_sandbox.protocols.a2a.models import (
    AgentResponse,
    ExecutionContext,
    Message,
    Task,
)

logger = get_logger(__name__)

DEBATE_SKILLS = ["debate-argue", "debate-rebut"]
DEBATE_ACTIONS = {"debate-argue": "argue", "debate-rebut": "rebut"}

DEBATE_TEMPERATURE = 0.8
DEBATE_MAX_TOKENS = 500


class DebateAgent(AgentExecutor):
    """Executor for the pro/con debate agents.

    Arguments come from the language model when it answers, and from the
    deterministic templates otherwise.
    """

    def __init__(
        self,
        config: AgentConfig,
        stance: Stance,
        llm: LanguageModel | None = None,
        base_url: str | None = None,
    ):
        """Initialize agent.

        Args:
            config: Agent configuration
            stance: ``pro`` or ``con``, fixed for the agent's lifetime
            llm: Optional language model
            base_url: Public base URL for the card
        """
        super().__init__(config, base_url)
        self.stance: Stance = stance
        self.llm = llm

    @property
    def stance_label(self) -> str:
        return "in favor" if self.stance == "pro" else "against"

    async def execute(
        self,
        task: Task,
        message: Message,
        context: ExecutionContext,
    ) -> AgentResponse:
        try:
            for data in extract_data_content(message):
                action = data.get("action")
                if action in DEBATE_ACTIONS:
                    params = data.get("params")
                    return await self._handle_debate_action(
                        action, params if isinstance(params, dict) else {}
                    )

            if extract_text_content(message):
                return completed_response(
                    f"Hello! I'm {self.name}. I'll take the side {self.stance_label} "
                    "in the debate. Please set a topic!"
                )
            return completed_response(f"{self.name} here. Ready for the debate!")
        except Exception as e:
            logger.error("Error executing task", agent_id=self.id, task_id=task.id, error=str(e))
            return error_response(str(e))

    async def _handle_debate_action(
        self, action: str, params: dict[str, Any]
    ) -> AgentResponse:
        topic = params.get("topic")
        if not topic or not isinstance(topic, str):
            return error_response("No topic specified")

        phase: Literal["argue", "rebut"] = DEBATE_ACTIONS[action]
        opponent_argument = params.get("opponentArgument")
        if not isinstance(opponent_argument, str):
            opponent_argument = None

        fallback = generate_argument(topic, self.stance, phase, opponent_argument)
        text = fallback.text
        used_llm = False
        try:
            text = await self._generate_with_llm(topic, phase, opponent_argument)
            used_llm = True
        except LLMUnavailableError as e:
            logger.info("Using template fallback", agent_id=self.id, reason=e.message)

        data: dict[str, Any] = {
            "skill": action,
            "stance": self.stance,
            "phase": phase,
            "topic": topic,
            "usedLLM": used_llm,
        }
        if fallback.perspective is not None and not used_llm:
            data["perspective"] = fallback.perspective
        return completed_response(text, data)

    async def _generate_with_llm(
        self,
        topic: str,
        phase: str,
        opponent_argument: str | None,
    ) -> str:
        if not self.config.use_llm or self.llm is None:
            raise LLMUnavailableError("LLM disabled for this agent")
        if not await self.llm.is_available():
            raise LLMUnavailableError("LLM server is not reachable")

        return await self.llm.complete(
            [
                ChatMessage(
                    role="system",
                    content=build_debate_system_prompt(self.name, self.stance),
                ),
                ChatMessage(
                    role="user",
                    content=build_debate_user_prompt(
                        topic, self.stance, phase, opponent_argument
                    ),
                ),
            ],
            temperature=DEBATE_TEMPERATURE,
            max_tokens=DEBATE_MAX_TOKENS,
        )
