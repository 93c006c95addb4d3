"""Personal-assistant agent that answers calendar questions."""

from typing import Any

from a2a_sandbox.agents.base import (
    AgentConfig,
    AgentExecutor,
    completed_response,
    error_response,
    failed_response,
    input_required_response,
)
from a2a_sandbox.agents.skills import ScheduleSkills
from a2a_sandbox.errors import LLMUnavailableError, SandboxError
from a2a_sandbox.llm import ChatMessage, LanguageModel, create_agent_system_prompt
from a2a_sandbox.logging import get_logger
from a2a_sandbox.protocols.a2a.agent_card import get_skills
from a2a_sandbox.protocols.a2a.messages import (
    ParsedRequest,
    extract_data_content,
    extract_text_content,
    parse_schedule_request,
)
from a2a_sandbox.protocols.a2a.models import (
    AgentResponse,
    ExecutionContext,
    Message,
    MessageRole,
    Task,
    to_wire,
)
from a2a_sandbox.utils.timeutils import add_hour, resolve_date

logger = get_logger(__name__)

SCHEDULE_SKILLS = ["check-availability", "get-busy-slots", "schedule-meeting"]

MISSING_MEETING_FIELDS = "Please provide the meeting title and time."


def error_text(error: Exception) -> str:
    """Human-readable text of an exception, without error-code decoration."""
    return error.message if isinstance(error, SandboxError) else str(error)


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


class SchedulingAgent(AgentExecutor):
    """Executor for the calendar assistants (Alice, Bob, Carol).

    Structured ``action`` requests go straight to a skill; free text is
    matched against scheduling intents; anything else goes to the language
    model when enabled, or gets a capability greeting.
    """

    def __init__(
        self,
        config: AgentConfig,
        skills: ScheduleSkills,
        llm: LanguageModel | None = None,
        base_url: str | None = None,
    ):
        """Initialize agent.

        Args:
            config: Agent configuration
            skills: Calendar skill set bound to storage
            llm: Optional language model for unclear requests
            base_url: Public base URL for the card
        """
        super().__init__(config, base_url)
        self.skills = skills
        self.llm = llm

    async def execute(
        self,
        task: Task,
        message: Message,
        context: ExecutionContext,
    ) -> AgentResponse:
        try:
            action = next((d for d in extract_data_content(message) if "action" in d), None)
            if action is not None:
                return await self._handle_structured(action)

            text = extract_text_content(message)
            parsed = parse_schedule_request(text)
            if parsed.intent != "unknown":
                return await self._handle_parsed(parsed)

            if self.config.use_llm and self.llm is not None:
                try:
                    return await self._handle_with_llm(text, message, context)
                except LLMUnavailableError as e:
                    logger.warning(
                        "LLM unavailable, answering with greeting",
                        agent_id=self.id,
                        error=e.message,
                    )

            return self._greeting()
        except Exception as e:
            logger.error(
                "Error executing task",
                agent_id=self.id,
                task_id=task.id,
                error=str(e),
            )
            return error_response(error_text(e))

    async def _handle_structured(self, data: dict[str, Any]) -> AgentResponse:
        action = data.get("action")
        params = data.get("params") or {}
        if not isinstance(params, dict):
            return error_response("params must be an object")

        if action == "check-availability":
            return await self.check_availability(
                params.get("date"), params.get("startTime"), params.get("endTime")
            )
        if action == "get-busy-slots":
            return await self.get_busy_slots(params.get("date"))
        if action == "schedule-meeting":
            return await self.schedule_meeting(
                params.get("title"),
                params.get("date"),
                params.get("startTime"),
                params.get("endTime"),
                params.get("description"),
            )
        return error_response(f"Unknown action: {action}")

    async def _handle_parsed(self, parsed: ParsedRequest) -> AgentResponse:
        params = parsed.params
        if parsed.intent == "check-availability":
            return await self.check_availability(
                params.get("date"), params.get("startTime"), params.get("endTime")
            )
        if parsed.intent == "get-busy-slots":
            return await self.get_busy_slots(params.get("date"))
        return await self.schedule_meeting(
            params.get("title"),
            params.get("date"),
            params.get("startTime"),
            params.get("endTime"),
        )

    async def _handle_with_llm(
        self, text: str, message: Message, context: ExecutionContext
    ) -> AgentResponse:
        history = context.history
        # history already ends with the incoming message
        if history and history[-1] == message:
            history = history[:-1]

        system_prompt = create_agent_system_prompt(
            name=self.name,
            skills=get_skills(self.config.skills),
            personality=self.config.personality,
        )
        messages = [ChatMessage(role="system", content=system_prompt)]
        messages += [
            ChatMessage(
                role="user" if m.role == MessageRole.USER else "assistant",
                content=extract_text_content(m),
            )
            for m in history
        ]
        messages.append(ChatMessage(role="user", content=text))

        reply = await self.llm.complete(messages)
        return completed_response(reply)

    def _greeting(self) -> AgentResponse:
        return completed_response(
            f"Hello! I'm {self.name}'s assistant. I can help you with:\n\n"
            "• Checking availability for specific times\n"
            "• Viewing busy time slots for a day\n"
            "• Scheduling meetings\n\n"
            "How can I help you today?"
        )

    async def check_availability(
        self,
        date: str | None,
        start_time: str | None = None,
        end_time: str | None = None,
    ) -> AgentResponse:
        result = await self.skills.check_availability(self.id, date, start_time, end_time)
        data = _compact(
            {
                "skill": "check-availability",
                "available": result.available,
                "status": result.status,
                "date": result.date,
                "startTime": start_time,
                "endTime": end_time,
                "busySlots": to_wire(result.busySlots),
            }
        )
        return completed_response(result.message, data)

    async def get_busy_slots(self, date: str | None) -> AgentResponse:
        result = await self.skills.get_busy_slots(self.id, date)

        if result.busySlots:
            lines = [f"Busy times on {result.date}:"]
            for slot in result.busySlots:
                title = f" - {slot.title}" if slot.title else ""
                lines.append(f"• {slot.startTime} - {slot.endTime}{title}")
        else:
            lines = [f"No scheduled events on {result.date}. The calendar is clear!"]

        if result.freeSlots:
            lines += ["", "Free time slots:"]
            lines += [f"• {slot.startTime} - {slot.endTime}" for slot in result.freeSlots]

        data = {
            "skill": "get-busy-slots",
            "date": result.date,
            "busySlots": to_wire(result.busySlots),
            "freeSlots": to_wire(result.freeSlots),
        }
        return completed_response("\n".join(lines), data)

    async def schedule_meeting(
        self,
        title: str | None,
        date: str | None,
        start_time: str | None,
        end_time: str | None,
        description: str | None = None,
    ) -> AgentResponse:
        if not title or not start_time:
            return input_required_response(MISSING_MEETING_FIELDS)
        if not end_time:
            end_time = add_hour(start_time)

        result = await self.skills.schedule_meeting(
            self.id, title, date, start_time, end_time, description
        )
        data = _compact(
            {
                "skill": "schedule-meeting",
                "success": result.success,
                "meetingId": result.meetingId,
                "conflict": result.conflict,
                "title": title,
                "date": resolve_date(date),
                "startTime": start_time,
                "endTime": end_time,
                "description": description,
            }
        )
        if result.success:
            return completed_response(result.message, data)
        return failed_response(result.message, data)
