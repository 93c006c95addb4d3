"""Agent Card generation for A2A protocol."""

from typing import Any

from a2a_sandbox.protocols.a2a.models import (
    AgentCapabilities,
    AgentCard,
    AgentProvider,
    AgentSkill,
)


def _schema(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


_DATE = {"type": "string", "description": "Date in YYYY-MM-DD format"}
_START = {"type": "string", "description": "Start time in HH:mm format"}
_END = {"type": "string", "description": "End time in HH:mm format"}
_STANCE = {"type": "string", "enum": ["pro", "con"], "description": "The agent's stance"}
_SLOT_LIST = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "startTime": {"type": "string"},
            "endTime": {"type": "string"},
            "status": {"type": "string"},
        },
    },
}

STANDARD_SKILLS: dict[str, AgentSkill] = {
    "check-availability": AgentSkill(
        id="check-availability",
        name="Check Availability",
        description=(
            "Check if the agent owner is available during a specific time range. "
            "Returns availability status without revealing private schedule details."
        ),
        tags=["schedule", "availability", "privacy"],
        examples=[
            "Are you available on 2024-01-15 from 14:00 to 15:00?",
            "Check availability for tomorrow afternoon",
        ],
        inputModes=["text", "data"],
        outputModes=["text", "data"],
        inputSchema=_schema(
            {"date": _DATE, "startTime": _START, "endTime": _END},
            ["date", "startTime", "endTime"],
        ),
        outputSchema=_schema(
            {
                "available": {
                    "type": "boolean",
                    "description": "Whether the time slot is available",
                },
                "status": {
                    "type": "string",
                    "enum": ["available", "busy", "tentative"],
                    "description": "Availability status",
                },
                "busySlots": {**_SLOT_LIST, "description": "Privacy-filtered busy slots"},
            },
            ["available", "status"],
        ),
    ),
    "get-busy-slots": AgentSkill(
        id="get-busy-slots",
        name="Get Busy Slots",
        description=(
            "Get all busy time slots for a specific date. "
            "Returns only busy/available status, not event details."
        ),
        tags=["schedule", "availability", "privacy"],
        examples=["What times are you busy today?", "Get busy slots for 2024-01-15"],
        inputModes=["text", "data"],
        outputModes=["text", "data"],
        inputSchema=_schema({"date": _DATE}, ["date"]),
        outputSchema=_schema(
            {
                "date": {"type": "string", "description": "The queried date"},
                "busySlots": {**_SLOT_LIST, "description": "List of busy time slots"},
                "freeSlots": {**_SLOT_LIST, "description": "Free slots within working hours"},
            },
            ["date", "busySlots"],
        ),
    ),
    "schedule-meeting": AgentSkill(
        id="schedule-meeting",
        name="Schedule Meeting",
        description=(
            "Schedule a meeting at a specific time. "
            "Adds the meeting to the calendar if the time slot is available."
        ),
        tags=["schedule", "meeting"],
        examples=[
            "Schedule a meeting on 2024-01-15 from 14:00 to 15:00",
            'Book a meeting called "Team Sync" on 2024-01-15 at 10:00',
        ],
        inputModes=["text", "data"],
        outputModes=["text", "data"],
        inputSchema=_schema(
            {
                "title": {"type": "string", "description": "Meeting title"},
                "date": _DATE,
                "startTime": _START,
                "endTime": _END,
                "description": {
                    "type": "string",
                    "description": "Optional meeting description",
                },
            },
            ["title", "date", "startTime", "endTime"],
        ),
        outputSchema=_schema(
            {
                "success": {
                    "type": "boolean",
                    "description": "Whether the meeting was scheduled successfully",
                },
                "meetingId": {"type": "string", "description": "ID of the created meeting"},
                "conflict": {
                    "type": "boolean",
                    "description": "Set when the requested time overlaps an existing entry",
                },
            },
            ["success"],
        ),
    ),
    "debate-argue": AgentSkill(
        id="debate-argue",
        name="Debate Argue",
        description="Present an argument for or against a given topic based on the agent's assigned stance.",
        tags=["debate", "argument"],
        examples=[
            "Present your argument about remote work",
            "Argue your position on AI regulation",
        ],
        inputModes=["data"],
        outputModes=["text", "data"],
        inputSchema=_schema(
            {"topic": {"type": "string", "description": "The debate topic"}}, ["topic"]
        ),
        outputSchema=_schema(
            {
                "stance": _STANCE,
                "argument": {"type": "string", "description": "The generated argument text"},
                "perspective": {
                    "type": "string",
                    "description": "The perspective used (ethics, practical, economic, innovation)",
                },
            },
            ["stance", "argument"],
        ),
    ),
    "debate-rebut": AgentSkill(
        id="debate-rebut",
        name="Debate Rebut",
        description="Present a rebuttal to the opponent's argument on the given topic.",
        tags=["debate", "rebuttal"],
        examples=["Rebut the opponent's argument about remote work"],
        inputModes=["data"],
        outputModes=["text", "data"],
        inputSchema=_schema(
            {
                "topic": {"type": "string", "description": "The debate topic"},
                "opponentArgument": {
                    "type": "string",
                    "description": "The opponent's argument to rebut",
                },
            },
            ["topic", "opponentArgument"],
        ),
        outputSchema=_schema(
            {
                "stance": _STANCE,
                "rebuttal": {"type": "string", "description": "The generated rebuttal text"},
            },
            ["stance", "rebuttal"],
        ),
    ),
}


def get_skills(skill_ids: list[str]) -> list[AgentSkill]:
    """Look up catalogue skills by id, in the given order.

    Raises:
        KeyError: If an id is not in the catalogue
    """
    return [STANDARD_SKILLS[skill_id].model_copy(deep=True) for skill_id in skill_ids]


def create_agent_card(
    name: str,
    url: str,
    skills: list[AgentSkill],
    description: str | None = None,
    version: str = "1.0.0",
    provider: AgentProvider | None = None,
) -> AgentCard:
    """Build an Agent Card with the sandbox's fixed capabilities.

    Args:
        name: Display name
        url: JSON-RPC endpoint of the agent
        skills: Advertised skills, in order
        description: Optional description
        version: Agent version string
        provider: Optional provider information

    Returns:
        Agent card (a new object on every call)
    """
    return AgentCard(
        name=name,
        description=description,
        url=url,
        version=version,
        provider=provider,
        capabilities=AgentCapabilities(
            streaming=False,
            pushNotifications=False,
            stateTransitionHistory=True,
        ),
        defaultInputModes=["text"],
        defaultOutputModes=["text"],
        skills=list(skills),
        protocolVersions=["1.0"],
    )
