"""Sample roster and calendar data."""

from typing import Any

from a2a_sandbox.logging import get_logger
from a2a_sandbox.storage.base import StorageBackend
from a2a_sandbox.storage.models import AgentRecord, Schedule
from a2a_sandbox.utils.ids import generate_schedule_id
from a2a_sandbox.utils.timeutils import today_string

logger = get_logger(__name__)

SEED_AGENTS: list[dict[str, Any]] = [
    {
        "id": "alice",
        "name": "Alice",
        "description": "Alice's personal assistant. Manages her schedule and coordinates meetings.",
        "avatarColor": "#ec4899",
    },
    {
        "id": "bob",
        "name": "Bob",
        "description": "Bob's personal assistant. Handles schedule queries and meeting coordination.",
        "avatarColor": "#3b82f6",
    },
    {
        "id": "carol",
        "name": "Carol",
        "description": "Carol's personal assistant. Manages her calendar and availability.",
        "avatarColor": "#22c55e",
    },
    {
        "id": "pro-kun",
        "name": "Pro-kun",
        "description": "Debate agent that argues in favor of any topic.",
        "avatarColor": "#f97316",
    },
    {
        "id": "con-kun",
        "name": "Con-kun",
        "description": "Debate agent that argues against any topic.",
        "avatarColor": "#8b5cf6",
    },
]

# (agent, title, description, start, end, private)
SEED_SCHEDULES: list[tuple[str, str, str, str, str, bool]] = [
    # Alice: morning meetings, free afternoon
    ("alice", "Team Standup", "Daily team sync meeting", "09:00", "09:30", False),
    ("alice", "Dentist Appointment", "Regular checkup", "10:00", "11:00", True),
    (
        "alice",
        "Product Review",
        "Quarterly product review with stakeholders",
        "11:30",
        "12:30",
        False,
    ),
    # Bob: late morning meetings
    ("bob", "Client Call", "Weekly check-in with client", "10:00", "11:00", False),
    ("bob", "Lunch with friend", "Catching up with old colleague", "12:00", "13:00", True),
    ("bob", "Code Review", "Review PRs for sprint", "15:00", "16:00", False),
    # Carol: afternoon meetings
    ("carol", "Morning Yoga", "Weekly yoga class", "08:00", "09:00", True),
    ("carol", "Strategy Meeting", "Planning session with leadership", "13:00", "14:00", False),
    ("carol", "Interview", "Candidate interview for open position", "16:00", "17:00", False),
]


async def seed_database(storage: StorageBackend, today: str | None = None) -> bool:
    """Insert the roster and today's sample schedules.

    Safe to call repeatedly: does nothing once any agent row exists.

    Args:
        storage: Target backend
        today: Date to place the schedules on (defaults to today)

    Returns:
        True if data was inserted, False if the store was already seeded
    """
    if await storage.count_agents() > 0:
        logger.debug("Database already seeded")
        return False

    event_date = today or today_string()

    for agent in SEED_AGENTS:
        await storage.insert_agent(
            AgentRecord(endpoint=f"/api/agents/{agent['id']}", **agent)
        )

    for agent_id, title, description, start, end, private in SEED_SCHEDULES:
        await storage.insert_schedule(
            Schedule(
                id=generate_schedule_id(),
                agentId=agent_id,
                title=title,
                description=description,
                startTime=start,
                endTime=end,
                eventDate=event_date,
                isPrivate=private,
                visibility="busy",
            )
        )

    logger.info(
        "Database seeded",
        agents=len(SEED_AGENTS),
        schedules=len(SEED_SCHEDULES),
        event_date=event_date,
    )
    return True


async def get_seed_summary(storage: StorageBackend) -> dict[str, int]:
    """Row counts for the roster and calendar."""
    return {
        "agents": await storage.count_agents(),
        "schedules": await storage.count_schedules(),
    }
