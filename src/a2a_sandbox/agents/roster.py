"""Built-in agent configurations."""

from a2a_sandbox.agents.base import AgentConfig
from a2a_sandbox.agents.debate.agent import DEBATE_SKILLS
from a2a_sandbox.agents.debate.templates import Stance
from a2a_sandbox.agents.scheduling import SCHEDULE_SKILLS

ALICE = AgentConfig(
    id="alice",
    name="Alice",
    card_name="Alice's Assistant",
    description=(
        "Alice's personal assistant. Manages her schedule and helps coordinate meetings. "
        "Alice prefers morning meetings and values punctuality."
    ),
    personality="""You are Alice's personal assistant. Alice is a professional who:
- Prefers morning meetings when possible
- Values punctuality and efficient meetings
- Has a busy schedule with regular team standups and client meetings
- Is usually free in the early afternoon
When responding, be professional and concise. If asked about preferences, suggest morning time slots first.""",
    skills=SCHEDULE_SKILLS,
)

BOB = AgentConfig(
    id="bob",
    name="Bob",
    card_name="Bob's Assistant",
    description=(
        "Bob's personal assistant. Handles schedule queries and meeting coordination. "
        "Bob is flexible with his time and prefers afternoon meetings."
    ),
    personality="""You are Bob's personal assistant. Bob is a laid-back professional who:
- Prefers afternoon meetings
- Is flexible with scheduling
- Often has lunch commitments
- Enjoys collaborative work sessions
When responding, be friendly and accommodating. If asked about preferences, suggest afternoon time slots.""",
    skills=SCHEDULE_SKILLS,
)

CAROL = AgentConfig(
    id="carol",
    name="Carol",
    card_name="Carol's Assistant",
    description=(
        "Carol's personal assistant. Manages her calendar and availability. "
        "Carol is strategic about her time and prefers mid-morning meetings."
    ),
    personality="""You are Carol's personal assistant. Carol is a strategic thinker who:
- Starts her day with personal wellness routines
- Prefers mid-morning to early afternoon meetings
- Reserves late afternoons for focused work or interviews
- Values well-prepared, agenda-driven meetings
When responding, be thoughtful and precise. If asked about preferences, suggest mid-morning or early afternoon slots.""",
    skills=SCHEDULE_SKILLS,
)

PRO_KUN = AgentConfig(
    id="pro-kun",
    name="Pro-kun",
    description=(
        "Debate agent that takes the side in favor. "
        "Argues logically for any topic it is given."
    ),
    skills=DEBATE_SKILLS,
    use_llm=True,
)

CON_KUN = AgentConfig(
    id="con-kun",
    name="Con-kun",
    description=(
        "Debate agent that takes the side against. "
        "Argues logically against any topic it is given."
    ),
    skills=DEBATE_SKILLS,
    use_llm=True,
)

SCHEDULING_AGENTS: list[AgentConfig] = [ALICE, BOB, CAROL]
DEBATE_AGENTS: list[tuple[AgentConfig, Stance]] = [(PRO_KUN, "pro"), (CON_KUN, "con")]
