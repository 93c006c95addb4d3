"""Prompt templates for agent tasks."""

from collections.abc import Iterable

from a2a_sandbox.protocols.a2a.models import AgentSkill

STANCE_LABELS = {"pro": "in favor", "con": "against"}


def create_agent_system_prompt(
    name: str,
    skills: Iterable[AgentSkill],
    personality: str | None = None,
) -> str:
    """System prompt for a scheduling assistant."""
    skill_lines = "\n".join(f"- {skill.name}: {skill.description}" for skill in skills)
    return f"""You are a personal assistant for {name}.

{personality or ""}

You have the following capabilities:
{skill_lines}

When users ask about availability or scheduling:
1. Always be clear about which dates and times you're referring to
2. Use 24-hour time format (e.g., 14:00 instead of 2 PM)
3. Respect privacy - never reveal details of private events, just say "busy"
4. Be helpful in finding alternative times if the requested time is not available

Respond in a friendly, professional manner. Keep responses concise but informative."""


def build_debate_system_prompt(name: str, stance: str) -> str:
    """System prompt pinning a debate agent to its stance."""
    label = STANCE_LABELS[stance]
    return f"""You are a debate agent named "{name}".
Your role is to always argue {label} of the given topic.

Rules:
- Keep your position {label} of the topic consistently, no matter what
- Build logical and persuasive arguments
- Draw on several perspectives: ethical, practical, economic and innovation
- Keep it concise, roughly 100 to 200 words
- Stay respectful toward your opponent while stating your position clearly"""


def build_debate_user_prompt(
    topic: str,
    stance: str,
    phase: str,
    opponent_argument: str | None = None,
) -> str:
    """User turn asking for an opening argument or a rebuttal."""
    label = STANCE_LABELS[stance]
    if phase == "argue":
        return f'Topic: "{topic}"\n\nPresent your argument {label} of this topic.'

    opponent = STANCE_LABELS["con" if stance == "pro" else "pro"]
    return (
        f'Topic: "{topic}"\n\n'
        f"Your opponent's argument ({opponent} of the topic):\n{opponent_argument or ''}\n\n"
        f"Rebut this argument while arguing {label} of the topic."
    )
