"""Agent executors, their skills and the agent registry."""

from a2a_sandbox.agents.base import AgentConfig, AgentExecutor
from a2a_sandbox.agents.debate import DebateAgent
from a2a_sandbox.agents.registry import AgentRegistry, build_default_registry
from a2a_sandbox.agents.scheduling import SchedulingAgent
from a2a_sandbox.agents.skills import ScheduleSkills, find_common_availability

__all__ = [
    "AgentConfig",
    "AgentExecutor",
    "AgentRegistry",
    "DebateAgent",
    "ScheduleSkills",
    "SchedulingAgent",
    "build_default_registry",
    "find_common_availability",
]
