"""Debate agents and their deterministic argument templates."""

from a2a_sandbox.agents.debate.agent import DebateAgent
from a2a_sandbox.agents.debate.templates import (
    PERSPECTIVES,
    GeneratedArgument,
    generate_argument,
    generate_summary,
    hash_string,
)

__all__ = [
    "PERSPECTIVES",
    "DebateAgent",
    "GeneratedArgument",
    "generate_argument",
    "generate_summary",
    "hash_string",
]
