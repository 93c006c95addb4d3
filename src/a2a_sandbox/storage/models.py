"""Persistence-level records."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from a2a_sandbox.protocols.a2a.models import TaskStatus
from a2a_sandbox.utils.timeutils import current_timestamp

Visibility = Literal["busy", "available", "tentative"]


class TaskRecord(BaseModel):
    """Task row without its history and artifacts."""

    id: str
    contextId: str | None = None
    status: TaskStatus
    metadata: dict[str, Any] = Field(default_factory=dict)
    createdAt: str = Field(default_factory=current_timestamp)
    updatedAt: str = Field(default_factory=current_timestamp)


class Schedule(BaseModel):
    """A private calendar entry owned by one agent."""

    id: str
    agentId: str
    title: str
    description: str | None = None
    startTime: str  # HH:mm
    endTime: str  # HH:mm
    eventDate: str  # YYYY-MM-DD
    isPrivate: bool = True
    visibility: Visibility = "busy"
    createdAt: str = Field(default_factory=current_timestamp)


class AgentRecord(BaseModel):
    """Static roster entry for an addressable agent."""

    id: str
    name: str
    description: str | None = None
    endpoint: str
    avatarColor: str = "#6366f1"
    isActive: bool = True
    createdAt: str = Field(default_factory=current_timestamp)
