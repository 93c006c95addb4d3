"""Privacy rules for schedule data.

The rules keep personal information from reaching external agents.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

RequesterType = Literal["internal", "external", "owner"]
RuleAction = Literal["hide", "mask", "replace"]


@dataclass(frozen=True)
class PrivacyContext:
    """Who is asking, and about what kind of record."""

    requester_type: RequesterType = "external"
    requester_id: str | None = None
    is_private: bool | None = None


@dataclass(frozen=True)
class PrivacyRule:
    """One field-level rule; applies when ``condition`` is absent or true."""

    field: str
    action: RuleAction
    replacement: str | None = None
    condition: Callable[[Any, PrivacyContext], bool] | None = None

    def applies(self, value: Any, context: PrivacyContext) -> bool:
        return self.condition is None or self.condition(value, context)


SCHEDULE_PRIVACY_RULES: list[PrivacyRule] = [
    # private event titles become a generic marker
    PrivacyRule(
        field="title",
        action="replace",
        replacement="Busy",
        condition=lambda _, ctx: ctx.is_private is True,
    ),
    PrivacyRule(
        field="description",
        action="hide",
        condition=lambda _, ctx: ctx.requester_type == "external",
    ),
    PrivacyRule(
        field="description",
        action="hide",
        condition=lambda _, ctx: ctx.is_private is True,
    ),
]

# Always safe to expose
SAFE_FIELDS = frozenset({"startTime", "endTime", "status", "visibility", "available"})

# Never exposed to external agents
SENSITIVE_FIELDS = frozenset({"description", "notes", "attendees", "location"})


def is_safe_field(name: str) -> bool:
    return name in SAFE_FIELDS


def is_sensitive_field(name: str) -> bool:
    return name in SENSITIVE_FIELDS
