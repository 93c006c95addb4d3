"""Privacy filtering of schedule data before it leaves an agent."""

from collections.abc import Iterable
from typing import Any, Literal

from pydantic import BaseModel, Field

from a2a_sandbox.logging import get_logger
from a2a_sandbox.privacy.rules import (
    SCHEDULE_PRIVACY_RULES,
    PrivacyContext,
    PrivacyRule,
    is_sensitive_field,
)
from a2a_sandbox.storage.models import Schedule, Visibility
from a2a_sandbox.utils.timeutils import from_minutes, to_minutes

audit_logger = get_logger("a2a_sandbox.privacy.audit")

WORK_START = "09:00"
WORK_END = "18:00"


class PublicSchedule(BaseModel):
    """Privacy-filtered projection of a schedule entry."""

    startTime: str
    endTime: str
    status: Visibility
    title: str | None = None


class TimeSlot(BaseModel):
    """A free interval ``[startTime, endTime)``."""

    startTime: str
    endTime: str


class AvailabilityResult(BaseModel):
    """Privacy-safe answer to an availability query."""

    available: bool
    busySlots: list[PublicSchedule] = Field(default_factory=list)
    freeSlots: list[TimeSlot] = Field(default_factory=list)


def filter_schedule(schedule: Schedule, context: PrivacyContext) -> PublicSchedule:
    """Project one schedule entry for the given requester.

    The owner sees the title unconditionally; anyone else sees it only for
    non-private entries. Descriptions never appear in the projection.
    """
    if context.requester_type == "owner":
        return PublicSchedule(
            startTime=schedule.startTime,
            endTime=schedule.endTime,
            status=schedule.visibility,
            title=schedule.title,
        )

    record_context = PrivacyContext(
        requester_type=context.requester_type,
        requester_id=context.requester_id,
        is_private=schedule.isPrivate,
    )
    hide_title = any(
        rule.field == "title" and rule.applies(schedule.title, record_context)
        for rule in SCHEDULE_PRIVACY_RULES
    )

    return PublicSchedule(
        startTime=schedule.startTime,
        endTime=schedule.endTime,
        status=schedule.visibility,
        title=None if hide_title or schedule.isPrivate else schedule.title,
    )


def filter_schedules(
    schedules: Iterable[Schedule], context: PrivacyContext
) -> list[PublicSchedule]:
    return [filter_schedule(schedule, context) for schedule in schedules]


def apply_privacy_filter(
    data: dict[str, Any],
    rules: list[PrivacyRule],
    context: PrivacyContext,
) -> dict[str, Any]:
    """Apply field rules to an arbitrary record.

    Sensitive fields are dropped for external requesters. Otherwise the first
    matching rule decides: ``hide`` drops the field, ``mask`` replaces it with
    ``***``, ``replace`` substitutes the rule's replacement.
    """
    result: dict[str, Any] = {}
    for key, value in data.items():
        if context.requester_type == "external" and is_sensitive_field(key):
            continue

        rule = next((r for r in rules if r.field == key and r.applies(value, context)), None)
        if rule is None:
            result[key] = value
        elif rule.action == "mask":
            result[key] = "***"
        elif rule.action == "replace":
            result[key] = rule.replacement or ""
        # hide: omit the field
    return result


def calculate_free_slots(
    busy: Iterable[tuple[str, str]],
    work_start: str = WORK_START,
    work_end: str = WORK_END,
) -> list[TimeSlot]:
    """Complement busy intervals within the working window.

    Overlapping or adjacent busy intervals are merged implicitly: the cursor
    only ever moves forward past busy-interval ends.
    """
    intervals = sorted((to_minutes(start), to_minutes(end)) for start, end in busy)
    window_end = to_minutes(work_end)
    cursor = to_minutes(work_start)

    free: list[TimeSlot] = []
    for busy_start, busy_end in intervals:
        if cursor < busy_start and cursor < window_end:
            free.append(
                TimeSlot(
                    startTime=from_minutes(cursor),
                    endTime=from_minutes(min(busy_start, window_end)),
                )
            )
        if busy_end > cursor:
            cursor = busy_end

    if cursor < window_end:
        free.append(TimeSlot(startTime=from_minutes(cursor), endTime=from_minutes(window_end)))
    return free


def is_range_available(
    busy: Iterable[tuple[str, str]], start_time: str, end_time: str
) -> bool:
    """True iff ``[start_time, end_time)`` overlaps no busy interval."""
    query_start, query_end = to_minutes(start_time), to_minutes(end_time)
    return not any(
        query_start < to_minutes(busy_end) and query_end > to_minutes(busy_start)
        for busy_start, busy_end in busy
    )


def create_availability_response(
    agent_id: str,
    date: str,
    schedules: list[Schedule],
    query_start_time: str | None = None,
    query_end_time: str | None = None,
    requester_id: str | None = None,
    work_start: str = WORK_START,
    work_end: str = WORK_END,
) -> AvailabilityResult:
    """Availability of one agent on one date, as seen by an external agent.

    Args:
        agent_id: Owner of the schedules
        date: Date being queried
        schedules: The owner's entries for ``date``
        query_start_time: Start of a specific range to check
        query_end_time: End of a specific range to check
        requester_id: Identity of the asking agent, for the audit log
        work_start: Start of the working window
        work_end: End of the working window

    Returns:
        Filtered busy slots, free slots within working hours and, when a
        range is given, whether that range is free
    """
    context = PrivacyContext(requester_type="external", requester_id=requester_id)
    public = filter_schedules(schedules, context)
    busy = [(slot.startTime, slot.endTime) for slot in public]

    available = True
    if query_start_time and query_end_time:
        available = is_range_available(busy, query_start_time, query_end_time)

    log_privacy_action(
        action="filter",
        agent_id=agent_id,
        requester_id=requester_id,
        data_type="schedule",
        fields_affected=_affected_fields(schedules),
        date=date,
    )

    return AvailabilityResult(
        available=available,
        busySlots=public,
        freeSlots=calculate_free_slots(busy, work_start, work_end),
    )


def _affected_fields(schedules: list[Schedule]) -> list[str]:
    fields = set()
    for schedule in schedules:
        if schedule.description is not None:
            fields.add("description")
        if schedule.isPrivate:
            fields.add("title")
    return sorted(fields)


def log_privacy_action(
    action: Literal["filter", "access", "deny"],
    agent_id: str,
    data_type: str,
    requester_id: str | None = None,
    fields_affected: list[str] | None = None,
    **extra: Any,
) -> None:
    """Record a privacy decision in the audit log."""
    audit_logger.info(
        "Privacy action",
        action=action,
        agent_id=agent_id,
        requester_id=requester_id,
        data_type=data_type,
        fields_affected=fields_affected or [],
        **extra,
    )
