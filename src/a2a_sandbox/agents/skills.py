"""Calendar skills shared by the scheduling agents.

All reads that leave an agent go through the privacy filter; only
``schedule_meeting`` looks at raw entries, and only to detect conflicts.
"""

from typing import Literal

from pydantic import BaseModel

from a2a_sandbox.errors import ExecutionError
from a2a_sandbox.errors.codes import ErrorCode
from a2a_sandbox.logging import get_logger
from a2a_sandbox.privacy import (
    PublicSchedule,
    TimeSlot,
    create_availability_response,
)
from a2a_sandbox.privacy.filter import WORK_END, WORK_START
from a2a_sandbox.storage.base import StorageBackend
from a2a_sandbox.storage.models import Schedule
from a2a_sandbox.utils.ids import generate_schedule_id
from a2a_sandbox.utils.timeutils import (
    from_minutes,
    intervals_overlap,
    is_valid_date,
    normalize_time,
    resolve_date,
    to_minutes,
)

logger = get_logger(__name__)

SLOT_MINUTES = 30


class AvailabilityCheck(BaseModel):
    """Result of ``check-availability``."""

    available: bool
    status: Literal["available", "busy", "tentative"]
    message: str
    date: str
    busySlots: list[PublicSchedule]
    freeSlots: list[TimeSlot]


class BusySlots(BaseModel):
    """Result of ``get-busy-slots``."""

    date: str
    busySlots: list[PublicSchedule]
    freeSlots: list[TimeSlot]


class MeetingResult(BaseModel):
    """Result of ``schedule-meeting``."""

    success: bool
    message: str
    meetingId: str | None = None
    conflict: bool | None = None


def _check_date(value: str | None) -> str:
    date = resolve_date(value)
    if not is_valid_date(date):
        raise ExecutionError(
            f"Invalid date (expected YYYY-MM-DD): {date}",
            code=ErrorCode.VALIDATION_ERROR,
            details={"date": date},
        )
    return date


def _check_time(value: str, name: str) -> str:
    try:
        return normalize_time(value)
    except ValueError as e:
        raise ExecutionError(
            f"Invalid {name} (expected HH:mm): {value}",
            code=ErrorCode.VALIDATION_ERROR,
            details={name: value},
        ) from e


def _check_range(start_time: str, end_time: str) -> tuple[str, str]:
    start = _check_time(start_time, "startTime")
    end = _check_time(end_time, "endTime")
    if to_minutes(start) >= to_minutes(end):
        raise ExecutionError(
            f"Invalid time range: {start} - {end}",
            code=ErrorCode.VALIDATION_ERROR,
            details={"startTime": start, "endTime": end},
        )
    return start, end


class ScheduleSkills:
    """The three calendar skills, bound to a storage backend.

    Args:
        storage: Backend holding the schedules
        work_start: Start of the working window used for free slots
        work_end: End of the working window used for free slots
    """

    def __init__(
        self,
        storage: StorageBackend,
        work_start: str = WORK_START,
        work_end: str = WORK_END,
    ):
        self.storage = storage
        self.work_start = work_start
        self.work_end = work_end

    async def check_availability(
        self,
        agent_id: str,
        date: str | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
    ) -> AvailabilityCheck:
        """Availability for an exact range, or the day's free slots.

        The range is only checked when both ends are given.
        """
        date = _check_date(date)
        ranged = bool(start_time and end_time)
        if ranged:
            start_time, end_time = _check_range(start_time, end_time)

        schedules = await self.storage.list_schedules(agent_id, date)
        result = create_availability_response(
            agent_id=agent_id,
            date=date,
            schedules=schedules,
            query_start_time=start_time if ranged else None,
            query_end_time=end_time if ranged else None,
            work_start=self.work_start,
            work_end=self.work_end,
        )

        if ranged:
            status = "available" if result.available else "busy"
            message = f"{date} from {start_time} to {end_time} is {status}."
        elif result.freeSlots:
            status = "available"
            free = ", ".join(f"{s.startTime}-{s.endTime}" for s in result.freeSlots)
            message = f"Free time on {date}: {free}"
        else:
            status = "busy"
            message = f"{date} is fully booked."

        return AvailabilityCheck(
            available=result.available,
            status=status,
            message=message,
            date=date,
            busySlots=result.busySlots,
            freeSlots=result.freeSlots,
        )

    async def get_busy_slots(self, agent_id: str, date: str | None = None) -> BusySlots:
        """Privacy-filtered busy slots and the free slots around them."""
        date = _check_date(date)
        schedules = await self.storage.list_schedules(agent_id, date)
        result = create_availability_response(
            agent_id=agent_id,
            date=date,
            schedules=schedules,
            work_start=self.work_start,
            work_end=self.work_end,
        )
        return BusySlots(date=date, busySlots=result.busySlots, freeSlots=result.freeSlots)

    async def schedule_meeting(
        self,
        agent_id: str,
        title: str,
        date: str | None,
        start_time: str,
        end_time: str,
        description: str | None = None,
        is_private: bool = False,
    ) -> MeetingResult:
        """Book a meeting unless it overlaps an existing entry.

        Raises:
            ExecutionError: On an invalid date or time range
        """
        if not title:
            raise ExecutionError("Meeting title is required", code=ErrorCode.VALIDATION_ERROR)
        date = _check_date(date)
        start_time, end_time = _check_range(start_time, end_time)

        existing = await self.storage.list_schedules(agent_id, date)
        if any(
            intervals_overlap(start_time, end_time, s.startTime, s.endTime) for s in existing
        ):
            logger.info(
                "Meeting conflicts with existing schedule",
                agent_id=agent_id,
                date=date,
                start_time=start_time,
                end_time=end_time,
            )
            return MeetingResult(
                success=False,
                conflict=True,
                message=(
                    f'Cannot schedule meeting "{title}" on {date} from {start_time} to '
                    f"{end_time}. There is a scheduling conflict."
                ),
            )

        schedule = await self.storage.insert_schedule(
            Schedule(
                id=generate_schedule_id(),
                agentId=agent_id,
                title=title,
                description=description,
                startTime=start_time,
                endTime=end_time,
                eventDate=date,
                isPrivate=is_private,
                visibility="busy",
            )
        )
        logger.info("Meeting scheduled", agent_id=agent_id, meeting_id=schedule.id, date=date)
        return MeetingResult(
            success=True,
            meetingId=schedule.id,
            message=f'Successfully scheduled "{title}" on {date} from {start_time} to {end_time}.',
        )

    async def common_free_slots(
        self, agent_ids: list[str], date: str | None = None
    ) -> list[TimeSlot]:
        """Free ranges shared by every agent on ``date``.

        Private entries block time like any other; only times are returned.
        """
        date = _check_date(date)
        busy_by_agent: dict[str, list[tuple[str, str]]] = {}
        for agent_id in agent_ids:
            schedules = await self.storage.list_schedules(agent_id, date)
            busy_by_agent[agent_id] = [(s.startTime, s.endTime) for s in schedules]
        return find_common_availability(
            agent_ids, busy_by_agent, work_start=self.work_start, work_end=self.work_end
        )


def find_common_availability(
    agent_ids: list[str],
    busy_by_agent: dict[str, list[tuple[str, str]]],
    work_start: str = WORK_START,
    work_end: str = WORK_END,
) -> list[TimeSlot]:
    """Ranges free for every agent, on a 30-minute grid, merged when adjacent.

    Args:
        agent_ids: Participants
        busy_by_agent: Busy ``(start, end)`` intervals per participant
        work_start: Start of the grid
        work_end: End of the grid
    """
    merged: list[list[int]] = []
    start, end = to_minutes(work_start), to_minutes(work_end)
    for slot_start in range(start, end, SLOT_MINUTES):
        slot_end = min(slot_start + SLOT_MINUTES, end)
        blocked = any(
            slot_start < to_minutes(busy_end) and slot_end > to_minutes(busy_start)
            for agent_id in agent_ids
            for busy_start, busy_end in busy_by_agent.get(agent_id, [])
        )
        if blocked:
            continue
        if merged and merged[-1][1] == slot_start:
            merged[-1][1] = slot_end
        else:
            merged.append([slot_start, slot_end])

    return [TimeSlot(startTime=from_minutes(s), endTime=from_minutes(e)) for s, e in merged]
