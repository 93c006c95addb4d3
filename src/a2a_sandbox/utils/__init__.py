"""Shared utilities."""

from a2a_sandbox.utils.ids import (
    generate_artifact_id,
    generate_context_id,
    generate_id,
    generate_message_id,
    generate_schedule_id,
    generate_task_id,
)
from a2a_sandbox.utils.timeutils import (
    add_hour,
    current_timestamp,
    from_minutes,
    intervals_overlap,
    is_valid_date,
    normalize_time,
    resolve_date,
    to_minutes,
    today_string,
)

__all__ = [
    "add_hour",
    "current_timestamp",
    "from_minutes",
    "generate_artifact_id",
    "generate_context_id",
    "generate_id",
    "generate_message_id",
    "generate_schedule_id",
    "generate_task_id",
    "intervals_overlap",
    "is_valid_date",
    "normalize_time",
    "resolve_date",
    "to_minutes",
    "today_string",
]
