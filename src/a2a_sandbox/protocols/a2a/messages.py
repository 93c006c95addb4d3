"""Message construction, content extraction and free-text intent parsing."""

import re
from dataclasses import dataclass, field
from typing import Any, Literal

from a2a_sandbox.protocols.a2a.models import (
    DataPart,
    FilePart,
    Message,
    MessageRole,
    Part,
    TextPart,
)
from a2a_sandbox.utils.timeutils import normalize_time

Intent = Literal["check-availability", "get-busy-slots", "schedule-meeting", "unknown"]

_DATE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})")
_TIME_RANGE_RE = re.compile(r"(\d{1,2}:\d{2})\s*(?:to|-)\s*(\d{1,2}:\d{2})")
_SINGLE_TIME_RE = re.compile(r"at\s+(\d{1,2}:\d{2})")
_TITLE_RE = re.compile(r"['\"]([^'\"]+)['\"]")


def create_text_message(role: MessageRole | str, text: str) -> Message:
    """Create a single-part text message."""
    return Message(role=MessageRole(role), parts=[TextPart(text=text)])


def create_data_message(
    role: MessageRole | str,
    data: dict[str, Any],
    text_prefix: str | None = None,
) -> Message:
    """Create a data message, optionally preceded by a text part."""
    parts: list[Part] = []
    if text_prefix:
        parts.append(TextPart(text=text_prefix))
    parts.append(DataPart(data=data))
    return Message(role=MessageRole(role), parts=parts)


def extract_text_content(message: Message) -> str:
    """Join all text parts with newlines."""
    return "\n".join(part.text for part in message.parts if isinstance(part, TextPart))


def extract_data_content(message: Message) -> list[dict[str, Any]]:
    """Payloads of all data parts, in order."""
    return [part.data for part in message.parts if isinstance(part, DataPart)]


def extract_file_content(message: Message) -> list[FilePart]:
    return [part for part in message.parts if isinstance(part, FilePart)]


def has_data_field(message: Message, name: str) -> bool:
    return any(name in data for data in extract_data_content(message))


def get_data_field(message: Message, name: str, default: Any = None) -> Any:
    """First value of ``name`` found across the message's data parts."""
    for data in extract_data_content(message):
        if name in data:
            return data[name]
    return default


@dataclass
class ParsedRequest:
    """Intent recognized in free text plus the fields extracted for it."""

    intent: Intent
    params: dict[str, str | None] = field(default_factory=dict)


def _time(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        return normalize_time(value)
    except ValueError:
        return value


def parse_schedule_request(text: str) -> ParsedRequest:
    """Recognize a scheduling intent in free text.

    Checked in order: availability keywords, busy/show-schedule keywords,
    booking keywords. Supports phrasing such as
    ``Are you available on 2024-01-15 from 14:00 to 15:00?`` and
    ``Schedule meeting 'Team Sync' on 2024-01-15 at 10:00``.
    """
    lower = text.lower()
    date_match = _DATE_RE.search(text)
    date = date_match.group(1) if date_match else None

    if "available" in lower or "availability" in lower or "free" in lower:
        range_match = _TIME_RANGE_RE.search(text)
        return ParsedRequest(
            "check-availability",
            {
                "date": date,
                "startTime": _time(range_match.group(1)) if range_match else None,
                "endTime": _time(range_match.group(2)) if range_match else None,
            },
        )

    if "busy" in lower or (
        "schedule" in lower and ("show" in lower or "get" in lower or "what" in lower)
    ):
        if date is None and "today" in lower:
            date = "today"
        return ParsedRequest("get-busy-slots", {"date": date})

    if "schedule" in lower or "book" in lower or "create meeting" in lower:
        range_match = _TIME_RANGE_RE.search(text)
        single_match = _SINGLE_TIME_RE.search(text)
        title_match = _TITLE_RE.search(text)
        if range_match:
            start, end = range_match.group(1), range_match.group(2)
        else:
            start, end = (single_match.group(1) if single_match else None), None
        return ParsedRequest(
            "schedule-meeting",
            {
                "title": title_match.group(1) if title_match else None,
                "date": date,
                "startTime": _time(start),
                "endTime": _time(end),
            },
        )

    return ParsedRequest("unknown")
