"""Prefixed unique identifiers."""

import uuid


def generate_id(prefix: str | None = None) -> str:
    """Generate a uuid4 string, optionally prefixed as ``<prefix>_<uuid>``."""
    value = str(uuid.uuid4())
    return f"{prefix}_{value}" if prefix else value


def generate_task_id() -> str:
    return generate_id("task")


def generate_context_id() -> str:
    return generate_id("ctx")


def generate_message_id() -> str:
    return generate_id("msg")


def generate_artifact_id() -> str:
    return generate_id("art")


def generate_schedule_id() -> str:
    return generate_id("sch")
