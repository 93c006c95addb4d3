"""Test fixtures and factories."""

from tests.fixtures.factories import TEST_DATE, make_schedule
from tests.fixtures.fakes import (
    FakeLanguageModel,
    ScriptedExecutor,
    data_of,
    text_of,
    user_action,
    user_text,
)

__all__ = [
    "TEST_DATE",
    "FakeLanguageModel",
    "ScriptedExecutor",
    "data_of",
    "make_schedule",
    "text_of",
    "user_action",
    "user_text",
]
