"""Tests for CLI module."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from a2a_sandbox import __version__
from a2a_sandbox.app import AppState
from a2a_sandbox.cli import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def state(settings) -> AppState:
    return AppState(settings=settings)


class TestCliGroup:
    """Test the command group."""

    def test_version(self, runner):
        """Test --version."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner, state):
        """Test --help shows every command."""
        result = runner.invoke(cli, ["--help"], obj=state)
        assert result.exit_code == 0
        for command in ("serve", "init-db", "cards", "send"):
            assert command in result.output


class TestInitDbCommand:
    """Test init-db."""

    def test_init(self, runner, state):
        """Test seeding prints the counts."""
        result = runner.invoke(cli, ["init-db"], obj=state)

        assert result.exit_code == 0
        assert "Database initialized" in result.output
        assert "Agents:    5" in result.output
        assert "Schedules: 9" in result.output

    def test_reset(self, runner, state):
        """Test --reset reseeds."""
        result = runner.invoke(cli, ["init-db", "--reset"], obj=state)

        assert result.exit_code == 0
        assert "Database reset and seeded" in result.output


class TestCardsCommand:
    """Test cards."""

    def test_text_output(self, runner, state):
        """Test the human-readable listing."""
        result = runner.invoke(cli, ["cards"], obj=state)

        assert result.exit_code == 0
        assert "Found 5 agent(s):" in result.output
        assert "Alice's Assistant" in result.output
        assert "URL: http://testserver/api/agents/alice" in result.output
        assert "- debate-rebut: Debate Rebut" in result.output

    def test_json_output(self, runner, state):
        """Test --json prints the card list."""
        result = runner.invoke(cli, ["--log-level", "ERROR", "cards", "--json"], obj=state)

        assert result.exit_code == 0
        start = result.output.index("[")
        cards = json.loads(result.output[start:])
        assert [card["name"] for card in cards][-2:] == ["Pro-kun", "Con-kun"]


class TestSendCommand:
    """Test send."""

    def test_send_text(self, runner, state):
        """Test the reply is printed with the task state."""
        result = runner.invoke(
            cli, ["send", "alice", "Are you available on 2024-01-15 from 14:00 to 15:00?"], obj=state
        )

        assert result.exit_code == 0
        assert "State: completed" in result.output
        assert "2024-01-15 from 14:00 to 15:00 is available." in result.output

    def test_send_json(self, runner, state):
        """Test --json prints the task."""
        result = runner.invoke(
            cli,
            ["--log-level", "ERROR", "send", "bob", "Hello", "--context-id", "ctx_cli", "--json"],
            obj=state,
        )

        assert result.exit_code == 0
        task = json.loads(result.output[result.output.index("{"):])
        assert task["contextId"] == "ctx_cli"
        assert task["status"]["state"] == "completed"

    def test_send_to_finished_task(self, runner, state):
        """Test continuing a completed task fails with the JSON-RPC code."""
        runner.invoke(cli, ["send", "bob", "Hello", "--task-id", "task_cli"], obj=state)
        result = runner.invoke(cli, ["send", "bob", "Again", "--task-id", "task_cli"], obj=state)

        assert result.exit_code == 1
        assert "Task is already in terminal state: completed (-32003)" in result.output

    def test_unknown_agent(self, runner, state):
        """Test unknown agents are reported."""
        result = runner.invoke(cli, ["send", "ghost", "Hello"], obj=state)

        assert result.exit_code == 1
        assert "Agent not found: ghost" in result.output


class TestServeCommand:
    """Test serve."""

    def test_serve_uses_settings(self, runner, state):
        """Test uvicorn is started with the configured host and an explicit port."""
        with patch("uvicorn.run") as run:
            result = runner.invoke(cli, ["serve", "--port", "8123"], obj=state)

        assert result.exit_code == 0
        assert "Server: http://0.0.0.0:8123" in result.output
        run.assert_called_once()
        assert run.call_args.kwargs["host"] == "0.0.0.0"
        assert run.call_args.kwargs["port"] == 8123

    def test_serve_reload_uses_factory(self, runner, state):
        """Test --reload passes the app factory by import string."""
        with patch("uvicorn.run") as run:
            result = runner.invoke(cli, ["serve", "--reload"], obj=state)

        assert result.exit_code == 0
        assert run.call_args.args[0] == "a2a_sandbox.server:create_app"
        assert run.call_args.kwargs["factory"] is True
        assert run.call_args.kwargs["reload"] is True
