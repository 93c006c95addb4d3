#!/usr/bin/env python
"""A2A sandbox CLI.

Commands:
    a2a-sandbox serve                 Start the HTTP server
    a2a-sandbox init-db [--reset]     Seed (or wipe and re-seed) the store
    a2a-sandbox cards [--json]        Show the registered agent cards
    a2a-sandbox send <agent> <text>   Send a message to an agent as a new task
"""

import asyncio
import json

import click

from a2a_sandbox import __version__
from a2a_sandbox.app import AppState, get_app_state
from a2a_sandbox.errors import SandboxError
from a2a_sandbox.logging import setup_logging
from a2a_sandbox.protocols.a2a.jsonrpc import JsonRpcException
from a2a_sandbox.protocols.a2a.messages import extract_text_content
from a2a_sandbox.protocols.a2a.models import to_wire

STATE_COLORS = {
    "completed": "green",
    "input-required": "yellow",
    "failed": "red",
    "canceled": "red",
    "working": "cyan",
    "submitted": "cyan",
}


@click.group()
@click.version_option(version=__version__, prog_name="a2a-sandbox")
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """A2A sandbox - agent-to-agent protocol playground."""
    if ctx.obj is None:
        ctx.obj = get_app_state()
    setup_logging(
        log_level=log_level or ctx.obj.settings.log_level,
        json_format=ctx.obj.settings.log_json,
    )


@cli.command()
@click.option("--host", default=None, help="Host to bind (default: A2A_HTTP_HOST)")
@click.option("--port", "-p", type=int, default=None, help="Port to bind (default: A2A_HTTP_PORT)")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
@click.pass_obj
def serve(state: AppState, host: str | None, port: int | None, reload: bool) -> None:
    """Start the HTTP server."""
    import uvicorn

    host = host or state.settings.http_host
    port = port or state.settings.http_port

    click.echo(click.style("Starting A2A sandbox", fg="green", bold=True))
    click.echo(f"Storage: {state.settings.storage_backend}")
    click.echo(f"Agents: {', '.join(state.registry.get_ids())}")
    click.echo(f"Server: http://{host}:{port}")
    click.echo(f"Agent cards: http://{host}:{port}/.well-known/agent.json")
    click.echo()
    click.echo(click.style("Press Ctrl+C to stop", fg="yellow"))

    if reload:
        uvicorn.run(
            "a2a_sandbox.server:create_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
        )
    else:
        from a2a_sandbox.server import create_app

        uvicorn.run(create_app(state), host=host, port=port)


@cli.command("init-db")
@click.option("--reset", is_flag=True, help="Drop all data before seeding")
@click.pass_obj
def init_db(state: AppState, reset: bool) -> None:
    """Seed the store with the agent roster and sample schedules."""

    async def _init() -> dict[str, int]:
        try:
            if reset:
                return await state.reset()
            await state.initialize()
            return {
                "agents": await state.storage.count_agents(),
                "schedules": await state.storage.count_schedules(),
            }
        finally:
            await state.close()

    try:
        summary = asyncio.run(_init())
    except SandboxError as e:
        raise click.ClickException(e.message) from e

    action = "reset and seeded" if reset else "initialized"
    click.echo(click.style(f"Database {action}", fg="green"))
    click.echo(f"  Agents:    {summary['agents']}")
    click.echo(f"  Schedules: {summary['schedules']}")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print the raw card JSON")
@click.pass_obj
def cards(state: AppState, as_json: bool) -> None:
    """Show the registered agent cards."""
    agent_cards = state.registry.get_agent_cards()

    if as_json:
        click.echo(json.dumps(to_wire(agent_cards), indent=2))
        return

    click.echo(f"Found {len(agent_cards)} agent(s):\n")
    for card in agent_cards:
        click.echo(click.style(card.name, fg="cyan", bold=True))
        click.echo(f"  URL: {card.url}")
        if card.description:
            click.echo(f"  {card.description}")
        for skill in card.skills:
            click.echo(f"  - {skill.id}: {skill.name}")
        click.echo()


@cli.command()
@click.argument("agent_id")
@click.argument("text")
@click.option("--context-id", default=None, help="Context to attach the task to")
@click.option("--task-id", default=None, help="Continue an existing task")
@click.option("--json", "as_json", is_flag=True, help="Print the resulting task as JSON")
@click.pass_obj
def send(
    state: AppState,
    agent_id: str,
    text: str,
    context_id: str | None,
    task_id: str | None,
    as_json: bool,
) -> None:
    """Send TEXT to AGENT_ID and print the agent's reply."""
    params: dict = {"message": {"role": "user", "parts": [{"type": "text", "text": text}]}}
    if context_id:
        params["contextId"] = context_id
    if task_id:
        params["id"] = task_id

    async def _send():
        try:
            await state.initialize()
            return await state.handler_for(agent_id).send_task(params)
        finally:
            await state.close()

    try:
        task = asyncio.run(_send())
    except JsonRpcException as e:
        raise click.ClickException(f"{e.message} ({int(e.code)})") from e
    except SandboxError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        click.echo(json.dumps(to_wire(task), indent=2))
        return

    state_value = task.status.state.value
    click.echo(f"Task: {task.id}")
    click.echo(f"State: {click.style(state_value, fg=STATE_COLORS.get(state_value))}")
    if task.status.message is not None:
        click.echo()
        click.echo(extract_text_content(task.status.message))


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
