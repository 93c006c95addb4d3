"""structlog configuration and per-task log context."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace

if TYPE_CHECKING:
    from structlog.typing import EventDict, Processor

QUIET_LOGGERS = ("aiohttp", "uvicorn.access", "asyncio")


def add_trace_id(_logger: Any, _method_name: str, event_dict: "EventDict") -> "EventDict":
    """Attach OpenTelemetry trace and span ids while a span is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span_context = span.get_span_context()
        event_dict["trace_id"] = format(span_context.trace_id, "032x")
        event_dict["span_id"] = format(span_context.span_id, "016x")
    return event_dict


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    enable_colors: bool = True,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit one JSON object per line instead of console output
        enable_colors: Colorize console output (ignored for JSON)
    """
    shared: list["Processor"] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_trace_id,
        structlog.processors.StackInfoRenderer(),
    ]
    renderer: list["Processor"]
    if json_format:
        renderer = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderer = [
            structlog.processors.ExceptionRenderer(),
            structlog.dev.ConsoleRenderer(colors=enable_colors),
        ]

    structlog.configure(
        processors=shared + renderer,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def task_log_context(task_id: str, agent_id: str | None = None) -> Iterator[None]:
    """Bind ``task_id`` (and ``agent_id``) to every log event in the block."""
    bound: dict[str, Any] = {"task_id": task_id}
    if agent_id is not None:
        bound["agent_id"] = agent_id
    with structlog.contextvars.bound_contextvars(**bound):
        yield


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)
