"""Structured logging for the A2A sandbox."""

from a2a_sandbox.logging.logger import get_logger, setup_logging, task_log_context

__all__ = ["get_logger", "setup_logging", "task_log_context"]
