"""A2A Sandbox - an agent-to-agent protocol engine with scheduling and debate agents."""

__version__ = "0.1.0"
