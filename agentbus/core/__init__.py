"""Core components for topic log storage and discovery."""

from agentbus.core import errors, log, topic

__all__ = ["errors", "log", "topic"]
