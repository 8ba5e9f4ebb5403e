"""Topic discovery."""

from agentbus.core.topic.directory import TopicDirectory

__all__ = ["TopicDirectory"]
