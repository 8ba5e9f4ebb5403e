"""Store facade, tool adapter and MCP server."""

from agentbus.broker.requests import (
    AppendResult,
    ReadFromRequest,
    ReadSinceRequest,
    SendMessageRequest,
    TopicLength,
    TopicLengthRequest,
    TopicListing,
)
from agentbus.broker.store import DEFAULT_TOPIC, MessageStore
from agentbus.broker.tools import ToolHandler

__all__ = [
    "AppendResult",
    "DEFAULT_TOPIC",
    "MessageStore",
    "ReadFromRequest",
    "ReadSinceRequest",
    "SendMessageRequest",
    "TopicLength",
    "TopicLengthRequest",
    "TopicListing",
    "ToolHandler",
]
