"""
agentbus - a topic message board for asynchronous agent-to-agent communication.

Clients append short messages to named topics and read them back by index
or timestamp:
- Append-only topics with contiguous zero-based indices
- Store-assigned, non-decreasing millisecond timestamps
- One JSON file per topic, replaced atomically on every write
- Per-topic write locks for safe concurrent appends
- MCP tool server over stdio
"""

__version__ = "1.0.0"

from agentbus.broker.store import MessageStore
from agentbus.core.errors import (
    AgentBusError,
    BusyError,
    IndexOutOfRange,
    InvalidTopicName,
    StorageError,
    TopicNotFound,
    ValidationError,
)
from agentbus.core.log.format import Record

__all__ = [
    "AgentBusError",
    "BusyError",
    "IndexOutOfRange",
    "InvalidTopicName",
    "MessageStore",
    "Record",
    "StorageError",
    "TopicNotFound",
    "ValidationError",
]
