"""
Typed requests and results for store operations.

Optional fields left as None are filled in by the store (the default
topic, empty handle and signature).
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from agentbus.core.errors import ValidationError


def require_int(name: str, value: Any) -> int:
    """
    Check that a request field is an integer.
    
    Raises:
        ValidationError: If value is missing, a bool, or not an int
    """
    if value is None:
        raise ValidationError(f'Missing required argument "{name}"')
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f'Argument "{name}" must be an integer, got {value!r}')
    return value


@dataclass
class SendMessageRequest:
    """
    Request to append a message.
    
    Attributes:
        body: Message text
        handle: Sender handle
        signature: Signature
        topic: Target topic (None for the default topic)
    """
    body: Any
    handle: Optional[Any] = None
    signature: Optional[Any] = None
    topic: Optional[str] = None


@dataclass
class ReadFromRequest:
    """Request for all messages from an index onward."""
    start_index: Any
    topic: Optional[str] = None


@dataclass
class ReadSinceRequest:
    """Request for all messages at or after a timestamp in milliseconds."""
    timestamp_ms: Any
    topic: Optional[str] = None


@dataclass
class TopicLengthRequest:
    """Request for the number of messages in a topic."""
    topic: Optional[str] = None


@dataclass(frozen=True)
class AppendResult:
    """Position assigned to an appended message."""
    topic: str
    index: int
    timestamp: int
    
    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'topic': self.topic,
            'index': self.index,
            'timestamp': self.timestamp,
        }


@dataclass(frozen=True)
class TopicLength:
    """Number of messages in a topic."""
    topic: str
    length: int
    
    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {'topic': self.topic, 'length': self.length}


@dataclass(frozen=True)
class TopicListing:
    """Topics that have received at least one message."""
    topics: List[str] = field(default_factory=list)
    
    @property
    def count(self) -> int:
        return len(self.topics)
    
    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {'topics': list(self.topics), 'count': self.count}
