"""
Failure taxonomy for the message store.

Every failure that reaches a caller is an AgentBusError subclass with a
stable machine-readable code.
"""

from typing import Dict


class AgentBusError(Exception):
    """Base class for caller-visible store failures."""
    
    code = "agentbus_error"
    
    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary."""
        return {"error": self.code, "message": str(self)}


class ValidationError(AgentBusError):
    """Raised when a request is missing a required field or has a wrong type."""
    
    code = "validation_error"


class InvalidTopicName(ValidationError):
    """Raised when a topic name is not safe to use as a file name."""
    
    code = "invalid_topic"


class TopicNotFound(AgentBusError):
    """Raised when reading a topic that has never received a message."""
    
    code = "topic_not_found"
    
    def __init__(self, topic: str):
        super().__init__(f'Topic "{topic}" not found')
        self.topic = topic


class IndexOutOfRange(AgentBusError):
    """Raised when a start index falls outside a topic's valid range."""
    
    code = "index_out_of_range"
    
    def __init__(self, topic: str, index: int, length: int):
        super().__init__(
            f'Invalid index {index}. Topic "{topic}" has {length} messages '
            f"(valid indices: 0-{length - 1})"
        )
        self.topic = topic
        self.index = index
        self.length = length


class StorageError(AgentBusError):
    """Raised when durable storage cannot be read or written."""
    
    code = "storage_error"


class BusyError(AgentBusError):
    """Raised when a topic's write lock is not acquired within the configured wait."""
    
    code = "busy"
