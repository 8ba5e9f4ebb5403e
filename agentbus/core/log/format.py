"""
Record format for topic logs.

A record is one message: sender handle, body, decorative signature and a
store-assigned timestamp. Its index is its position in the topic and is
never stored.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from agentbus.core.errors import StorageError, ValidationError


@dataclass(frozen=True)
class Record:
    """
    A single message in a topic.
    
    Attributes:
        handle: Sender handle (may be empty)
        body: Message text
        signature: Free-form signature (may be empty)
        timestamp: Milliseconds since epoch, assigned by the store
    """
    handle: str
    body: str
    signature: str
    timestamp: int
    
    def to_dict(self) -> dict:
        """Convert to the on-disk dictionary layout."""
        return {
            'handle': self.handle,
            'message': self.body,
            'signature': self.signature,
            'timestamp': self.timestamp,
        }
    
    @staticmethod
    def from_dict(data: Any) -> 'Record':
        """
        Create from the on-disk dictionary layout.
        
        Raises:
            StorageError: If the entry is not a well-formed record
        """
        if not isinstance(data, dict):
            raise StorageError(f"Malformed record: expected object, got {type(data).__name__}")
        
        missing = [k for k in ('handle', 'message', 'signature', 'timestamp') if k not in data]
        if missing:
            raise StorageError(f"Malformed record: missing {', '.join(missing)}")
        
        timestamp = data['timestamp']
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise StorageError(f"Malformed record: timestamp must be an integer, got {timestamp!r}")
        
        for key in ('handle', 'message', 'signature'):
            if not isinstance(data[key], str):
                raise StorageError(f"Malformed record: {key} must be a string")
        
        return Record(
            handle=data['handle'],
            body=data['message'],
            signature=data['signature'],
            timestamp=timestamp,
        )


def validate_message_fields(
    handle: Optional[Any],
    body: Any,
    signature: Optional[Any],
) -> Tuple[str, str, str]:
    """
    Validate caller-supplied message fields.
    
    Args:
        handle: Sender handle, None for empty
        body: Message text (required)
        signature: Signature, None for empty
    
    Returns:
        Normalized (handle, body, signature)
    
    Raises:
        ValidationError: If body is missing or any field is not a string
    """
    if body is None:
        raise ValidationError('Message must include a "message" property')
    if not isinstance(body, str):
        raise ValidationError("Message content must be a string")
    
    handle = "" if handle is None else handle
    signature = "" if signature is None else signature
    
    if not isinstance(handle, str):
        raise ValidationError('Message "handle" must be a string')
    if not isinstance(signature, str):
        raise ValidationError('Message "signature" must be a string')
    
    return handle, body, signature
