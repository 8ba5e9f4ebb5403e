"""
Tool-call adapter.

Turns a tool name and its raw JSON arguments into a typed store request
and renders the outcome as the text payload returned to the client.
Store failures are rendered as "Error: ..." text, never raised.
"""

import json
from typing import Any, Callable, Dict, List, Optional

from agentbus.broker.requests import (
    AppendResult,
    ReadFromRequest,
    ReadSinceRequest,
    SendMessageRequest,
    TopicLengthRequest,
)
from agentbus.broker.store import MessageStore
from agentbus.core.errors import AgentBusError, ValidationError
from agentbus.core.log.format import Record
from agentbus.utils.logging import get_logger

logger = get_logger(__name__)

TOOL_DESCRIPTIONS: Dict[str, str] = {
    "send_message": "Send a message to a topic channel",
    "read_from": "Read messages from a specific index onward",
    "read_since": "Read messages since a specific timestamp",
    "get_topic_length": "Get the number of messages in a topic",
    "get_topics": "Get list of all available topics",
}


def render_json(payload: Any) -> str:
    """Render a tool payload as indented JSON text."""
    return json.dumps(payload, indent=2)


def render_error(message: str) -> str:
    """Render a tool failure."""
    return f"Error: {message}"


def render_records(records: List[Record]) -> str:
    """Render records in their on-disk layout."""
    return render_json([r.to_dict() for r in records])


def render_append(result: AppendResult) -> str:
    """Render the acknowledgement for a sent message."""
    return render_json({
        'status': 'Message sent',
        'index': result.index,
        'timestamp': result.timestamp,
        'topic': result.topic,
    })


class ToolHandler:
    """
    Dispatches tool calls to a MessageStore.
    
    Attributes:
        store: Store that executes the requests
    """
    
    def __init__(self, store: MessageStore):
        self.store = store
        self._handlers: Dict[str, Callable[[Dict[str, Any]], str]] = {
            "send_message": self._send_message,
            "read_from": self._read_from,
            "read_since": self._read_since,
            "get_topic_length": self._get_topic_length,
            "get_topics": self._get_topics,
        }
    
    def tool_names(self) -> List[str]:
        """Get the names of all supported tools."""
        return list(self._handlers)
    
    def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """
        Run a tool.
        
        Args:
            name: Tool name
            arguments: Raw tool arguments
        
        Returns:
            Rendered JSON on success, "Error: ..." text on failure
        """
        handler = self._handlers.get(name)
        if handler is None:
            logger.warning("Unknown tool", tool=name)
            return render_error(f'Unknown tool "{name}"')
        
        try:
            return handler(arguments or {})
        except AgentBusError as e:
            return render_error(str(e))
    
    def _send_message(self, arguments: Dict[str, Any]) -> str:
        message_obj = arguments.get("messageObj")
        if not isinstance(message_obj, dict):
            raise ValidationError("Message must be an object")
        
        request = SendMessageRequest(
            body=message_obj.get("message"),
            handle=message_obj.get("handle"),
            signature=message_obj.get("signature"),
            topic=message_obj.get("topic"),
        )
        return render_append(self.store.execute(request))
    
    def _read_from(self, arguments: Dict[str, Any]) -> str:
        request = ReadFromRequest(
            start_index=arguments.get("message_index"),
            topic=arguments.get("topic"),
        )
        return render_records(self.store.execute(request))
    
    def _read_since(self, arguments: Dict[str, Any]) -> str:
        request = ReadSinceRequest(
            timestamp_ms=arguments.get("unix_timestamp"),
            topic=arguments.get("topic"),
        )
        return render_records(self.store.execute(request))
    
    def _get_topic_length(self, arguments: Dict[str, Any]) -> str:
        request = TopicLengthRequest(topic=arguments.get("topic"))
        return render_json(self.store.execute(request).to_dict())
    
    def _get_topics(self, arguments: Dict[str, Any]) -> str:
        return render_json(self.store.get_topics().to_dict())
