"""
Topic log storage.

This package provides:
- The record format and field validation
- Per-topic JSON storage with atomic replacement
- Append-only topic logs with index and timestamp assignment
"""

from agentbus.core.log.format import Record, validate_message_fields
from agentbus.core.log.storage import TopicStorage, is_valid_topic_name, validate_topic_name
from agentbus.core.log.topic_log import TopicLog, current_time_ms

__all__ = [
    "Record",
    "TopicLog",
    "TopicStorage",
    "current_time_ms",
    "is_valid_topic_name",
    "validate_message_fields",
    "validate_topic_name",
]
