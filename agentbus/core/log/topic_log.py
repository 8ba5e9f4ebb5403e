"""
Append-only log for a single topic.

A TopicLog holds no records between calls: every operation reloads the
topic from storage. Callers serialize appends to the same topic; see
MessageStore.
"""

import time
from typing import Callable, List, Optional, Tuple

from agentbus.core.errors import IndexOutOfRange, TopicNotFound
from agentbus.core.log.format import Record, validate_message_fields
from agentbus.core.log.storage import TopicStorage, validate_topic_name
from agentbus.utils.logging import get_logger

logger = get_logger(__name__)


def current_time_ms() -> int:
    """Get wall-clock time in milliseconds since epoch."""
    return int(time.time() * 1000)


class TopicLog:
    """
    Append-only record sequence for one topic.
    
    Indices are positions: the record appended to a log of length N gets
    index N. Timestamps never decrease within a topic.
    
    Attributes:
        topic: Topic name
        storage: Backing storage
    """
    
    def __init__(
        self,
        topic: str,
        storage: TopicStorage,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize a topic log.
        
        Args:
            topic: Topic name
            storage: Backing storage
            clock: Millisecond clock (default: wall clock)
        """
        self.topic = validate_topic_name(topic)
        self.storage = storage
        self._clock = clock or current_time_ms
    
    def _load_existing(self) -> List[Record]:
        records = self.storage.load(self.topic)
        if records is None:
            raise TopicNotFound(self.topic)
        return records
    
    def append(
        self,
        handle: Optional[str],
        body: str,
        signature: Optional[str],
    ) -> Tuple[int, int]:
        """
        Append a message to the topic.
        
        Not safe to call concurrently for the same topic without external
        locking: the whole topic is loaded, extended and stored back.
        
        Args:
            handle: Sender handle
            body: Message text
            signature: Signature
        
        Returns:
            (index, timestamp) assigned to the new record
        
        Raises:
            ValidationError: If the fields are invalid
            StorageError: If the topic cannot be read or written
        """
        handle, body, signature = validate_message_fields(handle, body, signature)
        
        # First append creates the topic
        records = self.storage.load(self.topic) or []
        
        timestamp = self._clock()
        if records and records[-1].timestamp > timestamp:
            # Wall clock stepped backwards
            timestamp = records[-1].timestamp
        
        index = len(records)
        records.append(
            Record(
                handle=handle,
                body=body,
                signature=signature,
                timestamp=timestamp,
            )
        )
        self.storage.store(self.topic, records)
        
        logger.debug(
            "Appended to topic",
            topic=self.topic,
            index=index,
            timestamp=timestamp,
            body_size=len(body),
        )
        
        return index, timestamp
    
    def read_from(self, start_index: int) -> List[Record]:
        """
        Read all records from an index onward.
        
        Args:
            start_index: First index to return
        
        Returns:
            Records with index >= start_index, in index order
        
        Raises:
            TopicNotFound: If the topic does not exist
            IndexOutOfRange: If start_index is not in [0, length - 1]
        """
        records = self._load_existing()
        
        if start_index < 0 or start_index >= len(records):
            raise IndexOutOfRange(self.topic, start_index, len(records))
        
        return records[start_index:]
    
    def read_since(self, timestamp_ms: int) -> List[Record]:
        """
        Read all records stamped at or after a time.
        
        Timestamps may repeat, so this scans rather than bisects.
        
        Args:
            timestamp_ms: Lower bound in milliseconds since epoch
        
        Returns:
            Matching records in index order (possibly empty)
        
        Raises:
            TopicNotFound: If the topic does not exist
        """
        return [r for r in self._load_existing() if r.timestamp >= timestamp_ms]
    
    def length(self) -> int:
        """
        Get the number of records in the topic.
        
        Raises:
            TopicNotFound: If the topic does not exist
        """
        return len(self._load_existing())
