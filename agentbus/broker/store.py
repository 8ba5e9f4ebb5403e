"""
Message store facade.

Single entry point for the tool adapter. Resolves topics, serializes
appends per topic and converts unexpected lower-layer failures into the
caller-facing error taxonomy.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from agentbus.broker.requests import (
    AppendResult,
    ReadFromRequest,
    ReadSinceRequest,
    SendMessageRequest,
    TopicLength,
    TopicLengthRequest,
    TopicListing,
    require_int,
)
from agentbus.core.errors import AgentBusError, BusyError, StorageError, ValidationError
from agentbus.core.log.format import Record, validate_message_fields
from agentbus.core.log.storage import TopicStorage, validate_topic_name
from agentbus.core.log.topic_log import TopicLog
from agentbus.core.topic.directory import TopicDirectory
from agentbus.utils.config import Config
from agentbus.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TOPIC = "general"

Request = Union[SendMessageRequest, ReadFromRequest, ReadSinceRequest, TopicLengthRequest]


class MessageStore:
    """
    Topic message store.
    
    Appends to the same topic are serialized by a per-topic lock held for
    the whole load, append and store sequence. Reads take no lock and rely
    on storage replacing topic files atomically.
    
    Attributes:
        data_dir: Directory holding topic files
        default_topic: Topic used when a request names none
        lock_timeout_ms: Max wait for a topic's write lock (None = no limit)
    """
    
    def __init__(
        self,
        data_dir: Path,
        default_topic: str = DEFAULT_TOPIC,
        lock_timeout_ms: Optional[int] = None,
        fsync: bool = True,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize the message store.
        
        Args:
            data_dir: Directory for topic files
            default_topic: Topic used when a request names none
            lock_timeout_ms: Max wait for a topic's write lock, None to wait forever
            fsync: Whether to fsync each topic write
            clock: Millisecond clock for timestamps (default: wall clock)
        
        Raises:
            InvalidTopicName: If default_topic is not a safe topic name
            ValidationError: If lock_timeout_ms is negative
        """
        self.data_dir = Path(data_dir)
        self.default_topic = validate_topic_name(default_topic)
        if lock_timeout_ms is not None and lock_timeout_ms < 0:
            raise ValidationError(f"lock_timeout_ms must be >= 0 or None, got {lock_timeout_ms}")
        self.lock_timeout_ms = lock_timeout_ms
        
        self._storage = TopicStorage(self.data_dir, fsync=fsync)
        self._directory = TopicDirectory(self._storage)
        self._clock = clock
        
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_lock = threading.Lock()
        
        logger.info(
            "Initialized message store",
            data_dir=str(self.data_dir),
            default_topic=self.default_topic,
            lock_timeout_ms=lock_timeout_ms,
        )
    
    @classmethod
    def from_config(cls, config: Config) -> "MessageStore":
        """
        Create a store from configuration.
        
        Args:
            config: Configuration with a "store" section
        
        Returns:
            Configured store
        """
        lock_timeout_ms = config.get("store.lock_timeout_ms")
        return cls(
            data_dir=Path(config.get("store.data_dir", "./messages")),
            default_topic=config.get("store.default_topic", DEFAULT_TOPIC),
            lock_timeout_ms=int(lock_timeout_ms) if lock_timeout_ms is not None else None,
            fsync=bool(config.get("store.fsync", True)),
        )
    
    def _resolve_topic(self, topic: Optional[str]) -> str:
        if topic is None or topic == "":
            return self.default_topic
        return validate_topic_name(topic)
    
    def _log(self, topic: str) -> TopicLog:
        return TopicLog(topic, self._storage, clock=self._clock)
    
    def _topic_lock(self, topic: str) -> threading.Lock:
        with self._locks_lock:
            lock = self._locks.get(topic)
            if lock is None:
                lock = self._locks[topic] = threading.Lock()
            return lock
    
    @contextmanager
    def _write_lock(self, topic: str) -> Iterator[None]:
        """
        Hold a topic's write lock.
        
        Raises:
            BusyError: If a bounded wait is configured and expires
        """
        lock = self._topic_lock(topic)
        
        if self.lock_timeout_ms is None:
            lock.acquire()
        elif not lock.acquire(timeout=self.lock_timeout_ms / 1000):
            raise BusyError(
                f'Topic "{topic}" is busy: write lock not acquired within {self.lock_timeout_ms} ms'
            )
        
        try:
            yield
        finally:
            lock.release()
    
    @contextmanager
    def _failures(self, operation: str, topic: Optional[str]) -> Iterator[None]:
        """Log rejected requests and convert stray OS errors to StorageError."""
        try:
            yield
        except AgentBusError as e:
            logger.warning(
                "Request rejected",
                operation=operation,
                topic=topic,
                error=e.code,
                reason=str(e),
            )
            raise
        except OSError as e:
            logger.error(
                "Storage failure",
                operation=operation,
                topic=topic,
                error=str(e),
                exc_info=True,
            )
            raise StorageError(f"{operation} failed: {e}") from e
    
    def send_message(
        self,
        body: Any,
        handle: Optional[Any] = None,
        signature: Optional[Any] = None,
        topic: Optional[str] = None,
    ) -> AppendResult:
        """
        Append a message to a topic, creating the topic if needed.
        
        Not idempotent: resending creates a new record.
        
        Args:
            body: Message text (required)
            handle: Sender handle (default: empty)
            signature: Signature (default: empty)
            topic: Target topic (default: the default topic)
        
        Returns:
            Topic, index and timestamp assigned to the message
        
        Raises:
            ValidationError: If a field is missing or has the wrong type
            StorageError: If the topic cannot be read or written
            BusyError: If the write lock wait times out
        """
        with self._failures("send_message", topic):
            handle, body, signature = validate_message_fields(handle, body, signature)
            name = self._resolve_topic(topic)
            with self._write_lock(name):
                index, timestamp = self._log(name).append(handle, body, signature)
        
        logger.info("Message appended", topic=name, index=index, timestamp=timestamp)
        
        return AppendResult(topic=name, index=index, timestamp=timestamp)
    
    def read_from(self, start_index: Any, topic: Optional[str] = None) -> List[Record]:
        """
        Read messages from an index onward.
        
        Args:
            start_index: First index to return
            topic: Topic to read (default: the default topic)
        
        Returns:
            Records in index order
        
        Raises:
            ValidationError: If start_index is not an integer
            TopicNotFound: If the topic does not exist
            IndexOutOfRange: If start_index is outside [0, length - 1]
            StorageError: If the topic cannot be read
        """
        with self._failures("read_from", topic):
            start_index = require_int("start_index", start_index)
            name = self._resolve_topic(topic)
            records = self._log(name).read_from(start_index)
        
        logger.debug("Read from index", topic=name, start_index=start_index, count=len(records))
        
        return records
    
    def read_since(self, timestamp_ms: Any, topic: Optional[str] = None) -> List[Record]:
        """
        Read messages stamped at or after a time.
        
        Args:
            timestamp_ms: Lower bound in milliseconds since epoch
            topic: Topic to read (default: the default topic)
        
        Returns:
            Records in index order, possibly empty
        
        Raises:
            ValidationError: If timestamp_ms is not an integer
            TopicNotFound: If the topic does not exist
            StorageError: If the topic cannot be read
        """
        with self._failures("read_since", topic):
            timestamp_ms = require_int("timestamp_ms", timestamp_ms)
            name = self._resolve_topic(topic)
            records = self._log(name).read_since(timestamp_ms)
        
        logger.debug("Read since timestamp", topic=name, timestamp_ms=timestamp_ms, count=len(records))
        
        return records
    
    def get_topic_length(self, topic: Optional[str] = None) -> TopicLength:
        """
        Get the number of messages in a topic.
        
        Raises:
            TopicNotFound: If the topic does not exist
            StorageError: If the topic cannot be read
        """
        with self._failures("get_topic_length", topic):
            name = self._resolve_topic(topic)
            length = self._log(name).length()
        
        return TopicLength(topic=name, length=length)
    
    def get_topics(self) -> TopicListing:
        """
        List topics that have received at least one message.
        
        Raises:
            StorageError: If the data directory cannot be listed
        """
        with self._failures("get_topics", None):
            topics = self._directory.list_topics()
        
        return TopicListing(topics=topics)
    
    def execute(self, request: Request) -> Any:
        """
        Run a typed request.
        
        Args:
            request: One of the request types from agentbus.broker.requests
        
        Returns:
            The result of the matching operation
        
        Raises:
            ValidationError: If the request type is unknown
        """
        if isinstance(request, SendMessageRequest):
            return self.send_message(
                body=request.body,
                handle=request.handle,
                signature=request.signature,
                topic=request.topic,
            )
        if isinstance(request, ReadFromRequest):
            return self.read_from(request.start_index, topic=request.topic)
        if isinstance(request, ReadSinceRequest):
            return self.read_since(request.timestamp_ms, topic=request.topic)
        if isinstance(request, TopicLengthRequest):
            return self.get_topic_length(topic=request.topic)
        
        raise ValidationError(f"Unsupported request type: {type(request).__name__}")
