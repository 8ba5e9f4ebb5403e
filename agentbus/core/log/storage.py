"""
Durable per-topic storage.

Each topic lives in one JSON file holding the full ordered array of its
records. Writes replace the whole file through a temporary sibling and an
atomic rename, so readers see either the old or the new contents, never a
partial write.
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from agentbus.core.errors import InvalidTopicName, StorageError
from agentbus.core.log.format import Record
from agentbus.utils.logging import get_logger

logger = get_logger(__name__)

TOPIC_FILE_SUFFIX = ".json"
MAX_TOPIC_NAME_LENGTH = 128

_TOPIC_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def default_file_mode() -> int:
    """Get the mode a plain open() gives new files under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def is_valid_topic_name(name: object) -> bool:
    """
    Check whether a topic name can be used as a file name under the data dir.
    
    Args:
        name: Candidate topic name
    
    Returns:
        True if the name is safe
    """
    return (
        isinstance(name, str)
        and 0 < len(name) <= MAX_TOPIC_NAME_LENGTH
        and ".." not in name
        and _TOPIC_NAME_RE.match(name) is not None
    )


def validate_topic_name(name: object) -> str:
    """
    Validate a topic name.
    
    Args:
        name: Candidate topic name
    
    Returns:
        The name, unchanged
    
    Raises:
        InvalidTopicName: If the name contains path separators, traversal
            sequences or other unsafe characters
    """
    if not isinstance(name, str):
        raise InvalidTopicName(f"Topic must be a string, got {type(name).__name__}")
    if not is_valid_topic_name(name):
        raise InvalidTopicName(
            f'Invalid topic name "{name}": use 1-{MAX_TOPIC_NAME_LENGTH} letters, digits, '
            f'".", "_" or "-", starting with a letter or digit and without ".."'
        )
    return name


class TopicStorage:
    """
    Maps topic names to JSON files under a data directory.
    
    Attributes:
        data_dir: Directory holding one file per topic
        fsync: Whether to fsync before the atomic rename
        file_mode: Permission bits given to topic files
    """
    
    def __init__(self, data_dir: Path, fsync: bool = True):
        """
        Initialize topic storage.
        
        The directory is created lazily on first store.
        
        Args:
            data_dir: Directory for topic files
            fsync: Whether to fsync each write
        """
        self.data_dir = Path(data_dir)
        self.fsync = fsync
        # mkstemp creates 0600 files; topic files get the usual umask mode
        self.file_mode = default_file_mode()
    
    def topic_path(self, topic: str) -> Path:
        """
        Get the file path for a topic.
        
        Args:
            topic: Topic name
        
        Returns:
            Path of the topic's file
        """
        return self.data_dir / f"{validate_topic_name(topic)}{TOPIC_FILE_SUFFIX}"
    
    def load(self, topic: str) -> Optional[List[Record]]:
        """
        Load all records of a topic.
        
        Args:
            topic: Topic name
        
        Returns:
            Records in index order, or None if the topic has no file
        
        Raises:
            StorageError: If the file cannot be read or is malformed
        """
        path = self.topic_path(topic)
        
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as e:
            logger.error("Corrupt topic file", topic=topic, path=str(path), error=str(e))
            raise StorageError(f'Topic "{topic}" storage is corrupt: {e}') from e
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read topic file", topic=topic, path=str(path), error=str(e))
            raise StorageError(f'Failed to read topic "{topic}": {e}') from e
        
        if not isinstance(data, list):
            raise StorageError(f'Topic "{topic}" storage is corrupt: expected a list of records')
        
        return [Record.from_dict(entry) for entry in data]
    
    def store(self, topic: str, records: Sequence[Record]) -> None:
        """
        Replace all records of a topic.
        
        On failure the previous file is left untouched.
        
        Args:
            topic: Topic name
            records: Full record sequence in index order
        
        Raises:
            StorageError: If the write fails
        """
        path = self.topic_path(topic)
        payload = json.dumps([r.to_dict() for r in records], indent=2)
        
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.data_dir,
                prefix=f".{topic}.",
                suffix=".tmp",
            )
        except OSError as e:
            logger.error("Failed to prepare topic write", topic=topic, error=str(e))
            raise StorageError(f'Failed to write topic "{topic}": {e}') from e
        
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                os.chmod(tmp_name, self.file_mode)
                f.write(payload)
                if self.fsync:
                    f.flush()
                    os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            logger.error("Failed to write topic file", topic=topic, path=str(path), error=str(e))
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StorageError(f'Failed to write topic "{topic}": {e}') from e
        
        logger.debug("Stored topic", topic=topic, records=len(records), bytes=len(payload))
    
    def list_containers(self) -> List[str]:
        """
        List topics that have a file on disk.
        
        Returns:
            Sorted topic names
        
        Raises:
            StorageError: If the data directory cannot be listed
        """
        if not self.data_dir.exists():
            return []
        
        try:
            names = [
                p.stem
                for p in self.data_dir.glob(f"*{TOPIC_FILE_SUFFIX}")
                if p.is_file() and is_valid_topic_name(p.stem)
            ]
        except OSError as e:
            raise StorageError(f"Failed to list topics: {e}") from e
        
        return sorted(names)
