"""Tests for per-topic JSON storage."""

import json
import os
import stat
import tempfile
from pathlib import Path
from unittest import mock

import pytest

from agentbus.core.errors import InvalidTopicName, StorageError
from agentbus.core.log.format import Record
from agentbus.core.log.storage import TopicStorage, is_valid_topic_name, validate_topic_name


def make_records(count, start_ts=1000):
    return [
        Record(handle=f"h{i}", body=f"msg-{i}", signature="", timestamp=start_ts + i)
        for i in range(count)
    ]


class TestTopicNames:
    """Test topic name validation."""
    
    @pytest.mark.parametrize("name", ["general", "t1", "agent-chat", "team_a.v2", "A" * 128])
    def test_valid_names(self, name):
        """Test names that are safe as file names."""
        assert validate_topic_name(name) == name
    
    @pytest.mark.parametrize(
        "name",
        ["", "..", "../etc", "a/b", "a\\b", "a..b", ".hidden", "-dash", "with space", "A" * 129],
    )
    def test_invalid_names(self, name):
        """Test names that could escape or confuse the data directory."""
        assert not is_valid_topic_name(name)
        with pytest.raises(InvalidTopicName):
            validate_topic_name(name)
    
    def test_non_string_name(self):
        """Test that a non-string topic is rejected."""
        with pytest.raises(InvalidTopicName, match="must be a string"):
            validate_topic_name(7)


class TestTopicStorage:
    """Test TopicStorage."""
    
    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory for tests."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)
    
    @pytest.fixture
    def storage(self, temp_dir):
        """Create storage under a nested, not yet existing directory."""
        return TopicStorage(temp_dir / "messages")
    
    def test_load_missing_topic(self, storage):
        """Test that a topic without a file loads as None."""
        assert storage.load("general") is None
    
    def test_store_creates_directory(self, storage):
        """Test that the first store creates the data directory."""
        storage.store("general", make_records(1))
        
        assert storage.data_dir.is_dir()
        assert storage.topic_path("general").exists()
    
    def test_store_and_load(self, storage):
        """Test that stored records load back in order."""
        records = make_records(3)
        storage.store("t1", records)
        
        assert storage.load("t1") == records
    
    def test_store_replaces_contents(self, storage):
        """Test that store replaces the whole topic."""
        storage.store("t1", make_records(3))
        storage.store("t1", make_records(1, start_ts=5000))
        
        loaded = storage.load("t1")
        assert len(loaded) == 1
        assert loaded[0].timestamp == 5000
    
    def test_file_layout(self, storage):
        """Test the on-disk JSON layout."""
        storage.store("t1", [Record(handle="A", body="hi", signature="", timestamp=7)])
        
        with open(storage.topic_path("t1")) as f:
            data = json.load(f)
        
        assert data == [{"handle": "A", "message": "hi", "signature": "", "timestamp": 7}]
    
    def test_no_temp_files_left(self, storage):
        """Test that successful writes leave only the topic file."""
        for i in range(3):
            storage.store("t1", make_records(i + 1))
        
        assert sorted(os.listdir(storage.data_dir)) == ["t1.json"]
    
    def test_topic_file_mode_follows_umask(self, storage):
        """Test that topic files get the umask default rather than 0600."""
        umask = os.umask(0o022)
        try:
            storage = TopicStorage(storage.data_dir)
            storage.store("t1", make_records(1))
        finally:
            os.umask(umask)
        
        assert stat.S_IMODE(storage.topic_path("t1").stat().st_mode) == 0o644
    
    def test_failed_store_keeps_previous_contents(self, storage):
        """Test that a failed write leaves the old file intact."""
        original = make_records(2)
        storage.store("t1", original)
        
        with mock.patch("agentbus.core.log.storage.os.replace", side_effect=OSError(28, "No space left")):
            with pytest.raises(StorageError, match="No space left"):
                storage.store("t1", make_records(5))
        
        assert storage.load("t1") == original
        assert sorted(os.listdir(storage.data_dir)) == ["t1.json"]
    
    def test_corrupt_file(self, storage):
        """Test that unparsable content raises StorageError."""
        storage.data_dir.mkdir(parents=True)
        storage.topic_path("t1").write_text("[{not json")
        
        with pytest.raises(StorageError, match="corrupt"):
            storage.load("t1")
    
    def test_wrong_shape(self, storage):
        """Test that a non-list document raises StorageError."""
        storage.data_dir.mkdir(parents=True)
        storage.topic_path("t1").write_text('{"handle": "A"}')
        
        with pytest.raises(StorageError):
            storage.load("t1")
    
    def test_invalid_topic_path(self, storage):
        """Test that traversal names never map to a path."""
        with pytest.raises(InvalidTopicName):
            storage.topic_path("../outside")
    
    def test_list_containers(self, storage):
        """Test listing topics with files."""
        storage.store("beta", make_records(1))
        storage.store("alpha", make_records(1))
        
        assert storage.list_containers() == ["alpha", "beta"]
    
    def test_list_containers_ignores_foreign_files(self, storage):
        """Test that temp files, other suffixes and unsafe names are skipped."""
        storage.store("alpha", make_records(1))
        (storage.data_dir / ".alpha.abc123.tmp").write_text("[]")
        (storage.data_dir / "notes.txt").write_text("")
        (storage.data_dir / ".hidden.json").write_text("[]")
        (storage.data_dir / "sub.json").mkdir()
        
        assert storage.list_containers() == ["alpha"]
    
    def test_list_containers_without_directory(self, storage):
        """Test listing before anything was stored."""
        assert storage.list_containers() == []
