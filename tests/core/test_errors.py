"""Tests for the failure taxonomy."""

from agentbus.core.errors import (
    AgentBusError,
    BusyError,
    IndexOutOfRange,
    InvalidTopicName,
    StorageError,
    TopicNotFound,
    ValidationError,
)


class TestErrors:
    """Test error codes and payloads."""
    
    def test_to_dict(self):
        """Test the structured form of an error."""
        error = TopicNotFound("t1")
        
        assert error.to_dict() == {
            "error": "topic_not_found",
            "message": 'Topic "t1" not found',
        }
    
    def test_index_out_of_range_payload(self):
        """Test that the valid range is part of the message."""
        payload = IndexOutOfRange("t1", 5, 3).to_dict()
        
        assert payload["error"] == "index_out_of_range"
        assert "valid indices: 0-2" in payload["message"]
    
    def test_codes_are_distinct(self):
        """Test that every error type has its own code."""
        classes = [
            AgentBusError,
            BusyError,
            IndexOutOfRange,
            InvalidTopicName,
            StorageError,
            TopicNotFound,
            ValidationError,
        ]
        
        assert len({cls.code for cls in classes}) == len(classes)
    
    def test_invalid_topic_is_validation_error(self):
        """Test that a bad topic name is reported as a validation failure."""
        error = InvalidTopicName("bad")
        
        assert isinstance(error, ValidationError)
        assert error.to_dict()["error"] == "invalid_topic"
