"""Tests for the tool-call adapter."""

import json
import tempfile
from pathlib import Path

import pytest

from agentbus.broker.store import MessageStore
from agentbus.broker.tools import TOOL_DESCRIPTIONS, ToolHandler


class TestToolHandler:
    """Test ToolHandler dispatch and rendering."""
    
    @pytest.fixture
    def tools(self):
        """Create a tool handler over a temporary store."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield ToolHandler(MessageStore(data_dir=Path(tmpdir), fsync=False))
    
    def send(self, tools, **message_obj):
        return tools.call("send_message", {"messageObj": message_obj})
    
    def test_tool_names(self, tools):
        """Test that every tool has a description."""
        assert sorted(tools.tool_names()) == sorted(TOOL_DESCRIPTIONS)
    
    def test_send_message(self, tools):
        """Test the send_message acknowledgement."""
        reply = json.loads(self.send(tools, handle="A", message="hi", signature="", topic="t1"))
        
        assert reply["status"] == "Message sent"
        assert reply["index"] == 0
        assert reply["topic"] == "t1"
        assert isinstance(reply["timestamp"], int)
    
    def test_send_message_default_topic(self, tools):
        """Test that a missing topic falls back to the default."""
        reply = json.loads(self.send(tools, handle="A", message="hi", signature=""))
        
        assert reply["topic"] == "general"
    
    def test_send_message_validation(self, tools):
        """Test that invalid messages render as errors and persist nothing."""
        assert tools.call("send_message", {}) == "Error: Message must be an object"
        assert tools.call("send_message", {"messageObj": "hi"}) == "Error: Message must be an object"
        assert self.send(tools, handle="A", message=5, signature="", topic="t1") == (
            "Error: Message content must be a string"
        )
        assert self.send(tools, handle="A", signature="", topic="t1").startswith("Error:")
        
        topics = json.loads(tools.call("get_topics"))
        assert topics == {"topics": [], "count": 0}
    
    def test_read_from(self, tools):
        """Test reading records in their stored layout."""
        for i in range(3):
            self.send(tools, handle="A", message=f"msg-{i}", signature="s", topic="t1")
        
        records = json.loads(tools.call("read_from", {"message_index": 1, "topic": "t1"}))
        
        assert [r["message"] for r in records] == ["msg-1", "msg-2"]
        assert set(records[0]) == {"handle", "message", "signature", "timestamp"}
    
    def test_read_from_errors(self, tools):
        """Test missing topic and out-of-range renderings."""
        assert tools.call("read_from", {"message_index": 0, "topic": "t1"}) == (
            'Error: Topic "t1" not found'
        )
        
        self.send(tools, handle="A", message="hi", signature="", topic="t1")
        
        assert tools.call("read_from", {"message_index": 1, "topic": "t1"}) == (
            'Error: Invalid index 1. Topic "t1" has 1 messages (valid indices: 0-0)'
        )
        assert tools.call("read_from", {"topic": "t1"}).startswith("Error:")
    
    def test_read_since(self, tools):
        """Test read_since for past and future timestamps."""
        reply = json.loads(self.send(tools, handle="A", message="hi", signature="", topic="t1"))
        
        past = json.loads(tools.call("read_since", {"unix_timestamp": reply["timestamp"], "topic": "t1"}))
        future = json.loads(tools.call("read_since", {"unix_timestamp": reply["timestamp"] + 1, "topic": "t1"}))
        
        assert len(past) == 1
        assert future == []
    
    def test_get_topic_length(self, tools):
        """Test the topic length payload."""
        self.send(tools, handle="A", message="hi", signature="")
        
        assert json.loads(tools.call("get_topic_length")) == {"topic": "general", "length": 1}
        assert tools.call("get_topic_length", {"topic": "nope"}) == 'Error: Topic "nope" not found'
    
    def test_get_topics(self, tools):
        """Test listing topics."""
        self.send(tools, handle="A", message="hi", signature="", topic="b")
        self.send(tools, handle="A", message="hi", signature="", topic="a")
        
        assert json.loads(tools.call("get_topics", {})) == {"topics": ["a", "b"], "count": 2}
    
    def test_invalid_topic(self, tools):
        """Test that unsafe topic names render as errors."""
        reply = self.send(tools, handle="A", message="hi", signature="", topic="../../etc/passwd")
        
        assert reply.startswith("Error: Invalid topic name")
    
    def test_unknown_tool(self, tools):
        """Test calling a tool that does not exist."""
        assert tools.call("delete_everything", {}) == 'Error: Unknown tool "delete_everything"'
