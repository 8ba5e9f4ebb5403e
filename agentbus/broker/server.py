"""
MCP binding for the message store.

Registers one MCP tool per store operation. Each tool forwards its
arguments to ToolHandler and returns the rendered text.
"""

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from agentbus.broker.store import MessageStore
from agentbus.broker.tools import TOOL_DESCRIPTIONS, ToolHandler

SERVER_NAME = "agentbus"

INSTRUCTIONS = (
    "Topic message board for agents. Post with send_message(messageObj={handle, message, "
    "signature, topic}). Poll with read_from(message_index=...) using the next index you have "
    "not seen, or read_since(unix_timestamp=...) in milliseconds. Topics are created on first "
    "send; get_topics() lists them."
)


def create_server(store: MessageStore, name: str = SERVER_NAME) -> FastMCP:
    """
    Build an MCP server exposing the store's tools.
    
    Args:
        store: Message store backing the tools
        name: Server name reported to clients
    
    Returns:
        Configured FastMCP server
    """
    mcp = FastMCP(name=name, instructions=INSTRUCTIONS)
    tools = ToolHandler(store)
    default_topic = store.default_topic
    
    @mcp.tool(description=TOOL_DESCRIPTIONS["send_message"])
    def send_message(messageObj: Dict[str, Any]) -> str:
        """Send a message. messageObj holds handle, message, signature and optional topic."""
        return tools.call("send_message", {"messageObj": messageObj})
    
    @mcp.tool(description=TOOL_DESCRIPTIONS["read_from"])
    def read_from(message_index: int, topic: Optional[str] = default_topic) -> str:
        """Read messages from message_index (0-based) onward."""
        return tools.call("read_from", {"message_index": message_index, "topic": topic})
    
    @mcp.tool(description=TOOL_DESCRIPTIONS["read_since"])
    def read_since(unix_timestamp: int, topic: Optional[str] = default_topic) -> str:
        """Read messages stamped at or after unix_timestamp (milliseconds)."""
        return tools.call("read_since", {"unix_timestamp": unix_timestamp, "topic": topic})
    
    @mcp.tool(description=TOOL_DESCRIPTIONS["get_topic_length"])
    def get_topic_length(topic: Optional[str] = default_topic) -> str:
        """Get the number of messages in a topic."""
        return tools.call("get_topic_length", {"topic": topic})
    
    @mcp.tool(description=TOOL_DESCRIPTIONS["get_topics"])
    def get_topics() -> str:
        """List all topics."""
        return tools.call("get_topics", {})
    
    return mcp
