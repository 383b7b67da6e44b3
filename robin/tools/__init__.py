"""
Tools
=====

Tools follow the Model Context Protocol (MCP) shape: each tool has a
name, a description, a JSON Schema for its parameters, and an async
function that runs it.

Robin exposes a single tool, "get-knowledge", which returns a user's
knowledge record. It can be called two ways:

1. In-process, through the ToolRegistry (KNOWLEDGE_TRANSPORT=local)
2. Over stdio, through the MCP server in robin.tools.server
   (KNOWLEDGE_TRANSPORT=stdio)

Either way the caller gets the same MCP-style payload:

    {"content": [{"type": "text", "text": "..."}], "isError": false}

This module provides:
- ToolResult for standardized responses
- MCPTool for defining tools
- ToolRegistry for looking tools up and running them
"""

from dataclasses import dataclass
from typing import Any, Callable, Awaitable
import json

from robin.utils.logger import Logger

logger = Logger("Tools")


@dataclass
class ToolResult:
    """
    Standardized result from tool execution.

    Attributes:
        success: Whether the tool executed successfully
        data: The result data (varies by tool)
        error: Error message if success is False
    """
    success: bool
    data: Any = None
    error: str | None = None

    def to_message(self) -> str:
        """Text form of the result; strings are passed through as-is."""
        if not self.success:
            return self.error or "Unknown error"
        if isinstance(self.data, str):
            return self.data
        return json.dumps(self.data, default=str)

    def to_mcp_content(self) -> dict:
        """Format as an MCP call-tool result with a single text item."""
        return {
            "content": [{"type": "text", "text": self.to_message()}],
            "isError": not self.success,
        }


@dataclass
class MCPTool:
    """
    Definition of a tool following the MCP pattern.

    Attributes:
        name: Unique identifier for the tool
        description: What the tool does
        parameters: JSON Schema for the parameters
        execute: Async function that runs the tool
    """
    name: str
    description: str
    parameters: dict
    execute: Callable[[dict], Awaitable[ToolResult]]

    def to_mcp_definition(self) -> dict:
        """Tool listing entry as returned by an MCP tools/list call."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameters,
        }


class ToolRegistry:
    """
    Central registry for available tools.

    Example:
        registry = ToolRegistry()
        registry.register(get_knowledge_tool)

        result = await registry.execute("get-knowledge", {"email": "a@b.com"})
    """

    def __init__(self):
        self._tools: dict[str, MCPTool] = {}

    def register(self, tool: MCPTool) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with this name already exists
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def get(self, name: str) -> MCPTool | None:
        return self._tools.get(name)

    def get_all(self) -> list[MCPTool]:
        return list(self._tools.values())

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    async def execute(self, name: str, params: dict) -> ToolResult:
        """
        Execute a tool by name.

        Unknown tools and exceptions raised by the tool are turned into a
        failed ToolResult.
        """
        tool = self.get(name)
        if not tool:
            return ToolResult(success=False, error=f"Tool '{name}' not found")

        try:
            logger.info(f"Executing tool: {name}")
            return await tool.execute(params)
        except Exception as e:
            logger.error(f"Tool execution failed: {name}", e)
            return ToolResult(success=False, error=str(e))


# Global tool registry instance
tool_registry = ToolRegistry()


__all__ = [
    "MCPTool",
    "ToolResult",
    "ToolRegistry",
    "tool_registry",
]
