"""
Knowledge Client
================

How the agent asks for a user's knowledge.

Two implementations share one interface:

- LocalKnowledgeClient calls the in-process ToolRegistry. Default.
- StdioKnowledgeClient spawns the knowledge tool server
  (robin.tools.server) and talks MCP to it over stdio. A fresh server is
  started for each lookup and shut down afterwards.

Both return the MCP call-tool payload:

    {"content": [{"type": "text", "text": "..."}], "isError": False}
"""

import os
from abc import ABC, abstractmethod
from typing import Sequence

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

from robin.tools import ToolRegistry
from robin.tools.knowledge_tools import GET_KNOWLEDGE
from robin.utils.config import KnowledgeConfig
from robin.utils.logger import Logger

logger = Logger("KnowledgeClient")


def first_text(payload: dict) -> str:
    """Text of the first content item in a call-tool payload, or ""."""
    content = payload.get("content") or []
    if not content:
        return ""
    return content[0].get("text") or ""


class KnowledgeClient(ABC):
    """Base class for knowledge clients."""

    @abstractmethod
    async def get_knowledge(self, email: str) -> dict:
        """Call get-knowledge for an email and return the MCP payload."""

    @abstractmethod
    async def list_tools(self) -> list[str]:
        """Names of the tools the other side offers."""

    async def knowledge_text(self, email: str) -> str:
        """The knowledge text for an email (placeholder text on lookup errors)."""
        return first_text(await self.get_knowledge(email))


class LocalKnowledgeClient(KnowledgeClient):
    """
    Calls get-knowledge through an in-process registry.

    Example:
        client = LocalKnowledgeClient(tool_registry)
        text = await client.knowledge_text("jane@example.com")
    """

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    async def get_knowledge(self, email: str) -> dict:
        result = await self.registry.execute(GET_KNOWLEDGE, {"email": email})
        return result.to_mcp_content()

    async def list_tools(self) -> list[str]:
        return self.registry.list_names()


class StdioKnowledgeClient(KnowledgeClient):
    """
    Calls get-knowledge on a knowledge server started over stdio.

    The server inherits this process's environment, so ROBIN_DATA_DIR and
    ROBIN_LOG_DIR apply to it as well.

    Example:
        client = StdioKnowledgeClient("python", ["-m", "robin.tools.server"])
        payload = await client.get_knowledge("jane@example.com")
    """

    def __init__(self, command: str, args: Sequence[str] = ()):
        """
        Args:
            command: Executable that starts the server
            args: Arguments for the executable
        """
        self.server_params = StdioServerParameters(
            command=command,
            args=list(args),
            env=dict(os.environ),
        )

    async def list_tools(self) -> list[str]:
        async with stdio_client(self.server_params) as (read, write):
            async with ClientSession(read, write) as session:
                await session.initialize()
                tools = await session.list_tools()
                return [tool.name for tool in tools.tools]

    async def get_knowledge(self, email: str) -> dict:
        async with stdio_client(self.server_params) as (read, write):
            async with ClientSession(read, write) as session:
                await session.initialize()

                tools = await session.list_tools()
                logger.debug(
                    "Connected to knowledge server",
                    {"tools": [tool.name for tool in tools.tools]}
                )

                result = await session.call_tool(GET_KNOWLEDGE, arguments={"email": email})

        return {
            "content": [
                {"type": item.type, "text": getattr(item, "text", "")}
                for item in result.content
            ],
            "isError": bool(result.isError),
        }


def create_knowledge_client(config: KnowledgeConfig, registry: ToolRegistry) -> KnowledgeClient:
    """
    Pick the client for the configured transport.

    Args:
        config: Knowledge configuration
        registry: Registry used by the local transport
    """
    if config.transport == "stdio":
        command, *args = config.server_command
        logger.info(f"Using stdio knowledge server: {' '.join(config.server_command)}")
        return StdioKnowledgeClient(command, args)

    logger.info("Using in-process knowledge tools")
    return LocalKnowledgeClient(registry)
