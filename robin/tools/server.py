"""
Knowledge Tool Server
=====================

Serves the registry's get-knowledge tool as an MCP server over stdio,
so other processes (or other MCP clients) can look up knowledge records.

stdout carries the protocol, so all logging goes to
~/.robin/logs/mcp-server.log (or ROBIN_LOG_DIR).

Run with:
    python -m robin.tools.server

Or after installing:
    robin-knowledge-server
"""

from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from robin.knowledge import KnowledgeStore
from robin.tools import ToolRegistry
from robin.tools.knowledge_tools import GET_KNOWLEDGE, register_knowledge_tools
from robin.utils.config import load_knowledge_config
from robin.utils.logger import Logger, configure_log_file

SERVER_NAME = "knowledge-base"

logger = Logger("MCPServer")


def create_server(registry: ToolRegistry) -> FastMCP:
    """
    Build the MCP server around a populated registry.

    Args:
        registry: Registry holding the get-knowledge tool

    Returns:
        A FastMCP server ready to run
    """
    tool = registry.get(GET_KNOWLEDGE)
    if tool is None:
        raise ValueError(f"Tool '{GET_KNOWLEDGE}' is not registered")

    email_schema = tool.parameters["properties"]["email"]
    server = FastMCP(SERVER_NAME)

    @server.tool(name=tool.name, description=tool.description)
    async def get_knowledge(
        email: Annotated[
            str,
            Field(
                description=email_schema["description"],
                json_schema_extra={"format": email_schema["format"]},
            ),
        ],
    ) -> str:
        """Return the knowledge record for an employee email."""
        result = await registry.execute(tool.name, {"email": email})
        return result.to_message()

    return server


def run() -> None:
    """Console entry point."""
    config = load_knowledge_config()
    configure_log_file(config.server_log_file)

    store = KnowledgeStore(config.data_dir)
    registry = ToolRegistry()
    register_knowledge_tools(registry, store)

    server = create_server(registry)
    logger.info("Knowledge base MCP Server running on stdio")

    try:
        server.run(transport="stdio")
    except Exception as e:
        logger.error("Fatal error in knowledge server", e)
        raise


if __name__ == "__main__":
    run()
