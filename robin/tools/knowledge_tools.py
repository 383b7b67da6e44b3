"""
Knowledge Tools
===============

The "get-knowledge" tool: given an employee's email, return their
knowledge record as text.

Lookup problems are never raised to the caller. Each one becomes a fixed,
friendly sentence that ends up in the prompt (and from there in the
answer) instead of a stack trace.
"""

from robin.knowledge import KnowledgeLookup, KnowledgeStatus, KnowledgeStore
from robin.tools import MCPTool, ToolResult, ToolRegistry
from robin.utils.logger import Logger

logger = Logger("KnowledgeTools")

GET_KNOWLEDGE = "get-knowledge"


def describe_lookup(result: KnowledgeLookup) -> str:
    """
    Text returned to the caller for a lookup outcome.

    FOUND returns the record itself; every other status maps to a fixed
    message.
    """
    email = result.email

    if result.status is KnowledgeStatus.FOUND:
        return result.text or "{}"
    if result.status is KnowledgeStatus.NOT_CONFIGURED:
        return "Knowledge base system is not properly configured. Please contact support."
    if result.status is KnowledgeStatus.NOT_FOUND:
        return (
            f"No knowledge base found for {email}. Please make sure the user has "
            f"set up their AI Assistant through the Slack app."
        )
    if result.status is KnowledgeStatus.CORRUPTED:
        return f"Error: Knowledge base for {email} is corrupted. Please contact support."
    return f"Error retrieving knowledge base for {email}. Please try again later."


def _is_email(value: object) -> bool:
    """Loose shape check: something@something."""
    if not isinstance(value, str):
        return False
    local, _, domain = value.strip().partition("@")
    return bool(local) and bool(domain)


def create_get_knowledge_tool(store: KnowledgeStore) -> MCPTool:
    """
    Build the get-knowledge tool bound to a store.

    Args:
        store: Where knowledge records are read from

    Returns:
        The tool definition
    """

    async def _get_knowledge(params: dict) -> ToolResult:
        email = params.get("email")
        if not _is_email(email):
            return ToolResult(success=False, error="A valid email is required")

        result = store.lookup(email.strip())
        text = describe_lookup(result)

        if result.found:
            return ToolResult(success=True, data=text)
        return ToolResult(success=False, data={"status": result.status.value}, error=text)

    return MCPTool(
        name=GET_KNOWLEDGE,
        description="Get knowledge from the knowledge base of an employee",
        parameters={
            "type": "object",
            "properties": {
                "email": {
                    "type": "string",
                    "format": "email",
                    "description": "The email Id of the employee"
                }
            },
            "required": ["email"]
        },
        execute=_get_knowledge
    )


def register_knowledge_tools(registry: ToolRegistry, store: KnowledgeStore) -> None:
    """Register the knowledge tools with a registry."""
    registry.register(create_get_knowledge_tool(store))
    logger.info("Registered knowledge tools", {"data_dir": str(store.data_dir)})
