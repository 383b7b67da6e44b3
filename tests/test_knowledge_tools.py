"""Tests for the get-knowledge tool, the registry and the local client."""

import json
import sys
from pathlib import Path

import pytest

from robin.knowledge import KnowledgeStore
from robin.tools import MCPTool, ToolRegistry, ToolResult
from robin.tools.client import (
    KnowledgeClient,
    LocalKnowledgeClient,
    StdioKnowledgeClient,
    create_knowledge_client,
    first_text,
)
from robin.tools.knowledge_tools import GET_KNOWLEDGE, register_knowledge_tools
from robin.tools.server import create_server
from robin.utils.config import KnowledgeConfig


@pytest.mark.asyncio
class TestGetKnowledgeTool:
    async def test_found_returns_pretty_json(
        self, registry: ToolRegistry, jane_record: dict
    ) -> None:
        result = await registry.execute(GET_KNOWLEDGE, {"email": "jane.doe@example.com"})

        assert result.success
        assert json.loads(result.to_message()) == jane_record

    async def test_not_found_message(self, registry: ToolRegistry) -> None:
        result = await registry.execute(GET_KNOWLEDGE, {"email": "a.b@x.com"})

        assert not result.success
        assert result.to_message() == (
            "No knowledge base found for a.b@x.com. Please make sure the user has "
            "set up their AI Assistant through the Slack app."
        )

    async def test_not_configured_message(self, tmp_path: Path) -> None:
        registry = ToolRegistry()
        register_knowledge_tools(registry, KnowledgeStore(tmp_path / "missing"))

        result = await registry.execute(GET_KNOWLEDGE, {"email": "a.b@x.com"})

        assert result.to_message() == (
            "Knowledge base system is not properly configured. Please contact support."
        )

    async def test_corrupted_message(self, registry: ToolRegistry, data_dir: Path) -> None:
        (data_dir / "a_b_x_com.json").write_text("42")

        result = await registry.execute(GET_KNOWLEDGE, {"email": "a.b@x.com"})

        assert result.to_message() == (
            "Error: Knowledge base for a.b@x.com is corrupted. Please contact support."
        )

    async def test_unavailable_message(self, registry: ToolRegistry, data_dir: Path) -> None:
        (data_dir / "a_b_x_com.json").write_bytes(b"\xff\xfe\xfa")

        result = await registry.execute(GET_KNOWLEDGE, {"email": "a.b@x.com"})

        assert not result.success
        assert result.data == {"status": "unavailable"}
        assert result.to_message() == (
            "Error retrieving knowledge base for a.b@x.com. Please try again later."
        )

    async def test_array_record_is_returned(self, registry: ToolRegistry, data_dir: Path) -> None:
        (data_dir / "a_b_x_com.json").write_text('[{"skill": "kafka"}]')

        result = await registry.execute(GET_KNOWLEDGE, {"email": "a.b@x.com"})

        assert result.success
        assert json.loads(result.to_message()) == [{"skill": "kafka"}]

    @pytest.mark.parametrize("params", [{}, {"email": ""}, {"email": "no-at-sign"}, {"email": 3}])
    async def test_rejects_invalid_email(self, registry: ToolRegistry, params: dict) -> None:
        result = await registry.execute(GET_KNOWLEDGE, params)

        assert not result.success
        assert result.error == "A valid email is required"


@pytest.mark.asyncio
class TestToolRegistry:
    async def test_unknown_tool(self) -> None:
        result = await ToolRegistry().execute("nope", {})

        assert not result.success
        assert "not found" in result.error

    async def test_exceptions_become_failed_results(self) -> None:
        async def boom(params: dict) -> ToolResult:
            raise RuntimeError("disk on fire")

        registry = ToolRegistry()
        registry.register(MCPTool("boom", "Always fails", {"type": "object"}, boom))

        result = await registry.execute("boom", {})

        assert not result.success
        assert result.error == "disk on fire"

    async def test_duplicate_registration_is_rejected(self, registry: ToolRegistry) -> None:
        tool = registry.get(GET_KNOWLEDGE)

        with pytest.raises(ValueError, match="already registered"):
            registry.register(tool)

    async def test_lists_exactly_one_tool(self, registry: ToolRegistry) -> None:
        assert registry.list_names() == [GET_KNOWLEDGE]
        definition = registry.get(GET_KNOWLEDGE).to_mcp_definition()
        assert definition["inputSchema"]["required"] == ["email"]


@pytest.mark.asyncio
class TestLocalKnowledgeClient:
    async def test_payload_shape(self, registry: ToolRegistry, jane_record: dict) -> None:
        client = LocalKnowledgeClient(registry)

        payload = await client.get_knowledge("jane.doe@example.com")

        assert payload["isError"] is False
        assert payload["content"][0]["type"] == "text"
        assert json.loads(payload["content"][0]["text"]) == jane_record

    async def test_knowledge_text_on_missing_record(self, registry: ToolRegistry) -> None:
        client = LocalKnowledgeClient(registry)

        text = await client.knowledge_text("a.b@x.com")

        assert text.startswith("No knowledge base found for a.b@x.com")

    async def test_list_tools(self, registry: ToolRegistry) -> None:
        assert await LocalKnowledgeClient(registry).list_tools() == [GET_KNOWLEDGE]


def test_first_text_handles_empty_payloads() -> None:
    assert first_text({}) == ""
    assert first_text({"content": []}) == ""
    assert first_text({"content": [{"type": "text", "text": "hi"}]}) == "hi"


def test_create_knowledge_client_picks_transport(registry: ToolRegistry, tmp_path: Path) -> None:
    local = KnowledgeConfig(tmp_path, tmp_path, "local", ("python", "-m", "robin.tools.server"))
    stdio = KnowledgeConfig(tmp_path, tmp_path, "stdio", ("python", "-m", "robin.tools.server"))

    assert isinstance(create_knowledge_client(local, registry), LocalKnowledgeClient)

    client = create_knowledge_client(stdio, registry)
    assert client.server_params.command == "python"
    assert client.server_params.args == ["-m", "robin.tools.server"]


def test_create_server_requires_registered_tool() -> None:
    with pytest.raises(ValueError, match=GET_KNOWLEDGE):
        create_server(ToolRegistry())


def test_create_server_names_server(registry: ToolRegistry) -> None:
    server = create_server(registry)

    assert server.name == "knowledge-base"


def test_knowledge_client_is_abstract() -> None:
    with pytest.raises(TypeError):
        KnowledgeClient()


def _content_of(result) -> list:
    # Newer FastMCP releases return (content, structured_content)
    return result[0] if isinstance(result, tuple) else list(result)


@pytest.mark.asyncio
class TestKnowledgeServer:
    async def test_lists_only_get_knowledge(self, registry: ToolRegistry) -> None:
        tools = await create_server(registry).list_tools()

        assert [tool.name for tool in tools] == [GET_KNOWLEDGE]
        email = tools[0].inputSchema["properties"]["email"]
        assert email["type"] == "string"
        assert email["format"] == "email"
        assert email["description"] == "The email Id of the employee"
        assert tools[0].inputSchema["required"] == ["email"]

    async def test_call_tool_returns_record(
        self, registry: ToolRegistry, jane_record: dict
    ) -> None:
        server = create_server(registry)

        result = await server.call_tool(GET_KNOWLEDGE, {"email": "jane.doe@example.com"})

        content = _content_of(result)
        assert len(content) == 1
        assert content[0].type == "text"
        assert json.loads(content[0].text) == jane_record

    async def test_call_tool_returns_lookup_message(self, registry: ToolRegistry) -> None:
        result = await create_server(registry).call_tool(GET_KNOWLEDGE, {"email": "a.b@x.com"})

        assert _content_of(result)[0].text.startswith("No knowledge base found for a.b@x.com")


@pytest.mark.asyncio
class TestStdioKnowledgeClient:
    @pytest.fixture()
    def client(self, data_dir: Path, tmp_path: Path, monkeypatch) -> StdioKnowledgeClient:
        monkeypatch.setenv("ROBIN_DATA_DIR", str(data_dir))
        monkeypatch.setenv("ROBIN_LOG_DIR", str(tmp_path / "logs"))
        return StdioKnowledgeClient(sys.executable, ["-m", "robin.tools.server"])

    async def test_round_trip(
        self, client: StdioKnowledgeClient, jane_record: dict, tmp_path: Path
    ) -> None:
        payload = await client.get_knowledge("jane.doe@example.com")

        assert payload["isError"] is False
        assert [item["type"] for item in payload["content"]] == ["text"]
        assert json.loads(payload["content"][0]["text"]) == jane_record
        assert (tmp_path / "logs" / "mcp-server.log").is_file()

    async def test_lists_tools(self, client: StdioKnowledgeClient) -> None:
        assert await client.list_tools() == [GET_KNOWLEDGE]
