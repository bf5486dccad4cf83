"""
Integration tests for the MCP server through the FastMCP client.

The client talks to the server in memory, so these tests cover discovery,
tool calls, resource reads and prompt rendering end to end without a
subprocess.
"""

import base64
import json

import httpx
import pytest
from fastmcp.client import Client
from fastmcp.exceptions import ToolError

from mcp_toolbox.mcp.config import MCPConfig
from mcp_toolbox.mcp.server import MCPServer

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x01" * 8


@pytest.fixture
def mcp_server():
    """Create an MCP server whose image provider is a mock transport."""
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})
    )
    return MCPServer(config=MCPConfig(hf_token="hf_test"), image_transport=transport)


class TestDiscovery:
    """Clients see every registered operation and its schema."""

    @pytest.mark.asyncio
    async def test_list_tools(self, mcp_server):
        async with Client(mcp_server.app) as client:
            tools = await client.list_tools()

        by_name = {tool.name: tool for tool in tools}
        assert set(by_name) == {"greeting", "calculator", "current_time", "generate_image"}
        calculator_schema = by_name["calculator"].inputSchema
        assert calculator_schema["properties"]["operation"]["enum"] == [
            "add", "subtract", "multiply", "divide",
        ]
        assert calculator_schema["required"] == ["operation", "a", "b"]

    @pytest.mark.asyncio
    async def test_list_resources_and_prompts(self, mcp_server):
        async with Client(mcp_server.app) as client:
            resources = await client.list_resources()
            prompts = await client.list_prompts()

        assert [str(resource.uri) for resource in resources] == ["server://info"]
        assert [resource.name for resource in resources] == ["server-info"]
        assert [prompt.name for prompt in prompts] == ["code_review"]
        assert {arg.name: arg.required for arg in prompts[0].arguments} == {
            "code": True,
            "focus": False,
        }


class TestToolCalls:
    """Tool calls return content or error results."""

    @pytest.mark.asyncio
    async def test_calculator_add(self, mcp_server):
        async with Client(mcp_server.app) as client:
            result = await client.call_tool("calculator", {"operation": "add", "a": 2, "b": 3})

        assert result.content[0].text == "2 + 3 = 5"

    @pytest.mark.asyncio
    async def test_calculator_divide_by_zero(self, mcp_server):
        async with Client(mcp_server.app) as client:
            with pytest.raises(ToolError, match="Cannot divide by zero"):
                await client.call_tool("calculator", {"operation": "divide", "a": 10, "b": 0})

    @pytest.mark.asyncio
    async def test_greeting_default_language(self, mcp_server):
        async with Client(mcp_server.app) as client:
            result = await client.call_tool("greeting", {"name": "Ada"})

        assert result.content[0].text == "안녕하세요, Ada님! 😊"

    @pytest.mark.asyncio
    async def test_unknown_tool(self, mcp_server):
        async with Client(mcp_server.app) as client:
            with pytest.raises(ToolError):
                await client.call_tool("does_not_exist", {})

    @pytest.mark.asyncio
    async def test_generate_image(self, mcp_server):
        async with Client(mcp_server.app) as client:
            result = await client.call_tool("generate_image", {"prompt": "a lighthouse"})

        image = result.content[0]
        assert image.type == "image"
        assert image.mimeType == "image/png"
        assert base64.b64decode(image.data) == PNG_BYTES

    @pytest.mark.asyncio
    async def test_generate_image_without_credential(self):
        server = MCPServer(config=MCPConfig(hf_token=None))

        async with Client(server.app) as client:
            with pytest.raises(ToolError, match="HF_TOKEN"):
                await client.call_tool("generate_image", {"prompt": "a lighthouse"})


class TestResourcesAndPrompts:
    """Resource reads and prompt rendering."""

    @pytest.mark.asyncio
    async def test_read_server_info(self, mcp_server):
        async with Client(mcp_server.app) as client:
            contents = await client.read_resource("server://info")

        info = json.loads(contents[0].text)
        assert info["name"] == "mcp-toolbox"
        assert "generate_image" in info["tools"]

    @pytest.mark.asyncio
    async def test_get_code_review_prompt(self, mcp_server):
        async with Client(mcp_server.app) as client:
            result = await client.get_prompt("code_review", {"code": "print(1)", "focus": "readability"})

        message = result.messages[0]
        assert message.role == "user"
        assert "readability focus" in message.content.text
        assert "print(1)" in message.content.text
