"""
Tests for the built-in tools, resource and prompt.

Handlers are exercised through the dispatcher so validation and envelope
shaping are covered the same way a client would see them.
"""

import json
from datetime import datetime
from unittest.mock import patch

import pytest

from mcp_toolbox.mcp.adapters import ImageGenerationAdapter
from mcp_toolbox.mcp.config import ImageProviderConfig
from mcp_toolbox.mcp.dispatcher import Dispatcher
from mcp_toolbox.mcp.faults import InternalFault, InvalidOperationFault, ValidationFault
from mcp_toolbox.mcp.registry import Registry
from mcp_toolbox.mcp.tools import register_all
from mcp_toolbox.mcp.tools.calculator_tools import calculate, format_number
from mcp_toolbox.mcp.tools.time_tools import resolve_timezone


@pytest.fixture
def dispatcher():
    registry = Registry()
    adapter = ImageGenerationAdapter(ImageProviderConfig(api_token=None))
    register_all(registry, adapter, "test-server", "9.9.9")
    return Dispatcher(registry)


class TestGreeting:
    """greeting tool."""

    @pytest.mark.asyncio
    async def test_default_language_is_korean(self, dispatcher):
        envelope = await dispatcher.call_tool("greeting", {"name": "민수"})

        assert envelope.success is True
        assert envelope.text == "안녕하세요, 민수님! 😊"

    @pytest.mark.asyncio
    async def test_english(self, dispatcher):
        envelope = await dispatcher.call_tool("greeting", {"name": "Ada", "language": "en"})

        assert envelope.text == "Hello, Ada! 👋"

    @pytest.mark.asyncio
    async def test_identical_calls_give_identical_output(self, dispatcher):
        args = {"name": "Ada", "language": "en"}

        first = await dispatcher.call_tool("greeting", args)
        second = await dispatcher.call_tool("greeting", args)

        assert first.to_dict() == second.to_dict()

    @pytest.mark.asyncio
    async def test_unsupported_language(self, dispatcher):
        envelope = await dispatcher.call_tool("greeting", {"name": "Ada", "language": "fr"})

        assert isinstance(envelope.fault, ValidationFault)
        assert "ko, en" in envelope.fault.message


class TestCalculator:
    """calculator tool."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("args,expected", [
        ({"operation": "add", "a": 2, "b": 3}, "2 + 3 = 5"),
        ({"operation": "subtract", "a": 2, "b": 3}, "2 - 3 = -1"),
        ({"operation": "multiply", "a": 1.5, "b": 4}, "1.5 × 4 = 6"),
        ({"operation": "divide", "a": 10, "b": 2}, "10 ÷ 2 = 5"),
        ({"operation": "divide", "a": 1, "b": 4}, "1 ÷ 4 = 0.25"),
    ])
    async def test_operations(self, dispatcher, args, expected):
        envelope = await dispatcher.call_tool("calculator", args)

        assert envelope.success is True
        assert len(envelope.content) == 1
        assert envelope.content[0].type == "text"
        assert envelope.text == expected

    @pytest.mark.asyncio
    async def test_divide_by_zero(self, dispatcher):
        envelope = await dispatcher.call_tool("calculator", {"operation": "divide", "a": 10, "b": 0})

        assert envelope.success is False
        assert isinstance(envelope.fault, InvalidOperationFault)
        assert envelope.fault.message == "Cannot divide by zero"

    @pytest.mark.asyncio
    async def test_reports_all_bad_arguments(self, dispatcher):
        envelope = await dispatcher.call_tool("calculator", {"operation": "modulo", "a": "ten"})

        assert isinstance(envelope.fault, ValidationFault)
        assert envelope.fault.fields == ["operation", "a", "b"]

    @pytest.mark.asyncio
    async def test_huge_integer_division_is_out_of_range(self, dispatcher):
        envelope = await dispatcher.call_tool("calculator", {"operation": "divide", "a": 10**400, "b": 3})

        assert envelope.success is False
        assert isinstance(envelope.fault, InvalidOperationFault)
        assert envelope.fault.message.startswith("Result is out of range")

    def test_float_overflow_is_out_of_range(self):
        with pytest.raises(InvalidOperationFault, match="Result is out of range"):
            calculate("multiply", 1e308, 10)

    def test_unsupported_operation_is_internal_fault(self):
        with pytest.raises(InternalFault, match="Unsupported operation: modulo"):
            calculate("modulo", 1, 2)

    def test_format_number(self):
        assert format_number(5.0) == "5"
        assert format_number(-0.5) == "-0.5"
        assert format_number(7) == "7"


class TestCurrentTime:
    """current_time tool."""

    @pytest.mark.asyncio
    async def test_default_timezone(self, dispatcher):
        fixed = datetime(2026, 1, 2, 3, 4, 5, tzinfo=resolve_timezone("Asia/Seoul"))
        with patch("mcp_toolbox.mcp.tools.time_tools._now", return_value=fixed):
            envelope = await dispatcher.call_tool("current_time", {})

        assert envelope.text == "Current time in Asia/Seoul: 2026-01-02 03:04:05 (UTC+09:00)"

    @pytest.mark.asyncio
    async def test_explicit_timezone(self, dispatcher):
        envelope = await dispatcher.call_tool("current_time", {"timezone": "UTC"})

        assert envelope.success is True
        assert envelope.text.startswith("Current time in UTC: ")
        assert envelope.text.endswith("(UTC+00:00)")

    @pytest.mark.asyncio
    async def test_unknown_timezone(self, dispatcher):
        envelope = await dispatcher.call_tool("current_time", {"timezone": "Mars/Olympus"})

        assert isinstance(envelope.fault, InvalidOperationFault)
        assert envelope.fault.message == "Unknown timezone: Mars/Olympus"


class TestServerInfoResource:
    """server-info resource."""

    @pytest.mark.asyncio
    async def test_describes_registered_operations(self, dispatcher):
        envelope = await dispatcher.read_resource("server-info")
        info = json.loads(envelope.text)

        assert info["name"] == "test-server"
        assert info["version"] == "9.9.9"
        assert info["tools"] == ["greeting", "calculator", "current_time", "generate_image"]
        assert info["resources"] == ["server-info"]
        assert info["prompts"] == ["code_review"]


class TestCodeReviewPrompt:
    """code_review prompt."""

    @pytest.mark.asyncio
    async def test_default_focus(self, dispatcher):
        envelope = await dispatcher.get_prompt("code_review", {"code": "x = 1"})

        assert "with a general focus" in envelope.text
        assert "```\nx = 1\n```" in envelope.text

    @pytest.mark.asyncio
    async def test_security_focus(self, dispatcher):
        envelope = await dispatcher.get_prompt("code_review", {"code": "eval(s)", "focus": "security"})

        assert "injection" in envelope.text

    @pytest.mark.asyncio
    async def test_missing_code(self, dispatcher):
        envelope = await dispatcher.get_prompt("code_review", {})

        assert isinstance(envelope.fault, ValidationFault)
        assert envelope.fault.fields == ["code"]
