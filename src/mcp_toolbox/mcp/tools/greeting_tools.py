"""Greeting tool: a localized greeting for a named person."""

from mcp_toolbox.mcp.registry import Registry
from mcp_toolbox.mcp.schema import SchemaDescriptor, enum, string

GREETING_SCHEMA = SchemaDescriptor({
    "name": string("Name of the person to greet"),
    "language": enum(("ko", "en"), "Greeting language (default: ko)", required=False, default="ko"),
})


def greeting_handler(name: str, language: str) -> str:
    """Return a greeting for ``name`` in the requested language."""
    if language == "ko":
        return f"안녕하세요, {name}님! 😊"
    return f"Hello, {name}! 👋"


def register_greeting_tool(registry: Registry) -> None:
    registry.register_tool(
        name="greeting",
        schema=GREETING_SCHEMA,
        handler=greeting_handler,
        description="Greet someone by name in Korean or English",
    )
