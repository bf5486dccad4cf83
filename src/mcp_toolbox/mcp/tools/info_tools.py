"""
Server information resource and code review prompt.

``server-info`` describes the running server and what it exposes;
``code_review`` produces a ready-to-send review request.
"""

import json
from typing import Callable

from mcp_toolbox.mcp.registry import OperationKind, Registry
from mcp_toolbox.mcp.schema import SchemaDescriptor, enum, string

SERVER_INFO_URI = "server://info"

REVIEW_FOCUS = ("general", "performance", "security", "readability")

CODE_REVIEW_SCHEMA = SchemaDescriptor({
    "code": string("Code to review"),
    "focus": enum(REVIEW_FOCUS, "Review focus (default: general)", required=False, default="general"),
})

_FOCUS_INSTRUCTIONS = {
    "general": "Point out bugs, unclear naming and missing edge cases.",
    "performance": "Point out unnecessary work, poor complexity and avoidable allocations.",
    "security": "Point out injection risks, unsafe input handling and leaked secrets.",
    "readability": "Point out confusing structure, naming and missing documentation.",
}


def build_server_info_handler(registry: Registry, server_name: str, version: str) -> Callable[[], str]:
    """Bind the server-info resource to the registry it describes."""

    def server_info_handler() -> str:
        info = {
            "name": server_name,
            "version": version,
            "tools": registry.listing(OperationKind.TOOL).names(),
            "resources": registry.listing(OperationKind.RESOURCE).names(),
            "prompts": registry.listing(OperationKind.PROMPT).names(),
        }
        return json.dumps(info, ensure_ascii=False, indent=2)

    return server_info_handler


def code_review_handler(code: str, focus: str) -> str:
    return (
        f"Please review the following code with a {focus} focus.\n"
        f"{_FOCUS_INSTRUCTIONS[focus]}\n\n"
        f"```\n{code}\n```"
    )


def register_info_operations(registry: Registry, server_name: str, version: str) -> None:
    registry.register_resource(
        name="server-info",
        uri=SERVER_INFO_URI,
        handler=build_server_info_handler(registry, server_name, version),
        description="Server name, version and registered operations",
        mime_type="application/json",
    )
    registry.register_prompt(
        name="code_review",
        schema=CODE_REVIEW_SCHEMA,
        handler=code_review_handler,
        description="Ask for a code review with a chosen focus",
    )
