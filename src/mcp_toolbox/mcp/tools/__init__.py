"""
MCP tool, resource and prompt handlers.

Each module declares its schema next to its handler and exposes a
``register_*`` function; ``register_all`` wires the full set into a
Registry.
"""

from mcp_toolbox.mcp.adapters import ImageGenerationAdapter
from mcp_toolbox.mcp.registry import Registry

from .calculator_tools import CALCULATOR_SCHEMA, calculator_handler, register_calculator_tool
from .greeting_tools import GREETING_SCHEMA, greeting_handler, register_greeting_tool
from .image_tools import GENERATE_IMAGE_SCHEMA, build_generate_image_handler, register_image_tool
from .info_tools import CODE_REVIEW_SCHEMA, SERVER_INFO_URI, code_review_handler, register_info_operations
from .time_tools import CURRENT_TIME_SCHEMA, current_time_handler, register_time_tool


def register_all(
    registry: Registry,
    image_adapter: ImageGenerationAdapter,
    server_name: str,
    version: str,
) -> Registry:
    """Register every built-in operation."""
    register_greeting_tool(registry)
    register_calculator_tool(registry)
    register_time_tool(registry)
    register_image_tool(registry, image_adapter)
    register_info_operations(registry, server_name, version)
    return registry


__all__ = [
    "CALCULATOR_SCHEMA",
    "CODE_REVIEW_SCHEMA",
    "CURRENT_TIME_SCHEMA",
    "GENERATE_IMAGE_SCHEMA",
    "GREETING_SCHEMA",
    "SERVER_INFO_URI",
    "build_generate_image_handler",
    "calculator_handler",
    "code_review_handler",
    "current_time_handler",
    "greeting_handler",
    "register_all",
    "register_calculator_tool",
    "register_greeting_tool",
    "register_image_tool",
    "register_info_operations",
    "register_time_tool",
]
