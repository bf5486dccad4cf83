"""
FastMCP binding for registry entries.

Each registry entry is exposed as a FastMCP component whose execution is
delegated to the Dispatcher, so argument validation and response shaping
happen in exactly one place. Failure envelopes are re-raised as the
FastMCP error type for the component, which clients receive as an error
result rather than a crash.
"""

import base64
import logging
from typing import Any, Dict, List, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import PromptError, ResourceError, ToolError
from fastmcp.prompts.prompt import Prompt, PromptArgument
from fastmcp.resources.resource import Resource
from fastmcp.tools.tool import Tool, ToolResult
from mcp.types import (
    Annotations as MCPAnnotations,
    BlobResourceContents,
    EmbeddedResource,
    ImageContent,
    PromptMessage,
    TextContent,
)
from pydantic import Field

from .dispatcher import Dispatcher
from .envelope import BinaryBlock, ContentBlock, ImageBlock, TextBlock
from .registry import OperationKind, Registry, RegistryEntry

logger = logging.getLogger(__name__)


def to_mcp_content(block: ContentBlock):
    """Convert a content block to its MCP protocol type."""
    if isinstance(block, TextBlock):
        return TextContent(type="text", text=block.text)

    if isinstance(block, ImageBlock):
        annotations = None
        if block.annotations:
            annotations = MCPAnnotations(
                audience=list(block.annotations.audience),
                priority=block.annotations.priority,
            )
        return ImageContent(
            type="image",
            data=block.data,
            mimeType=block.mime_type,
            annotations=annotations,
        )

    if isinstance(block, BinaryBlock):
        return EmbeddedResource(
            type="resource",
            resource=BlobResourceContents(uri=block.uri, mimeType=block.mime_type, blob=block.data),
        )

    raise TypeError(f"Unsupported content block: {type(block).__name__}")


class RegistryTool(Tool):
    """FastMCP tool that delegates to the Dispatcher."""

    dispatcher: Any = Field(exclude=True)

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        envelope = await self.dispatcher.call_tool(self.name, arguments)
        if not envelope.success:
            raise ToolError(envelope.fault.message)
        return ToolResult(content=[to_mcp_content(block) for block in envelope.content])


class RegistryResource(Resource):
    """FastMCP resource that delegates to the Dispatcher."""

    dispatcher: Any = Field(exclude=True)

    async def read(self) -> str | bytes:
        envelope = await self.dispatcher.read_resource(self.name)
        if not envelope.success:
            raise ResourceError(envelope.fault.message)

        binary = [block for block in envelope.content if isinstance(block, (ImageBlock, BinaryBlock))]
        if binary:
            return base64.b64decode(binary[0].data)
        return envelope.text


class RegistryPrompt(Prompt):
    """FastMCP prompt that delegates to the Dispatcher."""

    dispatcher: Any = Field(exclude=True)

    async def render(self, arguments: Optional[Dict[str, Any]] = None) -> List[PromptMessage]:
        envelope = await self.dispatcher.get_prompt(self.name, arguments or {})
        if not envelope.success:
            raise PromptError(envelope.fault.message)
        return [
            PromptMessage(role="user", content=to_mcp_content(block))
            for block in envelope.content
            if not isinstance(block, BinaryBlock)
        ]


def _bind_entry(app: FastMCP, entry: RegistryEntry, dispatcher: Dispatcher) -> None:
    if entry.kind == OperationKind.TOOL:
        app.add_tool(RegistryTool(
            name=entry.name,
            description=entry.description,
            parameters=entry.schema.to_json_schema(),
            dispatcher=dispatcher,
        ))
    elif entry.kind == OperationKind.RESOURCE:
        app.add_resource(RegistryResource(
            uri=entry.uri,
            name=entry.name,
            description=entry.description,
            mime_type=entry.mime_type or "text/plain",
            dispatcher=dispatcher,
        ))
    else:
        app.add_prompt(RegistryPrompt(
            name=entry.name,
            description=entry.description,
            arguments=[
                PromptArgument(name=name, description=spec.description, required=spec.required)
                for name, spec in entry.schema
            ],
            dispatcher=dispatcher,
        ))


def bind_registry(app: FastMCP, registry: Registry, dispatcher: Dispatcher) -> None:
    """Expose every registry entry on a FastMCP app."""
    for descriptor in registry.listing():
        entry = registry.lookup(descriptor.name, descriptor.kind)
        _bind_entry(app, entry, dispatcher)
        logger.debug("Bound %s '%s' to FastMCP", entry.kind.value, entry.name)
