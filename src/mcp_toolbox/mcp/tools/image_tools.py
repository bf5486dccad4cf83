"""Image generation tool backed by ImageGenerationAdapter."""

from typing import Awaitable, Callable

from mcp_toolbox.mcp.adapters import ImageGenerationAdapter
from mcp_toolbox.mcp.envelope import ImageBlock
from mcp_toolbox.mcp.registry import Registry
from mcp_toolbox.mcp.schema import SchemaDescriptor, string

GENERATE_IMAGE_SCHEMA = SchemaDescriptor({
    "prompt": string("Description of the image to generate"),
})


def build_generate_image_handler(
    adapter: ImageGenerationAdapter,
) -> Callable[..., Awaitable[ImageBlock]]:
    """Bind the generate_image handler to an adapter instance."""

    async def generate_image_handler(prompt: str) -> ImageBlock:
        return await adapter.generate(prompt)

    return generate_image_handler


def register_image_tool(registry: Registry, adapter: ImageGenerationAdapter) -> None:
    registry.register_tool(
        name="generate_image",
        schema=GENERATE_IMAGE_SCHEMA,
        handler=build_generate_image_handler(adapter),
        description="Generate a PNG image from a text prompt",
    )
