"""
FastMCP server initialization and configuration.

Main server class that assembles the registry, dispatcher and image
adapter, binds them to a FastMCP application and runs it over stdio.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx
from fastmcp import FastMCP

from mcp_toolbox import __version__
from mcp_toolbox.mcp.adapters import ImageGenerationAdapter
from mcp_toolbox.mcp.config import MCPConfig
from mcp_toolbox.mcp.dispatcher import Dispatcher
from mcp_toolbox.mcp.registry import Registry
from mcp_toolbox.mcp.transport import bind_registry

logger = logging.getLogger(__name__)


@dataclass
class MCPServer:
    """
    Main MCP server instance.

    Attributes:
        config: Loaded server configuration
        image_transport: Optional httpx transport for the image provider
            (tests inject httpx.MockTransport here)
        registry: Registered tools, resources and prompts
        dispatcher: Invocation dispatcher over the registry
    """

    config: MCPConfig = field(default_factory=MCPConfig)
    image_transport: Optional[httpx.AsyncBaseTransport] = None
    registry: Registry = field(default_factory=Registry, init=False)
    dispatcher: Optional[Dispatcher] = field(default=None, init=False)
    _app: Optional[FastMCP] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        """Assemble registry, dispatcher and FastMCP app."""
        self.dispatcher = Dispatcher(self.registry)
        self._app = FastMCP(self.config.server_name)

        self._register_tools()
        bind_registry(self._app, self.registry, self.dispatcher)

    def _register_tools(self):
        """Register all built-in tools, resources and prompts."""
        from mcp_toolbox.mcp.tools import register_all

        adapter = ImageGenerationAdapter(
            self.config.image_provider_config(),
            transport=self.image_transport,
        )
        register_all(self.registry, adapter, self.config.server_name, __version__)
        logger.info("Registered %d operations", len(self.registry))

    @property
    def app(self) -> FastMCP:
        if not self._app:
            raise RuntimeError("FastMCP app not initialized")
        return self._app

    def start(self):
        """
        Start the MCP server on the stdio transport.

        Raises:
            RuntimeError: If FastMCP fails to start
        """
        if not self._app:
            raise RuntimeError("FastMCP app not initialized. This should not happen.")

        # stdout carries JSON-RPC frames; logging goes to stderr
        try:
            self._app.run(transport="stdio")
        except Exception as e:
            raise RuntimeError(f"Failed to start MCP server with stdio transport: {e}") from e
