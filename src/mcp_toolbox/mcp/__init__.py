"""
MCP (Model Context Protocol) server implementation.

Architecture:
- schema.py: Declarative argument descriptors
- validation.py: Argument validation producing ArgumentRecords
- faults.py: Fault taxonomy
- envelope.py: Response envelope and content blocks
- registry.py: Tool/resource/prompt registry and discovery listing
- dispatcher.py: Lookup, validation, invocation and normalization
- adapters/: Calls to remote providers (image generation)
- tools/: Built-in handlers
- transport.py: FastMCP binding
- server.py: Server assembly
- config.py: Configuration loading
- lifecycle.py: PID file for the running stdio server
"""

__all__ = ["Dispatcher", "MCPConfig", "MCPServer", "Registry", "ServerPIDFile"]

from .config import MCPConfig
from .dispatcher import Dispatcher
from .lifecycle import ServerPIDFile
from .registry import Registry
from .server import MCPServer
