"""mcp-toolbox: a small MCP server exposing schema-validated tools."""

__version__ = "1.0.0"
