"""Command-line interface for mcp-toolbox."""

from .commands.mcp import app


def main():
    app()


__all__ = ["app", "main"]
