"""MCP server management commands."""

import asyncio
import json
import logging
import signal
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from mcp_toolbox.mcp.config import CONFIG_DIR, PID_FILE, MCPConfig
from mcp_toolbox.mcp.lifecycle import ServerPIDFile
from mcp_toolbox.mcp.registry import OperationKind
from mcp_toolbox.mcp.server import MCPServer

app = typer.Typer(help="MCP toolbox server management")
console = Console()
err_console = Console(stderr=True)


def _get_project_root() -> Path:
    """Get project root directory (contains .mcp-toolbox/)."""
    cwd = Path.cwd()

    current = cwd
    while current != current.parent:
        if (current / CONFIG_DIR).exists():
            return current
        current = current.parent

    return cwd


def _configure_logging(level: str) -> None:
    """Send log records to stderr; stdout is reserved for the protocol."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _pid_file(config: MCPConfig, project_root: Path) -> ServerPIDFile:
    return ServerPIDFile(config.pid_file or project_root / CONFIG_DIR / PID_FILE)


def _setup_signal_handlers(pid_file: ServerPIDFile):
    """
    Setup signal handlers for graceful shutdown.

    Handles SIGTERM (sent by `mcp-toolbox stop`) and SIGINT (Ctrl+C).
    """
    def signal_handler(signum, frame):
        err_console.print("\n[yellow]Shutting down MCP server...[/yellow]")
        pid_file.release()
        sys.exit(0)

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


@app.command()
def start(
    log_level: str = typer.Option(None, help="Log level (overrides config)"),
    config_file: bool = typer.Option(True, help="Load from .mcp-toolbox/config.yaml"),
):
    """
    Start the MCP server on stdio.

    Configuration is loaded from .mcp-toolbox/config.yaml if it exists.
    Environment variables override the config file, and command-line
    options override both. The server runs until its client closes stdin.

    Examples:
        mcp-toolbox start
        mcp-toolbox start --log-level DEBUG
        HF_TOKEN=hf_xxx mcp-toolbox start --no-config-file
    """
    project_root = _get_project_root()

    try:
        config = MCPConfig.load(project_root) if config_file else MCPConfig()
        if log_level is not None:
            config.log_level = log_level
        _configure_logging(config.log_level)
    except ValueError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    pid_file = _pid_file(config, project_root)
    try:
        pid_file.claim()
    except RuntimeError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    _setup_signal_handlers(pid_file)

    try:
        server = MCPServer(config=config)

        # Status goes to stderr; stdout carries JSON-RPC frames
        err_console.print("[green]Starting MCP server...[/green]")
        err_console.print("Transport: stdio")
        if not config.hf_token:
            err_console.print("[yellow]HF_TOKEN not set: generate_image will report a missing credential[/yellow]")
        err_console.print(f"PID file: {pid_file.path}")

        server.start()
    except RuntimeError as e:
        err_console.print(f"[red]Error starting server:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Server stopped by user[/yellow]")
    except Exception as e:
        err_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        pid_file.release()


@app.command()
def status():
    """
    Check if MCP server is running.

    Examples:
        mcp-toolbox status
    """
    project_root = _get_project_root()

    try:
        config = MCPConfig.load(project_root)
        status_info = _pid_file(config, project_root).status()

        table = Table(title="MCP Server Status", show_header=False)
        table.add_column("Property", style="cyan")
        table.add_column("Value")

        if status_info["running"]:
            table.add_row("Status", "[green]Running[/green]")
            table.add_row("PID", str(status_info["pid"]))
        else:
            table.add_row("Status", "[red]Not running[/red]")

        table.add_row("PID File", status_info["pid_file"])
        table.add_row("Server Name", config.server_name)
        table.add_row("Image Model", f"{config.image_provider}/{config.image_model}")
        table.add_row("HF Token", "Set" if config.hf_token else "Not set")

        console.print(table)

        if not status_info["running"]:
            raise typer.Exit(1)
    except typer.Exit:
        raise
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error checking status:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def stop(
    timeout: float = typer.Option(10.0, help="Seconds to wait for graceful shutdown"),
):
    """
    Stop the MCP server gracefully.

    Examples:
        mcp-toolbox stop
        mcp-toolbox stop --timeout 30
    """
    project_root = _get_project_root()

    try:
        config = MCPConfig.load(project_root)
        pid_file = _pid_file(config, project_root)

        console.print("[yellow]Stopping MCP server...[/yellow]")

        if pid_file.stop(timeout=timeout):
            console.print("[green]Server stopped successfully[/green]")
        else:
            console.print(
                f"[red]Server did not stop within {timeout:g} seconds.[/red]\n"
                "[yellow]Consider increasing timeout or manually killing the process.[/yellow]"
            )
            raise typer.Exit(1)
    except typer.Exit:
        raise
    except RuntimeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error stopping server:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def tools():
    """
    List registered tools, resources and prompts.

    Examples:
        mcp-toolbox tools
    """
    try:
        server = MCPServer(config=MCPConfig.load(_get_project_root()))
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title="Registered Operations")
    table.add_column("Kind", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    table.add_column("Arguments")

    for descriptor in server.registry.listing():
        arguments = ", ".join(
            f"{name}{'' if spec.required else '?'}: {spec.kind.value}"
            for name, spec in descriptor.schema
        )
        table.add_row(
            descriptor.kind.value,
            descriptor.name,
            descriptor.description,
            arguments or (descriptor.uri or "-"),
        )

    console.print(table)


@app.command()
def call(
    name: str = typer.Argument(..., help="Operation name"),
    args: str = typer.Option("{}", "--args", help="Arguments as a JSON object"),
    kind: OperationKind = typer.Option(OperationKind.TOOL, help="Operation kind"),
):
    """
    Invoke an operation once and print the response envelope as JSON.

    Examples:
        mcp-toolbox call calculator --args '{"operation": "add", "a": 2, "b": 3}'
        mcp-toolbox call server-info --kind resource
    """
    try:
        raw_args = json.loads(args)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid --args JSON:[/red] {e}")
        raise typer.Exit(1)

    try:
        server = MCPServer(config=MCPConfig.load(_get_project_root()))
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    envelope = asyncio.run(server.dispatcher.invoke(name, raw_args, kind))

    console.print_json(json.dumps(envelope.to_dict(), ensure_ascii=False))
    if not envelope.success:
        raise typer.Exit(1)
