"""
Single-instance bookkeeping for the stdio server.

A stdio server is spawned by its MCP client and exits when the client
closes its stdin, so the PID file only records which process currently
serves a project. ``start`` claims it, ``status`` and ``stop`` consult it,
and the owning process releases it on the way out.
"""

import logging
import os
import signal
import time
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def _alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but owned by another user
        return True
    except OSError:
        return False
    return True


class ServerPIDFile:
    """PID file marking the process that serves a project."""

    def __init__(self, path: Path):
        self.path = path

    def _recorded_pid(self) -> Optional[int]:
        try:
            return int(self.path.read_text().strip())
        except (FileNotFoundError, ValueError):
            return None

    def owner(self) -> Optional[int]:
        """Return the PID of the live server, discarding a stale or unreadable file."""
        pid = self._recorded_pid()
        if pid is not None and _alive(pid):
            return pid

        if self.path.exists():
            logger.info("Discarding stale PID file %s", self.path)
            self.path.unlink(missing_ok=True)
        return None

    def claim(self) -> None:
        """
        Record this process as the project's server.

        Raises:
            RuntimeError: If a live server already owns the PID file
        """
        pid = self.owner()
        if pid is not None:
            raise RuntimeError(
                f"MCP server already running (PID: {pid}). Stop it first with: mcp-toolbox stop"
            )

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(f"{os.getpid()}\n")

    def release(self) -> None:
        """Remove the PID file if this process owns it."""
        if self._recorded_pid() == os.getpid():
            self.path.unlink(missing_ok=True)

    def stop(self, timeout: float = 10.0, poll_interval: float = 0.2) -> bool:
        """
        Send SIGTERM to the running server and wait for it to exit.

        Returns:
            True if the server exited within ``timeout`` seconds

        Raises:
            RuntimeError: If no live server owns the PID file, or it cannot
                be signalled
        """
        pid = self.owner()
        if pid is None:
            raise RuntimeError("No MCP server running.")

        try:
            os.kill(pid, signal.SIGTERM)
        except PermissionError as e:
            raise RuntimeError(f"Permission denied: cannot stop server (PID: {pid})") from e

        deadline = time.monotonic() + timeout
        while _alive(pid):
            if time.monotonic() >= deadline:
                return False
            time.sleep(poll_interval)

        # The server normally releases its own file; clear it if it was killed
        self.path.unlink(missing_ok=True)
        return True

    def status(self) -> dict:
        """Return ``{"running", "pid", "pid_file"}`` for display."""
        pid = self.owner()
        return {"running": pid is not None, "pid": pid, "pid_file": str(self.path)}
