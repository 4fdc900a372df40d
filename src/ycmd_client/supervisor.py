"""
Process Supervision - Launch and track the ycmd daemon.

Handles:
- Port allocation and the options file handed to the daemon
- Spawning without waiting for readiness
- Liveness tracked from spawn/exit notifications, not OS polling
- Graceful termination with SIGKILL escalation
"""

import asyncio
import base64
import json
import os
import socket
import tempfile
from collections.abc import Awaitable, Callable
from enum import Enum
from pathlib import Path
from typing import Any

import structlog

from .config import ClientConfig
from .errors import SpawnFailure

__all__ = [
    "DaemonProcess",
    "ProcessState",
    "ProcessSupervisor",
    "find_free_port",
    "remove_options_file",
    "write_options_file",
]

logger = structlog.get_logger(__name__)

Launcher = Callable[..., Awaitable[asyncio.subprocess.Process]]


class ProcessState(Enum):
    """Daemon process states."""

    STARTING = "starting"
    ALIVE = "alive"
    DEAD = "dead"


class DaemonProcess:
    """A spawned daemon and its cached liveness.

    State only moves forward (STARTING -> ALIVE -> DEAD, or straight to
    DEAD on error). Notifications arriving out of order or twice are
    ignored, so each transition is observed exactly once.

    Example:
        process = await supervisor.spawn("ycmd", ["--port=9999"])
        await process.wait_started()

        if process.is_alive():
            process.kill()
    """

    def __init__(self, process: asyncio.subprocess.Process) -> None:
        self.process = process
        self._state = ProcessState.STARTING
        self._started = asyncio.Event()
        self._exited = asyncio.Event()
        self.returncode: int | None = None
        self.error: BaseException | None = None

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def state(self) -> ProcessState:
        return self._state

    def is_alive(self) -> bool:
        """True between the spawn notification and an exit/error notification."""
        return self._state is ProcessState.ALIVE

    def notify_spawned(self) -> None:
        if self._state is not ProcessState.STARTING:
            return
        self._state = ProcessState.ALIVE
        self._started.set()
        logger.info("daemon_alive", pid=self.pid)

    def notify_exited(self, returncode: int | None) -> None:
        if self._state is ProcessState.DEAD:
            return
        self._state = ProcessState.DEAD
        self.returncode = returncode
        self._started.set()
        self._exited.set()
        logger.info("daemon_exited", pid=self.pid, returncode=returncode)

    def notify_error(self, error: BaseException) -> None:
        if self._state is ProcessState.DEAD:
            return
        self._state = ProcessState.DEAD
        self.error = error
        self._started.set()
        self._exited.set()
        logger.error("daemon_error", pid=self.pid, error=str(error))

    async def wait_started(self) -> bool:
        """Wait for the spawn (or failure) notification.

        Returns:
            True if the process came up alive
        """
        await self._started.wait()
        return self.is_alive()

    async def wait_exited(self) -> int | None:
        """Wait for the exit notification and return the exit code."""
        await self._exited.wait()
        return self.returncode

    def kill(self) -> None:
        """Request termination (SIGTERM). No-op unless alive."""
        if not self.is_alive():
            return
        try:
            self.process.terminate()
            logger.info("signal_sent", pid=self.pid, signal="SIGTERM")
        except ProcessLookupError:
            self.notify_exited(self.process.returncode)

    async def terminate(self, timeout: float = 5.0) -> None:
        """Stop the process, escalating to SIGKILL after ``timeout`` seconds."""
        if not self.is_alive():
            return

        self.kill()
        try:
            await asyncio.wait_for(self._exited.wait(), timeout)
            return
        except asyncio.TimeoutError:
            logger.warning("shutdown_timeout", pid=self.pid, timeout=timeout)

        try:
            self.process.kill()
            logger.info("signal_sent", pid=self.pid, signal="SIGKILL")
        except ProcessLookupError:
            pass
        await self._exited.wait()

    async def watch(self) -> None:
        """Deliver spawn and exit notifications for the wrapped process."""
        self.notify_spawned()
        try:
            returncode = await self.process.wait()
        except Exception as e:
            self.notify_error(e)
            return
        self.notify_exited(returncode)


def find_free_port(host: str = "127.0.0.1") -> int:
    """Ask the OS for an unused TCP port on ``host``."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        return sock.getsockname()[1]


def write_options_file(options: dict[str, Any]) -> Path:
    """Write the daemon options to a private scratch file."""
    fd, path = tempfile.mkstemp(prefix="ycmd_options_", suffix=".json")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(options, f)
    except BaseException:
        os.unlink(path)
        raise
    return Path(path)


def remove_options_file(path: Path | None) -> bool:
    """Delete the options file.

    Returns:
        True if file was removed, False if it didn't exist
    """
    if path is None:
        return False
    try:
        path.unlink()
        logger.debug("options_file_removed", path=str(path))
        return True
    except FileNotFoundError:
        return False


class ProcessSupervisor:
    """Starts daemon processes and wires their liveness notifications.

    The port allocator, options writer and launcher are injectable so the
    startup sequence can run without a real daemon.

    Example:
        supervisor = ProcessSupervisor(config)
        process, port, options_path = await supervisor.start_daemon(secret)
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        port_provider: Callable[[str], int] = find_free_port,
        options_writer: Callable[[dict[str, Any]], Path] = write_options_file,
        launcher: Launcher = asyncio.create_subprocess_exec,
    ) -> None:
        self.config = config or ClientConfig()
        self.port_provider = port_provider
        self.options_writer = options_writer
        self.launcher = launcher
        self._watchers: set[asyncio.Task] = set()

    async def spawn(self, command: str, args: list[str]) -> DaemonProcess:
        """Launch ``command`` with ``args`` without waiting for readiness.

        Raises:
            SpawnFailure: If the process could not be launched
        """
        try:
            process = await self.launcher(
                command,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except (OSError, ValueError) as e:
            logger.error("spawn_failed", command=command, error=str(e))
            raise SpawnFailure("launch", str(e)) from e

        daemon = DaemonProcess(process)
        task = asyncio.create_task(daemon.watch())
        self._watchers.add(task)
        task.add_done_callback(self._watchers.discard)

        logger.info("daemon_spawned", pid=daemon.pid, command=command)
        return daemon

    async def start_daemon(self, secret: str) -> tuple[DaemonProcess, int, Path]:
        """Run the daemon startup sequence.

        Allocates a port, writes the options file carrying the base64
        secret, then spawns the daemon pointed at both.

        Returns:
            (process, port, options file path)

        Raises:
            SpawnFailure: If any step fails
        """
        argv = self.config.server_args
        if not argv:
            logger.error("no_server_command")
            raise SpawnFailure("launch", "no server command configured")

        try:
            port = self.port_provider(self.config.host)
        except OSError as e:
            logger.error("port_allocation_failed", error=str(e))
            raise SpawnFailure("port", str(e)) from e

        options = {"hmac_secret": base64.b64encode(secret.encode("utf-8")).decode("ascii")}
        try:
            options_path = self.options_writer(options)
        except OSError as e:
            logger.error("options_write_failed", error=str(e))
            raise SpawnFailure("options_file", str(e)) from e
        logger.debug("options_file_written", path=str(options_path))

        args = [
            *argv[1:],
            f"--port={port}",
            f"--options_file={options_path}",
            f"--idle_suicide_seconds={self.config.idle_suicide_seconds}",
            *self.config.extra_server_args,
        ]
        try:
            process = await self.spawn(argv[0], args)
        except BaseException:
            remove_options_file(options_path)
            raise

        return process, port, options_path
