"""
Daemon Client - Start ycmd and talk to it over signed HTTP.

Features:
- One secret per daemon, generated at startup
- Every request signed with X-Ycm-Hmac via httpx auth
- Readiness check that never touches the network while the daemon is down
- Optional verification of signed responses
"""

import asyncio
import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
import structlog

from .auth import HmacAuth, HmacSigner
from .config import ClientConfig
from .errors import SignatureMismatch, TransportFailure
from .protocol import ACCEPT_HEADER, HMAC_HEADER, Endpoint, EventKind
from .request import RequestBuilder, RequestContext
from .secret import generate_secret
from .supervisor import DaemonProcess, ProcessState, ProcessSupervisor, remove_options_file

__all__ = ["DaemonClient", "DaemonHandle"]

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DaemonHandle:
    """A running daemon: its process, port and session secret."""

    process: DaemonProcess
    port: int
    secret: str = field(repr=False)
    options_path: Path | None = None

    def is_alive(self) -> bool:
        return self.process.is_alive()


class DaemonClient:
    """Signed HTTP client bound to one daemon.

    Example:
        client = await DaemonClient.start()
        await client.wait_until_ready()

        completions = await client.code_completion("/tmp/a.py", "python", 10, 4)

        await client.shutdown()

    Also usable as an async context manager, which shuts the daemon down
    on exit.
    """

    def __init__(
        self,
        handle: DaemonHandle,
        config: ClientConfig | None = None,
        builder: RequestBuilder | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.handle = handle
        self.config = config or ClientConfig()
        self.builder = builder or RequestBuilder()
        self.signer = HmacSigner(handle.secret)
        self._options_path = handle.options_path
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url(handle.port),
            timeout=httpx.Timeout(self.config.request_timeout),
            headers=ACCEPT_HEADER,
            auth=HmacAuth(self.signer),
            transport=transport,
        )

    @classmethod
    async def start(
        cls,
        config: ClientConfig | None = None,
        supervisor: ProcessSupervisor | None = None,
        builder: RequestBuilder | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "DaemonClient":
        """Generate a secret, launch the daemon and return a bound client.

        Does not wait for the daemon to accept requests; see
        wait_until_ready().

        Raises:
            SpawnFailure: If the daemon could not be started
        """
        config = config or ClientConfig()
        supervisor = supervisor or ProcessSupervisor(config)

        secret = generate_secret(config.hmac_secret_length)
        process, port, options_path = await supervisor.start_daemon(secret)

        handle = DaemonHandle(process=process, port=port, secret=secret, options_path=options_path)
        logger.info("daemon_started", pid=process.pid, port=port)
        return cls(handle, config=config, builder=builder, transport=transport)

    @property
    def port(self) -> int:
        return self.handle.port

    @property
    def process(self) -> DaemonProcess:
        return self.handle.process

    def is_alive(self) -> bool:
        """Cached liveness of the daemon process."""
        return self.handle.is_alive()

    async def is_ready(self, include_subservers: bool = True) -> Any:
        """Ask the daemon's readiness handler whether it is up.

        Returns:
            False while the process is not alive (no request is made),
            otherwise the daemon's JSON answer

        Raises:
            TransportFailure: If the readiness request fails
        """
        if not self.is_alive():
            return False

        params = {"include_subservers": 1} if include_subservers else None
        result = await self.dispatch("GET", Endpoint.READY.path, params=params)
        if result:
            self._discard_options_file()
        return result

    async def wait_until_ready(self, timeout: float = 10.0, interval: float = 0.1) -> None:
        """Poll is_ready() until the daemon answers.

        Raises:
            TransportFailure: If the daemon dies or does not answer in time
        """
        await self.process.wait_started()
        deadline = time.monotonic() + timeout

        while True:
            if not self.is_alive():
                raise TransportFailure(Endpoint.READY.path, "daemon is not running")
            try:
                if await self.is_ready():
                    logger.info("daemon_ready", port=self.port)
                    return
            except TransportFailure as e:
                logger.debug("daemon_not_ready", reason=e.reason)

            if time.monotonic() >= deadline:
                raise TransportFailure(
                    Endpoint.READY.path,
                    f"daemon not ready after {timeout}s",
                )
            await asyncio.sleep(interval)

    async def shutdown(self, timeout: float | None = None) -> None:
        """Stop the daemon if it is alive. Safe to call repeatedly."""
        if timeout is None:
            timeout = self.config.shutdown_timeout

        if self.process.state is ProcessState.STARTING:
            await self.process.wait_started()

        if self.is_alive():
            logger.info("daemon_stopping", pid=self.process.pid)
            await self.process.terminate(timeout)

        await self._client.aclose()
        self._discard_options_file()

    async def list_subcommands(self, completer_target: str) -> Any:
        """Subcommands the given completer supports."""
        logger.debug("sending_defined_subcommands_request", completer_target=completer_target)
        return await self._send(
            Endpoint.DEFINED_SUBCOMMANDS,
            RequestContext(completer_target=completer_target),
        )

    async def code_completion(self, filepath: str, filetype: str, line: int, column: int) -> Any:
        """Completions at a position."""
        logger.debug("sending_code_completion_request", filepath=filepath)
        return await self._send(
            Endpoint.COMPLETIONS,
            RequestContext(
                filepath=filepath,
                filetype=filetype,
                line_num=line,
                column_num=column,
            ),
        )

    async def go_to(self, filepath: str, filetype: str, line: int, column: int) -> Any:
        """Location of the definition/declaration at a position."""
        logger.debug("sending_goto_request", filepath=filepath)
        return await self.run_completer_command(filepath, filetype, line, column, ["GoTo"])

    async def run_completer_command(
        self,
        filepath: str,
        filetype: str,
        line: int,
        column: int,
        arguments: list[str],
        completer_target: str | None = None,
    ) -> Any:
        """Run a named completer command such as GoTo or GetType."""
        return await self._send(
            Endpoint.COMPLETER_COMMAND,
            RequestContext(
                filepath=filepath,
                filetype=filetype,
                line_num=line,
                column_num=column,
                command_arguments=arguments,
                completer_target=completer_target,
            ),
        )

    async def send_event(
        self,
        event: EventKind,
        filepath: str,
        filetype: str,
        line: int,
        column: int,
        extra: dict[str, Any] | None = None,
    ) -> Any:
        """Notify the daemon of an editor event."""
        logger.debug("sending_event_notification", event_kind=event.name, filepath=filepath)
        return await self._send(
            Endpoint.EVENT_NOTIFICATION,
            RequestContext(
                filepath=filepath,
                filetype=filetype,
                line_num=line,
                column_num=column,
                extra_data={"event_name": int(event), **(extra or {})},
            ),
        )

    async def load_extra_config(self, path: str) -> Any:
        """Ask the daemon to load a per-project extra conf file."""
        logger.debug("sending_load_extra_conf_request", path=path)
        return await self.dispatch("POST", Endpoint.EXTRA_CONF.path, {"filepath": path})

    async def dispatch(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send one signed request and return the parsed JSON response.

        Raises:
            TransportFailure: On connection errors, timeouts and non-2xx
            SignatureMismatch: If response verification is on and fails
        """
        if self._client.is_closed:
            raise TransportFailure(path, "client is shut down")

        content = b"" if body is None else json.dumps(body).encode("utf-8")
        headers = {"Content-Type": "application/json"} if body is not None else None

        try:
            response = await self._client.request(
                method.upper(),
                path,
                content=content,
                params=params,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise TransportFailure(path, f"Timeout: {e}") from e
        except httpx.HTTPError as e:
            raise TransportFailure(path, f"Connection error: {e}") from e

        logger.debug("request_sent", method=method.upper(), path=path, status=response.status_code)

        if not response.is_success:
            raise TransportFailure(
                path,
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        if self.config.verify_responses and not self.signer.verify(
            response.content, response.headers.get(HMAC_HEADER)
        ):
            logger.error("response_hmac_mismatch", path=path)
            raise SignatureMismatch(path)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportFailure(path, f"Invalid JSON response: {e}") from e

    async def _send(self, endpoint: Endpoint, context: RequestContext) -> Any:
        payload = self.builder.build(context)
        return await self.dispatch("POST", endpoint.path, payload)

    def _discard_options_file(self) -> None:
        if self._options_path is not None:
            remove_options_file(self._options_path)
            self._options_path = None

    def status(self) -> dict[str, Any]:
        """Current daemon status."""
        return {
            "pid": self.process.pid,
            "port": self.port,
            "state": self.process.state.value,
            "alive": self.is_alive(),
            "returncode": self.process.returncode,
        }

    async def __aenter__(self) -> "DaemonClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.shutdown()
