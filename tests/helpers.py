"""
Shared test helpers: stand-ins for the daemon subprocess.
"""

import asyncio


class FakeProcess:
    """Stands in for asyncio.subprocess.Process."""

    def __init__(self, pid: int = 4242, honor_sigterm: bool = True):
        self.pid = pid
        self.returncode: int | None = None
        self.honor_sigterm = honor_sigterm
        self.signals: list[str] = []
        self._done = asyncio.Event()

    def finish(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self._done.set()

    async def wait(self) -> int:
        await self._done.wait()
        return self.returncode

    def terminate(self) -> None:
        self.signals.append("SIGTERM")
        if self.honor_sigterm:
            self.finish(-15)

    def kill(self) -> None:
        self.signals.append("SIGKILL")
        self.finish(-9)


class FakeLauncher:
    """Records launches and hands out a FakeProcess."""

    def __init__(self, process: FakeProcess | None = None, error: OSError | None = None):
        self.process = process or FakeProcess()
        self.error = error
        self.calls: list[tuple[str, ...]] = []

    async def __call__(self, command: str, *args: str, **kwargs) -> FakeProcess:
        self.calls.append((command, *args))
        if self.error:
            raise self.error
        return self.process
