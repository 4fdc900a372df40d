"""Shared test fixtures."""

import json
import tempfile
from pathlib import Path

import pytest
import structlog

from ycmd_client.config import ClientConfig
from ycmd_client.supervisor import ProcessSupervisor

from helpers import FakeLauncher, FakeProcess


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture
def config():
    """Create a test configuration."""
    return ClientConfig(
        server_command="ycmd-test --log=debug",
        host="127.0.0.1",
        idle_suicide_seconds=10800,
        hmac_secret_length=16,
        request_timeout=5.0,
        shutdown_timeout=0.5,
    )


@pytest.fixture
def fake_process():
    return FakeProcess()


@pytest.fixture
def launcher(fake_process):
    return FakeLauncher(fake_process)


@pytest.fixture
def options_writer(temp_dir):
    """Write the options file into the test's temp directory."""

    def write(options: dict) -> Path:
        path = temp_dir / "options.json"
        path.write_text(json.dumps(options))
        return path

    return write


@pytest.fixture
def supervisor(config, launcher, options_writer):
    """Supervisor that binds port 9999 and launches fake processes."""
    return ProcessSupervisor(
        config,
        port_provider=lambda host: 9999,
        options_writer=options_writer,
        launcher=launcher,
    )
