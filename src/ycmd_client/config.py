"""
Centralized configuration for the ycmd client.

Configuration sources (priority order):
1. Environment variables (YCMD_*)
2. Default values

Environment variables:
- YCMD_SERVER_COMMAND: Command used to launch the daemon (default: python3 -m ycmd)
- YCMD_HOST: Loopback address the daemon binds to (default: 127.0.0.1)
- YCMD_IDLE_SUICIDE_SECONDS: Daemon self-shutdown after inactivity (default: 10800)
- YCMD_HMAC_SECRET_LENGTH: Length of the per-session secret (default: 16)
- YCMD_REQUEST_TIMEOUT: Per-request HTTP timeout in seconds (default: 30)
- YCMD_SHUTDOWN_TIMEOUT: Seconds to wait for SIGTERM before SIGKILL (default: 5)
- YCMD_VERIFY_RESPONSES: Check the HMAC header on responses (default: false)
- YCMD_LOG_LEVEL: Log level (default: INFO)
"""

import os
import shlex
from dataclasses import dataclass, field

__all__ = ["ClientConfig", "config"]


def _get_env(key: str, default: str) -> str:
    """Get environment variable with YCMD_ prefix."""
    return os.environ.get(f"YCMD_{key}", default)


def _get_env_int(key: str, default: int) -> int:
    """Get integer environment variable."""
    return int(_get_env(key, str(default)))


def _get_env_float(key: str, default: float) -> float:
    """Get float environment variable."""
    return float(_get_env(key, str(default)))


def _get_env_bool(key: str, default: bool) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(f"YCMD_{key}")
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes", "on")


@dataclass(frozen=True)
class ClientConfig:
    """Immutable client configuration."""

    server_command: str = _get_env("SERVER_COMMAND", "python3 -m ycmd")
    host: str = _get_env("HOST", "127.0.0.1")
    idle_suicide_seconds: int = _get_env_int("IDLE_SUICIDE_SECONDS", 10800)  # 3 hours
    hmac_secret_length: int = _get_env_int("HMAC_SECRET_LENGTH", 16)
    request_timeout: float = _get_env_float("REQUEST_TIMEOUT", 30.0)
    shutdown_timeout: float = _get_env_float("SHUTDOWN_TIMEOUT", 5.0)
    verify_responses: bool = _get_env_bool("VERIFY_RESPONSES", False)
    log_level: str = _get_env("LOG_LEVEL", "INFO")

    # Appended after --port/--options_file/--idle_suicide_seconds
    extra_server_args: tuple[str, ...] = field(default_factory=tuple)

    @property
    def server_args(self) -> list[str]:
        """Launch command split into argv form."""
        return shlex.split(self.server_command)

    def base_url(self, port: int) -> str:
        """Daemon URL for a bound port."""
        return f"http://{self.host}:{port}"


# Global singleton
config = ClientConfig()
