"""
Errors raised while talking to the ycmd daemon.

Every failure is raised to the caller; nothing here retries.
"""

from pathlib import Path

__all__ = [
    "FileReadFailure",
    "SignatureMismatch",
    "SpawnFailure",
    "TransportFailure",
    "YcmdError",
]


class YcmdError(Exception):
    """Base class for all client errors."""


class SpawnFailure(YcmdError):
    """Raised when the daemon could not be started.

    Reasons:
    - No free port could be allocated
    - The options file could not be written
    - The process could not be launched
    """

    def __init__(self, stage: str, reason: str):
        self.stage = stage
        self.reason = reason
        super().__init__(f"Failed to start daemon ({stage}): {reason}")


class TransportFailure(YcmdError):
    """Raised when an HTTP exchange with the daemon fails.

    Covers refused connections, timeouts and non-2xx responses.
    """

    def __init__(self, path: str, reason: str, status_code: int | None = None):
        self.path = path
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Request to '{path}' failed: {reason}")


class FileReadFailure(YcmdError):
    """Raised when a source file cannot be read for a request payload."""

    def __init__(self, path: Path | str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot read '{path}': {reason}")


class SignatureMismatch(YcmdError):
    """Raised when an HMAC signature does not match the shared secret."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"HMAC signature mismatch on '{path}'")
