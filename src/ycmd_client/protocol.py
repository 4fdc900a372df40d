"""
Wire-level constants for the ycmd HTTP API.

Endpoints, headers and event codes shared by the request builder,
the signer and the client.
"""

from enum import Enum, IntEnum

__all__ = [
    "ACCEPT_HEADER",
    "FILE_DATA_KEY",
    "HMAC_HEADER",
    "Endpoint",
    "EventKind",
]

HMAC_HEADER = "X-Ycm-Hmac"
ACCEPT_HEADER = {"Accept": "application/json"}

# file_data is keyed by this label, not by the real file path
FILE_DATA_KEY = "test_path"


class Endpoint(Enum):
    """Daemon handlers, keyed by the client operation that uses them."""

    READY = "/"
    DEFINED_SUBCOMMANDS = "/defined_subcommands"
    COMPLETIONS = "/completions"
    COMPLETER_COMMAND = "/run_completer_command"
    EVENT_NOTIFICATION = "/event_notification"
    EXTRA_CONF = "/load_extra_conf_file"

    @property
    def path(self) -> str:
        return self.value


class EventKind(IntEnum):
    """Editor events understood by the daemon.

    Sent as opaque integers.
    """

    FILE_READY_TO_PARSE = 1
    BUFFER_UNLOAD = 2
    BUFFER_VISIT = 3
    INSERT_LEAVE = 4
    CURRENT_IDENTIFIER_FINISHED = 5

    @classmethod
    def parse(cls, name: str) -> "EventKind":
        """Look up an event by name, e.g. ``buffer-visit`` or ``BufferVisit``."""
        normalized = "".join(ch for ch in name.lower() if ch.isalnum())
        for kind in cls:
            if kind.name.replace("_", "").lower() == normalized:
                return kind
        raise ValueError(f"Unknown event kind: {name}")
