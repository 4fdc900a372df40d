"""
ycmd client - Launch a ycmd daemon and send it HMAC-signed requests.

Manages the daemon subprocess (spawn, liveness, shutdown) and builds the
file-context payloads its HTTP API expects.
"""

__version__ = "1.0.0"

from .auth import HmacAuth, HmacSigner
from .client import DaemonClient, DaemonHandle
from .config import ClientConfig, config
from .errors import (
    FileReadFailure,
    SignatureMismatch,
    SpawnFailure,
    TransportFailure,
    YcmdError,
)
from .protocol import Endpoint, EventKind
from .request import RequestBuilder, RequestContext
from .secret import generate_secret
from .supervisor import DaemonProcess, ProcessState, ProcessSupervisor

__all__ = [
    "__version__",
    "ClientConfig",
    "DaemonClient",
    "DaemonHandle",
    "DaemonProcess",
    "Endpoint",
    "EventKind",
    "FileReadFailure",
    "HmacAuth",
    "HmacSigner",
    "ProcessState",
    "ProcessSupervisor",
    "RequestBuilder",
    "RequestContext",
    "SignatureMismatch",
    "SpawnFailure",
    "TransportFailure",
    "YcmdError",
    "config",
    "generate_secret",
]
