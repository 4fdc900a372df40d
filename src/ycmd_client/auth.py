"""
HMAC request signing.

The daemon authenticates each request by an HMAC-SHA256 built in two
layers: method, path and body are digested separately, the three base64
digests are concatenated in that order, and the concatenation is digested
again. Field order and the absence of a separator are part of the format.

Example:
    signer = HmacSigner(secret)
    signature = signer.sign_request("POST", "/completions", body)

    client = httpx.AsyncClient(auth=HmacAuth(signer))
"""

import base64
import hashlib
import hmac
from collections.abc import Generator

import httpx

from .protocol import HMAC_HEADER

__all__ = ["HmacAuth", "HmacSigner"]


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


class HmacSigner:
    """Computes and checks signatures keyed by one session secret."""

    def __init__(self, secret: str | bytes) -> None:
        self._key = _as_bytes(secret)

    def digest(self, content: str | bytes) -> str:
        """Base64 HMAC-SHA256 of ``content``."""
        mac = hmac.new(self._key, _as_bytes(content), hashlib.sha256)
        return base64.b64encode(mac.digest()).decode("ascii")

    def sign_request(self, method: str, path: str, body: str | bytes) -> str:
        """Signature for a request, as sent in the ``X-Ycm-Hmac`` header."""
        joined = "".join((
            self.digest(method),
            self.digest(path),
            self.digest(body),
        ))
        return self.digest(joined)

    def verify(self, content: str | bytes, provided: str | bytes | None) -> bool:
        """Check a digest received alongside ``content``."""
        if not provided:
            return False
        return hmac.compare_digest(self.digest(content).encode("ascii"), _as_bytes(provided))


class HmacAuth(httpx.Auth):
    """httpx auth hook that signs every outgoing request.

    The signature covers the method and body bytes exactly as sent, and the
    URL path without host, port or query string.
    """

    requires_request_body = True

    def __init__(self, signer: HmacSigner) -> None:
        self.signer = signer

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers[HMAC_HEADER] = self.signer.sign_request(
            request.method,
            request.url.path,
            request.content,
        )
        yield request
