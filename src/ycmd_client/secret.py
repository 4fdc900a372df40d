"""Per-session secret generation."""

import math
import secrets

__all__ = ["generate_secret"]


def generate_secret(length: int) -> str:
    """Return a random hex string of exactly ``length`` characters.

    ``ceil(length / 2)`` bytes are drawn from the OS CSPRNG; the hex form is
    truncated so odd lengths are honoured.
    """
    if length < 1:
        raise ValueError(f"Secret length must be positive, got {length}")
    return secrets.token_bytes(math.ceil(length / 2)).hex()[:length]
