"""
Capability types consumed by the envelope layer.

The layer never generates real identities or reads the wall clock on its own;
callers inject these capabilities, and defaults are provided for production.
"""
import time
from typing import Protocol, Tuple, runtime_checkable


@runtime_checkable
class Signer(Protocol):
    """Protocol for identity key operations"""

    def get_public_key(self, privkey: str) -> str:
        """Derive the public key for a private key."""
        ...

    def generate_ephemeral(self) -> Tuple[str, str]:
        """
        Generate a fresh keypair unrelated to any real identity.

        Returns (privkey, pubkey).
        """
        ...


@runtime_checkable
class Clock(Protocol):
    """Protocol for time sources"""

    def now(self) -> float:
        """Current Unix time in seconds."""
        ...


class SystemClock:
    """Wall clock."""

    def now(self) -> float:
        return time.time()


class FixedClock:
    """Clock frozen at a given Unix time, for deterministic tests."""

    def __init__(self, timestamp: float):
        self.timestamp = timestamp

    def now(self) -> float:
        return self.timestamp

    def __repr__(self) -> str:
        return f"FixedClock({self.timestamp!r})"
