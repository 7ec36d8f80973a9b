"""
Test fixtures for Nostr envelope tests.
"""
import pytest

from core.config import EnvelopeConfig
from core.core_types import FixedClock
from core.crypto import generate_keypair
from protocols.nostr.dispatcher import MessageDispatcher


FIXED_NOW = 1_700_000_000


def make_identity() -> dict:
    privkey, pubkey = generate_keypair()
    return {"privkey": privkey, "pubkey": pubkey}


@pytest.fixture
def alice():
    """Generate a test identity for the sender."""
    return make_identity()


@pytest.fixture
def bob():
    return make_identity()


@pytest.fixture
def carol():
    return make_identity()


@pytest.fixture
def clock():
    """Clock frozen at FIXED_NOW."""
    return FixedClock(FIXED_NOW)


@pytest.fixture
def dispatcher(clock):
    """Dispatcher with a frozen clock and a small worker pool."""
    return MessageDispatcher(clock=clock, config=EnvelopeConfig(fan_out_workers=4))
