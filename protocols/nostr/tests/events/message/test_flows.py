"""
Tests for group message fan-out.
"""
import threading

import pytest

from core.crypto import Secp256k1Signer
from protocols.nostr import cipher
from protocols.nostr.events.gift_wrap.commands import unwrap
from protocols.nostr.events.message.flows import fan_out, unique_members
from protocols.nostr.kinds import PrivacyLevel


OFF_CURVE_PUBKEY = "ff" * 32


class RecordingSigner(Secp256k1Signer):
    """Default signer that records every ephemeral public key it hands out."""

    def __init__(self):
        self.lock = threading.Lock()
        self.ephemeral_pubkeys = []

    def generate_ephemeral(self):
        privkey, pubkey = super().generate_ephemeral()
        with self.lock:
            self.ephemeral_pubkeys.append(pubkey)
        return privkey, pubkey


class TestFanOut:
    """Test fan_out."""

    @pytest.mark.unit
    def test_gift_wrap_one_entry_per_member_in_order(self, alice, bob, carol, clock):
        """Test each member gets an independently wrapped envelope, in member order."""
        signer = RecordingSigner()
        members = [bob['pubkey'], carol['pubkey'], alice['pubkey']]
        entries, failures = fan_out("payload", members, alice['privkey'], PrivacyLevel.GIFTWRAPPED,
                                    {'delay_minutes': 1}, signer=signer, clock=clock, max_workers=3)

        assert failures == []
        assert [e['recipient_pubkey'] for e in entries] == members
        assert len(set(signer.ephemeral_pubkeys)) == 3
        assert len({e['gift_wrapped_event'].content for e in entries}) == 3
        for entry in entries:
            assert entry['delivery_time'] == int(clock.now()) + 60

        assert unwrap(entries[1]['gift_wrapped_event'], carol['privkey'])['message'] == "payload"

    @pytest.mark.unit
    @pytest.mark.parametrize("level", [PrivacyLevel.ENCRYPTED, PrivacyLevel.STANDARD])
    def test_pairwise_levels_share_one_path(self, alice, bob, carol, clock, level):
        entries, failures = fan_out("payload", [bob['pubkey'], carol['pubkey']], alice['privkey'], level,
                                    signer=Secp256k1Signer(), clock=clock)
        assert failures == []
        assert set(entries[0]) == {'recipient_pubkey', 'encrypted_content'}
        assert cipher.decrypt(entries[0]['encrypted_content'], alice['pubkey'], bob['privkey']) == "payload"
        assert cipher.decrypt(entries[1]['encrypted_content'], alice['pubkey'], carol['privkey']) == "payload"

    @pytest.mark.unit
    @pytest.mark.parametrize("level", [PrivacyLevel.GIFTWRAPPED, PrivacyLevel.ENCRYPTED])
    def test_failed_recipient_is_reported_without_affecting_others(self, alice, bob, carol, clock, level):
        """Test one bad recipient does not invalidate envelopes for the rest."""
        members = [bob['pubkey'], OFF_CURVE_PUBKEY, carol['pubkey']]
        entries, failures = fan_out("payload", members, alice['privkey'], level,
                                    signer=Secp256k1Signer(), clock=clock)

        assert [e['recipient_pubkey'] for e in entries] == [bob['pubkey'], carol['pubkey']]
        assert len(failures) == 1
        assert failures[0]['recipient_pubkey'] == OFF_CURVE_PUBKEY
        assert alice['privkey'] not in failures[0]['error']

    @pytest.mark.unit
    def test_malformed_member_is_reported(self, alice, bob, clock):
        entries, failures = fan_out("payload", [bob['pubkey'], "not-a-key"], alice['privkey'],
                                    PrivacyLevel.ENCRYPTED, signer=Secp256k1Signer(), clock=clock)
        assert len(entries) == 1
        assert failures[0]['recipient_pubkey'] == "not-a-key"

    @pytest.mark.unit
    def test_no_members(self, alice, clock):
        assert fan_out("payload", [], alice['privkey'], PrivacyLevel.GIFTWRAPPED,
                       signer=Secp256k1Signer(), clock=clock) == ([], [])

    @pytest.mark.unit
    def test_unique_members_keeps_first_seen_order(self):
        assert unique_members(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
