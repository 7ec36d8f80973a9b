"""
End-to-end family group scenarios through the public API.
"""
import json

import pytest

from protocols.nostr import api
from protocols.nostr.event import get_tag_values, verify_event_id
from protocols.nostr.kinds import Kind


@pytest.mark.scenario
class TestFamilyMessaging:
    """A guardian creates a family group and the members talk in it."""

    def test_family_group_lifecycle(self, dispatcher, alice, bob, carol):
        """Test create group, add members, send, and every member reads it."""
        # Guardian creates the group
        group = dispatcher.create_family_group(
            {'name': 'Smith Family', 'description': 'household'},
            alice['pubkey'], alice['privkey'],
            {'family_federation_id': 'fed-42'},
        )
        channel_id = group['channel_id']
        assert verify_event_id(group['channel_event'])

        # Members are added with roles
        membership = api.GroupChannel.create_group_membership(
            channel_id,
            [{'npub': bob['pubkey'], 'role': 'guardian'}, {'npub': carol['pubkey'], 'role': 'member'}],
            alice['pubkey'],
            {'group_type': 'family', 'family_federation_id': 'fed-42'},
            clock=dispatcher.clock,
        )
        members = get_tag_values(membership, 'p')
        assert members == [bob['pubkey'], carol['pubkey']]

        # Guardian messages the group
        sent = dispatcher.send_group_message(
            {
                'content': 'pocket money is in',
                'channel_id': channel_id,
                'members': members,
                'group_type': 'family',
                'family_id': 'fed-42',
                'delay_minutes': 3,
            },
            alice,
            'giftwrapped',
        )
        assert sent['failed_recipients'] == []
        assert sent['delivery_time'] == int(dispatcher.clock.now()) + 180

        # Each member opens their own envelope and sees the group message
        for identity, entry in zip([bob, carol], sent['gift_wrapped_messages']):
            assert entry['recipient_pubkey'] == identity['pubkey']
            received = dispatcher.decrypt_message(
                {'encrypted_content': entry['gift_wrapped_event'].to_dict(), 'metadata': sent['metadata']},
                identity['privkey'],
            )
            assert received['message'] == 'pocket money is in'
            assert received['sender'] == alice['pubkey']
            assert received['group_message'].tags[0] == ('e', channel_id)

        # The relay-visible wraps reveal neither the guardian nor each other
        wraps = [entry['gift_wrapped_event'] for entry in sent['gift_wrapped_messages']]
        assert all(w.kind == Kind.GIFT_WRAP for w in wraps)
        assert alice['pubkey'] not in {w.pubkey for w in wraps}
        assert wraps[0].pubkey != wraps[1].pubkey
        assert 'fed-42' not in json.dumps([w.to_dict() for w in wraps])

    def test_emergency_broadcast_over_pairwise_encryption(self, alice, bob, carol, clock):
        """Test an emergency message delivered with pairwise encryption."""
        emergency = api.GroupChannel.create_emergency_group_message(
            'car broke down', 'c' * 64, bob['pubkey'], [alice['pubkey'], carol['pubkey']],
            'roadside', 'fed-42', clock=clock,
        )
        for identity in (alice, carol):
            ciphertext = api.PairwiseCipher.encrypt(emergency.to_json(), identity['pubkey'], bob['privkey'])
            received = api.decrypt_message(
                {'encrypted_content': ciphertext, 'metadata': {'encrypted': True, 'gift_wrapped': False}},
                identity['privkey'],
                bob['pubkey'],
            )
            assert received['group_message'] == emergency
            assert ('priority', 'critical') in received['group_message'].tags

    def test_module_level_entry_points(self, alice, bob):
        """Test the default dispatcher round trip with the wall clock."""
        sent = api.encrypt_message('hi bob', bob, alice)
        assert sent['metadata']['gift_wrapped'] is True
        assert api.decrypt_message(sent, bob['privkey'])['message'] == 'hi bob'


class TestExposedApi:
    """Test the EXPOSED map points at real callables."""

    @pytest.mark.unit
    @pytest.mark.parametrize("operation,target", sorted(api.EXPOSED.items()))
    def test_target_resolves(self, operation, target):
        obj = api
        for part in target.split('.'):
            obj = getattr(obj, part)
        assert callable(obj), operation
