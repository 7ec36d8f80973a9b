"""
Explicit API surface for the Nostr envelope layer.

Everything calling code should need is importable from here; the modules
behind it are free to move.
"""
from protocols.nostr.cipher import PairwiseCipher
from protocols.nostr.dispatcher import (
    MessageDispatcher,
    decrypt_message,
    encrypt_message,
    get_default_dispatcher,
    send_group_message,
)
from protocols.nostr.event import ProtocolEvent, build_event, verify_event_id
from protocols.nostr.events.channel.commands import create_group_channel
from protocols.nostr.events.channel.validator import validate as validate_channel
from protocols.nostr.events.gift_wrap.commands import GiftWrapEnvelope
from protocols.nostr.events.gift_wrap.validator import validate_gift_wrap, validate_seal
from protocols.nostr.events.membership.commands import create_group_membership
from protocols.nostr.events.membership.validator import validate as validate_membership
from protocols.nostr.events.message.commands import (
    create_emergency_group_message,
    create_group_message,
)
from protocols.nostr.events.message.validator import detect_group_message
from protocols.nostr.events.message.validator import validate as validate_group_message
from protocols.nostr.kinds import Kind, PrivacyLevel


class GroupChannel:
    """Namespace for the group event builders and validators."""
    create_group_channel = staticmethod(create_group_channel)
    create_group_message = staticmethod(create_group_message)
    create_group_membership = staticmethod(create_group_membership)
    create_emergency_group_message = staticmethod(create_emergency_group_message)
    validate_channel = staticmethod(validate_channel)
    validate_group_message = staticmethod(validate_group_message)
    validate_membership = staticmethod(validate_membership)
    detect_group_message = staticmethod(detect_group_message)


EXPOSED: dict[str, str] = {
    'event.build': 'build_event',
    'event.verify': 'verify_event_id',
    'pairwise.encrypt': 'PairwiseCipher.encrypt',
    'pairwise.decrypt': 'PairwiseCipher.decrypt',
    'gift_wrap.wrap': 'GiftWrapEnvelope.wrap',
    'gift_wrap.unwrap': 'GiftWrapEnvelope.unwrap',
    'gift_wrap.validate': 'validate_gift_wrap',
    'seal.validate': 'validate_seal',
    'channel.create': 'GroupChannel.create_group_channel',
    'channel.validate': 'GroupChannel.validate_channel',
    'message.create': 'GroupChannel.create_group_message',
    'message.create_emergency': 'GroupChannel.create_emergency_group_message',
    'message.validate': 'GroupChannel.validate_group_message',
    'message.detect_group': 'GroupChannel.detect_group_message',
    'membership.update': 'GroupChannel.create_group_membership',
    'membership.validate': 'GroupChannel.validate_membership',
    'message.send_group': 'MessageDispatcher.send_group_message',
    'message.encrypt': 'MessageDispatcher.encrypt_message',
    'message.decrypt': 'MessageDispatcher.decrypt_message',
    'group.create_family': 'MessageDispatcher.create_family_group',
    'group.create_peer': 'MessageDispatcher.create_peer_group',
}

__all__ = [
    "EXPOSED",
    "GiftWrapEnvelope",
    "GroupChannel",
    "Kind",
    "MessageDispatcher",
    "PairwiseCipher",
    "PrivacyLevel",
    "ProtocolEvent",
    "build_event",
    "decrypt_message",
    "encrypt_message",
    "get_default_dispatcher",
    "send_group_message",
    "validate_gift_wrap",
    "validate_seal",
    "verify_event_id",
]
