"""
Top-level send/receive entry points.

On send, the privacy level selects gift wrapping or pairwise encryption for each
recipient. On receive, the envelope format is chosen from the metadata and group
messages are detected from the recovered plaintext.
"""
import logging
import uuid
from typing import Any, Dict, Optional, Union

from core.config import EnvelopeConfig, load_config
from core.core_types import Clock, Signer, SystemClock
from core.crypto import Secp256k1Signer, parse_key_hex
from core.errors import InvalidInputError
from protocols.nostr import cipher
from protocols.nostr.events.channel.commands import create_group_channel
from protocols.nostr.events.gift_wrap.commands import public_key_for, unwrap, wrap
from protocols.nostr.events.message.commands import create_group_message
from protocols.nostr.events.message.flows import fan_out, unique_members
from protocols.nostr.events.message.validator import detect_group_message
from protocols.nostr.kinds import PrivacyLevel, parse_privacy_level
from protocols.nostr.protocol_types import (
    DecryptMessageResult,
    EncryptMessageResult,
    GroupCreationResult,
    GroupSendResult,
    validate_identity,
)

logger = logging.getLogger(__name__)


class MessageDispatcher:
    """
    Privacy-level dispatch over the envelope layer.

    Holds only the injected capabilities and configuration; every call is
    independent.
    """

    def __init__(self, signer: Optional[Signer] = None, clock: Optional[Clock] = None,
                 config: Optional[EnvelopeConfig] = None):
        self.signer = signer or Secp256k1Signer()
        self.clock = clock or SystemClock()
        self.config = config or EnvelopeConfig()

    def _level(self, privacy_level: Union[str, PrivacyLevel, None]) -> PrivacyLevel:
        if privacy_level is None:
            privacy_level = self.config.default_privacy_level
        return parse_privacy_level(privacy_level)

    def _delay(self, value: Any) -> int:
        if value is None:
            return self.config.default_delay_minutes
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise InvalidInputError("delay_minutes must be a non-negative integer")
        return value

    def _require_sender(self, sender: Any) -> None:
        if not validate_identity(sender, {'pubkey', 'privkey'}):
            raise InvalidInputError("sender must have 'pubkey' and 'privkey'")
        parse_key_hex(sender['privkey'], "sender private key")
        if public_key_for(self.signer, sender['privkey']) != sender['pubkey']:
            raise InvalidInputError("sender pubkey does not match sender privkey")

    def send_group_message(self, message_data: Dict[str, Any], sender: Dict[str, str],
                           privacy_level: Union[str, PrivacyLevel, None] = None,
                           options: Optional[Dict[str, Any]] = None) -> GroupSendResult:
        """
        Build a group message and fan it out to every member.

        message_data: content, channel_id, members, and optionally group_type,
        family_id, priority, requires_approval, delay_minutes.

        Raises:
            UnknownPrivacyLevelError: before any envelope is produced
            InvalidInputError: malformed sender, delay or message data
        """
        level = self._level(privacy_level)
        self._require_sender(sender)
        options = dict(options or {})

        content = message_data.get('content')
        if not isinstance(content, str):
            raise InvalidInputError("content is required")
        members = message_data.get('members')
        if not members or isinstance(members, str):
            raise InvalidInputError("members is required")
        members = unique_members(members)

        delay_minutes = self._delay(message_data.get('delay_minutes'))
        group_type = message_data.get('group_type', 'peer')
        family_id = message_data.get('family_id')
        requires_approval = bool(message_data.get('requires_approval', False))

        message_options = {
            'group_type': group_type,
            'priority': message_data.get('priority', 'normal'),
            'requires_guardian_approval': requires_approval,
            'family_id': family_id,
            'privacy_level': level.value,
        }
        message_options.update(options)
        group_message = create_group_message(
            content, message_data.get('channel_id', ''), sender['pubkey'], members,
            message_options, clock=self.clock,
        )

        entries, failures = fan_out(
            group_message.to_json(),
            members,
            sender['privkey'],
            level,
            {
                'delay_minutes': delay_minutes,
                'family_context': family_id,
                'requires_approval': requires_approval,
                'expiry': options.get('expiry'),
            },
            signer=self.signer,
            clock=self.clock,
            max_workers=self.config.fan_out_workers,
        )
        logger.debug("Group message %s sent as %s to %d members",
                     group_message.id, level.value, len(members))

        now = int(self.clock.now())
        result: GroupSendResult = {
            'message_id': str(uuid.uuid4()),
            'group_message': group_message,
            'failed_recipients': failures,
            'delivery_time': now,
            'metadata': {
                'encrypted': True,
                'gift_wrapped': level.uses_gift_wrap,
                'group_type': group_type,
                'member_count': len(members),
            },
        }
        if level.uses_gift_wrap:
            result['gift_wrapped_messages'] = entries
            result['delivery_time'] = entries[0]['delivery_time'] if entries else now
            result['metadata']['delayed'] = delay_minutes > 0
            result['metadata']['requires_approval'] = requires_approval
        else:
            result['encrypted_messages'] = entries
            if level is PrivacyLevel.STANDARD:
                result['metadata']['level'] = level.value
            else:
                result['metadata']['immediate'] = True
        return result

    def encrypt_message(self, message: str, recipient: Dict[str, str], sender: Dict[str, str],
                        privacy_level: Union[str, PrivacyLevel, None] = None,
                        options: Optional[Dict[str, Any]] = None) -> EncryptMessageResult:
        """
        Encrypt a single message for one recipient.

        options: delay_minutes, family_id, requires_approval, expiry.
        """
        level = self._level(privacy_level)
        self._require_sender(sender)
        if not validate_identity(recipient, {'pubkey'}):
            raise InvalidInputError("recipient must have 'pubkey'")
        options = options or {}
        delay_minutes = self._delay(options.get('delay_minutes'))
        message_id = str(uuid.uuid4())

        if level.uses_gift_wrap:
            wrapped = wrap(
                message,
                recipient['pubkey'],
                sender['privkey'],
                {
                    'delay_minutes': delay_minutes,
                    'family_context': options.get('family_id'),
                    'requires_approval': options.get('requires_approval', False),
                    'expiry': options.get('expiry'),
                },
                signer=self.signer,
                clock=self.clock,
            )
            return {
                'message_id': message_id,
                'encrypted_content': wrapped['event'],
                'delivery_time': wrapped['delivery_time'],
                'metadata': dict(wrapped['metadata']),
            }

        metadata: Dict[str, Any] = {'encrypted': True, 'gift_wrapped': False}
        if level is PrivacyLevel.STANDARD:
            metadata['level'] = level.value
        else:
            metadata['immediate'] = True
        return {
            'message_id': message_id,
            'encrypted_content': cipher.encrypt(message, recipient['pubkey'], sender['privkey']),
            'delivery_time': int(self.clock.now()),
            'metadata': metadata,
        }

    def decrypt_message(self, encrypted_data: Dict[str, Any], recipient_privkey: str,
                        sender_pubkey: Optional[str] = None) -> DecryptMessageResult:
        """
        Decrypt the output of encrypt_message or one send_group_message entry.

        Gift wraps are recognised by metadata.gift_wrapped; anything else is
        pairwise ciphertext and needs sender_pubkey.
        """
        metadata = encrypted_data.get('metadata') or {}
        content = encrypted_data.get('encrypted_content')

        if metadata.get('gift_wrapped'):
            unwrapped = unwrap(content, recipient_privkey)
            group_message = detect_group_message(unwrapped['message'])
            if group_message is not None:
                return {
                    'message': group_message.content,
                    'group_message': group_message,
                    'sender': unwrapped['sender'],
                    'timestamp': unwrapped['timestamp'],
                    'metadata': {**unwrapped['metadata'], 'is_group_message': True},
                }
            return unwrapped

        if not sender_pubkey:
            raise InvalidInputError("sender_pubkey is required for pairwise decryption")
        if not isinstance(content, str):
            raise InvalidInputError("encrypted_content must be a base64 string")
        decrypted = cipher.decrypt(content, sender_pubkey, recipient_privkey)

        group_message = detect_group_message(decrypted)
        if group_message is not None:
            return {
                'message': group_message.content,
                'group_message': group_message,
                'metadata': {**metadata, 'is_group_message': True},
            }
        return {
            'message': decrypted,
            'metadata': metadata,
        }

    def _create_group(self, group_data: Dict[str, Any], admin_pubkey: str, admin_privkey: str,
                      channel_options: Dict[str, Any], wrap_options: Dict[str, Any]) -> GroupCreationResult:
        channel_event = create_group_channel(group_data, admin_pubkey, channel_options, clock=self.clock)
        group_type = channel_options['group_type']
        level = parse_privacy_level(channel_options['privacy_level'])

        if level.uses_gift_wrap:
            # Self-wrap so the creation reaches relays without revealing the admin.
            wrapped = wrap(channel_event.to_json(), admin_pubkey, admin_privkey, wrap_options,
                           signer=self.signer, clock=self.clock)
            logger.debug("Created %s group %s (gift-wrapped)", group_type, channel_event.id)
            return {
                'channel_id': channel_event.id,
                'channel_event': channel_event,
                'gift_wrapped_event': wrapped['event'],
                'delivery_time': wrapped['delivery_time'],
                'metadata': {**wrapped['metadata'], 'group_type': group_type},
            }

        logger.debug("Created %s group %s", group_type, channel_event.id)
        return {
            'channel_id': channel_event.id,
            'channel_event': channel_event,
            'delivery_time': int(self.clock.now()),
            'metadata': {'encrypted': False, 'gift_wrapped': False, 'group_type': group_type},
        }

    def create_family_group(self, group_data: Dict[str, Any], admin_pubkey: str, admin_privkey: str,
                            options: Optional[Dict[str, Any]] = None) -> GroupCreationResult:
        """
        Create a family channel, self-wrapped to the admin when gift-wrapped.

        options: family_federation_id, admin_pubkeys, privacy_level, delay_minutes.
        """
        options = options or {}
        federation_id = options.get('family_federation_id')
        privacy_level = self._level(options.get('privacy_level'))
        return self._create_group(
            group_data,
            admin_pubkey,
            admin_privkey,
            {
                'group_type': 'family',
                'privacy_level': privacy_level.value,
                'family_federation_id': federation_id,
                'admin_pubkeys': options.get('admin_pubkeys') or [admin_pubkey],
            },
            {
                'delay_minutes': self._delay(options.get('delay_minutes')),
                'family_context': federation_id,
                'requires_approval': False,
            },
        )

    def create_peer_group(self, group_data: Dict[str, Any], admin_pubkey: str, admin_privkey: str,
                          options: Optional[Dict[str, Any]] = None) -> GroupCreationResult:
        """
        Create a peer channel, self-wrapped to the admin when gift-wrapped.

        options: relationship, privacy_level, delay_minutes.
        """
        options = options or {}
        privacy_level = self._level(options.get('privacy_level'))
        return self._create_group(
            {**group_data, 'relationship': options.get('relationship', 'business')},
            admin_pubkey,
            admin_privkey,
            {
                'group_type': 'peer',
                'privacy_level': privacy_level.value,
            },
            {
                'delay_minutes': self._delay(options.get('delay_minutes')),
                'requires_approval': False,
            },
        )


_default_dispatcher: Optional[MessageDispatcher] = None


def get_default_dispatcher() -> MessageDispatcher:
    """Dispatcher configured from $NOSTR_ENVELOPE_CONFIG, created on first use."""
    global _default_dispatcher
    if _default_dispatcher is None:
        _default_dispatcher = MessageDispatcher(config=load_config())
    return _default_dispatcher


def send_group_message(message_data: Dict[str, Any], sender: Dict[str, str],
                       privacy_level: Union[str, PrivacyLevel, None] = None,
                       options: Optional[Dict[str, Any]] = None) -> GroupSendResult:
    return get_default_dispatcher().send_group_message(message_data, sender, privacy_level, options)


def encrypt_message(message: str, recipient: Dict[str, str], sender: Dict[str, str],
                    privacy_level: Union[str, PrivacyLevel, None] = None,
                    options: Optional[Dict[str, Any]] = None) -> EncryptMessageResult:
    return get_default_dispatcher().encrypt_message(message, recipient, sender, privacy_level, options)


def decrypt_message(encrypted_data: Dict[str, Any], recipient_privkey: str,
                    sender_pubkey: Optional[str] = None) -> DecryptMessageResult:
    return get_default_dispatcher().decrypt_message(encrypted_data, recipient_privkey, sender_pubkey)
