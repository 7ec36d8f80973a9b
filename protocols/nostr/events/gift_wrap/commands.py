"""
Commands for seal and gift wrap events (NIP-59 style).

A message is sealed under the real sender's identity, then the serialized seal
is encrypted to the recipient under a fresh ephemeral key and published as a
gift wrap carrying only the recipient and delay tags.
"""
import json
import logging
from typing import Any, Dict, Optional, Union

from core.core_types import Clock, Signer, SystemClock
from core.crypto import Secp256k1Signer
from core.errors import CryptoOperationError, InvalidInputError, ProtocolViolationError
from protocols.nostr import cipher
from protocols.nostr.event import ProtocolEvent, build_event, coerce_event, get_tag
from protocols.nostr.events.gift_wrap.validator import validate_gift_wrap, validate_seal
from protocols.nostr.events.registry import GiftWrapOptions
from protocols.nostr.kinds import Kind
from protocols.nostr.protocol_types import GiftWrapResult, UnwrapResult

logger = logging.getLogger(__name__)

_DEFAULT_SIGNER = Secp256k1Signer()
_DEFAULT_CLOCK = SystemClock()


def public_key_for(signer: Signer, privkey: str) -> str:
    try:
        return signer.get_public_key(privkey)
    except InvalidInputError:
        raise
    except (ValueError, TypeError) as e:
        raise CryptoOperationError(f"Public key derivation failed ({type(e).__name__})") from None


def padded_length(size: int) -> int:
    """
    Bucketed plaintext length for a seal of size bytes (NIP-44 padding).

    32-byte chunks up to 256 bytes, then chunks of one eighth of the next
    power of two.
    """
    if size <= 32:
        return 32
    next_power = 1 << (size - 1).bit_length()
    chunk = 32 if next_power <= 256 else next_power // 8
    return chunk * ((size - 1) // chunk + 1)


def _padded_seal(seal: ProtocolEvent) -> str:
    # Trailing whitespace is valid JSON, so unwrap parses the padded form as is.
    serialized = seal.to_json()
    size = len(serialized.encode('utf-8'))
    return serialized + ' ' * (padded_length(size) - size)


def create_seal(message: str, recipient_pubkey: str, sender_pubkey: str,
                opts: GiftWrapOptions, *, clock: Optional[Clock] = None) -> ProtocolEvent:
    """
    Build the inner seal (kind 13).

    Metadata tags are included only when supplied, in the order
    family, approval, expiry.
    """
    tags = [['p', recipient_pubkey]]
    if opts.family_context:
        tags.append(['family', str(opts.family_context)])
    if opts.requires_approval:
        tags.append(['approval', 'required'])
    if opts.expiry:
        tags.append(['expiry', str(opts.expiry)])
    return build_event(Kind.GIFT_WRAP_SEAL, message, sender_pubkey, tags, clock=clock)


def wrap(message: str, recipient_pubkey: str, sender_privkey: str,
         options: Optional[Dict[str, Any]] = None, *,
         signer: Optional[Signer] = None, clock: Optional[Clock] = None) -> GiftWrapResult:
    """
    Seal message for recipient_pubkey and wrap it under an ephemeral identity.

    Options: delay_minutes, family_context, requires_approval, expiry.

    Raises:
        InvalidInputError: malformed key or options
        CryptoOperationError: key derivation or encryption failed
    """
    signer = signer or _DEFAULT_SIGNER
    clock = clock or _DEFAULT_CLOCK
    opts = GiftWrapOptions.from_dict(options)
    if not isinstance(opts.delay_minutes, int) or opts.delay_minutes < 0:
        raise InvalidInputError("delay_minutes must be a non-negative integer")

    sender_pubkey = public_key_for(signer, sender_privkey)
    seal = create_seal(message, recipient_pubkey, sender_pubkey, opts, clock=clock)

    ephemeral_privkey, ephemeral_pubkey = signer.generate_ephemeral()
    encrypted_seal = cipher.encrypt(_padded_seal(seal), recipient_pubkey, ephemeral_privkey)

    gift_wrap = build_event(
        Kind.GIFT_WRAP,
        encrypted_seal,
        ephemeral_pubkey,
        [
            ['p', recipient_pubkey],
            ['delay', str(opts.delay_minutes)],
        ],
        clock=clock,
    )
    logger.debug("Wrapped seal %s as gift wrap %s", seal.id, gift_wrap.id)

    return {
        'event': gift_wrap,
        'seal_id': seal.id,
        'delivery_time': int(clock.now()) + opts.delay_minutes * 60,
        'metadata': {
            'encrypted': True,
            'gift_wrapped': True,
            'delayed': opts.delay_minutes > 0,
            'requires_approval': bool(opts.requires_approval),
            'family_context': opts.family_context,
        },
    }


def unwrap(gift_wrap: Union[ProtocolEvent, Dict[str, Any]], recipient_privkey: str) -> UnwrapResult:
    """
    Open a gift wrap addressed to the holder of recipient_privkey.

    Raises:
        ProtocolViolationError: not a well-formed gift wrap, or the payload is not a seal
        CryptoOperationError: decryption failed
    """
    try:
        event = coerce_event(gift_wrap)
    except InvalidInputError as e:
        raise ProtocolViolationError(f"Malformed gift wrap: {e}") from None

    if get_tag(event, 'p') is None:
        raise ProtocolViolationError("Gift wrap has no 'p' tag")
    if event.kind != Kind.GIFT_WRAP:
        raise ProtocolViolationError(f"Expected kind {int(Kind.GIFT_WRAP)}, got {event.kind}")
    if not validate_gift_wrap(event):
        raise ProtocolViolationError(f"Gift wrap {event.id} failed validation")

    seal_json = cipher.decrypt(event.content, event.pubkey, recipient_privkey)

    try:
        seal = ProtocolEvent.from_dict(json.loads(seal_json))
    except (ValueError, InvalidInputError):
        raise ProtocolViolationError("Gift wrap payload is not a seal event") from None
    if not validate_seal(seal):
        raise ProtocolViolationError(f"Seal {seal.id} failed validation")

    logger.debug("Unwrapped gift wrap %s to seal %s", event.id, seal.id)
    return {
        'message': seal.content,
        'sender': seal.pubkey,
        'timestamp': seal.created_at,
        'tags': seal.tags,
        'metadata': {
            'gift_wrapped': True,
            'unwrapped': True,
        },
    }


class GiftWrapEnvelope:
    """Namespace exposing wrap/unwrap as a stateless value."""
    wrap = staticmethod(wrap)
    unwrap = staticmethod(unwrap)
