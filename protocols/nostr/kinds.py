"""
Event kinds and privacy levels.
"""
from enum import Enum, IntEnum
from typing import Union

from core.errors import UnknownPrivacyLevelError


class Kind(IntEnum):
    """Nostr event kinds used by the envelope layer."""
    # NIP-01 / NIP-04
    TEXT_NOTE = 1
    ENCRYPTED_DIRECT_MESSAGE = 4

    # NIP-29 relay-based groups
    GROUP_CHAT_MESSAGE = 9
    GROUP_THREAD_REPLY = 10
    GROUP_THREAD_MENTION = 11
    GROUP_CHAT_THREAD = 12

    # NIP-59
    GIFT_WRAP_SEAL = 13
    GIFT_WRAP = 1059

    # NIP-28 public chat
    CHANNEL_CREATION = 40
    CHANNEL_METADATA = 41
    CHANNEL_MESSAGE = 42
    CHANNEL_HIDE_MESSAGE = 43
    CHANNEL_MUTE_USER = 44

    # NIP-29 admin
    GROUP_ADMIN_REQUEST = 9000
    GROUP_ADMIN_RESPONSE = 9001
    GROUP_ADMIN_CREATE = 9002
    GROUP_ADMIN_METADATA = 9003
    GROUP_ADMIN_MEMBERS = 9004
    GROUP_ADMIN_ROLES = 9005
    GROUP_ADMIN_INVITE = 9006
    GROUP_ADMIN_LEAVE = 9007


class PrivacyLevel(str, Enum):
    """How each recipient's envelope is protected."""
    GIFTWRAPPED = "giftwrapped"
    ENCRYPTED = "encrypted"
    STANDARD = "standard"

    @property
    def uses_gift_wrap(self) -> bool:
        return self is PrivacyLevel.GIFTWRAPPED


def parse_privacy_level(value: Union[str, PrivacyLevel]) -> PrivacyLevel:
    """Return the PrivacyLevel for value or raise UnknownPrivacyLevelError."""
    if isinstance(value, PrivacyLevel):
        return value
    try:
        return PrivacyLevel(value)
    except ValueError:
        raise UnknownPrivacyLevelError(value) from None
