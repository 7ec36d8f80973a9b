"""
Nostr envelope-layer type definitions.

Results are plain dicts so they cross the library boundary without framework
types; these TypedDicts document their shape.
"""

from typing import TypedDict, Any, Optional, Union, List
from typing_extensions import NotRequired

from protocols.nostr.event import ProtocolEvent, Tags


# Protocol-specific ID types
EventId = str
PubKey = str
PrivKey = str
ChannelId = str
MessageId = str


class Identity(TypedDict):
    """A sender's keypair."""
    pubkey: PubKey
    privkey: PrivKey


class Recipient(TypedDict):
    pubkey: PubKey


class GiftWrapMetadata(TypedDict):
    encrypted: bool
    gift_wrapped: bool
    delayed: bool
    requires_approval: bool
    family_context: Optional[str]


class GiftWrapResult(TypedDict):
    """Result of wrapping one message for one recipient"""
    event: ProtocolEvent
    seal_id: EventId
    delivery_time: int
    metadata: GiftWrapMetadata


class UnwrapMetadata(TypedDict):
    gift_wrapped: bool
    unwrapped: bool


class UnwrapResult(TypedDict):
    """Contents recovered from a gift wrap's seal"""
    message: str
    sender: PubKey
    timestamp: int
    tags: Tags
    metadata: UnwrapMetadata


class GiftWrappedEntry(TypedDict):
    recipient_pubkey: PubKey
    gift_wrapped_event: ProtocolEvent
    delivery_time: int


class EncryptedEntry(TypedDict):
    recipient_pubkey: PubKey
    encrypted_content: str


class FailedRecipient(TypedDict):
    recipient_pubkey: PubKey
    error: str


class GroupSendMetadata(TypedDict, total=False):
    encrypted: bool
    gift_wrapped: bool
    group_type: str
    member_count: int
    delayed: bool
    requires_approval: bool
    immediate: bool
    level: str


class GroupSendResult(TypedDict):
    """Aggregate result of a group fan-out"""
    message_id: MessageId
    group_message: ProtocolEvent
    gift_wrapped_messages: NotRequired[List[GiftWrappedEntry]]
    encrypted_messages: NotRequired[List[EncryptedEntry]]
    failed_recipients: List[FailedRecipient]
    delivery_time: int
    metadata: GroupSendMetadata


class EncryptMessageResult(TypedDict):
    """Result of a single-recipient send"""
    message_id: MessageId
    encrypted_content: Union[ProtocolEvent, str]
    delivery_time: int
    metadata: dict[str, Any]


class DecryptMessageResult(TypedDict, total=False):
    message: str
    group_message: ProtocolEvent
    sender: PubKey
    timestamp: int
    tags: Tags
    metadata: dict[str, Any]


class GroupCreationResult(TypedDict):
    """Result of creating a family or peer group"""
    channel_id: ChannelId
    channel_event: ProtocolEvent
    gift_wrapped_event: NotRequired[ProtocolEvent]
    delivery_time: int
    metadata: dict[str, Any]


def validate_identity(identity: Any, required: set[str]) -> bool:
    """
    Validate that an identity dict has the required key fields as strings.
    """
    return isinstance(identity, dict) and all(
        isinstance(identity.get(field), str) and identity.get(field)
        for field in required
    )
