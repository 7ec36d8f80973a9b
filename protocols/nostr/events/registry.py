"""
Event kind registry with the tag schema and option types for each envelope kind.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, FrozenSet, List, Optional, Type, TypeVar

from protocols.nostr.event import ProtocolEvent, get_tag, verify_event_id
from protocols.nostr.kinds import Kind


@dataclass(frozen=True)
class KindSchema:
    """Tags an event of this kind must carry"""
    kind: Kind
    required_tags: FrozenSet[str]
    json_content: bool = False


EVENT_KIND_REGISTRY: Dict[Kind, KindSchema] = {
    Kind.GIFT_WRAP_SEAL: KindSchema(Kind.GIFT_WRAP_SEAL, frozenset({'p'})),
    Kind.GIFT_WRAP: KindSchema(Kind.GIFT_WRAP, frozenset({'p', 'delay'})),
    Kind.CHANNEL_CREATION: KindSchema(
        Kind.CHANNEL_CREATION, frozenset({'group-type', 'privacy-level'}), json_content=True
    ),
    Kind.CHANNEL_MESSAGE: KindSchema(
        Kind.CHANNEL_MESSAGE, frozenset({'e', 'group-type', 'priority'})
    ),
    Kind.GROUP_ADMIN_MEMBERS: KindSchema(Kind.GROUP_ADMIN_MEMBERS, frozenset({'e'})),
}


# Option types. Callers pass plain dicts; unknown keys are ignored so a single
# options dict can be forwarded through several builders.

O = TypeVar('O')


def _from_options(cls: Type[O], options: Optional[Dict[str, Any]]) -> O:
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in (options or {}).items() if k in known and v is not None})


@dataclass
class GiftWrapOptions:
    """Options for wrapping a message"""
    delay_minutes: int = 0
    family_context: Optional[str] = None
    requires_approval: bool = False
    expiry: Optional[int] = None

    @classmethod
    def from_dict(cls, options: Optional[Dict[str, Any]]) -> 'GiftWrapOptions':
        return _from_options(cls, options)


@dataclass
class ChannelOptions:
    """Options for creating a group channel"""
    group_type: str = 'peer'
    privacy_level: str = 'giftwrapped'
    family_federation_id: Optional[str] = None
    admin_pubkeys: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, options: Optional[Dict[str, Any]]) -> 'ChannelOptions':
        return _from_options(cls, options)


@dataclass
class GroupMessageOptions:
    """Options for creating a group message"""
    group_type: str = 'peer'
    priority: str = 'normal'
    privacy_level: str = 'giftwrapped'
    requires_guardian_approval: bool = False
    emergency_level: Optional[str] = None
    family_id: Optional[str] = None

    @classmethod
    def from_dict(cls, options: Optional[Dict[str, Any]]) -> 'GroupMessageOptions':
        return _from_options(cls, options)


@dataclass
class MembershipOptions:
    """Options for a membership update"""
    group_type: str = 'peer'
    family_federation_id: Optional[str] = None

    @classmethod
    def from_dict(cls, options: Optional[Dict[str, Any]]) -> 'MembershipOptions':
        return _from_options(cls, options)


GROUP_TYPES = ('family', 'peer')


def validate_event_data(kind: Kind, event: ProtocolEvent) -> bool:
    """
    Validate that an event matches the schema registered for kind.

    Args:
        kind: The expected kind
        event: The event to validate

    Returns:
        True if valid, False otherwise
    """
    if kind not in EVENT_KIND_REGISTRY:
        return False

    schema = EVENT_KIND_REGISTRY[kind]

    if event.kind != schema.kind:
        return False

    # Check all required tags are present
    for name in schema.required_tags:
        if get_tag(event, name) is None:
            return False

    return verify_event_id(event)
