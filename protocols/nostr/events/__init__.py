"""
Event types module for the Nostr envelope layer.
"""

from .registry import (
    EVENT_KIND_REGISTRY,
    GROUP_TYPES,
    KindSchema,
    validate_event_data,
    # Option types
    GiftWrapOptions,
    ChannelOptions,
    GroupMessageOptions,
    MembershipOptions,
)

__all__ = [
    "EVENT_KIND_REGISTRY",
    "GROUP_TYPES",
    "KindSchema",
    "validate_event_data",
    "GiftWrapOptions",
    "ChannelOptions",
    "GroupMessageOptions",
    "MembershipOptions",
]
