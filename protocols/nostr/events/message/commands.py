"""
Commands for group message event type (NIP-28 channel message).
"""
from typing import Any, Dict, List, Optional, Sequence

from core.core_types import Clock
from core.errors import InvalidInputError
from protocols.nostr.event import ProtocolEvent, build_event
from protocols.nostr.events.registry import GROUP_TYPES, GroupMessageOptions
from protocols.nostr.kinds import Kind, parse_privacy_level


def _check_members(members: Sequence[str]) -> None:
    if isinstance(members, str) or not all(isinstance(m, str) and m for m in members):
        raise InvalidInputError("members must be a sequence of pubkeys")


def create_group_message(content: str, channel_id: str, sender_pubkey: str,
                         members: Sequence[str], options: Optional[Dict[str, Any]] = None, *,
                         clock: Optional[Clock] = None) -> ProtocolEvent:
    """
    Create a message in a group channel.

    Every member gets a 'p' tag. options: group_type, priority, privacy_level,
    requires_guardian_approval, emergency_level, family_id.
    """
    if not channel_id:
        raise InvalidInputError("channel_id is required")
    _check_members(members)

    opts = GroupMessageOptions.from_dict(options)
    if opts.group_type not in GROUP_TYPES:
        raise InvalidInputError(f"group_type must be one of {', '.join(GROUP_TYPES)}")

    tags: List[List[str]] = [['e', channel_id]]
    tags.extend(['p', member] for member in members)
    tags.extend([
        [f"{opts.group_type}-group", 'true'],
        ['group-type', opts.group_type],
        ['privacy-level', parse_privacy_level(opts.privacy_level).value],
        ['priority', opts.priority],
    ])
    if opts.requires_guardian_approval:
        tags.append(['guardian-approval', 'required'])
    if opts.emergency_level:
        tags.append(['emergency', opts.emergency_level])
    if opts.family_id:
        tags.append(['family-context', opts.family_id])

    return build_event(Kind.CHANNEL_MESSAGE, content, sender_pubkey, tags, clock=clock)


def create_emergency_group_message(content: str, channel_id: str, sender_pubkey: str,
                                   members: Sequence[str], emergency_type: str, family_id: str, *,
                                   clock: Optional[Clock] = None) -> ProtocolEvent:
    """Create a critical-priority family broadcast that requires guardian approval."""
    if not channel_id:
        raise InvalidInputError("channel_id is required")
    if not emergency_type:
        raise InvalidInputError("emergency_type is required")
    if not family_id:
        raise InvalidInputError("family_id is required")
    _check_members(members)

    tags: List[List[str]] = [['e', channel_id]]
    tags.extend(['p', member] for member in members)
    tags.extend([
        ['family-group', 'true'],
        ['group-type', 'family'],
        ['emergency', emergency_type],
        ['priority', 'critical'],
        ['guardian-approval', 'required'],
        ['broadcast', 'true'],
        ['family-context', family_id],
    ])

    return build_event(Kind.CHANNEL_MESSAGE, content, sender_pubkey, tags, clock=clock)
