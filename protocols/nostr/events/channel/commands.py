"""
Commands for channel event type (NIP-28 channel creation).
"""
import json
from typing import Any, Dict, List, Optional

from core.core_types import Clock
from core.errors import InvalidInputError
from protocols.nostr.event import ProtocolEvent, build_event
from protocols.nostr.events.registry import GROUP_TYPES, ChannelOptions
from protocols.nostr.kinds import Kind, parse_privacy_level


def create_group_channel(channel_data: Dict[str, Any], sender_pubkey: str,
                         options: Optional[Dict[str, Any]] = None, *,
                         clock: Optional[Clock] = None) -> ProtocolEvent:
    """
    Create a family or peer group channel.

    channel_data: name (required), description, picture, relationship.
    options: group_type, privacy_level, family_federation_id, admin_pubkeys.

    Returns an unsigned kind 40 event whose content is the JSON channel info.
    """
    # Extract and validate required parameters
    name = (channel_data or {}).get('name', '')
    if not name:
        raise InvalidInputError("name is required")

    opts = ChannelOptions.from_dict(options)
    if opts.group_type not in GROUP_TYPES:
        raise InvalidInputError(f"group_type must be one of {', '.join(GROUP_TYPES)}")
    privacy_level = parse_privacy_level(opts.privacy_level)

    channel_info = {
        'name': name,
        'about': channel_data.get('description') or f"{opts.group_type} group for secure communications",
        'picture': channel_data.get('picture'),
    }

    tags: List[List[str]] = [
        ['group-type', opts.group_type],
        ['privacy-level', privacy_level.value],
    ]
    if opts.group_type == 'family' and opts.family_federation_id:
        tags.append(['family-federation', opts.family_federation_id])
    tags.extend(['admin', pubkey] for pubkey in opts.admin_pubkeys)
    if opts.group_type == 'family':
        tags.append(['guardian-oversight', 'true'])
        tags.append(['spending-context', 'family-banking'])
    else:
        tags.append(['trust-level', 'verified'])
        tags.append(['relationship', channel_data.get('relationship') or 'business'])

    return build_event(
        Kind.CHANNEL_CREATION,
        json.dumps(channel_info, separators=(',', ':'), ensure_ascii=False),
        sender_pubkey,
        tags,
        clock=clock,
    )
