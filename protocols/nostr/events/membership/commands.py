"""
Commands for group membership events (NIP-29 admin members).
"""
from typing import Any, Dict, List, Optional, Sequence

from core.core_types import Clock
from core.errors import InvalidInputError
from protocols.nostr.event import ProtocolEvent, build_event
from protocols.nostr.events.registry import MembershipOptions
from protocols.nostr.kinds import Kind

FAMILY_SPENDING_LIMIT = '10000'


def create_group_membership(group_id: str, member_updates: Sequence[Dict[str, Any]],
                            admin_pubkey: str, options: Optional[Dict[str, Any]] = None, *,
                            clock: Optional[Clock] = None) -> ProtocolEvent:
    """
    Create a membership update for a group.

    Each update is {'npub': pubkey, 'role': role}; roles use the NIP-29
    ['p', pubkey, relay, role] layout with an empty relay hint.
    """
    if not group_id:
        raise InvalidInputError("group_id is required")

    opts = MembershipOptions.from_dict(options)

    tags: List[List[str]] = [['e', group_id]]
    for update in member_updates:
        member = update.get('npub') if isinstance(update, dict) else None
        if not member:
            raise InvalidInputError("each member update needs an 'npub'")
        tags.append(['p', member, '', update.get('role') or 'member'])

    if opts.group_type == 'family' and opts.family_federation_id:
        tags.extend([
            ['family-federation', opts.family_federation_id],
            ['family-role', 'member'],
            ['spending-limits', FAMILY_SPENDING_LIMIT],
        ])

    return build_event(Kind.GROUP_ADMIN_MEMBERS, '', admin_pubkey, tags, clock=clock)
