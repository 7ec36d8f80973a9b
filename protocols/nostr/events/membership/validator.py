"""
Validator for group membership events.
"""
from protocols.nostr.event import ProtocolEvent
from protocols.nostr.events.registry import validate_event_data
from protocols.nostr.kinds import Kind


def validate(event: ProtocolEvent) -> bool:
    """Every 'p' tag must carry a pubkey, relay slot and role."""
    if not validate_event_data(Kind.GROUP_ADMIN_MEMBERS, event):
        return False

    members = [tag for tag in event.tags if tag and tag[0] == 'p']
    return all(len(tag) == 4 and tag[1] and tag[3] for tag in members)
