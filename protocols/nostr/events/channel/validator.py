"""
Validator for channel events.
"""
import json

from protocols.nostr.event import ProtocolEvent, get_tag
from protocols.nostr.events.registry import GROUP_TYPES, validate_event_data
from protocols.nostr.kinds import Kind


def validate(event: ProtocolEvent) -> bool:
    """
    Validate a channel creation event.

    Returns True if valid, False otherwise.
    """
    if not validate_event_data(Kind.CHANNEL_CREATION, event):
        return False

    group_type = get_tag(event, 'group-type')
    if len(group_type) < 2 or group_type[1] not in GROUP_TYPES:
        return False

    try:
        info = json.loads(event.content)
    except (ValueError, RecursionError):
        return False

    return isinstance(info, dict) and bool(info.get('name'))
