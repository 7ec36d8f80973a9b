"""
Validator for group message events.
"""
import json
from typing import Optional

from protocols.nostr.event import ProtocolEvent, get_tag_values
from protocols.nostr.events.registry import validate_event_data
from protocols.nostr.kinds import Kind


def validate(event: ProtocolEvent) -> bool:
    """
    Validate a group message event.

    Checks:
    - Kind is 42 and id matches content
    - References exactly one channel
    - Lists at least one member
    """
    if not validate_event_data(Kind.CHANNEL_MESSAGE, event):
        return False

    if len(get_tag_values(event, 'e')) != 1:
        return False

    return len(get_tag_values(event, 'p')) > 0


def detect_group_message(payload: str) -> Optional[ProtocolEvent]:
    """
    Return the group message encoded in payload, or None.

    Anything that is not a valid JSON kind 42 event is treated as a plain
    message, including events whose id does not match their content.
    """
    try:
        data = json.loads(payload)
    except (ValueError, RecursionError):
        return None
    if not isinstance(data, dict) or data.get('kind') != Kind.CHANNEL_MESSAGE:
        return None
    try:
        event = ProtocolEvent.from_dict(data)
    except ValueError:
        return None
    return event if validate(event) else None
