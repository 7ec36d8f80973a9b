"""
Validators for seal and gift wrap events.
"""
from protocols.nostr.event import ProtocolEvent, get_tag
from protocols.nostr.events.registry import validate_event_data
from protocols.nostr.kinds import Kind


def validate_seal(event: ProtocolEvent) -> bool:
    """
    Validate a seal event.

    Checks:
    - Kind is 13 and id matches content
    - Addressed to exactly one recipient
    """
    if not validate_event_data(Kind.GIFT_WRAP_SEAL, event):
        return False

    return sum(1 for tag in event.tags if tag and tag[0] == 'p') == 1


def validate_gift_wrap(event: ProtocolEvent) -> bool:
    """
    Validate a gift wrap event.

    Checks:
    - Kind is 1059 and id matches content
    - Has recipient and delay tags
    - Delay is a non-negative integer
    """
    if not validate_event_data(Kind.GIFT_WRAP, event):
        return False

    recipient = get_tag(event, 'p')
    if recipient is None or len(recipient) < 2 or not recipient[1]:
        return False

    delay = get_tag(event, 'delay')
    return delay is not None and len(delay) > 1 and delay[1].isdigit()
