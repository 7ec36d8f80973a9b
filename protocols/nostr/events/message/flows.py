"""
Flows for group message fan-out.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.core_types import Clock, Signer
from core.errors import CryptoOperationError, InvalidInputError
from protocols.nostr import cipher
from protocols.nostr.events.gift_wrap.commands import wrap
from protocols.nostr.kinds import PrivacyLevel
from protocols.nostr.protocol_types import FailedRecipient

logger = logging.getLogger(__name__)


def unique_members(members: Sequence[str]) -> List[str]:
    """Members in first-seen order without duplicates."""
    return list(dict.fromkeys(members))


def fan_out(payload: str, members: Sequence[str], sender_privkey: str,
            privacy_level: PrivacyLevel, wrap_options: Optional[Dict[str, Any]] = None, *,
            signer: Signer, clock: Clock,
            max_workers: int = 8) -> Tuple[List[Dict[str, Any]], List[FailedRecipient]]:
    """
    Produce one independent envelope of payload per member.

    Tasks share no state and run on a thread pool; results come back in member
    order. A member whose envelope fails is reported in the second list and does
    not affect the others.
    """
    def envelope_for(member: str) -> Dict[str, Any]:
        if privacy_level.uses_gift_wrap:
            wrapped = wrap(payload, member, sender_privkey, wrap_options, signer=signer, clock=clock)
            return {
                'recipient_pubkey': member,
                'gift_wrapped_event': wrapped['event'],
                'delivery_time': wrapped['delivery_time'],
            }
        # encrypted and standard share the pairwise path
        return {
            'recipient_pubkey': member,
            'encrypted_content': cipher.encrypt(payload, member, sender_privkey),
        }

    produced: Dict[str, Dict[str, Any]] = {}
    failed: Dict[str, str] = {}

    workers = max(1, min(max_workers, len(members)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {pool.submit(envelope_for, member): member for member in members}
        for future in as_completed(futures):
            member = futures[future]
            try:
                produced[member] = future.result()
            except (CryptoOperationError, InvalidInputError) as e:
                logger.warning("Envelope for recipient %s failed: %s", member[:12], e)
                failed[member] = str(e)

    entries = [produced[m] for m in members if m in produced]
    failures: List[FailedRecipient] = [
        {'recipient_pubkey': m, 'error': failed[m]} for m in members if m in failed
    ]
    logger.debug("Fan-out produced %d envelopes, %d failures", len(entries), len(failures))
    return entries, failures
