"""
Canonical Nostr events and their content-addressed ids.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from core.core_types import Clock, SystemClock
from core.crypto import sha256_hex
from core.errors import InvalidInputError

Tag = Tuple[str, ...]
Tags = Tuple[Tag, ...]
TagsInput = Iterable[Sequence[str]]

_DEFAULT_CLOCK = SystemClock()


@dataclass(frozen=True)
class ProtocolEvent:
    """
    Immutable Nostr event.

    `sig` is always populated externally; this layer never signs.
    """
    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: Tags
    content: str
    sig: str = ''

    def to_dict(self) -> Dict[str, Any]:
        """Wire layout: tags become lists, kind a plain int."""
        return {
            'id': self.id,
            'pubkey': self.pubkey,
            'created_at': self.created_at,
            'kind': int(self.kind),
            'tags': [list(tag) for tag in self.tags],
            'content': self.content,
            'sig': self.sig,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(',', ':'), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProtocolEvent':
        """
        Build an event from its wire dict.

        Raises InvalidInputError if a field is missing or has the wrong type.
        The id is taken as given; use verify_event_id to check it.
        """
        if not isinstance(data, dict):
            raise InvalidInputError(f"Event must be a dict, got {type(data).__name__}")
        for field, expected in (('id', str), ('pubkey', str), ('created_at', int),
                                ('kind', int), ('content', str)):
            value = data.get(field)
            if not isinstance(value, expected) or isinstance(value, bool):
                raise InvalidInputError(f"Event field '{field}' must be {expected.__name__}")
        sig = data.get('sig', '')
        if not isinstance(sig, str):
            raise InvalidInputError("Event field 'sig' must be str")
        return cls(
            id=data['id'],
            pubkey=data['pubkey'],
            created_at=data['created_at'],
            kind=data['kind'],
            tags=normalize_tags(data.get('tags')),
            content=data['content'],
            sig=sig,
        )

    def __repr__(self):
        content = self.content if len(self.content) <= 32 else f"<str:{len(self.content)}>"
        return (f"ProtocolEvent(id={self.id[:12]}..., kind={self.kind}, "
                f"pubkey={self.pubkey[:12]}..., tags={len(self.tags)}, content={content!r})")


def normalize_tags(tags: Optional[TagsInput]) -> Tags:
    """Convert a sequence of string sequences to a tuple of tuples."""
    if tags is None:
        return ()
    if isinstance(tags, (str, bytes, dict)):
        raise InvalidInputError("tags must be a sequence of string sequences")
    result = []
    for tag in tags:
        if not isinstance(tag, (list, tuple)) or not all(isinstance(v, str) for v in tag):
            raise InvalidInputError("tags must be a sequence of string sequences")
        result.append(tuple(tag))
    return tuple(result)


def serialize_for_id(pubkey: str, created_at: int, kind: int, tags: TagsInput, content: str) -> str:
    """NIP-01 canonical serialization: [0, pubkey, created_at, kind, tags, content]."""
    return json.dumps(
        [0, pubkey, created_at, int(kind), [list(tag) for tag in tags], content],
        separators=(',', ':'),
        ensure_ascii=False,
    )


def compute_event_id(pubkey: str, created_at: int, kind: int, tags: TagsInput, content: str) -> str:
    serialized = serialize_for_id(pubkey, created_at, kind, tags, content)
    return sha256_hex(serialized.encode('utf-8'))


def build_event(kind: int, content: str, pubkey: str, tags: Optional[TagsInput] = None,
                *, clock: Optional[Clock] = None, created_at: Optional[int] = None) -> ProtocolEvent:
    """
    Build an unsigned event and compute its id.

    created_at defaults to the clock's current time in whole seconds.
    """
    normalized = normalize_tags(tags)
    if created_at is None:
        created_at = int((clock or _DEFAULT_CLOCK).now())
    event_id = compute_event_id(pubkey, created_at, kind, normalized, content)
    return ProtocolEvent(
        id=event_id,
        pubkey=pubkey,
        created_at=created_at,
        kind=kind,
        tags=normalized,
        content=content,
    )


def verify_event_id(event: ProtocolEvent) -> bool:
    """True if the event's id matches its canonical serialization."""
    return event.id == compute_event_id(
        event.pubkey, event.created_at, event.kind, event.tags, event.content
    )


def coerce_event(event: Union[ProtocolEvent, Dict[str, Any]]) -> ProtocolEvent:
    if isinstance(event, ProtocolEvent):
        return event
    return ProtocolEvent.from_dict(event)


def get_tag(event: ProtocolEvent, name: str) -> Optional[Tag]:
    """First tag whose name matches, or None."""
    for tag in event.tags:
        if tag and tag[0] == name:
            return tag
    return None


def get_tag_values(event: ProtocolEvent, name: str) -> List[str]:
    """Second element of every tag with the given name, in order."""
    return [tag[1] for tag in event.tags if len(tag) > 1 and tag[0] == name]
