"""Domain entities for Shelfstr."""

import json
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Union

from shelfstr.domain.exceptions import ValidationError


class EventKind(IntEnum):
    ZAP_REQUEST = 9734
    ZAP_RECEIPT = 9735
    BOOK = 30051
    BOOKSHELF = 30052
    REVIEW = 30053
    BOOK_CLUB = 30055


class ShelfStatus(str, Enum):
    """Reading statuses known to this client.

    Shelf entries store the status as a plain string; values outside this
    enum are valid and pass through untouched.
    """

    WANT_TO_READ = "want-to-read"
    READING = "reading"
    READ = "read"
    ABANDONED = "abandoned"


Tag = list[str]
ExtraTags = dict[str, list[list[str]]]


# ---------------------------------------------------------------------------
# Generic event envelope
# ---------------------------------------------------------------------------
@dataclass
class UnsignedEvent:
    """Pre-sign event payload produced by the encoder."""

    kind: int
    created_at: int
    tags: list[Tag]
    content: str = ""
    pubkey: Optional[str] = None

    def canonical_payload(self) -> list:
        """Return ``[0, pubkey, created_at, kind, tags, content]``.

        This array, serialized compactly, is what the signer hashes to derive
        the event id.
        """
        return [0, self.pubkey, self.created_at, self.kind, self.tags, self.content]

    def serialize(self) -> str:
        """Compact UTF-8 JSON of the canonical payload."""
        if not self.pubkey:
            raise ValidationError("pubkey is required to serialize an event", field="pubkey")
        return json.dumps(self.canonical_payload(), separators=(",", ":"), ensure_ascii=False)

    def to_dict(self) -> dict:
        return {
            "pubkey": self.pubkey,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
        }


@dataclass
class EventSignature:
    id: str
    sig: str


@dataclass
class Event:
    """A signed event as it travels on the wire."""

    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: list[Tag] = field(default_factory=list)
    content: str = ""
    sig: str = ""

    @classmethod
    def from_unsigned(cls, unsigned: UnsignedEvent, signature: EventSignature) -> "Event":
        return cls(
            id=signature.id,
            pubkey=unsigned.pubkey or "",
            created_at=unsigned.created_at,
            kind=unsigned.kind,
            tags=[list(tag) for tag in unsigned.tags],
            content=unsigned.content,
            sig=signature.sig,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        return cls(
            id=data.get("id", ""),
            pubkey=data.get("pubkey", ""),
            created_at=int(data.get("created_at", 0)),
            kind=int(data["kind"]),
            tags=[list(tag) for tag in data.get("tags") or []],
            content=data.get("content") or "",
            sig=data.get("sig", ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pubkey": self.pubkey,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
            "sig": self.sig,
        }

    def first_tag_value(self, key: str) -> Optional[str]:
        for tag in self.tags:
            if len(tag) > 1 and tag[0] == key:
                return tag[1]
        return None


# ---------------------------------------------------------------------------
# Reading domain
# ---------------------------------------------------------------------------
@dataclass
class Book:
    local_id: Optional[str] = None
    title: Optional[str] = None
    authors: Optional[list[str]] = None
    isbn: Optional[str] = None
    publish_date: Optional[str] = None
    publisher: Optional[str] = None
    cover_url: Optional[str] = None
    genres: Optional[list[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    extra_tags: ExtraTags = field(default_factory=dict)
    source: Optional[Event] = field(default=None, compare=False, repr=False)

    def is_valid(self) -> bool:
        return bool(self.local_id) and bool(self.title)


@dataclass
class ShelfEntry:
    book_event_id: Optional[str] = None
    status: Optional[str] = None
    progress: Optional[str] = None
    completed_date: Optional[str] = None


@dataclass
class Bookshelf:
    local_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    entries: list[ShelfEntry] = field(default_factory=list)
    extra_tags: ExtraTags = field(default_factory=dict)
    source: Optional[Event] = field(default=None, compare=False, repr=False)


@dataclass
class Review:
    book_event_id: Optional[str] = None
    rating: Optional[Union[int, str]] = None
    read_date: Optional[str] = None
    subject: Optional[str] = None
    content: Optional[str] = None
    extra_tags: ExtraTags = field(default_factory=dict)
    source: Optional[Event] = field(default=None, compare=False, repr=False)


@dataclass
class Discussion:
    date: Optional[str] = None
    topic: Optional[str] = None
    pages: Optional[str] = None


@dataclass
class BookClub:
    local_id: Optional[str] = None
    name: Optional[str] = None
    book_event_id: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None
    discussions: list[Discussion] = field(default_factory=list)
    extra_tags: ExtraTags = field(default_factory=dict)
    source: Optional[Event] = field(default=None, compare=False, repr=False)


# ---------------------------------------------------------------------------
# Zaps
# ---------------------------------------------------------------------------
@dataclass
class ZapRequest:
    """Zap request (encode only); payment itself happens elsewhere."""

    recipient_pubkey: Optional[str] = None
    amount: Optional[Union[int, str]] = None
    event_id: Optional[str] = None
    relays: Optional[list[str]] = None
    lnurl: Optional[str] = None
    comment: Optional[str] = None


@dataclass
class ZapReceipt:
    amount_sats: Optional[int] = None
    zapper_pubkey: Optional[str] = None
    event_id: Optional[str] = None
    extra_tags: ExtraTags = field(default_factory=dict)
    source: Optional[Event] = field(default=None, compare=False, repr=False)


@dataclass
class ZapStats:
    total_sats: int = 0
    receipt_count: int = 0
    unique_zappers: int = 0


@dataclass
class RawEvent:
    """Event of a kind this client does not model."""

    event: Event


DecodedEntity = Union[Book, Bookshelf, Review, BookClub, ZapReceipt]
EncodableEntity = Union[Book, Bookshelf, Review, BookClub, ZapRequest]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
@dataclass
class EventFilter:
    """Subset of events an event source should return.

    ``tag_filters`` maps a tag key (``"genre"``, ``"e"`` ...) to the values
    allowed at position 1 of that tag.
    """

    kinds: Optional[set[int]] = None
    authors: Optional[set[str]] = None
    ids: Optional[set[str]] = None
    tag_filters: dict[str, set[str]] = field(default_factory=dict)
    limit: Optional[int] = None

    def matches(self, event: Event) -> bool:
        if self.kinds is not None and event.kind not in self.kinds:
            return False
        if self.authors is not None and event.pubkey not in self.authors:
            return False
        if self.ids is not None and event.id not in self.ids:
            return False
        for key, allowed in self.tag_filters.items():
            if not any(len(tag) > 1 and tag[0] == key and tag[1] in allowed for tag in event.tags):
                return False
        return True
