"""Domain object -> unsigned event.

Tag order per kind is fixed: identifier first, then scalar tags in field
order, then repeatable tags, then compound tags.

    Book        d, title, authors, isbn, published, publisher, cover, summary, genre*
    Bookshelf   d, name, description, book*
    Review      e, rating, read, subject
    BookClub    d, name, e, start, end, discussion*
    ZapRequest  p, e, relays, amount, lnurl

Tags held in ``extra_tags`` are appended after these, unchanged. They may
not use a key the kind already models.
"""

import time
from collections.abc import Callable, Sequence
from typing import Optional

from shelfstr.codec.tags import (
    BOOK_CLUB_KEYS,
    BOOK_KEYS,
    BOOKSHELF_KEYS,
    REVIEW_KEYS,
    ZAP_REQUEST_KEYS,
    compound,
    multi,
    parse_int,
    present,
    repeated,
    single,
)
from shelfstr.domain.entities import (
    Book,
    BookClub,
    Bookshelf,
    EncodableEntity,
    EventKind,
    Review,
    ShelfStatus,
    Tag,
    UnsignedEvent,
    ZapRequest,
)
from shelfstr.domain.exceptions import ValidationError


def _require(value, field: str, entity: str) -> str:
    if present(value) is None:
        raise ValidationError(f"{entity}.{field} is required", field=field)
    if not isinstance(value, str):
        raise ValidationError(f"{entity}.{field} must be a string", field=field)
    return value


def _integer(value, field: str, entity: str) -> int:
    if present(value) is None:
        raise ValidationError(f"{entity}.{field} is required", field=field)
    number = parse_int(value)
    if number is None:
        raise ValidationError(
            f"{entity}.{field} must be a base-10 integer, got {value!r}", field=field
        )
    return number


class EventEncoder:
    """Builds unsigned events ready to be handed to a signer.

    ``clock`` returns the current unix time; it is the only source of
    non-determinism in the output.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        default_relays: Sequence[str] = (),
    ):
        self.clock = clock
        self.default_relays = list(default_relays)
        self._encoders = {
            Book: (EventKind.BOOK, self._book, BOOK_KEYS),
            Bookshelf: (EventKind.BOOKSHELF, self._bookshelf, BOOKSHELF_KEYS),
            Review: (EventKind.REVIEW, self._review, REVIEW_KEYS),
            BookClub: (EventKind.BOOK_CLUB, self._book_club, BOOK_CLUB_KEYS),
            ZapRequest: (EventKind.ZAP_REQUEST, self._zap_request, ZAP_REQUEST_KEYS),
        }

    def encode(self, entity: EncodableEntity, pubkey: Optional[str] = None) -> UnsignedEvent:
        try:
            kind, build, known = self._encoders[type(entity)]
        except KeyError:
            raise ValidationError(f"Cannot encode {type(entity).__name__}") from None
        tags, content = build(entity)
        for key, arg_lists in getattr(entity, "extra_tags", {}).items():
            if key in known:
                raise ValidationError(
                    f"extra_tags cannot carry modelled tag {key!r}", field="extra_tags"
                )
            tags += [[key, *map(str, args)] for args in arg_lists]
        return UnsignedEvent(
            kind=int(kind),
            created_at=int(self.clock()),
            tags=tags,
            content=content or "",
            pubkey=pubkey,
        )

    # ------------------------------------------------------------------
    # Per-kind tag builders
    # ------------------------------------------------------------------
    @staticmethod
    def _book(book: Book) -> tuple[list[Tag], Optional[str]]:
        tags = [["d", _require(book.local_id, "local_id", "Book")]]
        tags += [["title", _require(book.title, "title", "Book")]]
        tags += multi("authors", book.authors)
        tags += single("isbn", book.isbn)
        tags += single("published", book.publish_date)
        tags += single("publisher", book.publisher)
        tags += single("cover", book.cover_url)
        tags += single("summary", book.summary)
        tags += repeated("genre", book.genres)
        return tags, book.description

    @staticmethod
    def _bookshelf(shelf: Bookshelf) -> tuple[list[Tag], Optional[str]]:
        tags = [["d", _require(shelf.local_id, "local_id", "Bookshelf")]]
        tags += single("name", shelf.name)
        tags += single("description", shelf.description)
        for entry in shelf.entries:
            event_id = _require(entry.book_event_id, "book_event_id", "ShelfEntry")
            status = entry.status.value if isinstance(entry.status, ShelfStatus) else entry.status
            tags.append(
                compound("book", event_id, status, entry.progress, entry.completed_date)
            )
        return tags, shelf.notes

    @staticmethod
    def _review(review: Review) -> tuple[list[Tag], Optional[str]]:
        tags = [["e", _require(review.book_event_id, "book_event_id", "Review")]]
        tags += [["rating", str(_integer(review.rating, "rating", "Review"))]]
        tags += single("read", review.read_date)
        tags += single("subject", review.subject)
        return tags, review.content

    @staticmethod
    def _book_club(club: BookClub) -> tuple[list[Tag], Optional[str]]:
        tags = [["d", _require(club.local_id, "local_id", "BookClub")]]
        tags += single("name", club.name)
        tags += single("e", club.book_event_id)
        tags += single("start", club.start_date)
        tags += single("end", club.end_date)
        for discussion in club.discussions:
            tags.append(compound("discussion", discussion.date, discussion.topic, discussion.pages))
        return tags, club.description

    def _zap_request(self, zap: ZapRequest) -> tuple[list[Tag], Optional[str]]:
        tags = [["p", _require(zap.recipient_pubkey, "recipient_pubkey", "ZapRequest")]]
        amount = _integer(zap.amount, "amount", "ZapRequest")
        if amount <= 0:
            raise ValidationError("ZapRequest.amount must be positive", field="amount")
        tags += single("e", zap.event_id)
        tags += multi("relays", zap.relays if zap.relays else self.default_relays)
        tags += [["amount", str(amount)]]
        tags += single("lnurl", zap.lnurl)
        return tags, zap.comment
