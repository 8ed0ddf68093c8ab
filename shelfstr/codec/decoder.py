"""Generic event -> domain object.

Decoding never fails on tag content: short tags, empty values, repeated
single-value tags (last one wins) and unparseable numbers all degrade to
absent fields. Only an unknown ``kind`` is reported, via ``UnsupportedKind``.
"""

import logging
from collections.abc import Iterable
from typing import Union

from shelfstr.codec.tags import (
    BOOK_CLUB_KEYS,
    BOOK_KEYS,
    BOOKSHELF_KEYS,
    REVIEW_KEYS,
    ZAP_RECEIPT_KEYS,
    TagReader,
    parse_int,
    position,
    present,
)
from shelfstr.domain.entities import (
    Book,
    BookClub,
    Bookshelf,
    DecodedEntity,
    Discussion,
    Event,
    EventKind,
    RawEvent,
    Review,
    ShelfEntry,
    ZapReceipt,
)
from shelfstr.domain.exceptions import UnsupportedKind

logger = logging.getLogger(__name__)


class EventDecoder:
    """Stateless decoder; one instance may be shared freely."""

    def __init__(self):
        self._decoders = {
            EventKind.BOOK: self._book,
            EventKind.BOOKSHELF: self._bookshelf,
            EventKind.REVIEW: self._review,
            EventKind.BOOK_CLUB: self._book_club,
            EventKind.ZAP_RECEIPT: self._zap_receipt,
        }

    def supports(self, kind: int) -> bool:
        return kind in self._decoders

    def decode(self, event: Event) -> DecodedEntity:
        decoder = self._decoders.get(event.kind)
        if decoder is None:
            raise UnsupportedKind(event.kind, event_id=event.id)
        return decoder(event, TagReader(event.tags))

    def decode_or_raw(self, event: Event) -> Union[DecodedEntity, RawEvent]:
        try:
            return self.decode(event)
        except UnsupportedKind:
            return RawEvent(event=event)

    def decode_many(self, events: Iterable[Event]) -> list[DecodedEntity]:
        """Decode a batch, skipping events whose kind has no decoder."""
        decoded = []
        for event in events:
            try:
                decoded.append(self.decode(event))
            except UnsupportedKind as exc:
                logger.debug("Skipping event %s: %s", event.id, exc)
        return decoded

    # ------------------------------------------------------------------
    # Per-kind readers
    # ------------------------------------------------------------------
    @staticmethod
    def _book(event: Event, tags: TagReader) -> Book:
        return Book(
            local_id=tags.value("d"),
            title=tags.value("title"),
            authors=tags.values("authors"),
            isbn=tags.value("isbn"),
            publish_date=tags.value("published"),
            publisher=tags.value("publisher"),
            cover_url=tags.value("cover"),
            genres=tags.collect("genre"),
            summary=tags.value("summary"),
            description=present(event.content),
            extra_tags=tags.extras(BOOK_KEYS),
            source=event,
        )

    @staticmethod
    def _bookshelf(event: Event, tags: TagReader) -> Bookshelf:
        entries = [
            ShelfEntry(
                book_event_id=position(args, 0),
                status=position(args, 1),
                progress=position(args, 2),
                completed_date=position(args, 3),
            )
            for args in tags.all("book")
        ]
        return Bookshelf(
            local_id=tags.value("d"),
            name=tags.value("name"),
            description=tags.value("description"),
            notes=present(event.content),
            entries=entries,
            extra_tags=tags.extras(BOOKSHELF_KEYS),
            source=event,
        )

    @staticmethod
    def _review(event: Event, tags: TagReader) -> Review:
        rating = tags.value("rating")
        parsed = parse_int(rating)
        if rating is not None and parsed is None:
            logger.debug("Event %s: ignoring non-numeric rating %r", event.id, rating)
        return Review(
            book_event_id=tags.value("e"),
            rating=parsed,
            read_date=tags.value("read"),
            subject=tags.value("subject"),
            content=present(event.content),
            extra_tags=tags.extras(REVIEW_KEYS),
            source=event,
        )

    @staticmethod
    def _book_club(event: Event, tags: TagReader) -> BookClub:
        discussions = [
            Discussion(date=position(args, 0), topic=position(args, 1), pages=position(args, 2))
            for args in tags.all("discussion")
        ]
        return BookClub(
            local_id=tags.value("d"),
            name=tags.value("name"),
            book_event_id=tags.value("e"),
            start_date=tags.value("start"),
            end_date=tags.value("end"),
            description=present(event.content),
            discussions=discussions,
            extra_tags=tags.extras(BOOK_CLUB_KEYS),
            source=event,
        )

    @staticmethod
    def _zap_receipt(event: Event, tags: TagReader) -> ZapReceipt:
        # Receipts read the first matching tag, unlike the last-wins scalars above.
        return ZapReceipt(
            amount_sats=parse_int(tags.first_value("amount")),
            zapper_pubkey=present(event.pubkey),
            event_id=tags.first_value("e"),
            extra_tags=tags.extras(ZAP_RECEIPT_KEYS),
            source=event,
        )
