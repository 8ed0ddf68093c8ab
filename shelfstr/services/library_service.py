"""Library service: publishing and querying reading-domain events."""

import logging
from collections.abc import Iterable
from typing import Optional

from shelfstr.codec import EventDecoder, EventEncoder, aggregate
from shelfstr.domain.entities import (
    Book,
    BookClub,
    Bookshelf,
    EncodableEntity,
    Event,
    EventFilter,
    EventKind,
    Review,
    ZapStats,
)
from shelfstr.domain.repositories import IEventRepository, ISigner
from shelfstr.domain.services import ILibraryService

logger = logging.getLogger(__name__)


class LibraryService(ILibraryService):
    """Ties the codec to the local event store.

    The store may hold events of any kind and from any publisher; everything
    read back goes through the tolerant decoder, so a malformed event degrades
    to missing fields instead of failing the query.
    """

    def __init__(
        self,
        event_repository: IEventRepository,
        encoder: EventEncoder,
        decoder: EventDecoder,
        query_limit: int = 500,
    ):
        self.event_repository = event_repository
        self.encoder = encoder
        self.decoder = decoder
        self.query_limit = query_limit

    async def publish(self, entity: EncodableEntity, signer: ISigner) -> Event:
        """Encode, sign and store an entity.

        ``ValidationError`` from the encoder propagates before the signer is
        ever called.
        """
        pubkey = await signer.get_public_key()
        unsigned = self.encoder.encode(entity, pubkey=pubkey)
        signature = await signer.sign(unsigned)
        event = Event.from_unsigned(unsigned, signature)
        stored = await self.event_repository.save(event)
        logger.info(f"Published kind {event.kind} event {event.id} (stored={stored})")
        return event

    async def ingest(self, events: Iterable[Event]) -> int:
        stored = 0
        for event in events:
            if await self.event_repository.save(event):
                stored += 1
        logger.info("Ingested %d new events", stored)
        return stored

    async def fetch_books(
        self,
        tag_filters: Optional[dict[str, set[str]]] = None,
        authors: Optional[set[str]] = None,
    ) -> list[Book]:
        return await self._fetch(
            EventFilter(kinds={EventKind.BOOK}, authors=authors, tag_filters=tag_filters or {})
        )

    async def fetch_user_bookshelves(self, pubkey: str) -> list[Bookshelf]:
        return await self._fetch(EventFilter(kinds={EventKind.BOOKSHELF}, authors={pubkey}))

    async def fetch_book_reviews(self, book_event_id: str) -> list[Review]:
        return await self._fetch(
            EventFilter(kinds={EventKind.REVIEW}, tag_filters={"e": {book_event_id}})
        )

    async def fetch_book_clubs(self, book_event_id: Optional[str] = None) -> list[BookClub]:
        tag_filters = {"e": {book_event_id}} if book_event_id else {}
        return await self._fetch(EventFilter(kinds={EventKind.BOOK_CLUB}, tag_filters=tag_filters))

    async def get_zap_stats(self, event_id: str) -> ZapStats:
        receipts = await self.event_repository.fetch(
            EventFilter(kinds={EventKind.ZAP_RECEIPT}, tag_filters={"e": {event_id}})
        )
        return aggregate(receipts)

    async def _fetch(self, event_filter: EventFilter) -> list:
        if event_filter.limit is None:
            event_filter.limit = self.query_limit
        events = await self.event_repository.fetch(event_filter)
        return self.decoder.decode_many(events)
