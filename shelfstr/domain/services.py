"""Domain-level application service interfaces (ports).

The API layer depends on these abstract classes only. The concrete service
lives in ``shelfstr/services/`` and is wired up in
``shelfstr/core/dependencies.py``, so tests can swap it through
``app.dependency_overrides``.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Optional

from shelfstr.domain.entities import (
    Book,
    BookClub,
    Bookshelf,
    EncodableEntity,
    Event,
    Review,
    ZapStats,
)
from shelfstr.domain.repositories import ISigner


class ILibraryService(ABC):

    @abstractmethod
    async def publish(self, entity: EncodableEntity, signer: ISigner) -> Event:
        """Encode, sign and store an entity; returns the signed event."""
        pass

    @abstractmethod
    async def ingest(self, events: Iterable[Event]) -> int:
        """Store already-signed events; returns how many were kept."""
        pass

    @abstractmethod
    async def fetch_books(
        self,
        tag_filters: Optional[dict[str, set[str]]] = None,
        authors: Optional[set[str]] = None,
    ) -> list[Book]:
        pass

    @abstractmethod
    async def fetch_user_bookshelves(self, pubkey: str) -> list[Bookshelf]:
        pass

    @abstractmethod
    async def fetch_book_reviews(self, book_event_id: str) -> list[Review]:
        pass

    @abstractmethod
    async def fetch_book_clubs(self, book_event_id: Optional[str] = None) -> list[BookClub]:
        pass

    @abstractmethod
    async def get_zap_stats(self, event_id: str) -> ZapStats:
        pass
