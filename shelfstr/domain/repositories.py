"""Repository and collaborator interfaces (ports) for dependency inversion."""

from abc import ABC, abstractmethod
from typing import Optional

from shelfstr.domain.entities import Event, EventFilter, EventSignature, UnsignedEvent


class IEventRepository(ABC):
    """Local store of signed events, queried with an ``EventFilter``."""

    @abstractmethod
    async def save(self, event: Event) -> bool:
        """Store a signed event.

        Returns ``False`` when the event is a duplicate or is superseded by a
        newer replaceable event already held.
        """
        pass

    @abstractmethod
    async def get_by_id(self, event_id: str) -> Optional[Event]:
        pass

    @abstractmethod
    async def fetch(self, event_filter: EventFilter) -> list[Event]:
        """Return matching events, newest first."""
        pass


class ISigner(ABC):
    """Produces the event id and signature; keys never enter this package."""

    @abstractmethod
    async def get_public_key(self) -> str:
        pass

    @abstractmethod
    async def sign(self, unsigned: UnsignedEvent) -> EventSignature:
        pass
