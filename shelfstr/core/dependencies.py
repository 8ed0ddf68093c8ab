"""Dependency injection container."""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shelfstr.codec import EventDecoder, EventEncoder
from shelfstr.core.config import settings
from shelfstr.domain.repositories import IEventRepository
from shelfstr.domain.services import ILibraryService
from shelfstr.infrastructure.database.connection import get_db
from shelfstr.infrastructure.database.repository import EventRepository
from shelfstr.services.library_service import LibraryService


# ---------------------------------------------------------------------------
# Codec providers
# ---------------------------------------------------------------------------
@lru_cache()
def get_encoder() -> EventEncoder:
    return EventEncoder(default_relays=settings.default_relays)


@lru_cache()
def get_decoder() -> EventDecoder:
    return EventDecoder()


# ---------------------------------------------------------------------------
# Repository providers
# ---------------------------------------------------------------------------
async def get_event_repository(session: AsyncSession = Depends(get_db)) -> IEventRepository:
    return EventRepository(session)


# ---------------------------------------------------------------------------
# Service providers
# ---------------------------------------------------------------------------
async def get_library_service(
    event_repository: IEventRepository = Depends(get_event_repository),
    encoder: EventEncoder = Depends(get_encoder),
    decoder: EventDecoder = Depends(get_decoder),
) -> ILibraryService:
    return LibraryService(
        event_repository=event_repository,
        encoder=encoder,
        decoder=decoder,
        query_limit=settings.query_limit,
    )
