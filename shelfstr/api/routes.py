"""Library API routes (event ingest, books, shelves, reviews, clubs, zaps)."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from shelfstr.api.schemas import (
    DecodedEventResponse,
    IngestResponse,
    SignedEventSchema,
    ZapStatsResponse,
    decoded_response,
)
from shelfstr.core.dependencies import get_library_service
from shelfstr.domain.services import ILibraryService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["library"])


@router.post("/events", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
async def ingest_events(
    events: list[SignedEventSchema],
    library_service: Annotated[ILibraryService, Depends(get_library_service)],
) -> IngestResponse:
    """Store signed events fetched from the network.

    Signatures are not verified here; that belongs to whatever fetched them.
    """
    stored = await library_service.ingest(e.to_entity() for e in events)
    return IngestResponse(received=len(events), stored=stored)


@router.get("/books", response_model=list[DecodedEventResponse])
async def list_books(
    library_service: Annotated[ILibraryService, Depends(get_library_service)],
    genre: Annotated[Optional[list[str]], Query()] = None,
    author: Annotated[Optional[list[str]], Query()] = None,
) -> list[DecodedEventResponse]:
    """List books, optionally restricted to genres and publishing pubkeys."""
    tag_filters = {"genre": set(genre)} if genre else None
    books = await library_service.fetch_books(
        tag_filters=tag_filters, authors=set(author) if author else None
    )
    return [decoded_response(b) for b in books]


@router.get("/books/{event_id}/reviews", response_model=list[DecodedEventResponse])
async def list_book_reviews(
    event_id: str,
    library_service: Annotated[ILibraryService, Depends(get_library_service)],
) -> list[DecodedEventResponse]:
    reviews = await library_service.fetch_book_reviews(event_id)
    return [decoded_response(r) for r in reviews]


@router.get("/books/{event_id}/clubs", response_model=list[DecodedEventResponse])
async def list_book_clubs(
    event_id: str,
    library_service: Annotated[ILibraryService, Depends(get_library_service)],
) -> list[DecodedEventResponse]:
    clubs = await library_service.fetch_book_clubs(event_id)
    return [decoded_response(c) for c in clubs]


@router.get("/users/{pubkey}/bookshelves", response_model=list[DecodedEventResponse])
async def list_user_bookshelves(
    pubkey: str,
    library_service: Annotated[ILibraryService, Depends(get_library_service)],
) -> list[DecodedEventResponse]:
    shelves = await library_service.fetch_user_bookshelves(pubkey)
    return [decoded_response(s) for s in shelves]


@router.get("/events/{event_id}/zaps", response_model=ZapStatsResponse)
async def get_event_zaps(
    event_id: str,
    library_service: Annotated[ILibraryService, Depends(get_library_service)],
) -> ZapStatsResponse:
    """Zap totals for a book, review or any other event."""
    stats = await library_service.get_zap_stats(event_id)
    return ZapStatsResponse.model_validate(stats)
