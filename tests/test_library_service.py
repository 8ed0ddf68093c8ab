"""Tests for LibraryService."""

import hashlib

import pytest

from shelfstr.domain.entities import Book, Bookshelf, Review, ShelfEntry, ZapStats
from shelfstr.domain.exceptions import ValidationError
from shelfstr.infrastructure.database.repository import EventRepository
from shelfstr.services.library_service import LibraryService

from conftest import ALICE, BOB, make_event


@pytest.fixture
def service(memory_repository, encoder, decoder):
    return LibraryService(memory_repository, encoder, decoder, query_limit=50)


@pytest.mark.asyncio
async def test_publish_signs_canonical_payload_and_stores(service, signer, memory_repository):
    event = await service.publish(Book(local_id="dune", title="Dune"), signer)

    unsigned = signer.signed[0]
    assert unsigned.pubkey == ALICE
    assert event.id == hashlib.sha256(unsigned.serialize().encode("utf-8")).hexdigest()
    assert event.pubkey == ALICE
    assert event.tags == [["d", "dune"], ["title", "Dune"]]
    assert event.sig == "f" * 128
    assert await memory_repository.get_by_id(event.id) == event


@pytest.mark.asyncio
async def test_publish_invalid_entity_never_reaches_signer(service, signer, memory_repository):
    with pytest.raises(ValidationError):
        await service.publish(Review(book_event_id="e1"), signer)
    assert signer.signed == []
    assert memory_repository.events == {}


@pytest.mark.asyncio
async def test_fetch_books_by_genre_skips_other_kinds(service):
    await service.ingest([
        make_event(30051, [["d", "1"], ["title", "Dune"], ["genre", "science fiction"]]),
        make_event(30051, [["d", "2"], ["title", "Emma"], ["genre", "romance"]]),
        make_event(1, [["genre", "science fiction"]]),
    ])

    books = await service.fetch_books(tag_filters={"genre": {"science fiction"}})
    assert [b.title for b in books] == ["Dune"]
    assert len(await service.fetch_books()) == 2


@pytest.mark.asyncio
async def test_fetch_user_bookshelves(service):
    await service.ingest([
        make_event(30052, [["d", "s1"], ["book", "e1", "read"]], pubkey=ALICE),
        make_event(30052, [["d", "s2"]], pubkey=BOB),
    ])

    shelves = await service.fetch_user_bookshelves(ALICE)
    assert len(shelves) == 1
    assert isinstance(shelves[0], Bookshelf)
    assert shelves[0].entries == [ShelfEntry(book_event_id="e1", status="read")]


@pytest.mark.asyncio
async def test_fetch_book_reviews_and_clubs(service):
    book = make_event(30051, [["d", "dune"], ["title", "Dune"]])
    await service.ingest([
        book,
        make_event(30053, [["e", book.id], ["rating", "5"]], pubkey=BOB),
        make_event(30053, [["e", "other"], ["rating", "1"]], pubkey=BOB),
        make_event(30055, [["d", "club"], ["e", book.id]]),
    ])

    reviews = await service.fetch_book_reviews(book.id)
    assert [r.rating for r in reviews] == [5]
    clubs = await service.fetch_book_clubs(book.id)
    assert [c.local_id for c in clubs] == ["club"]
    assert await service.fetch_book_reviews("no-such-book") == []


@pytest.mark.asyncio
async def test_get_zap_stats(service):
    review = make_event(30053, [["e", "book"], ["rating", "4"]])
    await service.ingest([
        review,
        make_event(9735, [["e", review.id], ["amount", "1000"]], pubkey="A"),
        make_event(9735, [["e", review.id]], pubkey="A"),
        make_event(9735, [["e", review.id], ["amount", "500"]], pubkey="B"),
        make_event(9735, [["e", "elsewhere"], ["amount", "7"]], pubkey="C"),
    ])

    assert await service.get_zap_stats(review.id) == ZapStats(1500, 3, 2)


@pytest.mark.asyncio
async def test_ingest_counts_new_events_only(service):
    event = make_event(30053, [["e", "x"], ["rating", "3"]])
    assert await service.ingest([event, event]) == 1


@pytest.mark.asyncio
async def test_publish_replaces_shelf_in_database(db_session, encoder, decoder, signer):
    service = LibraryService(EventRepository(db_session), encoder, decoder)
    await service.publish(Bookshelf(local_id="s", name="Old"), signer)
    encoder.clock = lambda: 1700000100
    await service.publish(Bookshelf(local_id="s", name="New"), signer)

    shelves = await service.fetch_user_bookshelves(ALICE)
    assert [s.name for s in shelves] == ["New"]
