"""Tests for the event envelope and query filter."""

from shelfstr.domain.entities import (
    Book,
    Event,
    EventFilter,
    EventSignature,
    UnsignedEvent,
)

from conftest import ALICE, BOB, make_event


def test_wire_dict_round_trip():
    data = {
        "id": "1" * 64,
        "pubkey": ALICE,
        "created_at": 1700000000,
        "kind": 30051,
        "tags": [["d", "dune"], ["title", "Dune"]],
        "content": "Arrakis",
        "sig": "2" * 128,
    }
    event = Event.from_dict(data)
    assert event.first_tag_value("title") == "Dune"
    assert event.first_tag_value("isbn") is None
    assert event.to_dict() == data


def test_from_dict_tolerates_missing_optional_fields():
    event = Event.from_dict({"kind": 9735})
    assert event.tags == []
    assert event.content == ""


def test_from_unsigned_attaches_signature():
    unsigned = UnsignedEvent(kind=30053, created_at=5, tags=[["e", "x"]], content="c", pubkey=BOB)
    event = Event.from_unsigned(unsigned, EventSignature(id="abc", sig="def"))
    assert event == Event(id="abc", pubkey=BOB, created_at=5, kind=30053,
                          tags=[["e", "x"]], content="c", sig="def")
    assert event.tags is not unsigned.tags


def test_filter_matches():
    event = make_event(30051, [["genre", "scifi"], ["genre", "classic"]], pubkey=ALICE)
    assert EventFilter().matches(event)
    assert EventFilter(kinds={30051}, authors={ALICE}).matches(event)
    assert EventFilter(tag_filters={"genre": {"classic", "romance"}}).matches(event)
    assert not EventFilter(kinds={30052}).matches(event)
    assert not EventFilter(authors={BOB}).matches(event)
    assert not EventFilter(tag_filters={"genre": {"romance"}}).matches(event)
    assert not EventFilter(tag_filters={"genre": {"scifi"}, "e": {"x"}}).matches(event)


def test_book_validity():
    assert Book(local_id="x", title="T").is_valid()
    assert not Book(local_id="x").is_valid()
    assert not Book(local_id="", title="T").is_valid()
