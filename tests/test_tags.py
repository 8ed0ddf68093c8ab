"""Tests for the tag-level codec primitives."""

import pytest

from shelfstr.codec.tags import (
    TagReader,
    compound,
    multi,
    parse_int,
    position,
    repeated,
    single,
)


class TestEncodingPrimitives:

    def test_single_omits_absent_and_empty(self):
        assert single("isbn", "978") == [["isbn", "978"]]
        assert single("isbn", None) == []
        assert single("isbn", "") == []

    def test_multi_keeps_order_in_one_tag(self):
        assert multi("authors", ["Terry Pratchett", "Neil Gaiman"]) == [
            ["authors", "Terry Pratchett", "Neil Gaiman"]
        ]
        assert multi("authors", []) == []
        assert multi("authors", ["", None]) == []

    def test_repeated_emits_one_tag_per_distinct_value(self):
        assert repeated("genre", ["scifi", "classic", "scifi", ""]) == [
            ["genre", "scifi"],
            ["genre", "classic"],
        ]

    def test_compound_truncates_trailing_absent_fields(self):
        assert compound("book", "abc", "read", None, None) == ["book", "abc", "read"]
        assert compound("book", "abc", "reading", "50%") == ["book", "abc", "reading", "50%"]

    def test_compound_keeps_position_of_interior_gaps(self):
        assert compound("book", "abc", "read", None, "2023-05-15") == [
            "book", "abc", "read", "", "2023-05-15"
        ]


class TestParseInt:

    @pytest.mark.parametrize("raw, expected", [
        ("1000", 1000),
        (" 42 ", 42),
        ("-3", -3),
        (7, 7),
        ("12abc", None),
        ("1.5", None),
        ("", None),
        (None, None),
        ("NaN", None),
        ("1_000", None),
        (True, None),
        ("\u0665", None),
        ("\uff11\uff12", None),
        ("9" * 5000, None),
    ])
    def test_parse_int(self, raw, expected):
        assert parse_int(raw) == expected


class TestTagReader:

    def test_position_treats_missing_and_empty_as_absent(self):
        assert position(["x", ""], 1) is None
        assert position(["x"], 3) is None
        assert position(["x", "y"], 1) == "y"

    def test_last_tag_wins_for_values(self):
        reader = TagReader([["title", "First"], ["title", "Second"]])
        assert reader.value("title") == "Second"
        assert reader.first_value("title") == "First"

    def test_ignores_empty_tags(self):
        reader = TagReader([[], ["title", "Dune"]])
        assert reader.value("title") == "Dune"

    def test_short_tag_has_no_value(self):
        reader = TagReader([["title"]])
        assert "title" in reader
        assert reader.value("title") is None

    def test_collect_preserves_first_seen_order(self):
        reader = TagReader([["genre", "scifi"], ["d", "x"], ["genre", "classic"], ["genre", "scifi"]])
        assert reader.collect("genre") == ["scifi", "classic"]
        assert TagReader([]).collect("genre") is None

    def test_extras_exclude_known_keys(self):
        reader = TagReader([["d", "x"], ["custom", "x", "y"], ["custom", "z"]])
        assert reader.extras(["d"]) == {"custom": [["x", "y"], ["z"]]}

    def test_reader_does_not_alias_input(self):
        tags = [["custom", "x"]]
        extras = TagReader(tags).extras([])
        extras["custom"][0].append("mutated")
        assert tags == [["custom", "x"]]
