"""Tag-level encoding primitives shared by the encoder and decoder.

A tag is a list of strings whose first element is the key. Absent and empty
values are interchangeable on the wire: they are never written, and an empty
value read back is reported as absent.
"""

import re
from collections.abc import Iterable, Sequence
from typing import Optional

from shelfstr.domain.entities import ExtraTags, Tag

_INT_RE = re.compile(r"^\s*[+-]?[0-9]+\s*$")

# Tag keys each kind models; any other key is carried in ``extra_tags``.
BOOK_KEYS = ("d", "title", "authors", "isbn", "published", "publisher", "cover", "genre", "summary")
BOOKSHELF_KEYS = ("d", "name", "description", "book")
REVIEW_KEYS = ("e", "rating", "read", "subject")
BOOK_CLUB_KEYS = ("d", "name", "e", "start", "end", "discussion")
ZAP_REQUEST_KEYS = ("p", "e", "relays", "amount", "lnurl")
ZAP_RECEIPT_KEYS = ("amount", "e")


def present(value) -> Optional[str]:
    """Return ``value`` unless it is absent or the empty string."""
    if value is None or value == "":
        return None
    return value


def parse_int(value) -> Optional[int]:
    """Strict base-10 parse; anything else is ``None`` rather than zero."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str) or not _INT_RE.match(value):
        return None
    try:
        return int(value)
    except ValueError:
        # Exceeds the interpreter's int conversion digit limit.
        return None


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------
def single(key: str, value: Optional[str]) -> list[Tag]:
    """``[key, value]``, or nothing when the value is absent or empty."""
    value = present(value)
    return [[key, str(value)]] if value is not None else []


def multi(key: str, values: Optional[Iterable[str]]) -> list[Tag]:
    """``[key, v1, v2, ...]`` in order; empty values are dropped."""
    kept = [v for v in values or () if present(v) is not None]
    return [[key, *map(str, kept)]] if kept else []


def repeated(key: str, values: Optional[Iterable[str]]) -> list[Tag]:
    """One ``[key, value]`` tag per distinct value, first occurrence first."""
    return [[key, value] for value in unique(values)]


def compound(key: str, *fields: Optional[str]) -> Tag:
    """``[key, f1, f2, ...]`` truncated after the last present field.

    Interior gaps keep their position as ``""`` so later fields are not
    shifted into the wrong slot.
    """
    values = [present(f) for f in fields]
    while values and values[-1] is None:
        values.pop()
    return [key, *("" if v is None else str(v) for v in values)]


def unique(values: Optional[Iterable[str]]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values or ():
        if present(value) is not None:
            seen.setdefault(str(value), None)
    return list(seen)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------
def position(tag: Sequence[str], index: int) -> Optional[str]:
    """Value at ``index``; missing and empty positions are both ``None``."""
    if index >= len(tag):
        return None
    return present(tag[index])


class TagReader:
    """Index over an event's tag list.

    Tags are walked once, in order. ``value``/``args`` give the last tag seen
    for a key, ``all`` every tag for a key in order, ``first`` the first.
    """

    def __init__(self, tags: Iterable[Sequence[str]]):
        self._by_key: dict[str, list[list[str]]] = {}
        for tag in tags or ():
            if not tag or not isinstance(tag[0], str):
                continue
            self._by_key.setdefault(tag[0], []).append(list(tag[1:]))

    def __contains__(self, key: str) -> bool:
        return key in self._by_key

    def all(self, key: str) -> list[list[str]]:
        return [list(args) for args in self._by_key.get(key, [])]

    def args(self, key: str) -> Optional[list[str]]:
        tags = self._by_key.get(key)
        return list(tags[-1]) if tags else None

    def first(self, key: str) -> Optional[list[str]]:
        tags = self._by_key.get(key)
        return list(tags[0]) if tags else None

    def value(self, key: str) -> Optional[str]:
        args = self.args(key)
        return position(args, 0) if args is not None else None

    def first_value(self, key: str) -> Optional[str]:
        args = self.first(key)
        return position(args, 0) if args is not None else None

    def values(self, key: str) -> Optional[list[str]]:
        """Non-empty arguments of the last ``key`` tag, or ``None``."""
        args = self.args(key)
        kept = [v for v in args or () if present(v) is not None]
        return kept or None

    def collect(self, key: str) -> Optional[list[str]]:
        """Position-1 values of every ``key`` tag, de-duplicated in order."""
        kept = unique(position(args, 0) for args in self._by_key.get(key, []))
        return kept or None

    def extras(self, known: Iterable[str]) -> ExtraTags:
        known = set(known)
        return {key: self.all(key) for key in self._by_key if key not in known}
