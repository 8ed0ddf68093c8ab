"""Zap receipt aggregation."""

from collections.abc import Iterable

from shelfstr.codec.tags import TagReader, parse_int, present
from shelfstr.domain.entities import Event, EventKind, ZapStats


def aggregate(events: Iterable[Event]) -> ZapStats:
    """Fold zap receipts into totals.

    Non-receipt events are ignored. A receipt without a parseable ``amount``
    still counts towards ``receipt_count`` but adds nothing to ``total_sats``.
    Only the first ``amount`` tag of a receipt is read. A receipt with an
    empty pubkey counts as a receipt but not as a zapper.
    """
    total = 0
    count = 0
    zappers: set[str] = set()
    for event in events:
        if event.kind != EventKind.ZAP_RECEIPT:
            continue
        count += 1
        zapper = present(event.pubkey)
        if zapper is not None:
            zappers.add(zapper)
        amount = parse_int(TagReader(event.tags).first_value("amount"))
        if amount is not None:
            total += amount
    return ZapStats(total_sats=total, receipt_count=count, unique_zappers=len(zappers))
