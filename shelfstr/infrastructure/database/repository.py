"""Repository implementations."""

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shelfstr.domain.entities import Event, EventFilter
from shelfstr.domain.repositories import IEventRepository
from shelfstr.infrastructure.database.models import EventModel

logger = logging.getLogger(__name__)


def is_replaceable(kind: int) -> bool:
    """Kinds where only the newest event per (kind, pubkey) is kept."""
    return kind in (0, 3) or 10000 <= kind < 20000


def is_addressable(kind: int) -> bool:
    """Kinds where only the newest event per (kind, pubkey, d) is kept."""
    return 30000 <= kind < 40000


def supersedes(new: Event, old: EventModel) -> bool:
    """Newer ``created_at`` wins; on a tie the lower id is kept."""
    if new.created_at != old.created_at:
        return new.created_at > old.created_at
    return new.id < old.id


# ---------------------------------------------------------------------------
# Event Repository
# ---------------------------------------------------------------------------
class EventRepository(IEventRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, event: Event) -> bool:
        if await self.session.get(EventModel, event.id) is not None:
            return False

        d_tag = (event.first_tag_value("d") or "") if is_addressable(event.kind) else ""
        if is_replaceable(event.kind) or is_addressable(event.kind):
            result = await self.session.execute(
                select(EventModel).where(
                    EventModel.kind == event.kind,
                    EventModel.pubkey == event.pubkey,
                    EventModel.d_tag == d_tag,
                )
            )
            current = result.scalars().all()
            if any(not supersedes(event, old) for old in current):
                logger.info("Event %s superseded by a stored version, not kept", event.id)
                return False
            if current:
                await self.session.execute(
                    delete(EventModel).where(EventModel.id.in_([old.id for old in current]))
                )

        self.session.add(
            EventModel(
                id=event.id,
                pubkey=event.pubkey,
                created_at=event.created_at,
                kind=event.kind,
                tags=[list(tag) for tag in event.tags],
                content=event.content,
                sig=event.sig,
                d_tag=d_tag,
            )
        )
        await self.session.commit()
        return True

    async def get_by_id(self, event_id: str) -> Optional[Event]:
        db_event = await self.session.get(EventModel, event_id)
        return self._to_entity(db_event) if db_event else None

    async def fetch(self, event_filter: EventFilter) -> list[Event]:
        stmt = select(EventModel)
        if event_filter.kinds is not None:
            stmt = stmt.where(EventModel.kind.in_([int(k) for k in event_filter.kinds]))
        if event_filter.authors is not None:
            stmt = stmt.where(EventModel.pubkey.in_(list(event_filter.authors)))
        if event_filter.ids is not None:
            stmt = stmt.where(EventModel.id.in_(list(event_filter.ids)))
        stmt = stmt.order_by(EventModel.created_at.desc(), EventModel.id)
        # Tag filters run in Python, so the limit can only go to SQL without them.
        if event_filter.limit is not None and not event_filter.tag_filters:
            stmt = stmt.limit(event_filter.limit)

        result = await self.session.execute(stmt)
        events = [self._to_entity(m) for m in result.scalars().all()]
        if event_filter.tag_filters:
            events = [e for e in events if event_filter.matches(e)]
            if event_filter.limit is not None:
                events = events[: event_filter.limit]
        return events

    @staticmethod
    def _to_entity(model: EventModel) -> Event:
        return Event(
            id=model.id,
            pubkey=model.pubkey,
            created_at=model.created_at,
            kind=model.kind,
            tags=[list(tag) for tag in model.tags or []],
            content=model.content or "",
            sig=model.sig or "",
        )
