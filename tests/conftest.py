"""Pytest fixtures shared by the test suite."""

import hashlib
import itertools
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shelfstr.codec import EventDecoder, EventEncoder
from shelfstr.domain.entities import Event, EventFilter, EventSignature, UnsignedEvent
from shelfstr.domain.repositories import IEventRepository, ISigner
from shelfstr.infrastructure.database.models import Base

FIXED_NOW = 1700000000.75
ALICE = "a" * 64
BOB = "b" * 64

_ids = itertools.count(1)


def make_event(kind: int, tags=None, content: str = "", pubkey: str = ALICE,
               created_at: int = 1700000000, event_id: Optional[str] = None) -> Event:
    return Event(
        id=event_id or f"{next(_ids):064x}",
        pubkey=pubkey,
        created_at=created_at,
        kind=kind,
        tags=tags or [],
        content=content,
        sig="0" * 128,
    )


class FakeSigner(ISigner):
    """Hashes the canonical payload; the signature is a placeholder."""

    def __init__(self, pubkey: str = ALICE):
        self.pubkey = pubkey
        self.signed: list[UnsignedEvent] = []

    async def get_public_key(self) -> str:
        return self.pubkey

    async def sign(self, unsigned: UnsignedEvent) -> EventSignature:
        self.signed.append(unsigned)
        event_id = hashlib.sha256(unsigned.serialize().encode("utf-8")).hexdigest()
        return EventSignature(id=event_id, sig="f" * 128)


class InMemoryEventRepository(IEventRepository):
    """Keeps every event; no replacement rules."""

    def __init__(self, events=None):
        self.events: dict[str, Event] = {}
        for event in events or []:
            self.events[event.id] = event

    async def save(self, event: Event) -> bool:
        if event.id in self.events:
            return False
        self.events[event.id] = event
        return True

    async def get_by_id(self, event_id: str) -> Optional[Event]:
        return self.events.get(event_id)

    async def fetch(self, event_filter: EventFilter) -> list[Event]:
        found = [e for e in self.events.values() if event_filter.matches(e)]
        found.sort(key=lambda e: e.created_at, reverse=True)
        return found[: event_filter.limit] if event_filter.limit is not None else found


@pytest.fixture
def encoder():
    return EventEncoder(clock=lambda: FIXED_NOW, default_relays=["wss://relay.example"])


@pytest.fixture
def decoder():
    return EventDecoder()


@pytest.fixture
def signer():
    return FakeSigner()


@pytest.fixture
def memory_repository():
    return InMemoryEventRepository()


@pytest_asyncio.fixture
async def db_session():
    """Real SQLAlchemy session on an in-memory SQLite database."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
    await engine.dispose()
