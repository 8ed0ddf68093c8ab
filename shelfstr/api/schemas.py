"""Pydantic schemas for API requests and responses."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from shelfstr.domain import entities


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Event envelope
# ---------------------------------------------------------------------------
class EventSchema(ORMModel):
    """Wire-format event. Only ``kind`` is mandatory for decoding."""

    id: str = ""
    pubkey: str = ""
    created_at: int = 0
    kind: int
    tags: list[list[str]] = []
    content: str = ""
    sig: str = ""

    def to_entity(self) -> entities.Event:
        return entities.Event(**self.model_dump())


class SignedEventSchema(EventSchema):
    id: str = Field(..., min_length=1)
    pubkey: str = Field(..., min_length=1)
    created_at: int = Field(..., ge=0)
    sig: str = Field(..., min_length=1)


class UnsignedEventResponse(ORMModel):
    pubkey: Optional[str] = None
    created_at: int
    kind: int
    tags: list[list[str]]
    content: str
    serialized: Optional[str] = None


# ---------------------------------------------------------------------------
# Reading domain
# ---------------------------------------------------------------------------
class BookSchema(ORMModel):
    type: Literal["book"] = "book"
    local_id: Optional[str] = None
    title: Optional[str] = None
    authors: Optional[list[str]] = None
    isbn: Optional[str] = None
    publish_date: Optional[str] = None
    publisher: Optional[str] = None
    cover_url: Optional[str] = None
    genres: Optional[list[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    extra_tags: dict[str, list[list[str]]] = {}

    def to_entity(self) -> entities.Book:
        return entities.Book(**self.model_dump(exclude={"type"}))


class ShelfEntrySchema(ORMModel):
    book_event_id: Optional[str] = None
    status: Optional[str] = None
    progress: Optional[str] = None
    completed_date: Optional[str] = None


class BookshelfSchema(ORMModel):
    type: Literal["bookshelf"] = "bookshelf"
    local_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    entries: list[ShelfEntrySchema] = []
    extra_tags: dict[str, list[list[str]]] = {}

    def to_entity(self) -> entities.Bookshelf:
        data = self.model_dump(exclude={"type", "entries"})
        return entities.Bookshelf(
            **data, entries=[entities.ShelfEntry(**e.model_dump()) for e in self.entries]
        )


class ReviewSchema(ORMModel):
    type: Literal["review"] = "review"
    book_event_id: Optional[str] = None
    rating: Optional[Union[int, str]] = None
    read_date: Optional[str] = None
    subject: Optional[str] = None
    content: Optional[str] = None
    extra_tags: dict[str, list[list[str]]] = {}

    def to_entity(self) -> entities.Review:
        return entities.Review(**self.model_dump(exclude={"type"}))


class DiscussionSchema(ORMModel):
    date: Optional[str] = None
    topic: Optional[str] = None
    pages: Optional[str] = None


class BookClubSchema(ORMModel):
    type: Literal["book_club"] = "book_club"
    local_id: Optional[str] = None
    name: Optional[str] = None
    book_event_id: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None
    discussions: list[DiscussionSchema] = []
    extra_tags: dict[str, list[list[str]]] = {}

    def to_entity(self) -> entities.BookClub:
        data = self.model_dump(exclude={"type", "discussions"})
        return entities.BookClub(
            **data, discussions=[entities.Discussion(**d.model_dump()) for d in self.discussions]
        )


# ---------------------------------------------------------------------------
# Zaps
# ---------------------------------------------------------------------------
class ZapRequestSchema(ORMModel):
    type: Literal["zap_request"] = "zap_request"
    recipient_pubkey: Optional[str] = None
    amount: Optional[Union[int, str]] = None
    event_id: Optional[str] = None
    relays: Optional[list[str]] = None
    lnurl: Optional[str] = None
    comment: Optional[str] = None

    def to_entity(self) -> entities.ZapRequest:
        return entities.ZapRequest(**self.model_dump(exclude={"type"}))


class ZapReceiptSchema(ORMModel):
    type: Literal["zap_receipt"] = "zap_receipt"
    amount_sats: Optional[int] = None
    zapper_pubkey: Optional[str] = None
    event_id: Optional[str] = None
    extra_tags: dict[str, list[list[str]]] = {}


class ZapStatsResponse(ORMModel):
    total_sats: int
    receipt_count: int
    unique_zappers: int


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------
EncodableSchema = Annotated[
    Union[BookSchema, BookshelfSchema, ReviewSchema, BookClubSchema, ZapRequestSchema],
    Field(discriminator="type"),
]
DecodedSchema = Annotated[
    Union[BookSchema, BookshelfSchema, ReviewSchema, BookClubSchema, ZapReceiptSchema],
    Field(discriminator="type"),
]


class EncodeRequest(BaseModel):
    pubkey: Optional[str] = None
    entity: EncodableSchema


class DecodedEventResponse(BaseModel):
    event_id: str
    pubkey: str
    created_at: int
    kind: int
    entity: DecodedSchema


class SkippedEvent(BaseModel):
    event_id: str
    kind: int
    reason: str


class BatchDecodeResponse(BaseModel):
    decoded: list[DecodedEventResponse]
    skipped: list[SkippedEvent]


class IngestResponse(BaseModel):
    received: int
    stored: int


_DECODED_SCHEMAS = {
    entities.Book: BookSchema,
    entities.Bookshelf: BookshelfSchema,
    entities.Review: ReviewSchema,
    entities.BookClub: BookClubSchema,
    entities.ZapReceipt: ZapReceiptSchema,
}


def decoded_response(entity: entities.DecodedEntity) -> DecodedEventResponse:
    """Wrap a decoded entity together with the envelope it came from."""
    source = entity.source
    return DecodedEventResponse(
        event_id=source.id,
        pubkey=source.pubkey,
        created_at=source.created_at,
        kind=source.kind,
        entity=_DECODED_SCHEMAS[type(entity)].model_validate(entity),
    )
