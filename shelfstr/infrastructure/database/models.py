"""SQLAlchemy database models."""

from sqlalchemy import JSON, BigInteger, Column, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class EventModel(Base):
    __tablename__ = "events"

    id = Column(String(64), primary_key=True)
    pubkey = Column(String(64), nullable=False, index=True)
    created_at = Column(BigInteger, nullable=False, index=True)
    kind = Column(Integer, nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)
    content = Column(Text, nullable=False, default="")
    sig = Column(String(128), nullable=False, default="")
    # "d" tag value of addressable events; empty for every other kind
    d_tag = Column(String(255), nullable=False, default="", server_default="")

    __table_args__ = (
        Index("ix_events_kind_pubkey_d_tag", "kind", "pubkey", "d_tag"),
    )
