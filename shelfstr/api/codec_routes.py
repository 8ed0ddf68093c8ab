"""Codec API routes (encode, decode, zap statistics)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from shelfstr.api.schemas import (
    BatchDecodeResponse,
    DecodedEventResponse,
    EncodeRequest,
    EventSchema,
    SkippedEvent,
    UnsignedEventResponse,
    ZapStatsResponse,
    decoded_response,
)
from shelfstr.codec import EventDecoder, EventEncoder, aggregate
from shelfstr.core.dependencies import get_decoder, get_encoder
from shelfstr.domain.exceptions import UnsupportedKind, ValidationError

logger = logging.getLogger(__name__)
router = APIRouter(tags=["codec"])


@router.post("/codec/encode", response_model=UnsignedEventResponse)
async def encode_entity(
    request: EncodeRequest,
    encoder: Annotated[EventEncoder, Depends(get_encoder)],
) -> UnsignedEventResponse:
    """Build the unsigned event for an entity.

    ``serialized`` is only filled in when a pubkey is supplied, since the
    canonical payload the signer hashes includes it.
    """
    try:
        unsigned = encoder.encode(request.entity.to_entity(), pubkey=request.pubkey)
    except ValidationError as e:
        logger.warning(f"Rejected {request.entity.type} for encoding: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    return UnsignedEventResponse(
        **unsigned.to_dict(),
        serialized=unsigned.serialize() if unsigned.pubkey else None,
    )


@router.post("/codec/decode", response_model=DecodedEventResponse)
async def decode_event(
    event: EventSchema,
    decoder: Annotated[EventDecoder, Depends(get_decoder)],
) -> DecodedEventResponse:
    try:
        entity = decoder.decode(event.to_entity())
    except UnsupportedKind as e:
        raise HTTPException(status_code=400, detail=str(e))
    return decoded_response(entity)


@router.post("/codec/decode/batch", response_model=BatchDecodeResponse)
async def decode_batch(
    events: list[EventSchema],
    decoder: Annotated[EventDecoder, Depends(get_decoder)],
) -> BatchDecodeResponse:
    """Decode a mixed batch; unsupported events are listed, not fatal."""
    decoded, skipped = [], []
    for event in events:
        try:
            decoded.append(decoded_response(decoder.decode(event.to_entity())))
        except UnsupportedKind as e:
            skipped.append(SkippedEvent(event_id=event.id, kind=event.kind, reason=str(e)))
    return BatchDecodeResponse(decoded=decoded, skipped=skipped)


@router.post("/zaps/stats", response_model=ZapStatsResponse)
async def zap_stats(events: list[EventSchema]) -> ZapStatsResponse:
    return ZapStatsResponse.model_validate(aggregate(e.to_entity() for e in events))
