"""SSE endpoint relaying committed hub notifications (session started / ended)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse

from handcricket.core.event_bus import EventBus, Subscription

router = APIRouter(prefix="/api/events", tags=["events"])
logger = logging.getLogger(__name__)

HEARTBEAT_SECONDS = 15
MAX_STREAMS = 100

_stream_slots = asyncio.Semaphore(MAX_STREAMS)
_SSE_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


def _bus(request: Request) -> EventBus:
    return request.app.state.event_bus


async def _relay(request: Request, subscription: Subscription) -> AsyncIterator[str]:
    async with _stream_slots, subscription:
        logger.debug("sse_opened filter=%s", subscription.event_type)
        yield ": connected\n\n"
        while not await request.is_disconnected():
            event = await subscription.get(timeout=HEARTBEAT_SECONDS)
            yield event.to_sse() if event is not None else ": heartbeat\n\n"
    logger.debug("sse_closed filter=%s", subscription.event_type)


@router.get("/stream")
async def sse_stream(request: Request, event_type: str | None = None) -> StreamingResponse:
    """Stream ``hub.game_started`` / ``hub.game_ended`` events; ``event_type`` narrows to one.

    400 for an unknown event type, 429 once every stream slot is taken.
    """
    try:
        subscription = _bus(request).subscribe(event_type)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if _stream_slots.locked():
        raise HTTPException(status_code=429, detail=f"At most {MAX_STREAMS} event streams.")
    return StreamingResponse(
        _relay(request, subscription), media_type="text/event-stream", headers=_SSE_HEADERS
    )


@router.get("/health")
async def events_health(request: Request) -> dict:
    return {"status": "ok", "subscribers": _bus(request).subscriber_count}
