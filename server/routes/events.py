"""
Event log SSE endpoint.
"""

from fastapi import APIRouter, Header, Query, Request

from eventlog import HubClosedError

from ..event_hub import get_event_hub
from ..streaming import EventLogResponse, EventStream, parse_last_event_id


# =============================================================================
# Constants
# =============================================================================

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}


router = APIRouter()


@router.get("/events")
async def stream_events(
    request: Request,
    last_event_id: str | None = Header(None),
    lastEventId: str | None = Query(None),
) -> EventLogResponse:
    """
    Stream OCPP request/response events via SSE.

    Reconnecting clients send the last id they saw, either as the
    Last-Event-ID header or as the lastEventId query parameter, and receive
    every retained event after it before live events.
    """
    hub = get_event_hub()
    if hub.closed:
        raise HubClosedError("Event hub is closed")

    settings = request.app.state.config.event_log
    stream = EventStream(
        hub,
        resume_from=parse_last_event_id(last_event_id, lastEventId),
        heartbeat_seconds=settings.heartbeat_seconds,
        retry_ms=settings.retry_ms,
        request=request,
    )
    return EventLogResponse(
        stream.events(),
        headers=SSE_HEADERS,
        send_timeout=settings.send_timeout_seconds,
    )
