"""
Server-Sent Events streaming of the event log.

One EventStream serves one HTTP connection: it subscribes to the hub,
replays history after the client's last seen sequence, then forwards live
events until the client disconnects, the hub shuts down or the subscriber
is evicted for falling behind.
"""

import json
import logging
from typing import AsyncGenerator

from sse_starlette.sse import EventSourceResponse, SendTimeoutError, ServerSentEvent
from starlette.requests import Request
from starlette.types import Receive, Scope, Send

from config.defaults import DEFAULT_HEARTBEAT_SECONDS, DEFAULT_RETRY_MS
from eventlog import Event, EventHub, HubClosedError, SubscriberClosedError

logger = logging.getLogger(__name__)


def parse_last_event_id(*candidates: str | None) -> int | None:
    """
    Parse the client's reconnection cursor.

    The first non-empty candidate wins (header before query parameter).
    Anything that is not a non-negative integer is ignored, so the stream
    starts with live events only.
    """
    for raw in candidates:
        if raw is None or not raw.strip():
            continue
        try:
            value = int(raw.strip())
        except ValueError:
            logger.warning("Ignoring malformed last event id: %r", raw)
            return None
        if value < 0:
            logger.warning("Ignoring negative last event id: %d", value)
            return None
        return value
    return None


def format_event(event: Event) -> ServerSentEvent:
    """Encode one event as an SSE message; markers carry no id."""
    data = json.dumps(event.payload, separators=(",", ":"))
    if event.synthetic:
        return ServerSentEvent(data=data, event=event.name)
    return ServerSentEvent(data=data, event=event.name, id=str(event.sequence))


class EventStream:
    """Bridges one network connection to one hub subscriber."""

    def __init__(
        self,
        hub: EventHub,
        resume_from: int | None = None,
        heartbeat_seconds: float = DEFAULT_HEARTBEAT_SECONDS,
        retry_ms: int = DEFAULT_RETRY_MS,
        request: Request | None = None,
    ) -> None:
        self.hub = hub
        self.resume_from = resume_from
        self.heartbeat_seconds = heartbeat_seconds
        self.retry_ms = retry_ms
        self.request = request
        self.sent = 0

    async def events(self) -> AsyncGenerator[ServerSentEvent, None]:
        """Yield SSE messages until the connection or the subscriber ends."""
        try:
            subscriber = self.hub.subscribe(self.resume_from)
        except HubClosedError:
            logger.info("Event stream refused: hub closed")
            return

        try:
            yield ServerSentEvent(comment="connected", retry=self.retry_ms)

            while True:
                try:
                    event = await subscriber.next_event(timeout=self.heartbeat_seconds)
                except SubscriberClosedError:
                    logger.info("Event stream %s ended by hub (%d events sent)", subscriber.id, self.sent)
                    return

                if event is None:
                    if self.request is not None and await self.request.is_disconnected():
                        logger.info("Event stream %s: client went away", subscriber.id)
                        return
                    yield ServerSentEvent(comment="keep-alive")
                    continue

                yield format_event(event)
                self.sent += 1
        finally:
            self.hub.unsubscribe(subscriber)


class EventLogResponse(EventSourceResponse):
    """
    EventSourceResponse that treats a blocked write as a disconnect.

    sse-starlette raises SendTimeoutError (possibly inside an exception
    group from its task group) when a client stops reading for longer than
    ``send_timeout``. The client is simply gone, so log it and end the
    response. The event generator is closed either way so its subscriber
    is released.
    """

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        except SendTimeoutError:
            self._log_send_timeout(scope)
        except BaseExceptionGroup as group:
            _, rest = group.split(SendTimeoutError)
            if rest is not None:
                raise rest
            self._log_send_timeout(scope)
        finally:
            aclose = getattr(self.body_iterator, "aclose", None)
            if aclose is not None:
                await aclose()

    def _log_send_timeout(self, scope: Scope) -> None:
        client = scope.get("client") or ("-", 0)
        logger.info("Event stream to %s dropped: write blocked for %ss", client[0], self.send_timeout)
