"""
Broadcast event log.

EventHub owns the ring buffer of recent events and the set of connected
subscribers. Publishing assigns the next sequence number, stores the event
and hands it to every live subscriber without ever waiting on one of them.
"""

import logging
import secrets
import threading
from collections.abc import Mapping
from typing import Any

from pydantic_core import to_jsonable_python

from .events import Event
from .exceptions import HubClosedError
from .ring_buffer import RingBuffer
from .subscriber import OverflowPolicy, Subscriber, SubscriberState

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_CAPACITY = 10_000
DEFAULT_MAX_QUEUE_SIZE = 1_000


class EventHub:
    """
    In-process EventBus with bounded history and replay.

    A single lock serializes publish, subscribe and unsubscribe, so every
    subscriber sees events in strictly increasing sequence order and the
    replay handed out by ``subscribe`` joins the live flow without a gap
    or a duplicate. Fan-out only performs non-blocking enqueues while the
    lock is held.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE,
        overflow_policy: OverflowPolicy = "evict",
    ) -> None:
        self._buffer = RingBuffer(capacity)
        self._max_queue_size = max_queue_size
        self._overflow_policy = overflow_policy
        self._lock = threading.Lock()
        self._subscribers: dict[str, Subscriber] = {}
        self._sequence = 0
        self._evicted = 0
        self._closed = False

    @property
    def capacity(self) -> int:
        return self._buffer.capacity

    @property
    def last_sequence(self) -> int:
        return self._sequence

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def retained(self) -> int:
        return len(self._buffer)

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribers(self) -> list[Subscriber]:
        with self._lock:
            return list(self._subscribers.values())

    # -------------------------------------------------------------------------
    # Publishing
    # -------------------------------------------------------------------------

    def publish(self, name: str, payload: dict[str, Any]) -> int:
        """
        Publish an event to all subscribers.

        Safe to call from any thread. Never blocks on, and never fails
        because of, a slow subscriber. The payload is converted to JSON-safe
        data here: objects without a JSON form are stored as their str()
        and a non-mapping payload is wrapped as ``{"value": payload}``.

        Returns:
            The sequence number assigned to the event
        """
        document = _jsonable_payload(name, payload)

        with self._lock:
            event = Event(sequence=self._sequence + 1, name=name, payload=document)
            self._buffer.append(event)
            self._sequence = event.sequence

            rejected = [
                subscriber
                for subscriber in self._subscribers.values()
                if not subscriber.offer(event)
            ]
            for subscriber in rejected:
                if subscriber.state in (SubscriberState.DRAINING, SubscriberState.CLOSED):
                    # Closed by its reader but not unsubscribed yet.
                    self._subscribers.pop(subscriber.id, None)
                else:
                    self._evict(subscriber)

        logger.debug("Published %s #%d to %d subscribers", name, event.sequence, len(self._subscribers))
        return event.sequence

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, resume_from: int | None = None) -> Subscriber:
        """
        Register a new subscriber.

        Args:
            resume_from: Last sequence the client has seen. When given, every
                retained event after it is queued before live events.

        Returns:
            The attached subscriber

        Raises:
            HubClosedError: If the hub has been shut down
        """
        subscriber = Subscriber(
            f"sub_{secrets.token_urlsafe(12)}",
            max_queue_size=self._max_queue_size,
            overflow_policy=self._overflow_policy,
        )

        with self._lock:
            if self._closed:
                raise HubClosedError("Event hub is closed")

            if resume_from is not None:
                self._replay(subscriber, resume_from)
            subscriber.attach()
            self._subscribers[subscriber.id] = subscriber

        logger.info(
            "Subscriber %s attached (resume_from=%s, replayed=%d, total=%d)",
            subscriber.id,
            resume_from,
            subscriber.queued,
            len(self._subscribers),
        )
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        """Remove a subscriber and release its queue. Idempotent."""
        with self._lock:
            removed = self._subscribers.pop(subscriber.id, None)
        subscriber.close()
        if removed is not None:
            logger.info(
                "Subscriber %s detached (last_delivered=%d, total=%d)",
                subscriber.id,
                subscriber.last_delivered,
                len(self._subscribers),
            )

    def close(self) -> None:
        """Shut the hub down and close every subscriber."""
        with self._lock:
            self._closed = True
            subscribers = list(self._subscribers.values())
            self._subscribers.clear()

        for subscriber in subscribers:
            subscriber.close()
        logger.info("Event hub closed (%d subscribers released)", len(subscribers))

    def stats(self) -> dict[str, Any]:
        """Snapshot of hub counters for health reporting."""
        with self._lock:
            return {
                "lastSequence": self._sequence,
                "retained": len(self._buffer),
                "capacity": self._buffer.capacity,
                "oldestSequence": self._buffer.min_sequence,
                "subscribers": len(self._subscribers),
                "evicted": self._evicted,
            }

    # -------------------------------------------------------------------------
    # Internals (callers hold self._lock)
    # -------------------------------------------------------------------------

    def _replay(self, subscriber: Subscriber, resume_from: int) -> None:
        if resume_from > self._sequence:
            # Sequence numbers are unique per hub lifetime, so this cursor
            # was handed out by a previous process.
            subscriber.mark_resync(
                "unknown-cursor",
                requested=resume_from,
                lastSequence=self._sequence,
            )
            return

        replay = self._buffer.since(resume_from)
        if replay.truncated:
            subscriber.mark_resync(
                "history-truncated",
                requested=resume_from,
                oldestSequence=self._buffer.min_sequence,
            )
        subscriber.seed(replay.events)

    def _evict(self, subscriber: Subscriber) -> None:
        self._subscribers.pop(subscriber.id, None)
        self._evicted += 1
        subscriber.drain()
        logger.warning(
            "Subscriber %s evicted: queue overflow (%d queued, limit %d)",
            subscriber.id,
            subscriber.queued,
            subscriber.max_queue_size,
        )


def _jsonable_payload(name: str, payload: Any) -> dict[str, Any]:
    document = to_jsonable_python(payload, fallback=str)
    if not isinstance(payload, Mapping):
        logger.warning("Event %s: payload is a %s, not a mapping", name, type(payload).__name__)
        return {"value": document}
    return document
