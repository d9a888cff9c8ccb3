"""
Subscriber handle for one connected client.

The hub is the only writer (``seed``/``offer``/``drain``) and the streaming
endpoint is the only reader (``next_event``). Writers may run on any thread;
the reader always runs on the event loop the subscriber was created on.
"""

import asyncio
import logging
import threading
import time
from collections import deque
from enum import Enum
from typing import Iterable, Literal

from .events import Event
from .exceptions import SubscriberClosedError

logger = logging.getLogger(__name__)


OverflowPolicy = Literal["evict", "drop_oldest"]


class SubscriberState(str, Enum):
    CONNECTING = "connecting"
    STREAMING = "streaming"
    DRAINING = "draining"
    CLOSED = "closed"


_TRANSITIONS: dict[SubscriberState, frozenset[SubscriberState]] = {
    SubscriberState.CONNECTING: frozenset(
        {SubscriberState.STREAMING, SubscriberState.DRAINING, SubscriberState.CLOSED}
    ),
    SubscriberState.STREAMING: frozenset(
        {SubscriberState.DRAINING, SubscriberState.CLOSED}
    ),
    SubscriberState.DRAINING: frozenset({SubscriberState.CLOSED}),
    SubscriberState.CLOSED: frozenset(),
}


class Subscriber:
    """
    Bounded per-client queue with a delivery cursor and a lifecycle state.

    Events seeded during replay do not count against ``max_queue_size``;
    only live events do. When a live event does not fit, ``offer`` either
    refuses it (``evict`` policy, the hub then drains the subscriber) or
    discards the oldest queued event and flags a gap (``drop_oldest``).
    """

    def __init__(
        self,
        subscriber_id: str,
        max_queue_size: int = 1000,
        overflow_policy: OverflowPolicy = "evict",
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if max_queue_size < 1:
            raise ValueError(f"max_queue_size must be positive, got {max_queue_size}")
        self.id = subscriber_id
        self.max_queue_size = max_queue_size
        self.overflow_policy = overflow_policy
        self.created_at = time.time()
        self.last_delivered = 0
        self.dropped = 0

        self._loop = loop or asyncio.get_running_loop()
        self._lock = threading.Lock()
        self._wakeup = asyncio.Event()
        self._pending: deque[Event] = deque()
        self._state = SubscriberState.CONNECTING
        self._replay_backlog = 0
        self._replay_upto = 0
        self._gap = 0

    def __repr__(self) -> str:
        return f"Subscriber(id={self.id!r}, state={self._state.value}, queued={len(self._pending)})"

    @property
    def state(self) -> SubscriberState:
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._state is SubscriberState.CLOSED

    @property
    def queued(self) -> int:
        return len(self._pending)

    # -------------------------------------------------------------------------
    # Writer side (hub)
    # -------------------------------------------------------------------------

    def seed(self, events: Iterable[Event]) -> None:
        """Queue replayed history ahead of any live event."""
        with self._lock:
            for event in events:
                self._pending.append(event)
                if not event.synthetic:
                    self.last_delivered = event.sequence
                    self._replay_backlog += 1
            self._replay_upto = self.last_delivered
        self._notify()

    def mark_resync(self, reason: str, **details) -> None:
        """Queue a resync-required marker."""
        with self._lock:
            self._pending.append(Event.resync_required(reason, **details))
        self._notify()

    def attach(self) -> None:
        """Switch from replay to live fan-out."""
        with self._lock:
            self._transition(SubscriberState.STREAMING)

    def offer(self, event: Event) -> bool:
        """
        Try to enqueue a live event without blocking.

        Returns False when the subscriber no longer accepts events or when
        its queue is full under the ``evict`` policy.
        """
        with self._lock:
            if self._state not in (SubscriberState.CONNECTING, SubscriberState.STREAMING):
                return False
            live = len(self._pending) - self._replay_backlog
            if live >= self.max_queue_size:
                if self.overflow_policy != "drop_oldest":
                    return False
                self._discard_oldest()
            self._pending.append(event)
            self.last_delivered = event.sequence
        self._notify()
        return True

    def drain(self) -> None:
        """Stop accepting events; queued ones are still delivered."""
        with self._lock:
            if self._state in (SubscriberState.DRAINING, SubscriberState.CLOSED):
                return
            self._transition(SubscriberState.DRAINING)
        self._notify()

    def close(self) -> None:
        """Close immediately, discarding anything still queued. Idempotent."""
        with self._lock:
            if self._state is SubscriberState.CLOSED:
                return
            self._transition(SubscriberState.CLOSED)
            self._pending.clear()
            self._replay_backlog = 0
        self._notify()

    # -------------------------------------------------------------------------
    # Reader side (streaming endpoint)
    # -------------------------------------------------------------------------

    async def next_event(self, timeout: float | None = None) -> Event | None:
        """
        Wait for the next queued event.

        Returns None if nothing arrived within ``timeout`` seconds. Raises
        SubscriberClosedError once the subscriber is closed, or draining
        with an empty queue (which closes it).
        """
        while True:
            with self._lock:
                if self._gap:
                    dropped, self._gap = self._gap, 0
                    return Event.resync_required("queue-overflow", dropped=dropped)
                if self._pending:
                    return self._pop()
                if self._state is SubscriberState.DRAINING:
                    self._transition(SubscriberState.CLOSED)
                if self._state is SubscriberState.CLOSED:
                    raise SubscriberClosedError(self.id)
                self._wakeup.clear()

            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout)
            except asyncio.TimeoutError:
                return None

    # -------------------------------------------------------------------------
    # Internals (callers hold self._lock)
    # -------------------------------------------------------------------------

    def _pop(self) -> Event:
        event = self._pending.popleft()
        if self._replay_backlog and not event.synthetic and event.sequence <= self._replay_upto:
            self._replay_backlog -= 1
        return event

    def _discard_oldest(self) -> None:
        # Markers are never dropped; skip past them to the oldest real event.
        for index, queued in enumerate(self._pending):
            if not queued.synthetic:
                del self._pending[index]
                if self._replay_backlog and queued.sequence <= self._replay_upto:
                    self._replay_backlog -= 1
                self.dropped += 1
                self._gap += 1
                return

    def _transition(self, new_state: SubscriberState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise RuntimeError(
                f"Invalid subscriber transition {self._state.value} -> {new_state.value}"
            )
        logger.debug("Subscriber %s: %s -> %s", self.id, self._state.value, new_state.value)
        self._state = new_state

    def _notify(self) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._wakeup.set()
            return
        try:
            self._loop.call_soon_threadsafe(self._wakeup.set)
        except RuntimeError:
            # The reader's loop is gone; nothing is waiting anymore.
            logger.debug("Subscriber %s: event loop closed", self.id)
