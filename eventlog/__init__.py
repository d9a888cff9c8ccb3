"""
Broadcast event log package.

This package contains the transport-agnostic event log: a bounded ring
buffer of recent events, per-client subscriber queues and the hub that
fans published events out to them. The server package streams subscribers
to HTTP clients.
"""

from .events import RESYNC_REQUIRED, Event, EventBus, NullEventBus
from .exceptions import EventLogError, HubClosedError, SubscriberClosedError
from .hub import DEFAULT_CAPACITY, DEFAULT_MAX_QUEUE_SIZE, EventHub
from .ring_buffer import Replay, RingBuffer
from .subscriber import OverflowPolicy, Subscriber, SubscriberState

__all__ = [
    # Exceptions
    "EventLogError",
    "HubClosedError",
    "SubscriberClosedError",
    # Events
    "Event",
    "EventBus",
    "NullEventBus",
    "RESYNC_REQUIRED",
    # Storage
    "Replay",
    "RingBuffer",
    # Subscribers
    "OverflowPolicy",
    "Subscriber",
    "SubscriberState",
    # Hub
    "EventHub",
    "DEFAULT_CAPACITY",
    "DEFAULT_MAX_QUEUE_SIZE",
]
