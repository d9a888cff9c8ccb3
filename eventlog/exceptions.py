"""
Event log exceptions.

These exceptions are transport-agnostic; the server layer decides how a
closed subscriber or a shut down hub maps onto an HTTP connection.
"""


class EventLogError(Exception):
    """Base exception for all event log errors."""

    pass


class SubscriberClosedError(EventLogError):
    """Raised when reading from a subscriber that is closed and fully flushed."""

    def __init__(self, subscriber_id: str):
        self.subscriber_id = subscriber_id
        super().__init__(f"Subscriber closed: {subscriber_id}")


class HubClosedError(EventLogError):
    """Raised when subscribing to a hub that has been shut down."""

    pass
