"""
Event envelope and EventBus protocol.

The EventBus is the narrow interface publishers use; EventHub is the
in-process implementation that retains history and fans out to subscribers.
"""

from datetime import datetime, timezone
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field


RESYNC_REQUIRED = "resync-required"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Event(BaseModel):
    """One published notification. Ordering is defined by ``sequence`` alone."""

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(ge=0)
    name: str
    timestamp: datetime = Field(default_factory=utc_now)
    payload: dict[str, Any] = Field(default_factory=dict, description="JSON-safe document")
    synthetic: bool = Field(
        default=False,
        description="True for hub-generated markers that are not part of the log",
    )

    @classmethod
    def resync_required(cls, reason: str, **details: Any) -> "Event":
        """Build the marker telling a subscriber that it missed events."""
        return cls(
            sequence=0,
            name=RESYNC_REQUIRED,
            payload={"reason": reason, **details},
            synthetic=True,
        )


class EventBus(Protocol):
    """Abstract interface for publishing events."""

    def publish(self, name: str, payload: dict[str, Any]) -> int:
        """Publish an event and return its sequence number."""
        ...


class NullEventBus:
    """No-op EventBus implementation for testing."""

    def publish(self, name: str, payload: dict[str, Any]) -> int:
        """Discard the event."""
        return 0
