"""
Process-wide EventHub instance.

The WebAPI routes and the OCPP notification adapter share one hub; this
module owns its lifetime.
"""

import logging
from typing import Any

from config import EventLogConfig, get_config
from eventlog import EventHub

logger = logging.getLogger(__name__)


# Global event hub instance
_event_hub: EventHub | None = None


def configure_event_hub(settings: EventLogConfig) -> EventHub:
    """Replace the global hub with one built from the given settings."""
    global _event_hub
    if _event_hub is not None:
        _event_hub.close()
    _event_hub = EventHub(
        capacity=settings.capacity,
        max_queue_size=settings.subscriber_queue_size,
        overflow_policy=settings.overflow_policy,
    )
    logger.info(
        "Event hub configured (capacity=%d, queue=%d, overflow=%s)",
        settings.capacity,
        settings.subscriber_queue_size,
        settings.overflow_policy,
    )
    return _event_hub


def get_event_hub() -> EventHub:
    """Get the global event hub instance, creating it if necessary."""
    if _event_hub is None:
        return configure_event_hub(get_config().event_log)
    return _event_hub


def shutdown_event_hub() -> None:
    """Close the global hub; the next get_event_hub() starts a fresh one."""
    global _event_hub
    if _event_hub is not None:
        _event_hub.close()
        _event_hub = None


class CurrentHubBus:
    """EventBus that always publishes into the current global hub.

    Publishers created before the application starts keep working after the
    lifespan handler swaps in a freshly configured hub.
    """

    def publish(self, name: str, payload: dict[str, Any]) -> int:
        return get_event_hub().publish(name, payload)
