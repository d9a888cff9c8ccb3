"""
Wiring between an embedding central system and the WebAPI.
"""

import logging

from centralsystem import ChargeBoxRegistry, NotificationSource, OCPPEventPublisher

from .event_hub import CurrentHubBus
from .state import set_charge_box_registry

logger = logging.getLogger(__name__)


def attach_central_system(
    notifications: NotificationSource,
    registry: ChargeBoxRegistry | None = None,
) -> OCPPEventPublisher:
    """
    Connect a central system engine to the WebAPI.

    Args:
        notifications: The engine's request/response notification hooks
        registry: The engine's charge box registry, if it exposes one

    Returns:
        The publisher forwarding notifications into the event log
    """
    publisher = OCPPEventPublisher(CurrentHubBus())
    publisher.attach(notifications)
    if registry is not None:
        set_charge_box_registry(registry)
        logger.info("Charge box registry attached: %s", type(registry).__name__)
    return publisher
