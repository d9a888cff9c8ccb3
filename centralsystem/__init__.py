"""
Central system collaborator surface.

The OCPP engine itself lives outside this repository. This package holds
what the WebAPI needs from it: charge box snapshots behind a registry and
the adapter that turns its request/response notifications into events.
"""

from .charge_boxes import (
    MAX_CHARGE_BOX_ID_LENGTH,
    ChargeBox,
    ChargeBoxId,
    ChargeBoxRegistry,
    InMemoryChargeBoxRegistry,
    lookup_charge_box,
)
from .exceptions import CentralSystemError, MalformedIdentifierError, UnknownChargeBoxError
from .ocpp_events import (
    OCPP_OPERATIONS,
    OPERATIONS_BY_NAME,
    Direction,
    NotificationHooks,
    NotificationSource,
    OCPPEventPublisher,
    OCPPOperation,
    to_json,
)

__all__ = [
    # Exceptions
    "CentralSystemError",
    "MalformedIdentifierError",
    "UnknownChargeBoxError",
    # Charge boxes
    "ChargeBox",
    "ChargeBoxId",
    "ChargeBoxRegistry",
    "InMemoryChargeBoxRegistry",
    "MAX_CHARGE_BOX_ID_LENGTH",
    "lookup_charge_box",
    # OCPP notifications
    "Direction",
    "NotificationHooks",
    "NotificationSource",
    "OCPPEventPublisher",
    "OCPPOperation",
    "OCPP_OPERATIONS",
    "OPERATIONS_BY_NAME",
    "to_json",
]
