"""
Charge box snapshots and the registry surface the WebAPI reads from.

The central system engine owns the charge boxes; the WebAPI only needs to
list them and look one up by identification.
"""

import re
import threading
from datetime import datetime
from typing import Any, Iterable, Protocol

from pydantic import BaseModel

from .exceptions import MalformedIdentifierError, UnknownChargeBoxError


# =============================================================================
# Identification
# =============================================================================

MAX_CHARGE_BOX_ID_LENGTH = 48

# OCPP identifierString: a-z, A-Z, 0-9 and * - _ = : + | @ .
_CHARGE_BOX_ID_PATTERN = re.compile(r"^[A-Za-z0-9*\-_=:+|@.]{1,%d}$" % MAX_CHARGE_BOX_ID_LENGTH)


class ChargeBoxId:
    """Parsing helpers for charge box identifications."""

    @staticmethod
    def is_valid(text: str | None) -> bool:
        return text is not None and _CHARGE_BOX_ID_PATTERN.match(text) is not None

    @classmethod
    def parse(cls, text: str | None) -> str:
        """
        Parse a charge box identification.

        Raises:
            MalformedIdentifierError: If the text is not a valid identification
        """
        candidate = text.strip() if text is not None else None
        if not cls.is_valid(candidate):
            raise MalformedIdentifierError(text or "")
        return candidate


# =============================================================================
# Snapshots
# =============================================================================


class ChargeBox(BaseModel):
    id: str
    chargePointVendor: str | None = None
    chargePointModel: str | None = None
    chargePointSerialNumber: str | None = None
    chargeBoxSerialNumber: str | None = None
    firmwareVersion: str | None = None
    iccid: str | None = None
    imsi: str | None = None
    meterType: str | None = None
    meterSerialNumber: str | None = None
    meterPublicKey: str | None = None
    lastSeen: datetime | None = None

    def to_json(self) -> dict[str, Any]:
        """JSON snapshot without unset properties."""
        return self.model_dump(mode="json", exclude_none=True)


# =============================================================================
# Registry
# =============================================================================


class ChargeBoxRegistry(Protocol):
    """Read-only view on the charge boxes known to the central system."""

    def charge_box_ids(self) -> list[str]:
        ...

    def charge_boxes(self) -> list[ChargeBox]:
        ...

    def get_charge_box(self, charge_box_id: str) -> ChargeBox | None:
        ...


class InMemoryChargeBoxRegistry:
    """Registry kept in process memory, fed by the central system engine."""

    def __init__(self, charge_boxes: Iterable[ChargeBox] = ()) -> None:
        self._lock = threading.Lock()
        self._charge_boxes: dict[str, ChargeBox] = {box.id: box for box in charge_boxes}

    def add(self, charge_box: ChargeBox) -> None:
        """Add or replace a charge box snapshot."""
        ChargeBoxId.parse(charge_box.id)
        with self._lock:
            self._charge_boxes[charge_box.id] = charge_box

    def remove(self, charge_box_id: str) -> ChargeBox | None:
        with self._lock:
            return self._charge_boxes.pop(charge_box_id, None)

    def clear(self) -> None:
        with self._lock:
            self._charge_boxes.clear()

    def charge_box_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._charge_boxes)

    def charge_boxes(self) -> list[ChargeBox]:
        with self._lock:
            return [self._charge_boxes[key] for key in sorted(self._charge_boxes)]

    def get_charge_box(self, charge_box_id: str) -> ChargeBox | None:
        with self._lock:
            return self._charge_boxes.get(charge_box_id)


def lookup_charge_box(registry: ChargeBoxRegistry, raw_id: str) -> ChargeBox:
    """
    Resolve a charge box from an untrusted identification.

    Raises:
        MalformedIdentifierError: If the identification is malformed
        UnknownChargeBoxError: If no charge box with that identification exists
    """
    charge_box_id = ChargeBoxId.parse(raw_id)
    charge_box = registry.get_charge_box(charge_box_id)
    if charge_box is None:
        raise UnknownChargeBoxError(charge_box_id)
    return charge_box
