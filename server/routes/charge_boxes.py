"""
Charge box read endpoints.
"""

from fastapi import APIRouter

from centralsystem import lookup_charge_box

from ..state import get_charge_box_registry


router = APIRouter()


@router.get("/chargeBoxIds")
async def list_charge_box_ids() -> list[str]:
    """List the identifications of all known charge boxes."""
    return get_charge_box_registry().charge_box_ids()


@router.get("/chargeBoxes")
async def list_charge_boxes() -> list[dict]:
    """List snapshots of all known charge boxes."""
    return [charge_box.to_json() for charge_box in get_charge_box_registry().charge_boxes()]


@router.get("/chargeBoxes/{chargeBoxId}")
async def get_charge_box(chargeBoxId: str) -> dict:
    """Get the snapshot of a single charge box."""
    return lookup_charge_box(get_charge_box_registry(), chargeBoxId).to_json()
