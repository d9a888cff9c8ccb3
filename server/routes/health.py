"""
Health check endpoint.
"""

from fastapi import APIRouter

from ..event_hub import get_event_hub
from ..state import get_charge_box_registry


router = APIRouter()


@router.get("/health")
async def health() -> dict:
    """Report event log counters and the number of known charge boxes."""
    hub = get_event_hub()
    return {
        "status": "closing" if hub.closed else "ok",
        "chargeBoxes": len(get_charge_box_registry().charge_box_ids()),
        **hub.stats(),
    }
