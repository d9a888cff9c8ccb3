"""
Route registration for the OCPP WebAPI.
"""

from fastapi import FastAPI

from . import charge_boxes, events, health


def register_routes(app: FastAPI, prefix: str = "") -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(health.router)
    app.include_router(charge_boxes.router, prefix=prefix, tags=["chargeBoxes"])
    app.include_router(events.router, prefix=prefix, tags=["events"])
