"""
OCPP v1.6 WebAPI server.

Exposes the charge boxes known to the central system and streams every
OCPP request/response pair as Server-Sent Events.
"""

from .app import create_app
from .central_system import attach_central_system
from .event_hub import configure_event_hub, get_event_hub, shutdown_event_hub
from .state import get_charge_box_registry, set_charge_box_registry

app = create_app()

__all__ = [
    "app",
    "create_app",
    "attach_central_system",
    "configure_event_hub",
    "get_event_hub",
    "shutdown_event_hub",
    "get_charge_box_registry",
    "set_charge_box_registry",
]
