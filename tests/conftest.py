"""
Shared pytest fixtures for all tests.
"""
from typing import Iterator

import pytest
from sse_starlette.sse import AppStatus

from centralsystem import ChargeBox, InMemoryChargeBoxRegistry
from config import Config
from server import configure_event_hub, set_charge_box_registry, shutdown_event_hub


@pytest.fixture
def config() -> Config:
    """Default configuration, independent of config files and environment."""
    return Config()


@pytest.fixture
def registry() -> Iterator[InMemoryChargeBoxRegistry]:
    """Registry with two charge boxes, installed as the server registry."""
    registry = InMemoryChargeBoxRegistry(
        [
            ChargeBox(id="GD001", chargePointVendor="GraphDefined", chargePointModel="mm"),
            ChargeBox(id="GD002", chargePointVendor="GraphDefined", firmwareVersion="1.2.3"),
        ]
    )
    set_charge_box_registry(registry)
    yield registry
    set_charge_box_registry(InMemoryChargeBoxRegistry())


@pytest.fixture
def event_hub(config: Config):
    """Fresh global event hub for server-level tests."""
    hub = configure_event_hub(config.event_log)
    yield hub
    shutdown_event_hub()


@pytest.fixture
def boot_request() -> dict:
    """Sample BootNotification request body."""
    return {
        "chargePointVendor": "GraphDefined",
        "chargePointModel": "mm",
        "firmwareVersion": "1.2.3",
    }


@pytest.fixture
def sse_app_status():
    """Reset sse-starlette's process-wide shutdown state for a new event loop."""
    # The shutdown event lives on a class attribute bound to the first loop that used it.
    if hasattr(AppStatus, "should_exit_event"):
        AppStatus.should_exit_event = None
    AppStatus.should_exit = False
    yield AppStatus
