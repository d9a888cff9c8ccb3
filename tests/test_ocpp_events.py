"""
Tests for turning OCPP notifications into event log entries.
"""
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from pydantic import BaseModel, Field

from centralsystem import (
    OCPP_OPERATIONS,
    Direction,
    NotificationHooks,
    OCPPEventPublisher,
    to_json,
)
from eventlog import EventHub, NullEventBus

TIMESTAMP = datetime(2024, 2, 26, 21, 53, 54, 19000, tzinfo=timezone.utc)


class RecordingBus:
    """EventBus that keeps every published event."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def publish(self, name: str, payload: dict[str, Any]) -> int:
        self.events.append((name, payload))
        return len(self.events)


class HeartbeatResponse(BaseModel):
    current_time: datetime = Field(alias="currentTime")


class JsonMessage:
    def __init__(self, body: dict) -> None:
        self.body = body

    def to_json(self) -> dict:
        return self.body


@pytest.fixture
def bus() -> RecordingBus:
    return RecordingBus()


@pytest.fixture
def publisher(bus: RecordingBus) -> OCPPEventPublisher:
    return OCPPEventPublisher(bus)


class TestOperationTable:
    """Test the declarative list of OCPP operations."""

    def test_operation_names_are_unique(self):
        names = [op.name for op in OCPP_OPERATIONS]
        assert len(names) == len(set(names))

    def test_covers_both_directions(self):
        incoming = {op.name for op in OCPP_OPERATIONS if op.direction is Direction.CHARGE_POINT_TO_CENTRAL_SYSTEM}
        outgoing = {op.name for op in OCPP_OPERATIONS if op.direction is Direction.CENTRAL_SYSTEM_TO_CHARGE_POINT}
        assert {"BootNotification", "Heartbeat", "MeterValues", "IncomingDataTransfer"} <= incoming
        assert {"Reset", "RemoteStartTransaction", "DataTransfer", "ClearCache"} <= outgoing
        assert len(incoming) == 10
        assert len(outgoing) == 19

    def test_event_names(self):
        op = OCPP_OPERATIONS[0]
        assert op.request_event == "OnBootNotificationRequest"
        assert op.response_event == "OnBootNotificationResponse"


class TestEnvelopes:
    """Test request and response envelope shapes."""

    def test_request_envelope(self, publisher, bus, boot_request):
        publisher.publish_request("BootNotification", TIMESTAMP, "GD001", "evt-1", boot_request)

        name, payload = bus.events[0]
        assert name == "OnBootNotificationRequest"
        assert payload == {
            "timestamp": "2024-02-26T21:53:54.019Z",
            "chargeBoxId": "GD001",
            "eventTrackingId": "evt-1",
            "request": boot_request,
        }

    def test_response_envelope_with_timedelta_runtime(self, publisher, bus):
        response = HeartbeatResponse(currentTime=TIMESTAMP)
        publisher.publish_response(
            "Heartbeat", TIMESTAMP, "GD001", "evt-2", {}, response, timedelta(milliseconds=12.5)
        )

        name, payload = bus.events[0]
        assert name == "OnHeartbeatResponse"
        assert payload["request"] == {}
        assert payload["response"]["currentTime"].startswith("2024-02-26T21:53:54.019")
        assert payload["runtime"] == pytest.approx(12.5)

    def test_runtime_in_milliseconds(self, publisher, bus):
        publisher.publish_response("Reset", TIMESTAMP, "GD001", "evt-3", {"type": "Soft"}, {"status": "Accepted"}, 7)
        assert bus.events[0][1]["runtime"] == 7.0

    def test_naive_timestamp_is_treated_as_utc(self, publisher, bus):
        publisher.publish_request("Heartbeat", datetime(2024, 1, 1, 12, 0, 0), "GD001", "evt-4", {})
        assert bus.events[0][1]["timestamp"] == "2024-01-01T12:00:00.000Z"

    def test_unknown_operation(self, publisher):
        with pytest.raises(ValueError):
            publisher.publish_request("Teleport", TIMESTAMP, "GD001", "evt-5", {})

    def test_incoming_and_outgoing_data_transfer_are_distinct(self, publisher, bus):
        publisher.publish_request("IncomingDataTransfer", TIMESTAMP, "GD001", "a", {"vendorId": "x"})
        publisher.publish_request("DataTransfer", TIMESTAMP, "GD001", "b", {"vendorId": "x"})
        assert [name for name, _ in bus.events] == [
            "OnIncomingDataTransferRequest",
            "OnDataTransferRequest",
        ]


class TestToJson:
    """Test conversion of message objects."""

    def test_none(self):
        assert to_json(None) is None

    def test_object_with_to_json(self):
        assert to_json(JsonMessage({"idTag": "ABC"})) == {"idTag": "ABC"}

    def test_nested_mapping(self):
        document = {"meterValue": [{"timestamp": TIMESTAMP, "sampledValue": [{"value": "1"}]}]}
        assert to_json(document) == {
            "meterValue": [{"timestamp": "2024-02-26T21:53:54.019Z", "sampledValue": [{"value": "1"}]}]
        }

    def test_scalars_pass_through(self):
        assert to_json(42) == 42
        assert to_json("Accepted") == "Accepted"


class TestAttach:
    """Test wiring every operation to a notification source."""

    def test_registers_request_and_response_for_every_operation(self, publisher):
        hooks = NotificationHooks()
        count = publisher.attach(hooks)

        assert count == 2 * len(OCPP_OPERATIONS)
        for op in OCPP_OPERATIONS:
            assert len(hooks.listeners(op.request_event)) == 1
            assert len(hooks.listeners(op.response_event)) == 1

    def test_fired_notifications_reach_the_bus(self, publisher, bus, boot_request):
        hooks = NotificationHooks()
        publisher.attach(hooks)

        hooks.fire("OnBootNotificationRequest", TIMESTAMP, "GD001", "evt-1", boot_request)
        hooks.fire(
            "OnBootNotificationResponse",
            TIMESTAMP,
            "GD001",
            "evt-1",
            boot_request,
            {"status": "Accepted", "interval": 300},
            timedelta(milliseconds=3),
        )

        assert [name for name, _ in bus.events] == [
            "OnBootNotificationRequest",
            "OnBootNotificationResponse",
        ]
        assert bus.events[1][1]["response"] == {"status": "Accepted", "interval": 300}

    def test_handler_returns_hub_sequence(self):
        hub = EventHub(capacity=10)
        publisher = OCPPEventPublisher(hub)
        handler = publisher.request_handler("Authorize")

        assert handler(TIMESTAMP, "GD001", "evt-1", {"idTag": "ABC"}) == 1
        assert handler(TIMESTAMP, "GD001", "evt-2", {"idTag": "DEF"}) == 2
        assert handler.__name__ == "on_Authorize_request"

    def test_null_bus_discards(self):
        publisher = OCPPEventPublisher(NullEventBus())
        assert publisher.publish_request("Heartbeat", TIMESTAMP, "GD001", "evt-1", {}) == 0
