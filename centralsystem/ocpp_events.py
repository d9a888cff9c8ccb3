"""
OCPP request/response notifications as event log entries.

Every OCPP 1.6 operation produces one ``On<Operation>Request`` event when the
request is seen and one ``On<Operation>Response`` event when the response is
sent or received. The operations are listed once in ``OCPP_OPERATIONS``;
the handlers for all of them are generated from that table.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Protocol

from pydantic import BaseModel

from eventlog import EventBus

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    CHARGE_POINT_TO_CENTRAL_SYSTEM = "cp2cs"
    CENTRAL_SYSTEM_TO_CHARGE_POINT = "cs2cp"


@dataclass(frozen=True)
class OCPPOperation:
    name: str
    direction: Direction

    @property
    def request_event(self) -> str:
        return f"On{self.name}Request"

    @property
    def response_event(self) -> str:
        return f"On{self.name}Response"


_CP2CS = Direction.CHARGE_POINT_TO_CENTRAL_SYSTEM
_CS2CP = Direction.CENTRAL_SYSTEM_TO_CHARGE_POINT

OCPP_OPERATIONS: tuple[OCPPOperation, ...] = (
    # Charge point -> central system
    OCPPOperation("BootNotification", _CP2CS),
    OCPPOperation("Heartbeat", _CP2CS),
    OCPPOperation("Authorize", _CP2CS),
    OCPPOperation("StartTransaction", _CP2CS),
    OCPPOperation("StatusNotification", _CP2CS),
    OCPPOperation("MeterValues", _CP2CS),
    OCPPOperation("StopTransaction", _CP2CS),
    OCPPOperation("IncomingDataTransfer", _CP2CS),
    OCPPOperation("DiagnosticsStatusNotification", _CP2CS),
    OCPPOperation("FirmwareStatusNotification", _CP2CS),
    # Central system -> charge point
    OCPPOperation("Reset", _CS2CP),
    OCPPOperation("ChangeAvailability", _CS2CP),
    OCPPOperation("GetConfiguration", _CS2CP),
    OCPPOperation("ChangeConfiguration", _CS2CP),
    OCPPOperation("DataTransfer", _CS2CP),
    OCPPOperation("GetDiagnostics", _CS2CP),
    OCPPOperation("TriggerMessage", _CS2CP),
    OCPPOperation("UpdateFirmware", _CS2CP),
    OCPPOperation("ReserveNow", _CS2CP),
    OCPPOperation("CancelReservation", _CS2CP),
    OCPPOperation("RemoteStartTransaction", _CS2CP),
    OCPPOperation("RemoteStopTransaction", _CS2CP),
    OCPPOperation("SetChargingProfile", _CS2CP),
    OCPPOperation("ClearChargingProfile", _CS2CP),
    OCPPOperation("GetCompositeSchedule", _CS2CP),
    OCPPOperation("UnlockConnector", _CS2CP),
    OCPPOperation("GetLocalListVersion", _CS2CP),
    OCPPOperation("SendLocalList", _CS2CP),
    OCPPOperation("ClearCache", _CS2CP),
)

OPERATIONS_BY_NAME: dict[str, OCPPOperation] = {op.name: op for op in OCPP_OPERATIONS}


RequestHandler = Callable[[datetime, str, str, Any], int]
ResponseHandler = Callable[[datetime, str, str, Any, Any, timedelta | float], int]


class NotificationSource(Protocol):
    """The central system engine's notification hook surface."""

    def add_listener(self, event_name: str, callback: Callable[..., Any]) -> None:
        ...


# =============================================================================
# Envelope helpers
# =============================================================================


def to_json(message: Any) -> Any:
    """Convert an OCPP message object into a JSON-compatible document."""
    if message is None:
        return None
    if isinstance(message, BaseModel):
        return message.model_dump(mode="json", by_alias=True, exclude_none=True)
    to_json_method = getattr(message, "to_json", None)
    if callable(to_json_method):
        return to_json_method()
    if isinstance(message, Mapping):
        return {str(key): to_json(value) for key, value in message.items()}
    if isinstance(message, (list, tuple)):
        return [to_json(item) for item in message]
    if isinstance(message, datetime):
        return _iso8601(message)
    return message


def _iso8601(timestamp: datetime) -> str:
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _runtime_ms(runtime: timedelta | float) -> float:
    if isinstance(runtime, timedelta):
        return runtime.total_seconds() * 1000
    return float(runtime)


# =============================================================================
# Publisher
# =============================================================================


class OCPPEventPublisher:
    """Turns central system notifications into event log entries."""

    def __init__(self, bus: EventBus) -> None:
        self.bus = bus

    def publish_request(
        self,
        operation: str,
        timestamp: datetime,
        charge_box_id: str,
        event_tracking_id: str,
        request: Any,
    ) -> int:
        op = self._operation(operation)
        return self.bus.publish(
            op.request_event,
            {
                "timestamp": _iso8601(timestamp),
                "chargeBoxId": charge_box_id,
                "eventTrackingId": event_tracking_id,
                "request": to_json(request),
            },
        )

    def publish_response(
        self,
        operation: str,
        timestamp: datetime,
        charge_box_id: str,
        event_tracking_id: str,
        request: Any,
        response: Any,
        runtime: timedelta | float,
    ) -> int:
        """Publish a response envelope; ``runtime`` is a timedelta or milliseconds."""
        op = self._operation(operation)
        return self.bus.publish(
            op.response_event,
            {
                "timestamp": _iso8601(timestamp),
                "chargeBoxId": charge_box_id,
                "eventTrackingId": event_tracking_id,
                "request": to_json(request),
                "response": to_json(response),
                "runtime": _runtime_ms(runtime),
            },
        )

    def request_handler(self, operation: str) -> RequestHandler:
        op = self._operation(operation)

        def handle(timestamp, charge_box_id, event_tracking_id, request):
            return self.publish_request(op.name, timestamp, charge_box_id, event_tracking_id, request)

        handle.__name__ = f"on_{op.name}_request"
        return handle

    def response_handler(self, operation: str) -> ResponseHandler:
        op = self._operation(operation)

        def handle(timestamp, charge_box_id, event_tracking_id, request, response, runtime):
            return self.publish_response(
                op.name, timestamp, charge_box_id, event_tracking_id, request, response, runtime
            )

        handle.__name__ = f"on_{op.name}_response"
        return handle

    def attach(self, source: NotificationSource) -> int:
        """
        Register request and response handlers for every OCPP operation.

        Args:
            source: The central system's notification hooks

        Returns:
            Number of registered handlers
        """
        count = 0
        for op in OCPP_OPERATIONS:
            source.add_listener(op.request_event, self.request_handler(op.name))
            source.add_listener(op.response_event, self.response_handler(op.name))
            count += 2
        logger.info("Attached %d OCPP notification handlers", count)
        return count

    @staticmethod
    def _operation(name: str) -> OCPPOperation:
        try:
            return OPERATIONS_BY_NAME[name]
        except KeyError:
            raise ValueError(f"Unknown OCPP operation: {name}") from None


class NotificationHooks:
    """Minimal NotificationSource an embedding central system can fire into."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[..., Any]]] = {}

    def add_listener(self, event_name: str, callback: Callable[..., Any]) -> None:
        self._listeners.setdefault(event_name, []).append(callback)

    def listeners(self, event_name: str) -> list[Callable[..., Any]]:
        return list(self._listeners.get(event_name, ()))

    def fire(self, event_name: str, *args: Any) -> None:
        for callback in self._listeners.get(event_name, ()):
            callback(*args)
