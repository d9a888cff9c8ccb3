"""Exception handlers mapping domain errors onto JSON error responses.

Error bodies have the form ``{"description": "<message>"}`` and the
connection is closed after the response.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from centralsystem import MalformedIdentifierError, UnknownChargeBoxError
from eventlog import HubClosedError


def error_response(status_code: int, description: str) -> JSONResponse:
    """Build a JSON error response."""
    return JSONResponse(
        status_code=status_code,
        content={"description": description},
        headers={"Connection": "close"},
    )


async def malformed_identifier_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def unknown_charge_box_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, str(exc))


async def hub_closed_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Event log is shutting down!")


def register_exception_handlers(app: FastAPI) -> None:
    """Register all domain exception handlers with the FastAPI application."""
    app.add_exception_handler(MalformedIdentifierError, malformed_identifier_handler)
    app.add_exception_handler(UnknownChargeBoxError, unknown_charge_box_handler)
    app.add_exception_handler(HubClosedError, hub_closed_handler)
