"""HTTP middleware for request/response logging."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

# Slow request threshold in milliseconds
SLOW_REQUEST_THRESHOLD_MS = 1000

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every HTTP request with timing information and stamps the Server header.

    Log levels:
    - DEBUG: Request start
    - INFO: Successful responses, event streams opened
    - WARNING: 4xx errors, slow requests (>1s)
    - ERROR: 5xx errors

    For event streams the timing covers the time until the stream is
    opened, not its whole lifetime.
    """

    def __init__(self, app: ASGIApp, server_name: str | None = None) -> None:
        super().__init__(app)
        self.server_name = server_name

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        logger.debug("%s %s", request.method, request.url.path)

        response = await call_next(request)

        if self.server_name:
            response.headers["Server"] = self.server_name

        duration_ms = (time.perf_counter() - start_time) * 1000
        self._log_response(request, response, duration_ms)
        return response

    def _log_response(
        self, request: Request, response: Response, duration_ms: float
    ) -> None:
        method = request.method
        path = request.url.path
        status = response.status_code

        if status >= 500:
            logger.error("%s %s -> %d (%.1fms)", method, path, status, duration_ms)
        elif status >= 400:
            logger.warning("%s %s -> %d (%.1fms)", method, path, status, duration_ms)
        elif response.headers.get("content-type", "").startswith(EVENT_STREAM_MEDIA_TYPE):
            logger.info(
                "%s %s -> %d stream opened for %s (last-event-id=%s)",
                method,
                path,
                status,
                request.client.host if request.client else "-",
                request.headers.get("last-event-id", "-"),
            )
        elif duration_ms > SLOW_REQUEST_THRESHOLD_MS:
            logger.warning(
                "%s %s -> %d (%.1fms) SLOW", method, path, status, duration_ms
            )
        else:
            logger.info("%s %s -> %d (%.1fms)", method, path, status, duration_ms)
