"""
E2E test fixtures running the WebAPI on a real uvicorn server.

Uses httpx.AsyncClient for proper async SSE streaming.
"""
import asyncio
import json
from typing import AsyncGenerator

import httpx
import pytest_asyncio
import uvicorn

from config import Config, EventLogConfig, ServerConfig
from server import create_app


# =============================================================================
# Constants
# =============================================================================

E2E_TIMEOUT_SECONDS = 10
TEST_SERVER_PORT = 18766
STARTUP_TIMEOUT_SECONDS = 5.0


# =============================================================================
# Server - Async Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def e2e_client(registry, sse_app_status) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Start the WebAPI in the test's event loop and connect a client to it."""
    config = Config(
        server=ServerConfig(host="127.0.0.1", port=TEST_SERVER_PORT),
        event_log=EventLogConfig(heartbeat_seconds=0.2),
    )
    server = uvicorn.Server(
        uvicorn.Config(
            create_app(config),
            host="127.0.0.1",
            port=TEST_SERVER_PORT,
            log_level="warning",
            timeout_graceful_shutdown=2,
        )
    )

    # Start server in background task
    server_task = asyncio.create_task(server.serve())

    # Wait for server to start
    waited = 0.0
    while not server.started and waited < STARTUP_TIMEOUT_SECONDS:
        await asyncio.sleep(0.05)
        waited += 0.05

    async with httpx.AsyncClient(
        base_url=f"http://127.0.0.1:{TEST_SERVER_PORT}",
        timeout=httpx.Timeout(E2E_TIMEOUT_SECONDS),
    ) as client:
        yield client

    # Shutdown server
    server.should_exit = True
    await server_task


# =============================================================================
# SSE Stream Helpers
# =============================================================================

class SSEReader:
    """Reads SSE messages one at a time from a streaming response."""

    def __init__(self, response: httpx.Response):
        self.lines = response.aiter_lines()

    async def next_message(self) -> dict:
        """Read the next message, comments included."""
        message: dict = {}
        async for line in self.lines:
            if not line:
                if message:
                    return message
                continue
            field, _, value = line.partition(":")
            value = value[1:] if value.startswith(" ") else value
            if field == "":
                message.setdefault("comments", []).append(value)
            elif field == "data":
                message["data"] = json.loads(value)
            else:
                message[field] = value
        raise AssertionError("stream ended")

    async def wait_connected(self) -> dict:
        """Skip to the greeting that confirms the subscription exists."""
        while True:
            message = await self.next_message()
            if "connected" in message.get("comments", ()):
                return message

    async def next_event(self, timeout: float = 2.0) -> dict:
        """Read the next message carrying an event, skipping comments."""
        async def read() -> dict:
            while True:
                message = await self.next_message()
                if "event" in message:
                    return message

        return await asyncio.wait_for(read(), timeout)
