"""Event log configuration model."""

from typing import Literal

from pydantic import BaseModel, Field

from .defaults import (
    DEFAULT_EVENT_LOG_CAPACITY,
    DEFAULT_HEARTBEAT_SECONDS,
    DEFAULT_OVERFLOW_POLICY,
    DEFAULT_RETRY_MS,
    DEFAULT_SEND_TIMEOUT_SECONDS,
    DEFAULT_SUBSCRIBER_QUEUE_SIZE,
)


class EventLogConfig(BaseModel):
    """Event log and SSE streaming settings."""

    capacity: int = Field(
        default=DEFAULT_EVENT_LOG_CAPACITY,
        ge=1,
        description="Number of recent events kept for replay",
    )
    subscriber_queue_size: int = Field(
        default=DEFAULT_SUBSCRIBER_QUEUE_SIZE,
        ge=1,
        description="Live events a single client may fall behind before overflow",
    )
    overflow_policy: Literal["evict", "drop_oldest"] = Field(
        default=DEFAULT_OVERFLOW_POLICY,
        description="evict disconnects a slow client, drop_oldest skips events and sends a resync marker",
    )
    heartbeat_seconds: float = Field(
        default=DEFAULT_HEARTBEAT_SECONDS,
        gt=0,
        description="Idle time before a keep-alive comment is sent",
    )
    retry_ms: int = Field(
        default=DEFAULT_RETRY_MS,
        ge=0,
        description="Reconnection delay announced to SSE clients",
    )
    send_timeout_seconds: float | None = Field(
        default=DEFAULT_SEND_TIMEOUT_SECONDS,
        gt=0,
        description="Time a single write may block before the client is dropped; null disables",
    )
