"""Main Config model."""

from pydantic import BaseModel, Field

from .event_log_config import EventLogConfig
from .server_config import ServerConfig


class Config(BaseModel):
    """Main configuration model."""

    server: ServerConfig = Field(
        default_factory=ServerConfig,
        description="HTTP server settings",
    )
    event_log: EventLogConfig = Field(
        default_factory=EventLogConfig,
        description="Event log and streaming settings",
    )
