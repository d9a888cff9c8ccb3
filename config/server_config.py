"""HTTP server configuration model."""

from pydantic import BaseModel, Field, field_validator

from .defaults import DEFAULT_CORS_ORIGINS, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_URL_PATH_PREFIX


class ServerConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field(default=DEFAULT_HOST, description="Interface to bind to")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="TCP port to listen on")
    url_path_prefix: str = Field(
        default=DEFAULT_URL_PATH_PREFIX,
        description="Prefix for all WebAPI routes, e.g. /webapi",
    )
    cors_origins: str = Field(
        default=DEFAULT_CORS_ORIGINS,
        description="Comma-separated list of allowed origins, or *",
    )

    @field_validator("url_path_prefix")
    @classmethod
    def normalize_prefix(cls, value: str) -> str:
        value = value.strip().strip("/")
        return f"/{value}" if value else ""

    def cors_origin_list(self) -> list[str]:
        if self.cors_origins.strip() == DEFAULT_CORS_ORIGINS:
            return [DEFAULT_CORS_ORIGINS]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
