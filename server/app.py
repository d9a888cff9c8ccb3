"""
FastAPI application setup and configuration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import Config, HTTP_SERVER_NAME, get_config
from server.errors import register_exception_handlers
from server.event_hub import configure_event_hub, shutdown_event_hub
from server.middleware import RequestLoggingMiddleware
from server.routes import register_routes

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

API_TITLE = HTTP_SERVER_NAME
API_VERSION = "1.0.0"


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start a fresh event hub and release every stream on shutdown."""
    configure_event_hub(app.state.config.event_log)
    logger.info("WebAPI routes mounted at '%s'", app.state.config.server.url_path_prefix or "/")
    yield
    logger.info("Shutting down event hub...")
    shutdown_event_hub()


# =============================================================================
# FastAPI App
# =============================================================================


def create_app(config: Config | None = None) -> FastAPI:
    """Build the WebAPI application for the given configuration."""
    config = config or get_config()

    app = FastAPI(title=API_TITLE, version=API_VERSION, lifespan=lifespan)
    app.state.config = config

    # SECURITY NOTE: the default "*" lets any origin read the event stream.
    # Restrict it with CORS_ORIGINS="https://example.com,https://ops.example.com".
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origin_list(),
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Last-Event-ID"],
    )

    # Request logging middleware (added after CORS so it runs first)
    app.add_middleware(RequestLoggingMiddleware, server_name=HTTP_SERVER_NAME)

    register_exception_handlers(app)
    register_routes(app, prefix=config.server.url_path_prefix)
    return app
