"""
OCPP WebAPI server entry point.
"""
import logging

import uvicorn

from config import get_config
from server import app
from server.logging_config import setup_logging

# Initialize logging before anything else
setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    """Start the WebAPI server."""
    settings = get_config().server

    logger.info("Server listening on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, server_header=False)


if __name__ == "__main__":
    main()
