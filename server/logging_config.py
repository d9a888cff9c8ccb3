"""Logging setup for the WebAPI process."""

import logging
import os
import sys
from typing import Optional

SIMPLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_LEVEL_ENV = "LOG_LEVEL"
LOG_PUBLISHES_ENV = "LOG_PUBLISHES"
DEFAULT_LOG_LEVEL = "INFO"

# Loggers capped regardless of the root level
LIBRARY_LOG_LEVELS = {
    "sse_starlette": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.INFO,
}

# Logs one line per published event at DEBUG
PUBLISH_LOGGER = "eventlog.hub"


def setup_logging(level: Optional[str] = None, log_publishes: Optional[bool] = None) -> None:
    """Configure the root logger and cap chatty loggers.

    Args:
        level: Log level name. Defaults to $LOG_LEVEL, then INFO.
        log_publishes: Keep per-event publish lines when running at DEBUG.
            Defaults to $LOG_PUBLISHES being set.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    if log_publishes is None:
        log_publishes = bool(os.environ.get(LOG_PUBLISHES_ENV))

    logging.basicConfig(
        level=log_level,
        format=DETAILED_FORMAT if log_level == logging.DEBUG else SIMPLE_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for name, cap in LIBRARY_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(max(cap, log_level))

    # A busy central system publishes thousands of events per minute.
    if not log_publishes:
        logging.getLogger(PUBLISH_LOGGER).setLevel(max(logging.INFO, log_level))
