"""
Configuration module for the OCPP WebAPI.

Exports the configuration models and loader functions used throughout the application.
"""

from .defaults import (
    DEFAULT_EVENT_LOG_CAPACITY,
    DEFAULT_HEARTBEAT_SECONDS,
    DEFAULT_RETRY_MS,
    DEFAULT_URL_PATH_PREFIX,
    HTTP_SERVER_NAME,
)
from .event_log_config import EventLogConfig
from .loader import env_overrides, get_config, load_config, load_config_file, merge_configs, strip_jsonc_comments
from .main_config import Config
from .server_config import ServerConfig

__all__ = [
    # Constants
    "DEFAULT_EVENT_LOG_CAPACITY",
    "DEFAULT_HEARTBEAT_SECONDS",
    "DEFAULT_RETRY_MS",
    "DEFAULT_URL_PATH_PREFIX",
    "HTTP_SERVER_NAME",
    # Config models
    "Config",
    "ServerConfig",
    "EventLogConfig",
    # Loader functions
    "load_config",
    "get_config",
    "load_config_file",
    "merge_configs",
    "env_overrides",
    "strip_jsonc_comments",
]
