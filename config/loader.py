"""Configuration loading utilities."""

import json
import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from .defaults import CONFIG_DIRNAME, CONFIG_FILENAME
from .main_config import Config

logger = logging.getLogger(__name__)

# Environment variable -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "HOST": ("server", "host"),
    "PORT": ("server", "port"),
    "URL_PATH_PREFIX": ("server", "url_path_prefix"),
    "CORS_ORIGINS": ("server", "cors_origins"),
    "EVENT_LOG_CAPACITY": ("event_log", "capacity"),
    "SUBSCRIBER_QUEUE_SIZE": ("event_log", "subscriber_queue_size"),
    "OVERFLOW_POLICY": ("event_log", "overflow_policy"),
    "HEARTBEAT_SECONDS": ("event_log", "heartbeat_seconds"),
}


def strip_jsonc_comments(content: str) -> str:
    """
    Strip comments from JSONC content to convert to valid JSON.

    Handles:
    - Single-line comments: // comment
    - Multi-line comments: /* comment */

    Args:
        content: JSONC content string

    Returns:
        JSON string with comments removed
    """
    # Remove single-line comments that start a line or follow whitespace
    content = re.sub(r"(^|\s)//.*?$", r"\1", content, flags=re.MULTILINE)
    # Remove multi-line comments
    content = re.sub(r"/\*.*?\*/", "", content, flags=re.DOTALL)
    return content


def load_config_file(path: Path) -> dict[str, Any] | None:
    """
    Load a config file from the given path.

    Supports both .json and .jsonc files with comment stripping.

    Args:
        path: Path to the config file

    Returns:
        Parsed config dictionary or None if file doesn't exist or is invalid
    """
    if not path.exists():
        return None

    try:
        content = path.read_text()
        if path.suffix == ".jsonc":
            content = strip_jsonc_comments(content)
        return json.loads(content)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return None


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two configuration dictionaries.

    Args:
        base: Base configuration
        override: Override configuration (takes precedence)

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def env_overrides(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Collect config overrides from environment variables."""
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            overrides.setdefault(section, {})[key] = value
    return overrides


def load_config(project_root: Path | None = None, environ: dict[str, str] | None = None) -> Config:
    """
    Load configuration from multiple sources with precedence.

    Looks for config files in the following order:
    1. Project-level: ocpp-webapi.jsonc, ocpp-webapi.json, .ocpp-webapi/ocpp-webapi.jsonc
    2. Global: ~/.ocpp-webapi/ocpp-webapi.jsonc

    Project config is merged with and takes precedence over global config;
    environment variables take precedence over both.

    Args:
        project_root: Project root directory (defaults to current working directory)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Loaded and merged Config model
    """
    if project_root is None:
        project_root = Path.cwd()

    global_config_path = Path.home() / CONFIG_DIRNAME / f"{CONFIG_FILENAME}.jsonc"
    config_data = load_config_file(global_config_path) or {}

    project_config_paths = [
        project_root / f"{CONFIG_FILENAME}.jsonc",
        project_root / f"{CONFIG_FILENAME}.json",
        project_root / CONFIG_DIRNAME / f"{CONFIG_FILENAME}.jsonc",
    ]

    for path in project_config_paths:
        project_config = load_config_file(path)
        if project_config:
            config_data = merge_configs(config_data, project_config)
            break

    config_data = merge_configs(config_data, env_overrides(environ))

    # Create and validate Config model
    return Config(**config_data)


@lru_cache(maxsize=1)
def get_config(project_root: Path | None = None) -> Config:
    """
    Get cached configuration.

    This function caches the config to avoid repeated file I/O.
    To reload the config, clear the cache with get_config.cache_clear().

    Args:
        project_root: Project root directory (defaults to current working directory)

    Returns:
        Cached Config model
    """
    root = project_root or Path.cwd()
    return load_config(root)
