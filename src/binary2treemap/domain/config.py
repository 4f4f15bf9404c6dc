from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of serving preferences and source path mappings
using JSON. Stored values are merged over defaults so new keys always exist.
"""

import json
import logging
import os
from typing import Any, Dict

from binary2treemap.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_HOST,
    DEFAULT_MAX_DEPTH,
    DEFAULT_PORT,
    DEFAULT_PROGRESS_INTERVAL,
)
from binary2treemap.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"

# Keys that survive between runs. Terminal-mode flags apply to one run only.
PERSISTED_KEYS = ("host", "port", "max_depth", "path_map", "progress_interval")

# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Serving
        "host": DEFAULT_HOST,
        "port": DEFAULT_PORT,
        "serve": True,

        # Export
        "max_depth": DEFAULT_MAX_DEPTH,

        # Source lookup (recorded prefix -> local prefix)
        "path_map": {},

        # Terminal output
        "print_tree": False,
        "json_output": False,

        # Diagnostics
        "progress_interval": DEFAULT_PROGRESS_INTERVAL,
    }


def get_config_file() -> str:
    """Resolve the absolute path of the persistent configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load the stored configuration merged over the defaults.

    Returns:
        Dict[str, Any]: The loaded configuration or defaults on failure.
    """
    config = get_default_config()
    config_file = get_config_file()

    if not os.path.exists(config_file):
        logger.debug("Config file not found. Returning defaults.")
        return config

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return config

    config.update({k: v for k, v in data.items() if k in PERSISTED_KEYS})
    return config


def save_config(config: Dict[str, Any]) -> None:
    """
    Persist the stored subset of the configuration to disk.

    Only ``PERSISTED_KEYS`` are written; one-run flags such as ``json_output``
    or ``serve`` are dropped.

    Args:
        config: The configuration dictionary to save.
    """
    config_file = get_config_file()
    payload = {k: config[k] for k in PERSISTED_KEYS if k in config}
    payload["version"] = CURRENT_CONFIG_VERSION
    try:
        os.makedirs(os.path.dirname(config_file), exist_ok=True)
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_file}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
