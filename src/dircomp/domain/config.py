from __future__ import annotations

"""
Configuration Domain Management.

Handles the persistent run preferences of the tool (safety depth, pre-flight
delay, logging) stored as JSON in the per-user data directory, with default
fallback when the file is missing or corrupted.
"""

import json
import logging
import os
from typing import Any, Dict

from dircomp.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_SYNC_DELAY,
    DEFAULT_UNLOCK_TIMEOUT,
    MIN_SAFE_DEPTH,
)
from dircomp.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


def get_config_path() -> str:
    """Absolute path of the persistent configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


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
        # Safety
        "min_depth": MIN_SAFE_DEPTH,
        "dry_run": False,

        # Timing
        "delay_seconds": DEFAULT_SYNC_DELAY,
        "unlock_before_sync": False,
        "unlock_timeout": DEFAULT_UNLOCK_TIMEOUT,

        # Diagnostics
        "log_level": "INFO",
        "log_to_file": True,
        "log_file": "",
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load the configuration from disk, merged over the defaults.

    Returns:
        Dict[str, Any]: The loaded configuration or the defaults on failure.
    """
    config = get_default_config()
    path = get_config_path()

    if not os.path.exists(path):
        logger.debug("Config file not found. Returning defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return config

    data.pop("version", None)
    config.update(data)
    return config


def save_config(config: Dict[str, Any]) -> bool:
    """
    Persist the configuration to disk.

    Args:
        config: The configuration dictionary to save.

    Returns:
        bool: True if the file was written.
    """
    path = get_config_path()
    state = dict(config)
    state["version"] = CURRENT_CONFIG_VERSION
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {path}")
        return True
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        return False
