"""
Configuration module for GCP VPC peering management.

This module provides access to configuration values loaded from config.json.
"""

import json
import os
from pathlib import Path
from typing import Any

DEFAULT_OPERATION_TIMEOUT = 240
DEFAULT_OPERATION_POLL_INTERVAL = 2

CONFIG_PATH = Path(__file__).parent / "config.json"

_config: dict[str, Any] = {}


def load_config() -> dict[str, Any]:
    """Load configuration from config.json file (empty if the file is absent)."""
    global _config
    if _config:
        return _config

    try:
        _config = json.loads(CONFIG_PATH.read_text())
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}")
    return _config


def reset_config() -> None:
    """Forget the cached configuration so the next access re-reads the file."""
    global _config
    _config = {}


def get_gcp_projects() -> list[str]:
    """Get GCP projects from configuration."""
    config = load_config()
    return config.get("gcp_projects", [])


def get_default_project() -> str | None:
    """
    Get the project used when a peering does not name one.

    Lookup order: GOOGLE_CLOUD_PROJECT environment variable, the
    'gcp_project' key, then the first entry of 'gcp_projects'.

    Returns:
        str | None: Project ID, or None if nothing is configured
    """
    env_project = os.environ.get("GOOGLE_CLOUD_PROJECT")
    if env_project:
        return env_project

    config = load_config()
    if config.get("gcp_project"):
        return config["gcp_project"]

    projects = get_gcp_projects()
    return projects[0] if projects else None


def get_operation_timeout() -> float:
    """Get the number of seconds to wait for a compute operation."""
    config = load_config()
    return float(config.get("operation_timeout", DEFAULT_OPERATION_TIMEOUT))


def get_operation_poll_interval() -> float:
    """Get the initial number of seconds between operation polls."""
    config = load_config()
    return float(config.get("operation_poll_interval", DEFAULT_OPERATION_POLL_INTERVAL))
