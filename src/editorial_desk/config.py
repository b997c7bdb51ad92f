"""Runtime configuration.

Configuration is a plain nested dict. ``DEFAULT_CONFIG`` is merged with an
optional JSON file so a deployment only needs to list the keys it changes.
"""

import copy
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict = {
    "store": {
        "kind": "json",
        "root": "./workspace/records",
    },
    "backend": {
        "base_url": "http://localhost:5000/api",
        "timeout": 30,
        "retry_attempts": 3,
        "retry_delay": 1,
        "headers": {
            "User-Agent": "editorial-desk/0.1",
        },
    },
    "blobs": {
        "root": "./workspace/blobs",
    },
    "outbox": {
        "root": "./workspace/outbox",
    },
    "mail": {
        "publication_name": "Mosaic Magazine HI",
        "team_name": "The Mosaic Magazine Editorial Team",
    },
    "actor": {
        "email": "editor@localhost",
        "name": "Editor",
        "role": "editor",
    },
}


def merge_config(base: dict, overrides: dict) -> dict:
    """Recursively merge ``overrides`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(path: Path | None = None) -> dict:
    """Load configuration, layering a JSON file over the defaults.

    Args:
        path: Optional path to a JSON config file

    Returns:
        The merged configuration dict

    Raises:
        FileNotFoundError: If ``path`` is given but does not exist
        ValueError: If the file does not contain a JSON object
    """
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(path, "r", encoding="utf-8") as f:
        overrides = json.load(f)
    if not isinstance(overrides, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    logger.debug(f"Loaded config overrides from {path}")
    return merge_config(DEFAULT_CONFIG, overrides)
