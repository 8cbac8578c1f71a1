"""
Settings - JSON application settings with defaults.

Stored at <app dir>/settings.json. Command-line flags override these.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from utils import get_settings_path

logger = logging.getLogger(__name__)


DEFAULT_SETTINGS = {
    "wallet_file": "wallet.dat",
    "node_url": "http://127.0.0.1:16110",
    "derivation_path": "m/44'/111111'/0'/0/0",
    "word_count": 12,
    "log_retention_days": 0,
    "request_timeout": 10.0,
}


def _coerce(key: str, value):
    """Value cast to the type of its default, or None if it doesn't fit."""
    default = DEFAULT_SETTINGS[key]
    # bool is an int subclass but never a valid count or timeout
    if isinstance(value, bool):
        return None
    if isinstance(default, float) and isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, type(default)):
        return value
    return None


def load_settings(path: Optional[Path] = None) -> dict:
    """Load settings from disk, merged over DEFAULT_SETTINGS."""
    settings = dict(DEFAULT_SETTINGS)
    settings_path = path or get_settings_path()

    if settings_path.exists():
        try:
            with open(settings_path, 'r') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings root must be an object")
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load settings: {e}")
            return settings

        for key, value in data.items():
            if key not in DEFAULT_SETTINGS:
                continue
            coerced = _coerce(key, value)
            if coerced is None:
                logger.warning(
                    f"Ignoring setting {key}={value!r}: expected "
                    f"{type(DEFAULT_SETTINGS[key]).__name__}"
                )
                continue
            settings[key] = coerced

    return settings


def save_settings(settings: dict, path: Optional[Path] = None) -> None:
    """Save settings to disk."""
    settings_path = path or get_settings_path()
    with open(settings_path, 'w') as f:
        json.dump(settings, f, indent=2)
