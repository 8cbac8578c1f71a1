"""
Shared utility functions for the Kaspa wallet.

Contains path helpers used across packages.
"""

import os
from pathlib import Path


APP_HOME_ENV = "KASPA_WALLET_HOME"


def get_app_dir() -> Path:
    """Get the application data directory ($KASPA_WALLET_HOME or ~/.kaspa-wallet)."""
    override = os.environ.get(APP_HOME_ENV)
    if override:
        app_dir = Path(override)
    else:
        app_dir = Path.home() / ".kaspa-wallet"

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_settings_path() -> Path:
    """Get path to settings file."""
    return get_app_dir() / "settings.json"


def get_logs_dir() -> Path:
    """Get the logs directory."""
    logs_dir = get_app_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir
