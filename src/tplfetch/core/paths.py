"""Path constants and config-file resolution."""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "tplfetch"
CONFIG_TOML = "config.toml"
ENV_FILE = "env"


def config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / APP_NAME


def config_path() -> Path:
    """$TPLFETCH_CONFIG if set, else the user config file."""
    override = os.environ.get("TPLFETCH_CONFIG", "").strip()
    if override:
        return Path(override).expanduser()
    return config_dir() / CONFIG_TOML
