"""Centralized path management for servicebox.

State written by the tooling (config, logs) lives under a single base
directory, overridable with the SERVICEBOX_HOME environment variable.

Default location: ~/.servicebox
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "SERVICEBOX_HOME"

CONFIG_FILENAME = "config.toml"
LOCAL_CONFIG_FILENAME = "servicebox.toml"


@lru_cache(maxsize=1)
def get_servicebox_home() -> Path:
    """Get the base directory for servicebox data.

    Resolution order:
    1. SERVICEBOX_HOME environment variable (if set)
    2. ~/.servicebox
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".servicebox"


def get_config_path() -> Path:
    return get_servicebox_home() / CONFIG_FILENAME


def get_logs_path() -> Path:
    return get_servicebox_home() / "logs"
