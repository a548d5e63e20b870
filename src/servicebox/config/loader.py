"""Configuration loading from TOML files and environment variables."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from servicebox.config.models import ServiceBoxConfig
from servicebox.config.paths import LOCAL_CONFIG_FILENAME, get_config_path

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "SERVICEBOX_LOG_LEVEL"


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path(LOCAL_CONFIG_FILENAME),  # Current directory
        get_config_path(),  # ~/.servicebox/config.toml (or SERVICEBOX_HOME)
    ]


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply environment overrides on top of file values."""
    if level := os.environ.get(LOG_LEVEL_ENV_VAR):
        config.setdefault("logging", {})["level"] = level.upper()
    return config


def load_config(path: Path | None = None) -> ServiceBoxConfig:
    """Load configuration from a TOML file.

    Args:
        path: Explicit path to config file. If None, searches default
            locations and falls back to defaults when none exists.

    Returns:
        Validated ServiceBoxConfig instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
        pydantic.ValidationError: If the values are invalid.
    """
    config_path: Path | None = None

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in _get_default_config_paths():
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    raw_config: dict[str, Any] = {}
    if config_path is None:
        logger.debug("No config file found, using defaults")
    else:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)

    return ServiceBoxConfig.model_validate(_apply_env_overrides(raw_config))
