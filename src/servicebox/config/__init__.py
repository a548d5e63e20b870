"""Configuration module."""

from servicebox.config.loader import load_config
from servicebox.config.models import (
    ConfigError,
    LoggingConfig,
    ProtocolConfig,
    SchemaConfig,
    ServerConfig,
    ServiceBoxConfig,
)
from servicebox.config.paths import (
    get_config_path,
    get_logs_path,
    get_servicebox_home,
)

__all__ = [
    "ConfigError",
    "LoggingConfig",
    "ProtocolConfig",
    "SchemaConfig",
    "ServerConfig",
    "ServiceBoxConfig",
    "get_config_path",
    "get_logs_path",
    "get_servicebox_home",
    "load_config",
]
