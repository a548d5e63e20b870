"""Resolve ``module:attribute`` targets to a Host."""

import importlib
import inspect
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from servicebox.config import ConfigError

if TYPE_CHECKING:
    from servicebox.config import ServiceBoxConfig
    from servicebox.host import Host


def load_host(target: str, config: "ServiceBoxConfig | None" = None) -> "Host":
    """Import a Host, or a factory returning one, from ``module:attribute``.

    Factories taking a positional parameter are called with the loaded
    configuration, others with no arguments. When a configuration is given
    its protocol limits are applied to the resulting host.

    Raises:
        ConfigError: If the target cannot be imported or is not a Host.
    """
    from servicebox.host import Host

    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigError(f"Target must look like 'module:attribute', got {target!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import module {module_name!r}: {e}") from e

    obj = module
    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ConfigError(f"{module_name!r} has no attribute {attribute!r}") from e

    if isinstance(obj, Host):
        host = obj
    elif callable(obj):
        host = obj(config) if _takes_config(obj) else obj()
        if not isinstance(host, Host):
            raise ConfigError(f"{target!r} did not return a Host")
    else:
        raise ConfigError(f"{target!r} is not a Host or a factory returning one")

    if config is not None:
        host.configure(config)
    return host


def _takes_config(factory: Callable[..., Any]) -> bool:
    try:
        parameters = inspect.signature(factory).parameters.values()
    except (TypeError, ValueError):
        return False
    return any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
        for p in parameters
    )
