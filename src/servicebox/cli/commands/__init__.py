"""CLI command modules."""

from servicebox.cli.commands import call, config, describe, serve

__all__ = ["call", "config", "describe", "serve"]
