"""Describe command: print a host's methods and events."""

import json
from typing import Annotated

import typer


def register(app: typer.Typer) -> None:
    """Register the describe command."""

    @app.command()
    def describe(
        target: Annotated[
            str,
            typer.Argument(help="Host to describe, as 'module:attribute'"),
        ],
    ) -> None:
        """Print method signatures and event schemas as JSON."""
        from servicebox.cli.console import console, error
        from servicebox.cli.target import load_host
        from servicebox.config import ConfigError

        try:
            host = load_host(target)
        except ConfigError as e:
            error(str(e))
            raise typer.Exit(1) from e

        console.print_json(json.dumps(host.describe()))
