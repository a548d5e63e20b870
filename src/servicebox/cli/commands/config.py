"""Configuration management commands."""

import tomllib
from pathlib import Path
from typing import Annotated

import typer

from servicebox.cli.console import console, error, success


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str,
            typer.Argument(help="Action: show, validate"),
        ],
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: $SERVICEBOX_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Show or validate configuration."""
        from pydantic import ValidationError
        from rich.syntax import Syntax
        from rich.table import Table

        from servicebox.config import load_config
        from servicebox.config.paths import get_config_path

        expanded_path = path.expanduser() if path else get_config_path()

        if action not in ("show", "validate"):
            error(f"Unknown action: {action}")
            console.print("Valid actions: show, validate")
            raise typer.Exit(1)

        if not expanded_path.exists():
            error(f"Config file not found: {expanded_path}")
            raise typer.Exit(1)

        if action == "show":
            content = expanded_path.read_text()
            console.print(f"[bold]Config file: {expanded_path}[/bold]\n")
            console.print(Syntax(content, "toml", theme="monokai", line_numbers=True))
            return

        try:
            config_obj = load_config(expanded_path)
        except tomllib.TOMLDecodeError as e:
            error(f"Invalid TOML: {e}")
            raise typer.Exit(1) from e
        except ValidationError as e:
            error("Configuration validation failed:")
            for err in e.errors():
                loc = ".".join(str(part) for part in err["loc"])
                console.print(f"  [red]•[/red] {loc}: {err['msg']}")
            raise typer.Exit(1) from e

        table = Table(title="Configuration Summary")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        table.add_row(
            "Server",
            f"{config_obj.server.host}:{config_obj.server.port}{config_obj.server.path}",
        )
        table.add_row("Max body bytes", str(config_obj.protocol.max_body_bytes))
        table.add_row(
            "Extension keywords", ", ".join(config_obj.schema_.extension_keywords)
        )
        table.add_row("Log level", config_obj.logging.level)

        success("Configuration is valid!")
        console.print(table)
