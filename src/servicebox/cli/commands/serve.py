"""Server command for running a host over HTTP."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    """Register the serve command."""

    @app.command()
    def serve(
        target: Annotated[
            str,
            typer.Argument(help="Host to serve, as 'module:attribute'"),
        ],
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        host: Annotated[
            str | None,
            typer.Option(
                "--host",
                "-h",
                help="Host to bind to (overrides config)",
            ),
        ] = None,
        port: Annotated[
            int | None,
            typer.Option(
                "--port",
                "-p",
                help="Port to bind to (overrides config)",
            ),
        ] = None,
    ) -> None:
        """Serve a host's services over HTTP."""
        try:
            asyncio.run(_run_server(target, config, host, port))
        except KeyboardInterrupt:
            # Use print here since logging may not be configured yet
            print("\nServer stopped")


async def _run_server(
    target: str,
    config_path: Path | None = None,
    host: str | None = None,
    port: int | None = None,
) -> None:
    """Run the server asynchronously."""
    from servicebox.cli.console import error
    from servicebox.cli.target import load_host
    from servicebox.config import ConfigError, load_config
    from servicebox.logging import configure_logging, configure_redaction
    from servicebox.server import ServerRunner, create_app
    from servicebox.validator import configure_compiler

    config = load_config(config_path)
    configure_compiler(
        extension_keywords=config.schema_.extension_keywords,
        check_formats=config.schema_.check_formats,
    )

    configure_redaction(enabled=config.logging.redact)
    configure_logging(
        level=config.logging.level,
        use_rich=True,
        log_to_file=config.logging.log_to_file,
    )

    try:
        rpc_host = load_host(target, config)
    except ConfigError as e:
        error(str(e))
        raise typer.Exit(1) from e

    app = create_app(rpc_host, config)
    runner = ServerRunner(
        app,
        host=host or config.server.host,
        port=port if port is not None else config.server.port,
    )
    await runner.run()
