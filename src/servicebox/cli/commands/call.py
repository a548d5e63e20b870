"""Call command: invoke a remote method."""

import asyncio
import json
from typing import Annotated, Any

import typer


def register(app: typer.Typer) -> None:
    """Register the call command."""

    @app.command()
    def call(
        endpoint: Annotated[
            str,
            typer.Argument(help="Host endpoint URL, e.g. http://127.0.0.1:8080/"),
        ],
        method: Annotated[
            str,
            typer.Argument(help="Method as 'namespace/name'"),
        ],
        args: Annotated[
            list[str] | None,
            typer.Argument(help="Arguments, each decoded as JSON"),
        ] = None,
    ) -> None:
        """Call a method and print its result as JSON."""
        import httpx

        from servicebox.cli.console import console, error
        from servicebox.client import Client
        from servicebox.exceptions import RemoteError

        try:
            params = [_decode_arg(arg) for arg in args or []]
        except json.JSONDecodeError as e:
            error(f"Arguments must be JSON: {e}")
            raise typer.Exit(2) from e

        async def run() -> Any:
            async with Client(endpoint) as client:
                return await client.execute(method, *params)

        try:
            result = asyncio.run(run())
        except RemoteError as e:
            error(f"{e.message} ({e.code})")
            if e.data is not None:
                console.print_json(json.dumps(e.data))
            raise typer.Exit(1) from e
        except httpx.HTTPError as e:
            error(f"Request failed: {e}")
            raise typer.Exit(1) from e

        console.print_json(json.dumps(result))


def _decode_arg(arg: str) -> Any:
    return json.loads(arg)
