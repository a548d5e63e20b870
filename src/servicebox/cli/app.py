"""Main CLI application."""

import typer

from servicebox.cli.commands import call, config, describe, serve

app = typer.Typer(
    name="servicebox",
    help="servicebox - typed batch JSON-RPC host",
    no_args_is_help=True,
)

serve.register(app)
describe.register(app)
call.register(app)
config.register(app)


def main() -> None:
    app()
