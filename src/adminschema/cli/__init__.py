"""
adminschema CLI.

Inspection commands for the built-in schema registry:

- schemas: list registered schemas
- show: list the fields of one schema
- resolve: resolve visibility, defaults and placeholders for given values
"""

import typer

from adminschema import __version__
from adminschema.cli.inspect import resolve_command, schemas_command, show_command

app = typer.Typer(
    help="Inspect administrative configuration schemas",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        typer.echo(f"adminschema {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version",
    ),
) -> None:
    """adminschema CLI main callback for global options."""
    pass


app.command(name="schemas")(schemas_command)
app.command(name="show")(show_command)
app.command(name="resolve")(resolve_command)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


__all__ = ["app", "main", "version_callback"]
