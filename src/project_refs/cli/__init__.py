"""project-refs command line interface."""

from __future__ import annotations

import typer

from project_refs import __version__
from project_refs.cli.commands import query
from project_refs.cli.commands.link import link
from project_refs.cli.helpers import console

app = typer.Typer(
    name="project-refs",
    help="Keep TypeScript project references in sync with internal package dependencies.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"project-refs {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Keep TypeScript project references in sync with internal package dependencies."""


app.command()(link)
app.add_typer(query.app, name="query")


def main() -> None:
    app()


__all__ = ["app", "main"]
