"""Query commands for inspecting the monorepo's internal dependency graph."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from typing_extensions import Annotated

from project_refs.cli.helpers import ROOT_ENVVAR, console, resolve_root
from project_refs.monorepo_manifest import EnumeratePackageManifestsError
from project_refs.opts import InternalDependenciesFormat
from project_refs.query import query_internal_dependencies

app = typer.Typer(
    name="query",
    help="Query the internal dependency graph of the monorepo",
    no_args_is_help=True,
)


@app.command("internal-dependencies")
def internal_dependencies(
    root: Annotated[
        Optional[Path],
        typer.Option("--root", envvar=ROOT_ENVVAR, file_okay=False, help="Monorepo root"),
    ] = None,
    fmt: Annotated[
        InternalDependenciesFormat,
        typer.Option("--format", case_sensitive=False, help="Identify packages by name or path"),
    ] = InternalDependenciesFormat.NAME,
) -> None:
    """Print each internal package's internal dependencies as JSON."""
    try:
        result = query_internal_dependencies(resolve_root(root), fmt)
    except EnumeratePackageManifestsError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(2)

    print(json.dumps(result, indent=2))
