"""Link command: bring tsconfig.json project references up to date."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from project_refs.cli.helpers import ROOT_ENVVAR, console, resolve_root
from project_refs.link import (
    LinkError,
    ProjectReferencesOutOfDateError,
    link_project_references,
)
from project_refs.opts import Action

EXIT_OUT_OF_DATE = 1
EXIT_ERROR = 2


def link(
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        envvar=ROOT_ENVVAR,
        file_okay=False,
        help="Monorepo root (defaults to the current directory)",
    ),
    action: Action = typer.Option(
        Action.WRITE,
        "--action",
        envvar="PROJECT_REFS_ACTION",
        case_sensitive=False,
        help="write: update files in place; lint: report out-of-date files only",
    ),
) -> None:
    """Link TypeScript project references to internal package dependencies.

    Every directory above an internal package gets a tsconfig.json that
    references its children, and every package's tsconfig.json references
    its internal dependencies.

    Exit codes: 0 on success, 1 when lint finds out-of-date references,
    2 when manifests or configuration files cannot be read or written.

    Examples:
        # Update every tsconfig.json in place
        project-refs link

        # Check in CI without touching any file
        project-refs link --action lint
    """
    repo_root = resolve_root(root)

    try:
        summary = link_project_references(repo_root, action, console=console)
    except ProjectReferencesOutOfDateError as exc:
        divergent = len(exc.summary.divergent) if exc.summary else 0
        console.print(
            f"\n[red]Lint failed:[/red] {escape(str(exc))} ({divergent} file(s) out of date)"
        )
        console.print("Run `project-refs link` to update them.")
        raise typer.Exit(EXIT_OUT_OF_DATE)
    except LinkError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(EXIT_ERROR)

    if summary.updated:
        console.print(
            f"[green]✓[/green] Updated project references in {len(summary.updated)} file(s)"
        )
        for outcome in summary.updated:
            console.print(f"  • {escape(str(outcome.path))}")
    else:
        console.print("[green]✓[/green] Project references are up-to-date")


__all__ = ["link"]
