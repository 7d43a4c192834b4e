"""Shared console and root resolution for CLI commands."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

console = Console(soft_wrap=True, emoji=False)

ROOT_ENVVAR = "PROJECT_REFS_ROOT"


def resolve_root(root: Path | None) -> Path:
    """Return the monorepo root given on the command line, or the cwd."""
    return (root if root is not None else Path.cwd()).resolve()
