"""
TypeScript project reference management for JavaScript monorepos.

This package keeps the ``references`` of every ``tsconfig.json`` in a
monorepo consistent with the internal package dependency graph.

Responsibilities:
- Manifest discovery (lerna.json, package.json workspaces, pnpm-workspace.yaml)
- Directory hierarchy linking (parent tsconfig.json files)
- Package dependency linking (per-package tsconfig.json files)
- Internal dependency queries
"""

from project_refs.opts import Action, InternalDependenciesFormat
from project_refs.link import (
    LinkError,
    LinkSummary,
    ProjectReferencesOutOfDateError,
    ReconcileOutcome,
    ReconcileStatus,
    link_project_references,
)
from project_refs.query import query_internal_dependencies

__version__ = "0.3.0"

__all__ = [
    # Options
    "Action",
    "InternalDependenciesFormat",
    # Linking
    "LinkError",
    "LinkSummary",
    "ProjectReferencesOutOfDateError",
    "ReconcileOutcome",
    "ReconcileStatus",
    "link_project_references",
    # Queries
    "query_internal_dependencies",
]
