"""Link TypeScript project references across a monorepo.

Two independent passes share one entry point, :func:`link_project_references`:

1. ``link_children_packages`` - every directory above an internal package gets
   a tsconfig.json referencing its immediate children, so the monorepo can be
   compiled from the top down.
2. ``link_package_dependencies`` - every package's tsconfig.json references
   its internal dependencies, as paths relative to the package.

Each configuration file ends in one of three states:

- UNCHANGED: current references already match, nothing happens
- UPDATED: references differed and the file was rewritten (write action)
- DIVERGENT: references differ and are reported only (lint action)

References are always sorted before they are stored: the files live in
version control and any ordering change would show up as a diff.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Iterable, Mapping

from rich.console import Console

from project_refs.configuration_file import (
    ConfigurationDocument,
    ProjectReference,
    TypescriptConfig,
    TypescriptParentProjectReference,
    WriteError,
    references_to_value,
    write,
)
from project_refs.json_io import FromFileError
from project_refs.monorepo_manifest import EnumeratePackageManifestsError, MonorepoManifest
from project_refs.opts import Action
from project_refs.package_manifest import PackageManifest

ConsoleType = Console | None


class LinkError(Exception):
    """Raised when project references cannot be linked.

    The underlying manifest, read or write failure is chained as ``__cause__``.
    """


class ProjectReferencesOutOfDateError(LinkError):
    """Lint found configuration files whose references are out of date.

    Not a failure of the tool itself: every divergent file has already been
    reported when this is raised.
    """

    def __init__(self, summary: "LinkSummary | None" = None) -> None:
        super().__init__("TypeScript project references are not up-to-date")
        self.summary = summary


class ReconcileStatus(str, Enum):
    """Outcome of reconciling a single configuration file."""

    UNCHANGED = "unchanged"
    UPDATED = "updated"
    DIVERGENT = "divergent"


@dataclass(frozen=True)
class ReconcileOutcome:
    """Decision for one configuration file.

    Attributes:
        status: What happens (or happened) to the file
        path: File path relative to the monorepo root
        desired: References the file should contain
    """

    status: ReconcileStatus
    path: PurePosixPath
    desired: tuple[ProjectReference, ...] = ()


@dataclass
class LinkSummary:
    """Outcomes of both linking passes of one run."""

    action: Action
    children: list[ReconcileOutcome] = field(default_factory=list)
    dependencies: list[ReconcileOutcome] = field(default_factory=list)

    @property
    def outcomes(self) -> list[ReconcileOutcome]:
        return self.children + self.dependencies

    @property
    def updated(self) -> list[ReconcileOutcome]:
        return [o for o in self.outcomes if o.status == ReconcileStatus.UPDATED]

    @property
    def divergent(self) -> list[ReconcileOutcome]:
        return [o for o in self.outcomes if o.status == ReconcileStatus.DIVERGENT]

    @property
    def is_success(self) -> bool:
        """True unless lint found out-of-date references."""
        return not self.divergent


def _resolve_console(console: ConsoleType) -> Console:
    """Return the provided console or lazily create one."""
    return console if console is not None else Console()


# ============================================================================
# Hierarchy and reference construction
# ============================================================================


def key_children_by_parent(
    accumulator: dict[str, list[str]],
    package_manifest: PackageManifest,
) -> dict[str, list[str]]:
    """Record each component of a package directory as a child of its parent.

    A package at ``a/b/c`` adds ``a`` under ``""``, ``b`` under ``a`` and
    ``c`` under ``a/b``.
    """
    parts = PurePosixPath(package_manifest.directory).parts
    for index, component in enumerate(parts):
        parent = "/".join(parts[:index])
        children = accumulator.setdefault(parent, [])
        if component not in children:
            children.append(component)
    return accumulator


def build_directory_hierarchy(manifests: Iterable[PackageManifest]) -> dict[str, list[str]]:
    """Map every ancestor directory of an internal package to its children."""
    accumulator: dict[str, list[str]] = {}
    for manifest in manifests:
        key_children_by_parent(accumulator, manifest)
    return accumulator


def create_project_references(paths: Iterable[str]) -> list[ProjectReference]:
    """Return project references for ``paths``, sorted by path."""
    return [ProjectReference(path=path) for path in sorted(paths)]


def relative_path(from_directory: PurePosixPath | str, to_directory: PurePosixPath | str) -> str:
    """Return the path to ``to_directory`` as seen from ``from_directory``.

    Both directories must be relative to the same root.

    Raises:
        ValueError: If either directory is absolute
    """
    source = PurePosixPath(from_directory)
    target = PurePosixPath(to_directory)
    if source.is_absolute() or target.is_absolute():
        raise ValueError(f"Cannot relate {source} and {target}: paths must be relative")

    common = 0
    for source_part, target_part in zip(source.parts, target.parts):
        if source_part != target_part:
            break
        common += 1

    parts = [".."] * (len(source.parts) - common) + list(target.parts[common:])
    return "/".join(parts) or "."


def references_match(
    current: Iterable[ProjectReference], desired: Iterable[ProjectReference]
) -> bool:
    """Compare reference lists regardless of the order they are stored in."""
    return sorted(current) == sorted(desired)


# ============================================================================
# Outcome computation and dispatch
# ============================================================================


def diff_references(
    current: Iterable[ProjectReference],
    desired: Iterable[ProjectReference],
    action: Action,
    path: PurePosixPath,
) -> ReconcileOutcome:
    """Decide what happens to a configuration file. Performs no I/O."""
    desired = tuple(desired)
    if references_match(current, desired):
        return ReconcileOutcome(ReconcileStatus.UNCHANGED, path, desired)
    if action == Action.LINT:
        return ReconcileOutcome(ReconcileStatus.DIVERGENT, path, desired)
    return ReconcileOutcome(ReconcileStatus.UPDATED, path, desired)


def report_divergence(outcome: ReconcileOutcome, console: ConsoleType = None) -> None:
    """Print a divergent file and the references it should contain."""
    resolved_console = _resolve_console(console)
    serialized = json.dumps(references_to_value(list(outcome.desired)), indent=2)
    resolved_console.print(
        f"File has out-of-date project references: {outcome.path}, expecting:",
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )
    resolved_console.print(serialized, markup=False, emoji=False, highlight=False, soft_wrap=True)


def apply_outcome(
    root: Path,
    document: ConfigurationDocument,
    outcome: ReconcileOutcome,
    console: ConsoleType = None,
) -> None:
    """Carry out ``outcome`` for ``document``.

    Raises:
        LinkError: If an updated document cannot be written
    """
    if outcome.status == ReconcileStatus.UNCHANGED:
        return
    if outcome.status == ReconcileStatus.DIVERGENT:
        report_divergence(outcome, console)
        return

    document.references = list(outcome.desired)
    try:
        write(root, document)
    except WriteError as e:
        raise LinkError(f"Unable to write project references: {e}") from e


# ============================================================================
# Reconcilers
# ============================================================================


def _directory_key(directory: PurePosixPath | str) -> str:
    """Hierarchy key of a directory; the monorepo root is ``""``."""
    return "/".join(PurePosixPath(directory).parts)


def link_children_packages(
    root: Path,
    action: Action,
    manifests: Iterable[PackageManifest],
    console: ConsoleType = None,
) -> list[ReconcileOutcome]:
    """Make every parent directory's tsconfig.json reference its children.

    A directory that is itself a package is left to
    :func:`link_package_dependencies`, which merges its children into the
    package's own references.

    Raises:
        LinkError: If a parent tsconfig.json cannot be read or written
    """
    manifests = list(manifests)
    package_directories = {_directory_key(manifest.directory) for manifest in manifests}
    outcomes: list[ReconcileOutcome] = []
    hierarchy = build_directory_hierarchy(manifests)

    for directory, children in sorted(hierarchy.items()):
        if directory in package_directories:
            continue
        desired = create_project_references(children)
        try:
            tsconfig = TypescriptParentProjectReference.from_directory(
                root, PurePosixPath(directory)
            )
        except FromFileError as e:
            raise LinkError(f"Unable to read parent configuration: {e}") from e

        outcome = diff_references(tsconfig.references, desired, action, tsconfig.path)
        apply_outcome(root, tsconfig, outcome, console)
        outcomes.append(outcome)

    return outcomes


def link_package_dependencies(
    root: Path,
    action: Action,
    manifests_by_name: Mapping[str, PackageManifest],
    console: ConsoleType = None,
) -> list[ReconcileOutcome]:
    """Make every package's tsconfig.json reference its internal dependencies.

    A package whose directory contains other packages also references its
    immediate children, so both kinds of reference live in one list.

    Args:
        root: Monorepo root
        action: Write or lint
        manifests_by_name: Lookup of every internal package, computed once
        console: Rich console for lint reports

    Raises:
        LinkError: If a package tsconfig.json cannot be read or written
    """
    outcomes: list[ReconcileOutcome] = []
    hierarchy = build_directory_hierarchy(manifests_by_name.values())

    for manifest in sorted(manifests_by_name.values(), key=lambda m: m.directory):
        paths = [
            relative_path(manifest.directory, dependency.directory)
            for dependency in manifest.internal_dependencies(manifests_by_name)
        ]
        paths.extend(hierarchy.get(_directory_key(manifest.directory), []))
        desired = create_project_references(dict.fromkeys(paths))
        try:
            tsconfig = TypescriptConfig.from_directory(root, manifest.directory)
        except FromFileError as e:
            raise LinkError(f"Unable to read package configuration: {e}") from e

        outcome = diff_references(tsconfig.references, desired, action, tsconfig.path)
        apply_outcome(root, tsconfig, outcome, console)
        outcomes.append(outcome)

    return outcomes


def link_project_references(
    root: Path | str,
    action: Action = Action.WRITE,
    console: ConsoleType = None,
) -> LinkSummary:
    """Link parent and package project references of the monorepo at ``root``.

    The children pass completes before the dependencies pass begins.

    Returns:
        Outcomes of both passes

    Raises:
        ProjectReferencesOutOfDateError: Lint found out-of-date files
        LinkError: Manifests or configuration files could not be read or written
    """
    root = Path(root)
    try:
        manifests_by_name = MonorepoManifest.from_directory(root).package_manifests_by_name()
    except EnumeratePackageManifestsError as e:
        raise LinkError(f"Unable to enumerate internal packages: {e}") from e

    manifests = sorted(manifests_by_name.values(), key=lambda m: m.directory)

    summary = LinkSummary(action=action)
    summary.children = link_children_packages(root, action, manifests, console)
    summary.dependencies = link_package_dependencies(root, action, manifests_by_name, console)

    if action == Action.LINT and not summary.is_success:
        raise ProjectReferencesOutOfDateError(summary)

    return summary
