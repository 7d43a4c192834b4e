"""Query the internal dependency graph of a monorepo."""

from __future__ import annotations

from pathlib import Path

from project_refs.monorepo_manifest import MonorepoManifest
from project_refs.opts import InternalDependenciesFormat


def query_internal_dependencies(
    root: Path | str,
    fmt: InternalDependenciesFormat = InternalDependenciesFormat.NAME,
) -> dict[str, list[str]]:
    """Return each internal package's internal dependencies.

    Args:
        root: Monorepo root
        fmt: Identify packages by name, or by directory relative to ``root``

    Returns:
        Sorted mapping of package -> sorted internal dependencies

    Raises:
        EnumeratePackageManifestsError: If the packages cannot be enumerated
    """
    manifests_by_name = MonorepoManifest.from_directory(Path(root)).package_manifests_by_name()

    def identify(manifest) -> str:
        if fmt == InternalDependenciesFormat.PATH:
            return manifest.directory.as_posix()
        return manifest.name

    result: dict[str, list[str]] = {}
    for manifest in manifests_by_name.values():
        dependencies = manifest.internal_dependencies(manifests_by_name)
        result[identify(manifest)] = sorted(identify(dependency) for dependency in dependencies)
    return dict(sorted(result.items()))
