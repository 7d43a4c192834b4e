"""Monorepo workspace discovery.

The set of internal packages is described by the monorepo's own workspace
configuration. Sources are consulted in this order:

1. ``lerna.json`` -> ``packages``
2. ``package.json`` -> ``workspaces`` (list, or ``{"packages": [...]}``)
3. ``pnpm-workspace.yaml`` -> ``packages``

Each entry is a glob relative to the monorepo root; entries starting with
``!`` exclude matches. A matched directory is an internal package when it
contains a ``package.json``.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from project_refs.json_io import FromFileError, read_json_file
from project_refs.package_manifest import MANIFEST_FILENAME, PackageManifest

LERNA_FILENAME = "lerna.json"
PNPM_WORKSPACE_FILENAME = "pnpm-workspace.yaml"


class EnumeratePackageManifestsError(Exception):
    """Raised when the internal packages of a monorepo cannot be enumerated."""


def _string_globs(value: object, source: Path) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise EnumeratePackageManifestsError(
            f"Expected a list of package globs in {source}"
        )
    return list(value)


def _read_lerna_globs(root: Path) -> list[str] | None:
    path = root / LERNA_FILENAME
    if not path.exists():
        return None
    try:
        contents = read_json_file(path)
    except FromFileError as e:
        raise EnumeratePackageManifestsError(str(e)) from e
    if "packages" not in contents:
        return None
    return _string_globs(contents["packages"], path)


def _read_workspaces_globs(root: Path) -> list[str] | None:
    path = root / MANIFEST_FILENAME
    if not path.exists():
        return None
    try:
        contents = read_json_file(path)
    except FromFileError as e:
        raise EnumeratePackageManifestsError(str(e)) from e
    workspaces = contents.get("workspaces")
    if workspaces is None:
        return None
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages", [])
    return _string_globs(workspaces, path)


def _read_pnpm_globs(root: Path) -> list[str] | None:
    path = root / PNPM_WORKSPACE_FILENAME
    if not path.exists():
        return None
    try:
        contents = YAML(typ="safe").load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, YAMLError) as e:
        raise EnumeratePackageManifestsError(f"Unable to read {path}") from e
    if not isinstance(contents, dict) or "packages" not in contents:
        return None
    return _string_globs(contents["packages"], path)


def _expand_glob(root: Path, pattern: str) -> set[PurePosixPath]:
    """Return package directories (relative to root) matched by ``pattern``."""
    pattern = pattern.strip().rstrip("/")
    if pattern.startswith("./"):
        pattern = pattern[2:]

    if pattern in ("", "."):
        candidates = [root]
    else:
        candidates = list(root.glob(pattern))

    matches: set[PurePosixPath] = set()
    for candidate in candidates:
        if not candidate.is_dir():
            continue
        relative = PurePosixPath(candidate.relative_to(root).as_posix())
        if "node_modules" in relative.parts:
            continue
        if (candidate / MANIFEST_FILENAME).is_file():
            matches.add(relative)
    return matches


class MonorepoManifest:
    """
    Aggregate description of every internal package in a monorepo.

    Enumeration reads every package.json below the workspace globs, which is
    the slowest step of a run. Callers compute the name lookup once with
    :meth:`package_manifests_by_name` and pass it around.
    """

    def __init__(self, root: Path, globs: list[str]) -> None:
        self.root = root
        self.globs = globs

    @classmethod
    def from_directory(cls, root: Path) -> "MonorepoManifest":
        """Locate the workspace configuration of the monorepo at ``root``.

        Raises:
            EnumeratePackageManifestsError: If no workspace configuration exists
                or it is malformed
        """
        root = Path(root)
        for reader in (_read_lerna_globs, _read_workspaces_globs, _read_pnpm_globs):
            globs = reader(root)
            if globs is not None:
                return cls(root, globs)
        raise EnumeratePackageManifestsError(
            f"No workspace configuration found in {root} "
            f"(expected {LERNA_FILENAME}, {MANIFEST_FILENAME} workspaces "
            f"or {PNPM_WORKSPACE_FILENAME})"
        )

    def package_directories(self) -> list[PurePosixPath]:
        """Return every internal package directory, sorted."""
        included: set[PurePosixPath] = set()
        excluded: set[PurePosixPath] = set()
        for pattern in self.globs:
            if pattern.startswith("!"):
                excluded |= _expand_glob(self.root, pattern[1:])
            else:
                included |= _expand_glob(self.root, pattern)
        return sorted(included - excluded)

    def internal_package_manifests(self) -> list[PackageManifest]:
        """Load the manifest of every internal package, sorted by directory.

        Raises:
            EnumeratePackageManifestsError: If a manifest is malformed or two
                packages share a name
        """
        manifests: list[PackageManifest] = []
        seen: dict[str, PurePosixPath] = {}
        for directory in self.package_directories():
            try:
                manifest = PackageManifest.from_directory(self.root, directory)
            except FromFileError as e:
                raise EnumeratePackageManifestsError(str(e)) from e
            if manifest.name in seen:
                raise EnumeratePackageManifestsError(
                    f"Package name '{manifest.name}' is used by both "
                    f"{seen[manifest.name]} and {directory}"
                )
            seen[manifest.name] = directory
            manifests.append(manifest)
        return manifests

    def package_manifests_by_name(self) -> dict[str, PackageManifest]:
        """Return a lookup of every internal package manifest by package name."""
        return {manifest.name: manifest for manifest in self.internal_package_manifests()}
