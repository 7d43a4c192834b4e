"""package.json manifests of internal monorepo packages."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Mapping

from project_refs.json_io import FromFileError, read_json_file

MANIFEST_FILENAME = "package.json"

DEPENDENCY_GROUPS = (
    "dependencies",
    "devDependencies",
    "optionalDependencies",
    "peerDependencies",
)


@dataclass
class PackageManifest:
    """
    A single internal package of the monorepo.

    Fields:
    - name: Package name from package.json
    - directory: Package directory, relative to the monorepo root
    - contents: Raw package.json contents
    """

    name: str
    directory: PurePosixPath
    contents: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_directory(cls, root: Path, directory: PurePosixPath) -> "PackageManifest":
        """Load ``<root>/<directory>/package.json``.

        Raises:
            FromFileError: If the manifest is unreadable or has no name
        """
        path = root / directory / MANIFEST_FILENAME
        contents = read_json_file(path)
        name = contents.get("name")
        if not isinstance(name, str) or not name:
            raise FromFileError(path, "Package manifest has no name")
        return cls(name=name, directory=directory, contents=contents)

    def dependency_names(self) -> list[str]:
        """Return every declared dependency name, first occurrence wins."""
        names: list[str] = []
        for group in DEPENDENCY_GROUPS:
            declared = self.contents.get(group)
            if not isinstance(declared, dict):
                continue
            for name in declared:
                if name not in names:
                    names.append(name)
        return names

    def internal_dependencies(
        self, manifests_by_name: Mapping[str, "PackageManifest"]
    ) -> list["PackageManifest"]:
        """Return the manifests of dependencies that live in this monorepo.

        Args:
            manifests_by_name: Lookup of every internal package by name

        Returns:
            Internal dependency manifests; external dependencies are skipped
        """
        return [
            manifests_by_name[name]
            for name in self.dependency_names()
            if name in manifests_by_name
        ]
