"""tsconfig.json documents managed by project reference linking.

Two kinds of documents are handled:

* ``TypescriptParentProjectReference`` - the tsconfig.json of a directory
  that contains internal packages below it. It only exists to reference its
  children so the monorepo can be compiled top-down. When missing on disk an
  in-memory default is created.
* ``TypescriptConfig`` - the tsconfig.json of a package. Only its
  ``references`` key is managed; every other key is preserved as loaded.

Both are written back as JSON with 2-space indentation and a trailing
newline, keeping the key order of the loaded document.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import ClassVar

from project_refs.json_io import FromFileError, read_json_file

TSCONFIG_FILENAME = "tsconfig.json"
REFERENCES_KEY = "references"


class WriteError(Exception):
    """Raised when a configuration document cannot be persisted."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


@dataclass(frozen=True, order=True)
class ProjectReference:
    """A reference from one tsconfig.json to another project's directory."""

    path: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path}

    @classmethod
    def from_value(cls, value: object) -> "ProjectReference":
        """Parse a ``{"path": ...}`` object; other keys are ignored."""
        if not isinstance(value, dict) or not isinstance(value.get("path"), str):
            raise ValueError(f"Invalid project reference: {value!r}")
        return cls(path=value["path"])


def references_to_value(references: list[ProjectReference]) -> list[dict[str, str]]:
    """Return the JSON representation of a reference list."""
    return [reference.to_dict() for reference in references]


def parse_references(contents: dict) -> list[ProjectReference]:
    """Return the references stored in ``contents`` (absent key means none).

    Raises:
        ValueError: If the stored value is not a list of reference objects
    """
    value = contents.get(REFERENCES_KEY)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{REFERENCES_KEY}' must be a list")
    return [ProjectReference.from_value(item) for item in value]


@dataclass
class ConfigurationDocument:
    """A tsconfig.json file, located relative to the monorepo root."""

    directory: PurePosixPath
    contents: dict = field(default_factory=dict)

    @property
    def path(self) -> PurePosixPath:
        """File path relative to the monorepo root."""
        return self.directory / TSCONFIG_FILENAME

    @property
    def references(self) -> list[ProjectReference]:
        """Project references currently stored in the document."""
        return parse_references(self.contents)

    @references.setter
    def references(self, references: list[ProjectReference]) -> None:
        self.contents[REFERENCES_KEY] = references_to_value(references)

    @classmethod
    def _load(cls, root: Path, directory: PurePosixPath) -> dict:
        path = Path(root) / directory / TSCONFIG_FILENAME
        contents = read_json_file(path)
        try:
            parse_references(contents)
        except ValueError as e:
            raise FromFileError(path, f"Malformed project references ({e})") from e
        return contents


@dataclass
class TypescriptParentProjectReference(ConfigurationDocument):
    """tsconfig.json of a directory whose descendants are internal packages."""

    DEFAULT_CONTENTS: ClassVar[dict] = {"files": [], REFERENCES_KEY: []}

    @classmethod
    def from_directory(
        cls, root: Path, directory: PurePosixPath
    ) -> "TypescriptParentProjectReference":
        """Load the parent tsconfig.json, or create the default in memory.

        Raises:
            FromFileError: If the file exists but cannot be parsed
        """
        directory = PurePosixPath(directory)
        if not (Path(root) / directory / TSCONFIG_FILENAME).exists():
            return cls(directory=directory, contents=copy.deepcopy(cls.DEFAULT_CONTENTS))
        return cls(directory=directory, contents=cls._load(root, directory))


@dataclass
class TypescriptConfig(ConfigurationDocument):
    """tsconfig.json of an internal package."""

    @classmethod
    def from_directory(cls, root: Path, directory: PurePosixPath) -> "TypescriptConfig":
        """Load a package's tsconfig.json.

        Raises:
            FromFileError: If the file is missing or cannot be parsed
        """
        directory = PurePosixPath(directory)
        return cls(directory=directory, contents=cls._load(root, directory))


def serialize(contents: object) -> str:
    """Render JSON the way configuration documents are stored on disk."""
    return json.dumps(contents, indent=2, ensure_ascii=False) + "\n"


def write(root: Path, document: ConfigurationDocument) -> None:
    """Persist ``document`` below ``root``.

    Raises:
        WriteError: If the file cannot be written
    """
    path = Path(root) / document.path
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(serialize(document.contents), encoding="utf-8")
    except OSError as e:
        raise WriteError(path, "Unable to write configuration file") from e
