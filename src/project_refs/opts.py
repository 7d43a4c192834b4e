"""Option types shared by the CLI and the library entry points."""

from __future__ import annotations

from enum import Enum


class Action(str, Enum):
    """What to do with a configuration file whose references are out of date."""

    WRITE = "write"
    LINT = "lint"


class InternalDependenciesFormat(str, Enum):
    """How internal dependencies are identified in query output."""

    NAME = "name"
    PATH = "path"
