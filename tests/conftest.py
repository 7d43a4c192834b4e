"""Shared fixtures: throw-away monorepos under tmp_path."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Iterable

import pytest

COMPILER_OPTIONS = {"compilerOptions": {"composite": True, "outDir": "dist"}}


def write_json(path: Path, contents: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(contents, indent=2) + "\n", encoding="utf-8")


@pytest.fixture
def make_monorepo(tmp_path) -> Callable[..., Path]:
    """Build a lerna monorepo from ``{directory: package.json contents}``.

    Every package gets a tsconfig.json with compiler options unless
    ``with_tsconfig`` is False.
    """

    def _make(
        packages: dict[str, dict],
        globs: Iterable[str] = ("packages/*",),
        with_tsconfig: bool = True,
    ) -> Path:
        write_json(tmp_path / "lerna.json", {"packages": list(globs)})
        write_json(tmp_path / "package.json", {"name": "monorepo", "private": True})
        for directory, manifest in packages.items():
            write_json(tmp_path / directory / "package.json", manifest)
            if with_tsconfig:
                write_json(tmp_path / directory / "tsconfig.json", COMPILER_OPTIONS)
        return tmp_path

    return _make


@pytest.fixture
def simple_monorepo(make_monorepo) -> Path:
    """packages/a (no deps) and packages/b (depends on a and an external package)."""
    return make_monorepo(
        {
            "packages/a": {"name": "a", "version": "1.0.0"},
            "packages/b": {
                "name": "b",
                "version": "1.0.0",
                "dependencies": {"a": "^1.0.0", "lodash": "^4.17.21"},
            },
        }
    )
