"""JSON file helpers."""

from __future__ import annotations

import json
from pathlib import Path


class FromFileError(Exception):
    """Raised when a JSON document cannot be read or parsed."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


def read_json_file(path: Path) -> dict:
    """Read a JSON object from ``path``.

    Args:
        path: File to read

    Returns:
        The decoded JSON object, with key order preserved

    Raises:
        FromFileError: If the file is missing, unreadable, not valid JSON,
            or its top-level value is not an object
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            contents = json.load(f)
    except FileNotFoundError as e:
        raise FromFileError(path, "File not found") from e
    except json.JSONDecodeError as e:
        raise FromFileError(path, f"Invalid JSON (line {e.lineno}, column {e.colno})") from e
    except (OSError, UnicodeDecodeError) as e:
        raise FromFileError(path, "Unable to read file") from e

    if not isinstance(contents, dict):
        raise FromFileError(path, "Expected a JSON object")
    return contents
