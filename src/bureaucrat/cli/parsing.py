"""Input parsing utilities for CLI commands."""

import json
from pathlib import Path
from typing import Any


def parse_value(raw: str) -> Any:
    """Parse a command line value, as JSON when possible.

    Examples:
        "42" → 42
        "null" → None
        "Douglas" → "Douglas"
    """
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        # Not valid JSON, keep as string
        return raw


def parse_assignment(spec: str) -> tuple[str, Any]:
    """Parse a ``key=value`` assignment.

    Examples:
        "id=3" → ("id", 3)
        "code=ABC" → ("code", "ABC")

    Raises:
        ValueError: If spec has no '=' or an empty key
    """
    key, sep, raw = spec.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"Invalid assignment: '{spec}'. Expected format: key=value")
    return key, parse_value(raw)


def parse_assignments(specs: list[str] | None) -> dict[str, Any]:
    """Parse repeated ``key=value`` options into a dict."""
    return dict(parse_assignment(spec) for spec in specs or [])


def parse_json_object(text: str) -> dict[str, Any]:
    """Parse a JSON object given inline on the command line.

    Raises:
        ValueError: If text is not a JSON object
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def read_json_file(path: str) -> dict[str, Any]:
    """Read single JSON object from file.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON object

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file contains invalid JSON
        ValueError: If the file holds something other than an object
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with file_path.open("r") as f:
        return parse_json_object(f.read())
