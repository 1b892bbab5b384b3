"""
Read extracted statblock primitives.

The statblock text grammar lives in an external extraction adapter; this
module defines its contract and reads primitives that were already
extracted and saved as JSON or YAML.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

import yaml
from pydantic import ValidationError

from ...models import StatBlockPrimitives
from ..base import StatBlockFileError


class ExtractionAdapter(Protocol):
    """Turns raw statblock text into typed primitive fields."""

    def extract(self, text: str) -> StatBlockPrimitives: ...


def parse_primitives(data: Any) -> StatBlockPrimitives:
    """
    Validate a mapping of extracted fields.

    Args:
        data: Mapping produced by an extraction adapter, optionally wrapped
              in a {"statblock": {...}} envelope

    Returns:
        Parsed primitives

    Raises:
        StatBlockFileError: If the data is not a mapping or has the wrong shape
    """
    if isinstance(data, dict) and "statblock" in data:
        data = data["statblock"]

    if not isinstance(data, dict):
        raise StatBlockFileError(
            f"Invalid statblock format: expected an object, got {type(data).__name__}"
        )

    if "name" not in data or "stats" not in data:
        raise StatBlockFileError(
            "Unrecognized statblock format: missing required fields (name, stats)."
        )

    try:
        return StatBlockPrimitives.model_validate(data)
    except ValidationError as e:
        raise StatBlockFileError(f"Invalid statblock fields: {e}") from None


def read_statblock_file(file_path: str | Path) -> StatBlockPrimitives:
    """
    Read and validate a JSON or YAML file of extracted primitives.

    Args:
        file_path: Path to the file

    Returns:
        Parsed primitives

    Raises:
        StatBlockFileError: If file not found, unparseable, or unrecognized
    """
    path = Path(file_path)

    try:
        raw_content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise StatBlockFileError(f"Statblock file not found: {file_path}") from None
    except OSError as e:
        raise StatBlockFileError(f"Failed to read statblock file: {e}") from None

    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(raw_content)
        else:
            data = json.loads(raw_content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise StatBlockFileError(f"Invalid statblock file {path.name}: {e}") from None

    return parse_primitives(data)
