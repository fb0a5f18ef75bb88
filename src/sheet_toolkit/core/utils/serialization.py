"""
Serialization Utilities

Provides to/from JSON utilities for layout configs and sheet layouts.

The JSON form is the data contract shared with the sheet editor and
printed-sheet tooling: camelCase keys, covered grid positions as
``null``, deferred cells as ``{"type": "english-grid", "metadata": {...}}``.

- `serialize_*` / `deserialize_*` convert models to/from dicts
- `load_*_json` / `save_*_json` read and write UTF-8 files
- Validation runs before deserialization (basic checks by default)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..models.cells import SheetCell
from ..models.config import LayoutConfig
from ..models.sheet import SheetLayout
from ..schemas.validator import (
    LAYOUT_SCHEMA_VERSION,
    ValidationError,
    validate_config_data,
    validate_layout_data,
)


# ─────────────────────────────────────────────────────────────────────────────
# Config Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_config(config: LayoutConfig) -> dict[str, Any]:
    """Serialize a LayoutConfig to a dictionary."""
    return config.to_dict()


def deserialize_config(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> LayoutConfig:
    """
    Deserialize a LayoutConfig from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate first
        strict: Use full JSON schema validation

    Returns:
        LayoutConfig instance

    Raises:
        ValidationError: If data is invalid
    """
    if validate:
        validate_config_data(data, strict=strict)
    try:
        return LayoutConfig.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Cannot parse layout config: {e}", errors=[str(e)]) from e


# ─────────────────────────────────────────────────────────────────────────────
# Layout Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_layout(layout: SheetLayout) -> dict[str, Any]:
    """
    Serialize a SheetLayout to a dictionary.

    The output can be written to JSON and will pass schema validation.
    """
    data: dict[str, Any] = {
        "schemaVersion": LAYOUT_SCHEMA_VERSION,
        "id": layout.id,
        "name": layout.name,
        "rows": layout.rows,
        "cols": layout.cols,
        "rowHeights": list(layout.row_heights),
        "colWidths": list(layout.col_widths),
        "cells": [
            [cell.to_dict() if cell is not None else None for cell in row]
            for row in layout.cells
        ],
    }
    if layout.config is not None:
        data["config"] = serialize_config(layout.config)
    return data


def deserialize_layout(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> SheetLayout:
    """
    Deserialize a SheetLayout from a dictionary.

    Files written before schema versioning (no ``schemaVersion``) are accepted.

    Raises:
        ValidationError: If validate=True and data is invalid, or the
            file was written by a newer schema
    """
    version = data.get("schemaVersion", LAYOUT_SCHEMA_VERSION)
    if version > LAYOUT_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported layout schema version: {version} (max {LAYOUT_SCHEMA_VERSION})",
            path="schemaVersion"
        )
    if validate:
        validate_layout_data(data, strict=strict)

    try:
        config_data = data.get("config")
        config = deserialize_config(config_data, validate=validate) if config_data else None
        return SheetLayout(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            rows=int(data["rows"]),
            cols=int(data["cols"]),
            row_heights=tuple(float(h) for h in data["rowHeights"]),
            col_widths=tuple(float(w) for w in data["colWidths"]),
            cells=tuple(
                tuple(SheetCell.from_dict(c) if c is not None else None for c in row)
                for row in data["cells"]
            ),
            config=config,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Cannot parse sheet layout: {e}", errors=[str(e)]) from e


# ─────────────────────────────────────────────────────────────────────────────
# File Utilities
# ─────────────────────────────────────────────────────────────────────────────

def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(
            f"Invalid JSON in {path.name}: {e}",
            path=str(path),
            errors=[str(e)]
        ) from e


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_config_json(path: Path, *, validate: bool = True, strict: bool = False) -> LayoutConfig:
    """
    Load a layout config from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the file is not valid JSON or not a valid config
    """
    return deserialize_config(_read_json(path), validate=validate, strict=strict)


def save_config_json(config: LayoutConfig, path: Path) -> None:
    """Save a layout config to a JSON file."""
    _write_json(path, serialize_config(config))


def load_layout_json(path: Path, *, validate: bool = True, strict: bool = False) -> SheetLayout:
    """
    Load a sheet layout from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the file is not valid JSON or not a valid layout
    """
    return deserialize_layout(_read_json(path), validate=validate, strict=strict)


def save_layout_json(layout: SheetLayout, path: Path) -> None:
    """Save a sheet layout, including its originating config, to a JSON file."""
    _write_json(path, serialize_layout(layout))
