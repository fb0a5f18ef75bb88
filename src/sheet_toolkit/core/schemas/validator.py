"""
Schema Validation Utilities

Validates layout configs and generated sheet layouts.

Two levels:
- Data contract checks on raw JSON dicts (`validate_config_data`,
  `validate_layout_data`): basic structural checks, plus full JSON Schema
  validation with ``strict=True``.
- Grid invariant checks on SheetLayout models (`validate_layout_grid`):
  rectangularity, span coverage and span overlap.

`ensure_generatable()` is the pre-flight check callers run before the
layout engine; the engine itself never raises for a bad config.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import jsonschema

if TYPE_CHECKING:
    from ..models.config import LayoutConfig
    from ..models.sheet import SheetLayout


# Schema version constants
LAYOUT_SCHEMA_VERSION = 2  # v2 adds english-grid cells and numbering styles


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema or invariant validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _check_schema(data: dict[str, Any], schema_name: str) -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message]
        ) from e


# ─────────────────────────────────────────────────────────────────────────────
# Config
# ─────────────────────────────────────────────────────────────────────────────

def validate_config_data(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a layout config dict.

    Args:
        data: Config dictionary (camelCase keys)
        strict: If True, also validate against the JSON schema

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Layout config must be an object")

    required = ["name", "paperSize", "sections"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing]
        )

    paper = data.get("paperSize")
    if paper not in ("A4", "B5", "A3"):
        raise ValidationError(f"Invalid paperSize: {paper!r}", path="paperSize")

    position = data.get("headerPosition", "top")
    if position not in ("top", "bottom"):
        raise ValidationError(f"Invalid headerPosition: {position!r}", path="headerPosition")

    sections = data.get("sections")
    if not isinstance(sections, list):
        raise ValidationError("sections must be a list", path="sections")

    for i, section in enumerate(sections):
        _validate_section(section, f"sections[{i}]")

    header_elements = data.get("headerElements")
    if header_elements is not None:
        if not isinstance(header_elements, list):
            raise ValidationError("headerElements must be a list", path="headerElements")
        for i, element in enumerate(header_elements):
            if not isinstance(element, dict) or element.get("id") not in ("title", "name", "score"):
                raise ValidationError(
                    f"Invalid header element: {element!r}",
                    path=f"headerElements[{i}]"
                )

    if strict:
        _check_schema(data, "layout_config")


def _validate_section(data: Any, path: str) -> None:
    """Validate one section and its questions."""
    if not isinstance(data, dict):
        raise ValidationError("section must be an object", path=path)

    questions = data.get("questions", [])
    if not isinstance(questions, list):
        raise ValidationError("questions must be a list", path=f"{path}.questions")

    for i, question in enumerate(questions):
        q_path = f"{path}.questions[{i}]"
        if not isinstance(question, dict):
            raise ValidationError("question must be an object", path=q_path)
        q_type = question.get("type", "short_text")
        if q_type not in ("text", "short_text", "marksheet", "long_text", "english_word"):
            raise ValidationError(f"Invalid question type: {q_type!r}", path=f"{q_path}.type")


def ensure_generatable(config: LayoutConfig) -> None:
    """
    Pre-flight check before running the layout engine.

    The engine degrades silently on extreme values, so the only failure
    worth surfacing is a config that would produce no question rows.

    Raises:
        ValidationError: If the config has no sections or no questions
    """
    if not config.sections:
        raise ValidationError("Layout has no sections", path="sections")
    if config.question_count == 0:
        raise ValidationError(
            "Layout has no questions",
            path="sections",
            errors=[f"Section {s.title!r} is empty" for s in config.sections]
        )


# ─────────────────────────────────────────────────────────────────────────────
# Layout
# ─────────────────────────────────────────────────────────────────────────────

def validate_layout_data(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a persisted sheet layout dict.

    Args:
        data: Layout dictionary (camelCase keys)
        strict: If True, also validate against the JSON schema

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Sheet layout must be an object")

    required = ["id", "rows", "cols", "rowHeights", "colWidths", "cells"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            errors=[f"Missing field: {f}" for f in missing]
        )

    rows, cols = data["rows"], data["cols"]
    cells = data["cells"]
    if not isinstance(cells, list) or len(cells) != rows:
        raise ValidationError(f"cells must have {rows} rows", path="cells")
    for r, row in enumerate(cells):
        if not isinstance(row, list) or len(row) != cols:
            raise ValidationError(f"Row {r} must have {cols} cells", path=f"cells[{r}]")

    if len(data["rowHeights"]) != rows:
        raise ValidationError(f"rowHeights must have {rows} entries", path="rowHeights")
    if len(data["colWidths"]) != cols:
        raise ValidationError(f"colWidths must have {cols} entries", path="colWidths")

    if strict:
        _check_schema(data, "sheet_layout")


def validate_layout_grid(layout: SheetLayout) -> list[str]:
    """
    Check the spanning-grid invariants of a layout.

    Returns:
        List of violation messages (empty if the grid is consistent)
    """
    problems: list[str] = []
    owner: list[list[Optional[tuple[int, int]]]] = [
        [None] * layout.cols for _ in range(layout.rows)
    ]

    for r, c, cell in layout.iter_cells():
        if r + cell.row_span > layout.rows or c + cell.col_span > layout.cols:
            problems.append(
                f"Cell ({r},{c}) span {cell.row_span}x{cell.col_span} overflows "
                f"{layout.rows}x{layout.cols} grid"
            )
        for rr in range(r, min(r + cell.row_span, layout.rows)):
            for cc in range(c, min(c + cell.col_span, layout.cols)):
                if owner[rr][cc] is not None:
                    problems.append(
                        f"Cell ({r},{c}) overlaps cell {owner[rr][cc]} at ({rr},{cc})"
                    )
                    continue
                owner[rr][cc] = (r, c)
                if (rr, cc) != (r, c) and layout.cells[rr][cc] is not None:
                    problems.append(f"Position ({rr},{cc}) covered by ({r},{c}) is not null")

    for r in range(layout.rows):
        for c in range(layout.cols):
            if owner[r][c] is None:
                problems.append(f"Position ({r},{c}) is null but not covered by any span")

    return problems


def validate_layout(layout: SheetLayout) -> None:
    """
    Raise if the layout breaks any grid invariant.

    Raises:
        ValidationError: With every violation listed in ``errors``
    """
    problems = validate_layout_grid(layout)
    if problems:
        raise ValidationError(
            f"Layout {layout.id!r} has {len(problems)} grid violation(s): {problems[0]}",
            path="cells",
            errors=problems
        )
