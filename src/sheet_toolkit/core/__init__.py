"""
Answer Sheet Core Package

Shared data models, schema validation and JSON serialization.

1. **Immutable Data Models**
   - Configs and layouts are frozen dataclasses; edits build new snapshots

2. **One Data Contract**
   - Models serialize to the camelCase JSON the sheet files are stored in
"""

from .models import LayoutConfig, Question, Section, SheetCell, SheetLayout

__all__ = [
    "LayoutConfig",
    "Question",
    "Section",
    "SheetCell",
    "SheetLayout",
]
