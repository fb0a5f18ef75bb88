"""
Core Models Package

Immutable data models shared by the layout engine, renderers and
persistence.

**DESIGN RATIONALE:**

All models in this package are frozen dataclasses. This ensures:
1. A generated layout is a snapshot that later edits cannot disturb
2. Safe to generate layouts concurrently for independent configs
3. Structural equality makes regeneration easy to compare
"""

from .cells import Borders, CellKind, EnglishGrid, SheetCell, blank_cell, make_cell
from .config import (
    DEFAULT_HEADER_ELEMENTS,
    PAPER_DIMENSIONS,
    HeaderElement,
    LayoutConfig,
    PaperSize,
    Question,
    QuestionType,
    Section,
)
from .sheet import SheetLayout

__all__ = [
    "Borders",
    "CellKind",
    "EnglishGrid",
    "SheetCell",
    "blank_cell",
    "make_cell",
    "DEFAULT_HEADER_ELEMENTS",
    "PAPER_DIMENSIONS",
    "HeaderElement",
    "LayoutConfig",
    "PaperSize",
    "Question",
    "QuestionType",
    "Section",
    "SheetLayout",
]
