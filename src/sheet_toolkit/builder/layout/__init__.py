"""
Module: builder.layout

Purpose:
    Auto-layout engine for answer sheets.
    Converts a LayoutConfig into a fixed-resolution grid of spanning cells,
    and edits the resulting grids.

Key Functions:
    - generate_layout(): Main entry point for layout
    - build_layout(): Layout plus per-question placements
    - compose_header(): Header rows
    - compose_body(): Section/question rows
    - merge_cells() / split_cell() / update_cells(): Grid edits

Key Classes:
    - GridSettings: Configuration for the engine
    - GridAllocator: Growable grid the composers write into
    - PlacementState: Cursor threaded through question placement
    - QuestionPlacement: Where a question ended up
    - LayoutHistory: Undo/redo of edited layouts

Dependencies:
    - sheet_toolkit.core.models: LayoutConfig, SheetLayout, SheetCell

Used By:
    - sheet_toolkit.cli
    - builder.output renderers (via SheetLayout)
"""

from .config import MM_TO_PX, GridSettings
from .grid import GridAllocator
from .header import compose_header
from .body import (
    PlacementState,
    QuestionPlacement,
    answer_width,
    compose_body,
    compose_section,
    english_layout,
    place_question,
)
from .numbering import circled, format_number
from .generator import GenerationResult, build_layout, generate_layout
from .editing import (
    EditError,
    LayoutHistory,
    expand_selection,
    merge_cells,
    split_cell,
    update_cells,
)

__all__ = [
    # Config
    "MM_TO_PX",
    "GridSettings",
    # Engine
    "GridAllocator",
    "compose_header",
    "compose_body",
    "compose_section",
    "place_question",
    "answer_width",
    "english_layout",
    "PlacementState",
    "QuestionPlacement",
    "circled",
    "format_number",
    "GenerationResult",
    "build_layout",
    "generate_layout",
    # Editing
    "EditError",
    "LayoutHistory",
    "expand_selection",
    "merge_cells",
    "split_cell",
    "update_cells",
]
