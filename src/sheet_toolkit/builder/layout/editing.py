"""
Module: builder.layout.editing

Purpose:
    Cell-level edits of a generated SheetLayout (merge, split, restyle)
    and a snapshot history for undo/redo. Every edit returns a new
    layout; rows an edit does not touch are shared with the input.

Key Functions:
    - merge_cells(): Merge a rectangular selection into one cell
    - split_cell(): Break a spanning cell into 1x1 cells
    - update_cells(): Apply text/format changes to a selection

Key Classes:
    - LayoutHistory: Bounded undo/redo stack of layouts
    - EditError: Raised for invalid selections

Dependencies:
    - core.models: SheetLayout, SheetCell

Used By:
    - Sheet editors embedding the toolkit
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from sheet_toolkit.core.models import SheetCell, SheetLayout, make_cell

logger = logging.getLogger(__name__)

_SPAN_FIELDS = ("row_span", "col_span")


class EditError(ValueError):
    """Invalid edit of a sheet layout."""
    pass


def _check_range(layout: SheetLayout, top: int, left: int, bottom: int, right: int) -> None:
    if top > bottom or left > right:
        raise EditError(f"Empty selection ({top},{left})-({bottom},{right})")
    if top < 0 or left < 0 or bottom >= layout.rows or right >= layout.cols:
        raise EditError(
            f"Selection ({top},{left})-({bottom},{right}) outside "
            f"{layout.rows}x{layout.cols} grid"
        )


def _with_rows(layout: SheetLayout, edited: Dict[int, List[Optional[SheetCell]]]) -> SheetLayout:
    """New layout with ``edited`` rows replaced and all other rows shared."""
    rows = tuple(
        tuple(edited[r]) if r in edited else row
        for r, row in enumerate(layout.cells)
    )
    return replace(layout, cells=rows)


def expand_selection(
    layout: SheetLayout, top: int, left: int, bottom: int, right: int
) -> tuple[int, int, int, int]:
    """
    Grow a selection until no span crosses its edge.

    Returns:
        (top, left, bottom, right), inclusive
    """
    _check_range(layout, top, left, bottom, right)
    changed = True
    while changed:
        changed = False
        for r in range(top, bottom + 1):
            for c in range(left, right + 1):
                anchor = layout.find_anchor(r, c)
                if anchor is None:
                    continue
                ar, ac = anchor
                cell = layout.cells[ar][ac]
                new_bounds = (
                    min(top, ar),
                    min(left, ac),
                    max(bottom, ar + cell.row_span - 1),
                    max(right, ac + cell.col_span - 1),
                )
                if new_bounds != (top, left, bottom, right):
                    top, left, bottom, right = new_bounds
                    changed = True
    return top, left, bottom, right


def merge_cells(layout: SheetLayout, top: int, left: int, bottom: int, right: int) -> SheetLayout:
    """
    Merge the selection (inclusive bounds) into its top-left cell.

    The selection first expands to fully contain every span it touches.
    The anchor keeps its content; all other positions become covered.

    Raises:
        EditError: If the selection is outside the grid
    """
    top, left, bottom, right = expand_selection(layout, top, left, bottom, right)
    anchor = layout.cells[top][left]
    if anchor is None:
        raise EditError(f"No cell anchors the selection at ({top},{left})")

    edited: Dict[int, List[Optional[SheetCell]]] = {}
    for r in range(top, bottom + 1):
        row = list(layout.cells[r])
        for c in range(left, right + 1):
            row[c] = None
        edited[r] = row
    edited[top][left] = replace(
        anchor, row_span=bottom - top + 1, col_span=right - left + 1
    )
    logger.debug(f"Merged ({top},{left})-({bottom},{right})")
    return _with_rows(layout, edited)


def split_cell(layout: SheetLayout, row: int, col: int) -> SheetLayout:
    """
    Replace a spanning cell with blank bordered 1x1 cells over its rectangle.

    Returns the input unchanged when the cell spans a single position.

    Raises:
        EditError: If (row, col) is outside the grid or covered by a span
    """
    _check_range(layout, row, col, row, col)
    cell = layout.cells[row][col]
    if cell is None:
        raise EditError(f"Position ({row},{col}) is covered by a span")
    if cell.row_span == 1 and cell.col_span == 1:
        return layout

    fresh = make_cell(
        v_align="top",
        font_size=12,
        border_color=cell.border_color,
        border_width=cell.border_width,
    )
    edited: Dict[int, List[Optional[SheetCell]]] = {}
    for r in range(row, row + cell.row_span):
        cells = list(layout.cells[r])
        for c in range(col, col + cell.col_span):
            cells[c] = fresh
        edited[r] = cells
    logger.debug(f"Split ({row},{col}) span {cell.row_span}x{cell.col_span}")
    return _with_rows(layout, edited)


def update_cells(
    layout: SheetLayout,
    top: int,
    left: int,
    bottom: int,
    right: int,
    **changes: Any,
) -> SheetLayout:
    """
    Apply field changes to every cell anchored inside the selection.

    Example:
        >>> bold = update_cells(layout, 0, 0, 0, 79, font_weight="bold")

    Raises:
        EditError: If the selection is outside the grid or ``changes``
            touch spans (use merge_cells/split_cell)
    """
    _check_range(layout, top, left, bottom, right)
    blocked = [f for f in _SPAN_FIELDS if f in changes]
    if blocked:
        raise EditError(f"Spans cannot be updated directly: {blocked}")

    edited: Dict[int, List[Optional[SheetCell]]] = {}
    for r in range(top, bottom + 1):
        for c in range(left, right + 1):
            cell = layout.cells[r][c]
            if cell is None:
                continue
            if r not in edited:
                edited[r] = list(layout.cells[r])
            try:
                edited[r][c] = replace(cell, **changes)
            except TypeError as e:
                raise EditError(f"Invalid cell change: {e}") from e
    return _with_rows(layout, edited)


class LayoutHistory:
    """
    Undo/redo stack of layout snapshots.

    Pushing after an undo discards the redo branch. Snapshots share
    unchanged rows, so keeping many of them is cheap.

    Example:
        >>> history = LayoutHistory(layout)
        >>> history.push(merge_cells(layout, 0, 0, 1, 1))
        >>> history.undo() is layout
        True
    """

    def __init__(self, initial: SheetLayout, max_depth: int = 100) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1: {max_depth}")
        self.max_depth = max_depth
        self._states: List[SheetLayout] = [initial]
        self._index = 0

    @property
    def current(self) -> SheetLayout:
        return self._states[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._states) - 1

    def push(self, layout: SheetLayout) -> None:
        """Record a new state as current."""
        self._states = self._states[: self._index + 1]
        self._states.append(layout)
        if len(self._states) > self.max_depth:
            self._states = self._states[-self.max_depth:]
        self._index = len(self._states) - 1

    def undo(self) -> SheetLayout:
        if self.can_undo:
            self._index -= 1
        return self.current

    def redo(self) -> SheetLayout:
        if self.can_redo:
            self._index += 1
        return self.current

    def reset(self, layout: SheetLayout) -> None:
        self._states = [layout]
        self._index = 0
