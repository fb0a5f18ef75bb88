"""
Module: builder.layout.grid

Purpose:
    Append-only rows x fixed_cols matrix the header and body composers
    write into. The allocator is the single safe way to write a cell:
    it grows the grid on demand, clamps spans to the grid edge and nulls
    the positions a span covers.

Key Classes:
    - GridAllocator: Growable grid with per-row heights

Dependencies:
    - core.models: SheetCell, SheetLayout
    - builder.layout.config: GridSettings

Used By:
    - builder.layout.header
    - builder.layout.body
    - builder.layout.generator
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from sheet_toolkit.core.models import LayoutConfig, SheetCell, SheetLayout, blank_cell

from .config import GridSettings

logger = logging.getLogger(__name__)


class GridAllocator:
    """
    Growable grid of SheetCell | None.

    Out-of-range writes are clamped or dropped instead of raising so an
    oversized config still yields a printable sheet.

    Example:
        >>> grid = GridAllocator(config, GridSettings())
        >>> row = grid.add_row()
        >>> grid.place_cell(row, 0, 10, make_cell(text="1"))
        10
    """

    def __init__(self, config: LayoutConfig, settings: GridSettings) -> None:
        self.config = config
        self.settings = settings
        self.cols = settings.fixed_cols
        self._cells: List[List[Optional[SheetCell]]] = []
        self._row_heights_mm: List[float] = []

    @property
    def row_count(self) -> int:
        return len(self._cells)

    @property
    def base_row_height(self) -> float:
        """Base row height in millimetres."""
        return self.config.default_row_height

    def cell(self, row: int, col: int) -> Optional[SheetCell]:
        return self._cells[row][col]

    # ─────────────────────────────────────────────────────────────────────────
    # Rows
    # ─────────────────────────────────────────────────────────────────────────

    def add_row(self, height_mm: Optional[float] = None) -> int:
        """
        Append a row of borderless blank cells.

        Args:
            height_mm: Row height, defaults to the config's base row height

        Returns:
            Index of the new row
        """
        filler = blank_cell().with_defaults(self.config.border_width, self.config.border_color)
        self._cells.append([filler] * self.cols)
        self._row_heights_mm.append(self.base_row_height if height_mm is None else height_mm)
        return len(self._cells) - 1

    def ensure_rows(self, count: int) -> None:
        """Grow the grid with default-height rows until it has ``count`` rows."""
        while self.row_count < count:
            self.add_row()

    def set_row_height(self, row: int, height_mm: float) -> None:
        self._row_heights_mm[row] = height_mm

    def raise_row_height(self, row: int, height_mm: float) -> None:
        """Set a row's height to at least ``height_mm``."""
        if height_mm > self._row_heights_mm[row]:
            self._row_heights_mm[row] = height_mm

    def row_height(self, row: int) -> float:
        return self._row_heights_mm[row]

    # ─────────────────────────────────────────────────────────────────────────
    # Cells
    # ─────────────────────────────────────────────────────────────────────────

    def place_cell(self, row: int, col: int, span: int, content: SheetCell) -> int:
        """
        Write a cell spanning ``span`` columns of one row.

        Grows the grid until ``row`` exists, clamps the span to the grid
        edge and nulls the other columns the cell covers. Callers null
        additional rows themselves when the cell spans rows (see
        ``cover``).

        Returns:
            The column span actually written (0 if the write was dropped)
        """
        self.ensure_rows(row + 1)
        if col < 0 or col >= self.cols:
            logger.debug(f"Dropped cell at ({row},{col}): column outside grid")
            return 0

        safe_span = min(span, self.cols - col)
        if safe_span <= 0:
            logger.debug(f"Dropped cell at ({row},{col}): span {span}")
            return 0
        if safe_span < span:
            logger.debug(f"Clamped cell at ({row},{col}) from span {span} to {safe_span}")

        cell = replace(
            content.with_defaults(self.config.border_width, self.config.border_color),
            col_span=safe_span,
        )
        cells = self._cells[row]
        cells[col] = cell
        for k in range(col + 1, col + safe_span):
            cells[k] = None
        return safe_span

    def cover(self, row: int, col: int, row_span: int, col_span: int) -> None:
        """
        Null every position of [row, row+row_span) x [col, col+col_span)
        except the anchor, growing the grid to include the span's last row.
        """
        self.ensure_rows(row + row_span)
        last_col = min(col + col_span, self.cols)
        for r in range(row, row + row_span):
            for c in range(col, last_col):
                if (r, c) != (row, col):
                    self._cells[r][c] = None

    def place_block(
        self, row: int, col: int, row_span: int, col_span: int, content: SheetCell
    ) -> int:
        """
        Write a cell spanning rows and columns, nulling everything it covers.

        Returns:
            The column span actually written
        """
        row_span = max(1, row_span)
        written = self.place_cell(row, col, col_span, replace(content, row_span=row_span))
        if written and row_span > 1:
            self.cover(row, col, row_span, written)
        return written

    # ─────────────────────────────────────────────────────────────────────────
    # Snapshot
    # ─────────────────────────────────────────────────────────────────────────

    def snapshot(self, layout_id: str) -> SheetLayout:
        """Freeze the grid into an immutable SheetLayout."""
        mm_to_px = self.settings.mm_to_px
        col_width = self.settings.column_width_px(self.config.paper_size.width_mm)
        return SheetLayout(
            id=layout_id,
            name=self.config.name,
            rows=self.row_count,
            cols=self.cols,
            row_heights=tuple(h * mm_to_px for h in self._row_heights_mm),
            col_widths=(col_width,) * self.cols,
            cells=tuple(tuple(row) for row in self._cells),
            config=self.config,
        )
