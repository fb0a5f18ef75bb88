"""
Module: sheet

Purpose:
    Provides SheetLayout - the immutable snapshot produced by the layout
    engine and consumed by editors, renderers and persistence.

Key Classes:
    - SheetLayout: rows x cols grid of SheetCell | None with pixel sizes

Dependencies:
    - dataclasses (std)
    - .cells, .config

Used By:
    - builder.layout.generator: Produces layouts
    - builder.layout.editing: Derives edited layouts
    - builder.output: Renders layouts
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from .cells import SheetCell
from .config import LayoutConfig


Row = tuple[Optional[SheetCell], ...]


@dataclass(frozen=True)
class SheetLayout:
    """
    Generated answer sheet grid (immutable).

    A None position is always "covered by a span", never "no data".

    Attributes:
        id: Layout identifier
        name: Display name (the config's title)
        rows: Number of grid rows
        cols: Number of grid columns (the fixed column resolution)
        row_heights: Height of each row in px
        col_widths: Width of each column in px
        cells: rows x cols positions
        config: Originating config, kept for regeneration

    Invariants:
        - len(cells) == rows and every row has cols entries
        - len(row_heights) == rows, len(col_widths) == cols

    Example:
        >>> layout.cell(0, 0).text
        'Quiz 1'
    """

    id: str
    name: str
    rows: int
    cols: int
    row_heights: tuple[float, ...]
    col_widths: tuple[float, ...]
    cells: tuple[Row, ...]
    config: Optional[LayoutConfig] = None

    def __post_init__(self) -> None:
        """Validate grid shape on construction."""
        if len(self.cells) != self.rows:
            raise ValueError(f"Expected {self.rows} rows, got {len(self.cells)}")
        for r, row in enumerate(self.cells):
            if len(row) != self.cols:
                raise ValueError(f"Row {r} has {len(row)} cells, expected {self.cols}")
        if len(self.row_heights) != self.rows:
            raise ValueError(
                f"row_heights has {len(self.row_heights)} entries, expected {self.rows}"
            )
        if len(self.col_widths) != self.cols:
            raise ValueError(
                f"col_widths has {len(self.col_widths)} entries, expected {self.cols}"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def width_px(self) -> float:
        return sum(self.col_widths)

    @property
    def height_px(self) -> float:
        return sum(self.row_heights)

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    def cell(self, row: int, col: int) -> Optional[SheetCell]:
        """Cell at (row, col); None if the position is covered by a span."""
        return self.cells[row][col]

    def iter_cells(self) -> Iterator[tuple[int, int, SheetCell]]:
        """Yield (row, col, cell) for every occupied position in row-major order."""
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                if cell is not None:
                    yield r, c, cell

    def row_cells(self, row: int) -> list[tuple[int, SheetCell]]:
        """Occupied (col, cell) pairs of one row."""
        return [(c, cell) for c, cell in enumerate(self.cells[row]) if cell is not None]

    def find_anchor(self, row: int, col: int) -> Optional[tuple[int, int]]:
        """
        Find the occupied cell whose span covers (row, col).

        Returns:
            (anchor_row, anchor_col), or None if nothing covers the position
        """
        for r in range(row, -1, -1):
            for c in range(col, -1, -1):
                cell = self.cells[r][c]
                if cell is None:
                    continue
                if r + cell.row_span > row and c + cell.col_span > col:
                    return r, c
        return None

    def structure_key(self) -> tuple:
        """Everything except the id; equal keys mean structurally identical layouts."""
        return (self.rows, self.cols, self.row_heights, self.col_widths, self.cells)
