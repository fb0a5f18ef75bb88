"""
Module: builder.output.geometry

Purpose:
    Pixel geometry of a SheetLayout shared by all renderers.
    Resolves each occupied cell to its rectangle and expands deferred
    English grids into their writing lines.

Key Functions:
    - cell_boxes(): Rectangle of every occupied cell
    - border_segments(): Drawn border sides of a cell
    - english_grid_lines(): Dashed writing lines of an English grid

Key Classes:
    - CellBox: Occupied cell with its pixel rectangle
    - Segment: Straight line between two points

Dependencies:
    - core.models: SheetLayout, SheetCell, EnglishGrid

Used By:
    - builder.output.renderer: PDF
    - builder.output.preview: PNG
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import accumulate
from typing import Iterator, List, Sequence

from sheet_toolkit.core.models import EnglishGrid, SheetCell, SheetLayout

# Inset of each word line from its slot edges, px
SLOT_PADDING_PX = 4.0
# Gap between a writing line and the bottom of its physical line, px
LINE_PADDING_PX = 4.0


@dataclass(frozen=True)
class Segment:
    """Line from (x0, y0) to (x1, y1) in layout pixels, y growing downward."""

    x0: float
    y0: float
    x1: float
    y1: float


@dataclass(frozen=True)
class CellBox:
    """
    Occupied cell resolved to pixels.

    Attributes:
        row / col: Anchor position
        cell: The cell
        x / y: Top-left corner, px from the layout origin
        width / height: Size of the spanned rectangle, px
    """

    row: int
    col: int
    cell: SheetCell
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


def offsets(sizes: Sequence[float]) -> List[float]:
    """
    Cumulative start offsets with a trailing total.

    Example:
        >>> offsets([10, 20, 5])
        [0, 10, 30, 35]
    """
    return [0, *accumulate(sizes)]


def cell_boxes(layout: SheetLayout) -> Iterator[CellBox]:
    """
    Yield the rectangle of every occupied cell in row-major order.

    Spans reaching past the grid edge are cut at the edge.
    """
    xs = offsets(layout.col_widths)
    ys = offsets(layout.row_heights)
    for r, c, cell in layout.iter_cells():
        last_row = min(r + cell.row_span, layout.rows)
        last_col = min(c + cell.col_span, layout.cols)
        yield CellBox(
            row=r,
            col=c,
            cell=cell,
            x=xs[c],
            y=ys[r],
            width=xs[last_col] - xs[c],
            height=ys[last_row] - ys[r],
        )


def border_segments(box: CellBox) -> dict[str, Segment]:
    """Drawn sides of a cell keyed by side name; empty for border style ``none``."""
    cell = box.cell
    if cell.border_style == "none":
        return {}
    sides = {
        "top": Segment(box.x, box.y, box.right, box.y),
        "bottom": Segment(box.x, box.bottom, box.right, box.bottom),
        "left": Segment(box.x, box.y, box.x, box.bottom),
        "right": Segment(box.right, box.y, box.right, box.bottom),
    }
    flags = cell.borders
    return {name: seg for name, seg in sides.items() if getattr(flags, name)}


def english_grid_lines(box: CellBox, grid: EnglishGrid) -> List[Segment]:
    """
    Writing lines of a deferred English grid.

    The box is split into ``grid.rows`` physical lines of
    ``grid.words_per_line`` equal slots. Each word gets a horizontal line
    near the bottom of its slot; slots past ``word_count`` on the last
    line stay empty.

    Example:
        >>> len(english_grid_lines(box, EnglishGrid(word_count=7, words_per_line=3)))
        7
    """
    per_line = grid.words_per_line
    rows = grid.rows
    slot_width = box.width / per_line
    line_height = box.height / rows
    inset = SLOT_PADDING_PX if slot_width > 2 * SLOT_PADDING_PX else 0.0
    lift = min(LINE_PADDING_PX, line_height / 2)

    lines: List[Segment] = []
    for index in range(grid.word_count):
        r, c = divmod(index, per_line)
        y = box.y + (r + 1) * line_height - lift
        x0 = box.x + c * slot_width + inset
        x1 = box.x + (c + 1) * slot_width - inset
        lines.append(Segment(x0, y, x1, y))
    return lines
