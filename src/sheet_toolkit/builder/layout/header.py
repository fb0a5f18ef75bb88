"""
Module: builder.layout.header

Purpose:
    Materialize the config's header elements (title, score box, name box)
    into header rows of the grid.

Key Functions:
    - compose_header(): Emit all visible header elements plus a spacer row

Algorithm:
    Walk the visible elements in order:
    1. A title directly followed by a score shares one block: the score
       takes a fixed-width lane on the right, the title the rest, and the
       block spans max(title height, score height) rows.
    2. Any other element gets its own block of ``height`` rows.
    3. A short borderless spacer row separates the header from the body.

Dependencies:
    - builder.layout.grid: GridAllocator
    - core.models: HeaderElement, make_cell

Used By:
    - builder.layout.generator
"""

from __future__ import annotations

import logging
from typing import Sequence

from sheet_toolkit.core.models import HeaderElement, make_cell

from .grid import GridAllocator

logger = logging.getLogger(__name__)


def compose_header(grid: GridAllocator, elements: Sequence[HeaderElement]) -> None:
    """
    Append header rows for ``elements`` to the grid.

    Hidden elements are skipped. Heights below 1 are treated as 1.

    Args:
        grid: Grid being built
        elements: Ordered header elements
    """
    visible = [e for e in elements if e.visible]

    i = 0
    while i < len(visible):
        element = visible[i]
        next_element = visible[i + 1] if i + 1 < len(visible) else None

        if element.id == "title" and next_element is not None and next_element.id == "score":
            row_span = max(_height(element), _height(next_element))
            start_row = _add_block_rows(grid, row_span, first_row_mm=grid.settings.title_row_mm)
            title_width = grid.cols - grid.settings.score_width
            _place_title(grid, start_row, 0, title_width, row_span)
            _place_score(grid, start_row, title_width, row_span)
            i += 2
            continue

        row_span = _height(element)
        first_row_mm = (
            grid.settings.title_row_mm if element.id == "title" else grid.settings.header_row_mm
        )
        start_row = _add_block_rows(grid, row_span, first_row_mm=first_row_mm)

        if element.id == "title":
            _place_title(grid, start_row, 0, grid.cols, row_span)
        elif element.id == "name":
            _place_name(grid, start_row, row_span)
        elif element.id == "score":
            _place_score(grid, start_row, grid.cols - grid.settings.score_width, row_span)
        i += 1

    grid.add_row(grid.settings.header_spacer_mm)
    logger.debug(f"Composed header from {len(visible)} visible element(s)")


def _height(element: HeaderElement) -> int:
    return max(1, int(element.height))


def _add_block_rows(grid: GridAllocator, row_span: int, *, first_row_mm: float) -> int:
    """Add ``row_span`` rows for one header block; returns the first row."""
    start_row = grid.add_row(first_row_mm)
    for _ in range(1, row_span):
        grid.add_row(grid.settings.header_row_mm)
    return start_row


def _place_title(grid: GridAllocator, row: int, col: int, width: int, row_span: int) -> None:
    grid.place_block(row, col, row_span, width, make_cell(
        text=grid.config.name,
        font_size=grid.settings.title_font_size,
        font_weight="bold",
        h_align="center",
    ))


def _place_score(grid: GridAllocator, row: int, col: int, row_span: int) -> None:
    """Score label on the first row, a blank writing area below it."""
    width = grid.settings.score_width
    grid.place_cell(row, col, width, make_cell(
        text=grid.settings.score_label,
        font_size=grid.settings.score_font_size,
        v_align="top",
    ))
    if row_span > 1:
        grid.place_block(row + 1, col, row_span - 1, width, make_cell())


def _place_name(grid: GridAllocator, row: int, row_span: int) -> None:
    """Class/number/seat box on the left third, name box on the rest."""
    info_width = grid.cols // 3
    grid.place_block(row, 0, row_span, info_width, make_cell(text=grid.settings.class_label))
    grid.place_block(
        row, info_width, row_span, grid.cols - info_width,
        make_cell(text=grid.settings.name_label),
    )
