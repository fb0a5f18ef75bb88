"""
Module: builder.output.xlsx

Purpose:
    Export a SheetLayout as an Excel worksheet so teachers can tweak and
    print the sheet from a spreadsheet application. Each grid position
    becomes one worksheet cell; spans become merged ranges.

Key Functions:
    - export_xlsx(): Write a layout to an .xlsx file
    - build_workbook(): Build the workbook in memory

Dependencies:
    - openpyxl: Workbook, styles, merged ranges

Used By:
    - sheet_toolkit.cli: ``render --xlsx``
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font as XLFont, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.page import PageMargins

from sheet_toolkit.core.models import CellKind, SheetCell, SheetLayout

from .renderer import RenderError

logger = logging.getLogger(__name__)

# Excel column width unit is roughly one 7px character
PX_PER_CHAR = 7.0
PT_PER_PX = 0.75
MARGIN_INCHES = 10 / 25.4
FONT_NAME = "MS Gothic"

# Excel paper codes
PAPER_CODES = {"A3": 8, "A4": 9, "B5": 13}

_V_ALIGN = {"top": "top", "middle": "center", "bottom": "bottom"}
_INVALID_TITLE_CHARS = re.compile(r"[\\/*?:\[\]]")


def export_xlsx(layout: SheetLayout, output_path: Path) -> None:
    """
    Export a layout to an .xlsx workbook with a single worksheet.

    English grid cells have no spreadsheet equivalent; they are written
    as underscore writing slots and a warning is logged.

    Raises:
        RenderError: If the workbook cannot be built or written

    Example:
        >>> export_xlsx(layout, Path("output/sheet.xlsx"))
    """
    try:
        wb = build_workbook(layout)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(str(output_path))
    except ValueError as e:
        raise RenderError(f"Cannot export layout {layout.id!r}: {e}") from e
    except OSError as e:
        raise RenderError(f"Cannot write {output_path}: {e}") from e
    logger.info(f"Exported layout {layout.id!r} to {output_path}")


def build_workbook(layout: SheetLayout) -> Workbook:
    """Build a workbook whose first worksheet mirrors the layout grid."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title(layout.name or layout.id)

    for c, width_px in enumerate(layout.col_widths):
        ws.column_dimensions[get_column_letter(c + 1)].width = round(width_px / PX_PER_CHAR, 2)
    for r, height_px in enumerate(layout.row_heights):
        ws.row_dimensions[r + 1].height = round(height_px * PT_PER_PX, 2)

    english_grids = 0
    for r, c, cell in layout.iter_cells():
        target = ws.cell(row=r + 1, column=c + 1)
        if cell.kind is CellKind.ENGLISH_GRID:
            english_grids += 1
            target.value = _writing_slots(cell)
        elif cell.text:
            target.value = cell.text

        target.font = _font(cell)
        target.alignment = _alignment(cell)
        border = _border(cell)
        if border is not None:
            target.border = border
        if cell.background_color:
            color = _hex(cell.background_color)
            target.fill = PatternFill(start_color=color, end_color=color, fill_type="solid")

        if cell.row_span > 1 or cell.col_span > 1:
            # Merging copies the anchor's edge sides onto the range border
            ws.merge_cells(
                start_row=r + 1,
                start_column=c + 1,
                end_row=min(r + cell.row_span, layout.rows),
                end_column=min(c + cell.col_span, layout.cols),
            )

    if english_grids:
        logger.warning(
            f"{english_grids} English grid cell(s) exported as text slots; "
            f"spreadsheets have no native word grid"
        )

    if layout.config is not None:
        ws.page_setup.paperSize = PAPER_CODES.get(layout.config.paper_size.value, PAPER_CODES["A4"])
    ws.page_setup.fitToWidth = 1
    ws.sheet_properties.pageSetUpPr.fitToPage = True
    ws.page_margins = PageMargins(
        left=MARGIN_INCHES, right=MARGIN_INCHES, top=MARGIN_INCHES, bottom=MARGIN_INCHES
    )
    ws.sheet_view.showGridLines = False
    return wb


def sheet_title(name: str) -> str:
    """
    Worksheet title Excel accepts: no ``\\/*?:[]``, at most 31 characters.

    Example:
        >>> sheet_title("Quiz 1/2")
        'Quiz 1_2'
    """
    title = _INVALID_TITLE_CHARS.sub("_", name).strip()[:31]
    return title or "Sheet"


# ─────────────────────────────────────────────────────────────────────────────
# Styles
# ─────────────────────────────────────────────────────────────────────────────

def _hex(color: str) -> str:
    """'#rrggbb' -> 'RRGGBB' as openpyxl expects."""
    value = color.lstrip("#").upper()
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if not re.fullmatch(r"[0-9A-F]{6}", value):
        raise ValueError(f"Invalid colour: {color!r}")
    return value


def _font(cell: SheetCell) -> XLFont:
    return XLFont(
        name=FONT_NAME,
        size=cell.font_size,
        bold=cell.is_bold,
        italic=cell.is_italic,
        underline="single" if cell.is_underlined else None,
    )


def _alignment(cell: SheetCell) -> Alignment:
    return Alignment(
        horizontal=cell.h_align,
        vertical=_V_ALIGN[cell.v_align],
        wrap_text=True,
    )


def _side_style(cell: SheetCell) -> Optional[str]:
    """Map border style and width onto an Excel line style."""
    width = cell.border_width if cell.border_width is not None else 1.0
    if cell.border_style == "none" or width <= 0:
        return None
    if cell.border_style == "double":
        return "double"
    if cell.border_style == "dotted":
        return "dotted"
    if cell.border_style == "dashed":
        return "mediumDashed" if width > 1.5 else "dashed"
    if width > 2.5:
        return "thick"
    if width > 1.5:
        return "medium"
    return "thin"


def _border(cell: SheetCell) -> Optional[Border]:
    style = _side_style(cell)
    if style is None or not cell.borders.any:
        return None
    color = _hex(cell.border_color or "#000000")

    def side(drawn: bool) -> Side:
        return Side(style=style, color=color) if drawn else Side()

    return Border(
        left=side(cell.borders.left),
        right=side(cell.borders.right),
        top=side(cell.borders.top),
        bottom=side(cell.borders.bottom),
    )


def _writing_slots(cell: SheetCell) -> str:
    """One underscore run per word, one text line per grid line."""
    grid = cell.grid
    slot = "_" * 6
    lines = []
    for start in range(0, grid.word_count, grid.words_per_line):
        count = min(grid.words_per_line, grid.word_count - start)
        lines.append("  ".join([slot] * count))
    return "\n".join(lines)
