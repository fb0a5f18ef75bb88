"""
Module: builder.output.renderer

Purpose:
    Render a SheetLayout to a one-page PDF using ReportLab.
    The grid is placed inside 10 mm page margins; cells are drawn as
    background, text, borders, and deferred English grids are expanded
    into dashed writing lines.

Key Functions:
    - render_to_pdf(): Main rendering function

Key Classes:
    - RenderError: Raised when an output cannot be produced

Dependencies:
    - reportlab: PDF generation, CJK CID font
    - builder.output.geometry: Cell rectangles and writing lines

Used By:
    - sheet_toolkit.cli: ``render --pdf``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from reportlab.lib.colors import HexColor, black
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas

from sheet_toolkit.builder.layout.config import MM_TO_PX
from sheet_toolkit.core.models import CellKind, SheetCell, SheetLayout

from .geometry import CellBox, Segment, border_segments, cell_boxes, english_grid_lines

logger = logging.getLogger(__name__)

# Constants
PAGE_MARGIN_MM = 10.0
DEFAULT_PAGE_MM = (210.0, 297.0)
CELL_PADDING_X_PX = 4.0
CELL_PADDING_Y_PX = 2.0
LINE_SPACING = 1.2
ASCENT_RATIO = 0.8

_CJK_FONT_NAME = "HeiseiKakuGo-W5"
_cjk_ready: Optional[bool] = None

# Dash patterns in px, scaled with the border width
_DASHES = {
    "dashed": (4, 2),
    "dotted": (1, 2),
}


class RenderError(Exception):
    """Error while rendering a layout to an output file."""
    pass


def _ensure_cjk_font() -> bool:
    """Register the CJK CID font once; False if ReportLab cannot provide it."""
    global _cjk_ready
    if _cjk_ready is None:
        try:
            pdfmetrics.registerFont(UnicodeCIDFont(_CJK_FONT_NAME))
            _cjk_ready = True
        except (KeyError, ValueError, OSError) as e:
            logger.warning(f"CJK font {_CJK_FONT_NAME} unavailable, falling back to Helvetica: {e}")
            _cjk_ready = False
    return _cjk_ready


@dataclass(frozen=True)
class _Page:
    """Maps layout pixels (y down) onto PDF points (y up)."""

    left_pt: float
    top_pt: float
    scale: float  # points per layout pixel

    def x(self, x_px: float) -> float:
        return self.left_pt + x_px * self.scale

    def y(self, y_px: float) -> float:
        return self.top_pt - y_px * self.scale

    def length(self, px: float) -> float:
        return px * self.scale


def render_to_pdf(
    layout: SheetLayout,
    output_path: Path,
    *,
    margin_mm: float = PAGE_MARGIN_MM,
    draw_english_grids: bool = True,
) -> None:
    """
    Render a layout to a single-page PDF.

    The page size comes from the layout's config (A4 when the layout
    carries none). Content larger than the printable area is scaled down
    uniformly.

    Args:
        layout: Layout to render
        output_path: Path to write PDF
        margin_mm: Page margin on every side
        draw_english_grids: Draw writing lines inside English grid cells

    Raises:
        RenderError: If a cell style cannot be drawn or the file cannot be written

    Example:
        >>> render_to_pdf(layout, Path("output/sheet.pdf"))
    """
    page_w_mm, page_h_mm = _page_size_mm(layout)
    page_w_pt, page_h_pt = page_w_mm * mm, page_h_mm * mm
    pt_per_px = mm / MM_TO_PX

    avail_w = page_w_pt - 2 * margin_mm * mm
    avail_h = page_h_pt - 2 * margin_mm * mm
    content_w = layout.width_px * pt_per_px
    content_h = layout.height_px * pt_per_px

    fit = 1.0
    if content_w > 0 and content_h > 0:
        fit = min(1.0, avail_w / content_w, avail_h / content_h)
    if fit < 1.0 - 1e-6:
        logger.warning(
            f"Layout {layout.id!r} is larger than the printable area, scaled to {fit:.0%}"
        )

    page = _Page(
        left_pt=margin_mm * mm,
        top_pt=page_h_pt - margin_mm * mm,
        scale=pt_per_px * fit,
    )

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        c = canvas.Canvas(str(output_path), pagesize=(page_w_pt, page_h_pt))
        c.setTitle(layout.name or layout.id)

        boxes = list(cell_boxes(layout))
        for box in boxes:
            _draw_background(c, page, box)
        for box in boxes:
            if box.cell.kind is CellKind.ENGLISH_GRID:
                if draw_english_grids:
                    _draw_english_grid(c, page, box)
            elif box.cell.text:
                _draw_text(c, page, box, fit)
        for box in boxes:
            _draw_borders(c, page, box)

        c.showPage()
        c.save()
    except ValueError as e:
        raise RenderError(f"Cannot render layout {layout.id!r}: {e}") from e
    except OSError as e:
        raise RenderError(f"Cannot write {output_path}: {e}") from e

    logger.info(f"Rendered layout {layout.id!r} ({len(boxes)} cells) to {output_path}")


def _page_size_mm(layout: SheetLayout) -> tuple[float, float]:
    if layout.config is None:
        return DEFAULT_PAGE_MM
    paper = layout.config.paper_size
    return paper.width_mm, paper.height_mm


# ─────────────────────────────────────────────────────────────────────────────
# Cell Drawing
# ─────────────────────────────────────────────────────────────────────────────

def _draw_background(c: canvas.Canvas, page: _Page, box: CellBox) -> None:
    color = box.cell.background_color
    if not color:
        return
    c.saveState()
    c.setFillColor(HexColor(color))
    c.rect(
        page.x(box.x), page.y(box.bottom),
        page.length(box.width), page.length(box.height),
        stroke=0, fill=1,
    )
    c.restoreState()


def _draw_borders(c: canvas.Canvas, page: _Page, box: CellBox) -> None:
    """
    Draw the cell's enabled sides.

    Adjacent cells both drawing a shared edge overlap exactly, matching a
    collapsed-border table.
    """
    segments = border_segments(box)
    if not segments:
        return

    cell = box.cell
    width_px = cell.border_width if cell.border_width is not None else 1.0
    if width_px <= 0:
        return
    width = page.length(width_px)

    c.saveState()
    c.setStrokeColor(HexColor(cell.border_color or "#000000"))
    c.setLineWidth(width)
    dash = _DASHES.get(cell.border_style)
    if dash:
        c.setDash([page.length(d * width_px) for d in dash], 0)

    for side, seg in segments.items():
        if cell.border_style == "double":
            _draw_double(c, page, side, seg, width)
        else:
            c.line(page.x(seg.x0), page.y(seg.y0), page.x(seg.x1), page.y(seg.y1))
    c.restoreState()


def _draw_double(c: canvas.Canvas, page: _Page, side: str, seg: Segment, width: float) -> None:
    """Two thin lines, one on the edge and one inset into the cell."""
    c.setLineWidth(width / 2)
    inset = width * 1.5
    dx, dy = {
        "top": (0, -inset),
        "bottom": (0, inset),
        "left": (inset, 0),
        "right": (-inset, 0),
    }[side]
    x0, y0, x1, y1 = page.x(seg.x0), page.y(seg.y0), page.x(seg.x1), page.y(seg.y1)
    c.line(x0, y0, x1, y1)
    c.line(x0 + dx, y0 + dy, x1 + dx, y1 + dy)


def _draw_english_grid(c: canvas.Canvas, page: _Page, box: CellBox) -> None:
    c.saveState()
    c.setStrokeColor(black)
    c.setLineWidth(page.length(1.0))
    c.setDash([page.length(3), page.length(2)], 0)
    for seg in english_grid_lines(box, box.cell.grid):
        c.line(page.x(seg.x0), page.y(seg.y0), page.x(seg.x1), page.y(seg.y1))
    c.restoreState()


# ─────────────────────────────────────────────────────────────────────────────
# Text
# ─────────────────────────────────────────────────────────────────────────────

def _font_for(cell: SheetCell) -> tuple[str, bool]:
    """
    Pick a font for the cell's text.

    Returns:
        (font name, fake bold) - fake bold strokes the glyph outline for
        fonts without a bold face
    """
    if not cell.text.isascii():
        if _ensure_cjk_font():
            return _CJK_FONT_NAME, cell.is_bold
        logger.warning(f"Non-Latin text {cell.text[:10]!r} drawn with Helvetica")

    if cell.is_bold and cell.is_italic:
        return "Helvetica-BoldOblique", False
    if cell.is_bold:
        return "Helvetica-Bold", False
    if cell.is_italic:
        return "Helvetica-Oblique", False
    return "Helvetica", False


def _draw_text(c: canvas.Canvas, page: _Page, box: CellBox, fit: float) -> None:
    """Draw multi-line text aligned inside the cell, clipped to its rectangle."""
    cell = box.cell
    font_name, fake_bold = _font_for(cell)
    size = cell.font_size * fit
    leading = size * LINE_SPACING
    lines = cell.text.split("\n")

    left = page.x(box.x) + page.length(CELL_PADDING_X_PX)
    right = page.x(box.right) - page.length(CELL_PADDING_X_PX)
    top = page.y(box.y) - page.length(CELL_PADDING_Y_PX)
    bottom = page.y(box.bottom) + page.length(CELL_PADDING_Y_PX)

    block_h = leading * (len(lines) - 1) + size
    if cell.v_align == "top":
        first_baseline = top - size * ASCENT_RATIO
    elif cell.v_align == "bottom":
        first_baseline = bottom + block_h - size * ASCENT_RATIO
    else:
        first_baseline = (top + bottom) / 2 + block_h / 2 - size * ASCENT_RATIO

    c.saveState()
    clip = c.beginPath()
    clip.rect(page.x(box.x), page.y(box.bottom), page.length(box.width), page.length(box.height))
    c.clipPath(clip, stroke=0, fill=0)
    c.setFillColor(black)
    c.setStrokeColor(black)

    for i, line in enumerate(lines):
        baseline = first_baseline - i * leading
        width = pdfmetrics.stringWidth(line, font_name, size)
        if cell.h_align == "center":
            x = (left + right - width) / 2
        elif cell.h_align == "right":
            x = right - width
        else:
            x = left

        text = c.beginText(x, baseline)
        text.setFont(font_name, size)
        if fake_bold:
            c.setLineWidth(size * 0.03)
            text.setTextRenderMode(2)
        text.textOut(line)
        c.drawText(text)

        if cell.is_underlined and line:
            c.setLineWidth(max(size * 0.05, 0.3))
            c.line(x, baseline - size * 0.12, x + width, baseline - size * 0.12)
    c.restoreState()
