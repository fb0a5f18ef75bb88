"""
Module: builder.output.preview

Purpose:
    Rasterise a SheetLayout to a PNG preview with Pillow, using the same
    cell geometry as the PDF renderer.

Key Functions:
    - render_preview(): Draw a layout to an image file
    - render_image(): Draw a layout to an in-memory image

Dependencies:
    - PIL: Image drawing
    - builder.output.geometry: Cell rectangles and writing lines

Used By:
    - sheet_toolkit.cli: ``render --png``
"""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from sheet_toolkit.core.models import CellKind, SheetLayout

from .geometry import CellBox, Segment, border_segments, cell_boxes, english_grid_lines
from .renderer import RenderError

logger = logging.getLogger(__name__)

# Default settings
DEFAULT_SCALE = 2.0
PT_TO_PX = 96 / 72
BACKGROUND = "white"
TEXT_COLOR = "black"
PADDING_X_PX = 4
PADDING_Y_PX = 2


def render_image(layout: SheetLayout, *, scale: float = DEFAULT_SCALE) -> Image.Image:
    """
    Draw a layout onto a new RGB image.

    Args:
        layout: Layout to draw
        scale: Output pixels per layout pixel

    Returns:
        Image of size ceil(layout size x scale), at least 1x1

    Raises:
        ValueError: If scale is not positive or a cell colour is invalid
    """
    if scale <= 0:
        raise ValueError(f"scale must be positive: {scale}")

    size = (
        max(1, math.ceil(layout.width_px * scale)),
        max(1, math.ceil(layout.height_px * scale)),
    )
    image = Image.new("RGB", size, BACKGROUND)
    draw = ImageDraw.Draw(image)

    boxes = list(cell_boxes(layout))
    for box in boxes:
        if box.cell.background_color:
            draw.rectangle(_rect(box, scale), fill=box.cell.background_color)
    for box in boxes:
        if box.cell.kind is CellKind.ENGLISH_GRID:
            for seg in english_grid_lines(box, box.cell.grid):
                _dashed_line(draw, seg, scale, width=max(1, round(scale)), dash=(3, 2))
        elif box.cell.text:
            _draw_text(draw, box, scale)
    for box in boxes:
        _draw_borders(draw, box, scale)
    return image


def render_preview(
    layout: SheetLayout,
    output_path: Path,
    *,
    scale: float = DEFAULT_SCALE,
) -> None:
    """
    Render a layout to a PNG file.

    Example:
        >>> render_preview(layout, Path("output/sheet.png"), scale=1.0)

    Raises:
        RenderError: If the layout cannot be drawn or the file cannot be written
    """
    try:
        image = render_image(layout, scale=scale)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        image.save(output_path, format="PNG")
    except ValueError as e:
        raise RenderError(f"Cannot render layout {layout.id!r}: {e}") from e
    except OSError as e:
        raise RenderError(f"Cannot write {output_path}: {e}") from e
    logger.info(f"Rendered preview of {layout.id!r} ({image.width}x{image.height}) to {output_path}")


def _rect(box: CellBox, scale: float) -> tuple[int, int, int, int]:
    return (
        round(box.x * scale),
        round(box.y * scale),
        max(round(box.x * scale), round(box.right * scale) - 1),
        max(round(box.y * scale), round(box.bottom * scale) - 1),
    )


def _draw_borders(draw: ImageDraw.ImageDraw, box: CellBox, scale: float) -> None:
    cell = box.cell
    width_px = cell.border_width if cell.border_width is not None else 1.0
    if width_px <= 0:
        return
    width = max(1, round(width_px * scale))
    color = cell.border_color or "#000000"

    for seg in border_segments(box).values():
        if cell.border_style == "dashed":
            _dashed_line(draw, seg, scale, width=width, dash=(4 * width_px, 2 * width_px), fill=color)
        elif cell.border_style == "dotted":
            _dashed_line(draw, seg, scale, width=width, dash=(width_px, 2 * width_px), fill=color)
        else:
            draw.line(_points(seg, scale), fill=color, width=width)


def _points(seg: Segment, scale: float) -> list[tuple[float, float]]:
    return [(seg.x0 * scale, seg.y0 * scale), (seg.x1 * scale, seg.y1 * scale)]


def _dashed_line(
    draw: ImageDraw.ImageDraw,
    seg: Segment,
    scale: float,
    *,
    width: int,
    dash: tuple[float, float],
    fill: str = TEXT_COLOR,
) -> None:
    """Pillow has no dash support; draw the segment piecewise."""
    (x0, y0), (x1, y1) = _points(seg, scale)
    length = math.hypot(x1 - x0, y1 - y0)
    on, off = dash[0] * scale, dash[1] * scale
    if length == 0 or on <= 0:
        return
    ux, uy = (x1 - x0) / length, (y1 - y0) / length
    pos = 0.0
    while pos < length:
        end = min(pos + on, length)
        draw.line(
            [(x0 + ux * pos, y0 + uy * pos), (x0 + ux * end, y0 + uy * end)],
            fill=fill,
            width=width,
        )
        pos = end + off


def _draw_text(draw: ImageDraw.ImageDraw, box: CellBox, scale: float) -> None:
    cell = box.cell
    font = _load_font(max(1, round(cell.font_size * PT_TO_PX * scale)), cell.is_bold)
    align = cell.h_align

    left, top, right, bottom = _rect(box, scale)
    left += PADDING_X_PX * scale
    right -= PADDING_X_PX * scale
    top += PADDING_Y_PX * scale
    bottom -= PADDING_Y_PX * scale

    bbox = draw.multiline_textbbox((0, 0), cell.text, font=font, align=align)
    text_w = bbox[2] - bbox[0]
    text_h = bbox[3] - bbox[1]

    if align == "center":
        x = (left + right - text_w) / 2
    elif align == "right":
        x = right - text_w
    else:
        x = left
    if cell.v_align == "top":
        y = top
    elif cell.v_align == "bottom":
        y = bottom - text_h
    else:
        y = (top + bottom - text_h) / 2

    origin = (x - bbox[0], y - bbox[1])
    draw.multiline_text(origin, cell.text, fill=TEXT_COLOR, font=font, align=align)
    if cell.is_underlined:
        underline_y = y + text_h + max(1, scale)
        draw.line([(x, underline_y), (x + text_w, underline_y)], fill=TEXT_COLOR, width=max(1, round(scale)))


@lru_cache(maxsize=64)
def _load_font(size: int, bold: bool = False) -> ImageFont.ImageFont:
    """
    Load a font able to draw Japanese labels where the system has one.

    Falls back to Latin fonts, then to Pillow's built-in font.
    """
    cjk_options = [
        "NotoSansCJK-Bold.ttc" if bold else "NotoSansCJK-Regular.ttc",
        "NotoSansJP-Regular.otf",
        "msgothic.ttc",             # MS Gothic (Windows)
        "YuGothM.ttc",
        "ヒラギノ角ゴシック W3.ttc",  # Hiragino (Mac)
        "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
        "/System/Library/Fonts/Hiragino Sans GB.ttc",
    ]
    latin_options = [
        "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf",
        "arialbd.ttf" if bold else "arial.ttf",
        "Arial.ttf",
        "DejaVuSans.ttf",
    ]

    for font_name in cjk_options + latin_options:
        try:
            return ImageFont.truetype(font_name, size)
        except (IOError, OSError):
            continue

    logger.warning("Could not load TrueType font, using default")
    return ImageFont.load_default()
