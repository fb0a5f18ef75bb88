"""
Module: builder.output

Purpose:
    Output generation for generated answer sheets.
    Converts a SheetLayout to PDF (ReportLab), PNG previews (Pillow)
    and Excel workbooks (openpyxl).

Key Functions:
    - render_to_pdf(): Render layout to PDF
    - render_preview(): Rasterise layout to PNG
    - export_xlsx(): Export layout to .xlsx
    - cell_boxes(): Pixel rectangles shared by the renderers

Dependencies:
    - reportlab: PDF generation
    - PIL: Image drawing
    - openpyxl: Spreadsheet writing

Used By:
    - sheet_toolkit.cli: ``render`` subcommand
"""

from .geometry import CellBox, Segment, border_segments, cell_boxes, english_grid_lines
from .renderer import RenderError, render_to_pdf
from .preview import render_image, render_preview
from .xlsx import build_workbook, export_xlsx

__all__ = [
    "CellBox",
    "Segment",
    "border_segments",
    "cell_boxes",
    "english_grid_lines",
    "RenderError",
    "render_to_pdf",
    "render_image",
    "render_preview",
    "build_workbook",
    "export_xlsx",
]
