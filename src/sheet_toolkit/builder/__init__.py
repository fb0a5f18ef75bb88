"""
Module: builder

Purpose:
    Answer sheet building pipeline: turns a LayoutConfig into a SheetLayout
    grid and renders that grid to print and office formats.

Key Functions:
    - generate_layout(): Main entry point for layout generation
    - render_to_pdf(): Render a layout to a printable PDF
    - render_preview(): Rasterise a layout to PNG
    - export_xlsx(): Export a layout as a spreadsheet

Key Classes:
    - GridSettings: Engine tunables
    - GenerationResult: Layout plus question placements

Dependencies:
    - reportlab: PDF rendering
    - PIL: PNG preview
    - openpyxl: Spreadsheet export
    - sheet_toolkit.core.models: LayoutConfig, SheetLayout

Used By:
    - sheet_toolkit.cli: Command line interface
"""

from .layout import GenerationResult, GridSettings, build_layout, generate_layout
from .output import RenderError, export_xlsx, render_preview, render_to_pdf

__all__ = [
    # Layout
    "GridSettings",
    "GenerationResult",
    "build_layout",
    "generate_layout",
    # Output
    "RenderError",
    "render_to_pdf",
    "render_preview",
    "export_xlsx",
]
