"""
Module: builder.layout.generator

Purpose:
    Entry point of the answer sheet layout engine.
    Turns a LayoutConfig into a finished SheetLayout:
    Header → Body, or Body → gap → Header when the header sits at the bottom.

Key Functions:
    - generate_layout(): LayoutConfig -> SheetLayout
    - build_layout(): Same, also returning where each question was placed

Key Classes:
    - GenerationResult: Layout plus question placements

Dependencies:
    - builder.layout.grid, header, body
    - core.models: LayoutConfig, SheetLayout

Used By:
    - sheet_toolkit.cli
    - builder.layout (package API)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from sheet_toolkit.core.models import LayoutConfig, SheetLayout

from .body import QuestionPlacement, compose_body
from .config import GridSettings
from .grid import GridAllocator
from .header import compose_header

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """
    Generated layout with diagnostics.

    Attributes:
        layout: The generated sheet
        placements: Grid rectangle of every question, in config order
    """

    layout: SheetLayout
    placements: tuple[QuestionPlacement, ...]

    def placement_for(self, question_id: str) -> Optional[QuestionPlacement]:
        return next((p for p in self.placements if p.question_id == question_id), None)


def build_layout(
    config: LayoutConfig,
    *,
    settings: Optional[GridSettings] = None,
    layout_id: Optional[str] = None,
) -> GenerationResult:
    """
    Generate a layout and report where each question was placed.

    Pure function over ``config``: each call builds its own grid, so
    independent configs may be generated concurrently.

    Args:
        config: Sheet description (never mutated)
        settings: Engine settings, defaults to GridSettings()
        layout_id: Identifier of the result; a timestamp-based id when None

    Returns:
        GenerationResult with the layout and question placements
    """
    settings = settings or GridSettings()
    grid = GridAllocator(config, settings)

    if config.header_position == "bottom":
        placements = compose_body(grid, config.sections)
        grid.add_row(settings.bottom_header_gap_mm)
        compose_header(grid, config.resolved_header_elements)
    else:
        compose_header(grid, config.resolved_header_elements)
        placements = compose_body(grid, config.sections)

    if layout_id is None:
        layout_id = f"layout_{int(time.time() * 1000)}"

    layout = grid.snapshot(layout_id)
    logger.info(
        f"Generated layout {layout.id!r}: {layout.rows} rows x {layout.cols} cols, "
        f"{len(placements)} question(s) in {len(config.sections)} section(s)"
    )
    return GenerationResult(layout=layout, placements=tuple(placements))


def generate_layout(
    config: LayoutConfig,
    *,
    settings: Optional[GridSettings] = None,
    layout_id: Optional[str] = None,
) -> SheetLayout:
    """
    Generate the answer sheet grid for ``config``.

    Example:
        >>> layout = generate_layout(config, layout_id="quiz1")
        >>> layout.cols
        80
    """
    return build_layout(config, settings=settings, layout_id=layout_id).layout
