"""
Module: builder.layout.config

Purpose:
    Tunables of the answer sheet layout engine.
    Defines the fixed column resolution, unit widths of each answer kind,
    header row heights and the default header label texts.

Key Classes:
    - GridSettings: Immutable engine settings

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.grid: Grid allocation
    - builder.layout.header: Header composition
    - builder.layout.body: Question placement
"""

from __future__ import annotations

from dataclasses import dataclass


# Millimetres to CSS pixels at 96 DPI
MM_TO_PX = 3.78


@dataclass(frozen=True)
class GridSettings:
    """
    Configuration for the layout engine (immutable).

    All widths are in grid units (columns of the fixed-resolution grid);
    heights are in millimetres.

    Attributes:
        fixed_cols: Column resolution of the internal grid
        mm_to_px: Conversion factor for row heights and column widths
        horizontal_margin_mm: Paper width not available to the grid
        score_width: Width of the score lane in the header
        section_label_width: Width of the vertical section title column
        right_margin_units: Units kept free at the right edge of the body
        question_number_width: Width of each question-number cell
        marksheet_unit: Units per marksheet choice
        word_unit: Units per English word slot (box plus gap)
        single_line_word_limit: Auto English grids up to this many words stay on one line
        min_answer_width: Smallest answer width for ratio text
        title_row_mm / header_row_mm: Header row heights
        header_spacer_mm / bottom_header_gap_mm / section_gap_mm: Spacer rows
        gap_row_mm_per_unit: Height of the row inserted between wrapped rows, per gap unit

    Example:
        >>> GridSettings().content_width
        74
    """

    fixed_cols: int = 80
    mm_to_px: float = MM_TO_PX
    horizontal_margin_mm: float = 20.0

    # Header
    score_width: int = 16
    title_row_mm: float = 14.0
    header_row_mm: float = 10.0
    header_spacer_mm: float = 6.0
    bottom_header_gap_mm: float = 10.0
    title_font_size: float = 18
    score_font_size: float = 10
    score_label: str = "点数"
    class_label: str = "  年     組     番"
    name_label: str = "氏名"

    # Body
    section_label_width: int = 5
    right_margin_units: int = 1
    question_number_width: int = 4
    marksheet_unit: int = 5
    word_unit: int = 8
    single_line_word_limit: int = 6
    min_answer_width: int = 2
    section_gap_mm: float = 4.0
    gap_row_mm_per_unit: float = 1.0
    section_font_size: float = 14

    # Colours
    question_number_fill: str = "#f3f4f6"
    section_label_fill: str = "#e5e7eb"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.fixed_cols <= 0:
            raise ValueError(f"fixed_cols must be positive: {self.fixed_cols}")
        if self.mm_to_px <= 0:
            raise ValueError(f"mm_to_px must be positive: {self.mm_to_px}")
        if self.score_width >= self.fixed_cols:
            raise ValueError("score_width exceeds grid width")
        if self.content_width <= self.question_number_width:
            raise ValueError("Section label and margins leave no room for questions")
        if self.word_unit < 2 or self.marksheet_unit < 2:
            raise ValueError("word_unit and marksheet_unit must be at least 2")

    @property
    def content_width(self) -> int:
        """Units available for question placement in each body row."""
        return self.fixed_cols - self.section_label_width - self.right_margin_units

    @property
    def content_start_col(self) -> int:
        """First grid column of the content area."""
        return self.section_label_width

    @property
    def max_answer_width(self) -> int:
        """Widest answer box that still fits beside its number cell."""
        return self.content_width - self.question_number_width

    def column_width_px(self, paper_width_mm: float) -> float:
        """Width of one grid unit in px for a given paper width."""
        return (paper_width_mm - self.horizontal_margin_mm) / self.fixed_cols * self.mm_to_px
