"""
Module: builder.layout.body

Purpose:
    Lay out all sections' questions into body rows of the grid.
    Questions flow left-to-right, top-to-bottom through the content area
    to the right of a reserved section-label column.

Key Functions:
    - answer_width(): Answer-box width of a question in grid units
    - english_layout(): Wrap width and line count of an English word grid
    - place_question(): Place one question and advance the placement state
    - compose_section(): Place a section's questions and its title label
    - compose_body(): Place every section

Key Classes:
    - PlacementState: Cursor state threaded through placement steps
    - QuestionPlacement: Where a question ended up (for answer-area mapping)

Algorithm:
    Greedy row wrap, no backtracking:
    1. Item width = number cell + answer width (per-type policy)
    2. If the item (plus gap when not first in row) overflows the
       content width, finalize the row height, optionally add a gap
       row, and start a new row
    3. Row height = base height x tallest height ratio in the row
       (English grids count their line count as a ratio)
    4. After a section, a vertical title label spans all its rows

Dependencies:
    - builder.layout.grid: GridAllocator
    - builder.layout.numbering: Number/label formatting
    - core.models: Question, Section, cells

Used By:
    - builder.layout.generator
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

from sheet_toolkit.core.models import (
    Borders,
    EnglishGrid,
    Question,
    QuestionType,
    Section,
    make_cell,
)

from .config import GridSettings
from .grid import GridAllocator
from .numbering import circled, format_number

logger = logging.getLogger(__name__)

DEFAULT_CHOICES = 4
MAX_CHOICES = 20
DEFAULT_WORD_COUNT = 5
DEFAULT_WIDTH_RATIO = 20
MAX_WIDTH_RATIO = 40


@dataclass(frozen=True)
class PlacementState:
    """
    Accumulator threaded through the placement loop.

    Attributes:
        cursor_row: Row currently being filled
        cursor_col: Next free unit of the content area (0 = row is empty)
        row_max_height_ratio: Tallest height ratio placed in the current row
        question_counter: Next auto number
    """

    cursor_row: int
    cursor_col: int = 0
    row_max_height_ratio: float = 1.0
    question_counter: int = 1


@dataclass(frozen=True)
class QuestionPlacement:
    """
    Grid rectangle a question occupies.

    Attributes:
        question_id: Source question
        label: Text of the number cell
        row: First grid row
        col: Grid column of the number cell
        number_width: Units of the number cell
        answer_width: Units of the answer area
        row_span: Rows the item spans
    """

    question_id: str
    label: str
    row: int
    col: int
    number_width: int
    answer_width: int
    row_span: int = 1

    @property
    def total_width(self) -> int:
        return self.number_width + self.answer_width

    @property
    def answer_col(self) -> int:
        return self.col + self.number_width


# ─────────────────────────────────────────────────────────────────────────────
# Sizing
# ─────────────────────────────────────────────────────────────────────────────

def choice_count(question: Question) -> int:
    """Marksheet option count, defaulted and clamped to 1-20."""
    choices = question.choices if question.choices is not None else DEFAULT_CHOICES
    return max(1, min(MAX_CHOICES, int(choices)))


def word_count(question: Question) -> int:
    """English word count, defaulted and clamped to >= 1."""
    count = question.word_count if question.word_count else DEFAULT_WORD_COUNT
    return max(1, int(count))


def line_height_ratio(question: Question) -> float:
    """English grid line spacing; missing or non-positive ratios mean 1."""
    ratio = question.line_height_ratio
    return float(ratio) if ratio and ratio > 0 else 1.0


def answer_width(question: Question, settings: GridSettings) -> int:
    """
    Answer-box width in grid units.

    Every kind is clamped to [1, content width - number width] so an item
    always fits in an empty row.

    Args:
        question: Question to size
        settings: Engine settings

    Returns:
        Width in grid units
    """
    q_type = question.type
    if q_type is QuestionType.MARKSHEET:
        width = choice_count(question) * settings.marksheet_unit - 1
    elif q_type is QuestionType.LONG_TEXT:
        width = settings.max_answer_width
    elif q_type is QuestionType.ENGLISH_WORD:
        count = word_count(question)
        if question.words_per_line and question.words_per_line > 0:
            width = min(count, question.words_per_line) * settings.word_unit - 1
        elif count <= settings.single_line_word_limit:
            width = count * settings.word_unit - 1
        else:
            width = settings.max_answer_width
    else:
        ratio = question.width_ratio if question.width_ratio is not None else DEFAULT_WIDTH_RATIO
        ratio = min(MAX_WIDTH_RATIO, max(1, ratio))
        width = math.floor(settings.content_width * ratio / MAX_WIDTH_RATIO)
        width = max(settings.min_answer_width, width - settings.question_number_width)

    return max(1, min(settings.max_answer_width, width))


def english_layout(question: Question, width: int, settings: GridSettings) -> Tuple[int, int]:
    """
    Wrap width and line count of an English word grid.

    An explicit ``words_per_line`` is honoured unless the answer box was
    clamped narrower than that many slots; otherwise the wrap width is as
    many slots as fit the box.

    Returns:
        (words_per_line, rows)
    """
    count = word_count(question)
    fitting = max(1, (width + 1) // settings.word_unit)
    if question.words_per_line and question.words_per_line > 0:
        per_line = min(question.words_per_line, fitting)
    elif count <= settings.single_line_word_limit:
        per_line = count
    else:
        per_line = fitting
    per_line = max(1, per_line)
    return per_line, math.ceil(count / per_line)


def split_width(width: int, parts: int) -> List[int]:
    """
    Split ``width`` into ``parts`` integer widths that sum to ``width``.

    The remainder goes to the first sub-cells.

    Example:
        >>> split_width(19, 4)
        [5, 5, 5, 4]
    """
    base, remainder = divmod(width, parts)
    return [base + 1 if i < remainder else base for i in range(parts)]


# ─────────────────────────────────────────────────────────────────────────────
# Placement
# ─────────────────────────────────────────────────────────────────────────────

def finalize_row(grid: GridAllocator, state: PlacementState) -> None:
    """Set the current row's height from its tallest item."""
    height = grid.base_row_height * state.row_max_height_ratio
    row = state.cursor_row
    grid.set_row_height(row, max(height, grid.row_height(row)))


def place_question(
    grid: GridAllocator,
    question: Question,
    state: PlacementState,
    numbering_style: str = "1",
) -> Tuple[PlacementState, QuestionPlacement]:
    """
    Place one question at the cursor, wrapping to a new row if needed.

    Args:
        grid: Grid being built
        question: Question to place
        state: Current placement state
        numbering_style: Style of the auto number for this section

    Returns:
        (new state, placement of the question)
    """
    settings = grid.settings
    gap = max(0, grid.config.gap_between_questions)

    if question.label_override:
        label = question.label_override
        counter = state.question_counter
    else:
        label = format_number(state.question_counter, numbering_style)
        counter = state.question_counter + 1

    number_width = settings.question_number_width
    width = answer_width(question, settings)
    total_width = number_width + width

    effective_gap = gap if state.cursor_col > 0 else 0
    if state.cursor_col > 0 and state.cursor_col + effective_gap + total_width > settings.content_width:
        finalize_row(grid, state)
        if gap > 0:
            grid.add_row(gap * settings.gap_row_mm_per_unit)
        state = PlacementState(cursor_row=grid.add_row(), question_counter=state.question_counter)
    else:
        state = replace(state, cursor_col=state.cursor_col + effective_gap)

    grid_spec = None
    rows = 1
    if question.type is QuestionType.ENGLISH_WORD:
        per_line, rows = english_layout(question, width, settings)
        grid_spec = EnglishGrid(
            word_count=word_count(question),
            words_per_line=per_line,
            line_height_ratio=line_height_ratio(question),
        )

    height_ratio = max(1.0, question.height_ratio or 1.0)
    row = state.cursor_row
    col = settings.content_start_col + state.cursor_col

    grid.place_block(row, col, rows, number_width, make_cell(
        text=label,
        h_align="center",
        v_align="middle",
        background_color=settings.question_number_fill,
    ))

    answer_col = col + number_width
    if question.type is QuestionType.MARKSHEET:
        _place_marksheet(grid, row, answer_col, width, choice_count(question))
    elif grid_spec is not None:
        _place_english_grid(grid, row, answer_col, width, grid_spec)
    else:
        grid.place_cell(row, answer_col, width, make_cell())

    placement = QuestionPlacement(
        question_id=question.id,
        label=label,
        row=row,
        col=col,
        number_width=number_width,
        answer_width=width,
        row_span=rows,
    )
    state = replace(
        state,
        cursor_col=state.cursor_col + total_width,
        row_max_height_ratio=max(state.row_max_height_ratio, height_ratio, rows),
        question_counter=counter,
    )
    return state, placement


def _place_marksheet(grid: GridAllocator, row: int, col: int, width: int, choices: int) -> None:
    """One sub-cell per choice; outer sides only at the group's extremes."""
    widths = split_width(width, choices)
    offset = 0
    for i, sub_width in enumerate(widths):
        if sub_width <= 0:
            continue
        grid.place_cell(row, col + offset, sub_width, make_cell(
            text=circled(i + 1),
            h_align="center",
            borders=Borders(top=True, bottom=True, left=(i == 0), right=(i == choices - 1)),
        ))
        offset += sub_width


def _place_english_grid(
    grid: GridAllocator, row: int, col: int, width: int, spec: EnglishGrid
) -> None:
    """One merged placeholder cell; slots are drawn at render time."""
    grid.place_block(row, col, spec.rows, width, make_cell(
        borders=Borders.none(),
        grid=spec,
    ))
    line_height = grid.base_row_height * spec.line_height_ratio
    for r in range(row, row + spec.rows):
        grid.raise_row_height(r, line_height)


# ─────────────────────────────────────────────────────────────────────────────
# Sections
# ─────────────────────────────────────────────────────────────────────────────

def compose_section(
    grid: GridAllocator,
    section: Section,
    question_counter: int,
) -> Tuple[int, List[QuestionPlacement]]:
    """
    Place a section's questions, then its vertical title label and a gap row.

    Returns:
        (next question counter, placements)
    """
    settings = grid.settings
    first_row = grid.add_row()
    state = PlacementState(cursor_row=first_row, question_counter=question_counter)
    placements: List[QuestionPlacement] = []

    for question in section.questions:
        state, placement = place_question(grid, question, state, section.numbering_style)
        placements.append(placement)

    finalize_row(grid, state)

    last_row = grid.row_count - 1
    row_span = last_row - first_row + 1
    grid.place_block(first_row, 0, row_span, settings.section_label_width, make_cell(
        text=section.title,
        h_align="center",
        v_align="middle",
        font_size=settings.section_font_size,
        font_weight="bold",
        background_color=settings.section_label_fill,
    ))
    grid.add_row(settings.section_gap_mm)

    logger.debug(
        f"Section {section.title!r}: {len(section.questions)} question(s) "
        f"in rows {first_row}-{last_row}"
    )
    return state.question_counter, placements


def compose_body(grid: GridAllocator, sections: Sequence[Section]) -> List[QuestionPlacement]:
    """
    Place every section in order with one global question counter.

    Returns:
        Placements of all questions in config order
    """
    counter = 1
    placements: List[QuestionPlacement] = []
    for section in sections:
        counter, section_placements = compose_section(grid, section, counter)
        placements.extend(section_placements)
    return placements
