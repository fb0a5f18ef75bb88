"""
Unit tests for body composition: sizing, wrapping and section labels.

Configs use no header elements so the body starts at row 1
(row 0 is the header spacer).
"""

import pytest

from sheet_toolkit.builder.layout import (
    GridAllocator,
    GridSettings,
    PlacementState,
    answer_width,
    build_layout,
    english_layout,
    place_question,
)
from sheet_toolkit.builder.layout.body import split_width
from sheet_toolkit.core.models import CellKind, LayoutConfig, Question, QuestionType, Section
from sheet_toolkit.core.schemas import validate_layout_grid

MM_TO_PX = 3.78
SETTINGS = GridSettings()


def _build(config_factory, *questions, **kwargs):
    kwargs.setdefault("header_elements", ())
    config = config_factory(list(questions), **kwargs)
    return build_layout(config, layout_id="test")


# ─────────────────────────────────────────────────────────────────────────────
# Sizing
# ─────────────────────────────────────────────────────────────────────────────

class TestAnswerWidth:
    """Per-type answer width policies."""

    @pytest.mark.parametrize("choices, expected", [
        (4, 19),
        (None, 19),
        (2, 9),
        (0, 4),
        (99, 70),
    ])
    def test_answer_width_when_marksheet_then_five_units_per_choice(self, choices, expected):
        q = Question(id="m", type=QuestionType.MARKSHEET, choices=choices)
        assert answer_width(q, SETTINGS) == expected

    def test_answer_width_when_long_text_then_full_content_width(self):
        q = Question(id="l", type=QuestionType.LONG_TEXT)
        assert answer_width(q, SETTINGS) == 70

    @pytest.mark.parametrize("ratio, expected", [
        (40, 70),
        (20, 33),
        (10, 14),
        (1, 2),
        (0, 2),
        (400, 70),
    ])
    def test_answer_width_when_ratio_text_then_scaled_and_clamped(self, ratio, expected):
        q = Question(id="t", width_ratio=ratio)
        assert answer_width(q, SETTINGS) == expected

    def test_answer_width_when_ratio_missing_then_default_ratio(self):
        q = Question(id="t", width_ratio=None)
        assert answer_width(q, SETTINGS) == 33

    @pytest.mark.parametrize("word_count, per_line, expected", [
        (12, 5, 39),
        (3, None, 23),
        (6, None, 47),
        (7, None, 70),
        (None, None, 39),
        (12, 20, 70),
    ])
    def test_answer_width_when_english_word_then_eight_units_per_word(self, word_count, per_line, expected):
        q = Question(
            id="e", type=QuestionType.ENGLISH_WORD, word_count=word_count, words_per_line=per_line
        )
        assert answer_width(q, SETTINGS) == expected


class TestEnglishLayout:
    """Wrap width and line count of English grids."""

    def test_english_layout_when_words_per_line_given_then_uses_it(self):
        q = Question(id="e", type=QuestionType.ENGLISH_WORD, word_count=12, words_per_line=5)
        assert english_layout(q, 39, SETTINGS) == (5, 3)

    def test_english_layout_when_short_auto_then_single_line(self):
        q = Question(id="e", type=QuestionType.ENGLISH_WORD, word_count=4)
        assert english_layout(q, 31, SETTINGS) == (4, 1)

    def test_english_layout_when_long_auto_then_wraps_at_fitting_slots(self):
        q = Question(id="e", type=QuestionType.ENGLISH_WORD, word_count=20)
        assert english_layout(q, 70, SETTINGS) == (8, 3)

    def test_english_layout_when_box_clamped_then_reduces_words_per_line(self):
        q = Question(id="e", type=QuestionType.ENGLISH_WORD, word_count=40, words_per_line=50)
        assert english_layout(q, 70, SETTINGS) == (8, 5)


class TestSplitWidth:
    """Marksheet sub-cell widths."""

    def test_split_width_when_remainder_then_goes_to_first_cells(self):
        assert split_width(19, 4) == [5, 5, 5, 4]
        assert split_width(22, 4) == [6, 6, 5, 5]

    def test_split_width_when_even_then_equal_parts(self):
        assert split_width(20, 4) == [5, 5, 5, 5]

    def test_split_width_when_called_then_sum_preserved(self):
        for width in range(1, 71):
            for parts in range(1, 21):
                assert sum(split_width(width, parts)) == width


# ─────────────────────────────────────────────────────────────────────────────
# Placement
# ─────────────────────────────────────────────────────────────────────────────

class TestPlaceQuestion:
    """Single placement step."""

    def test_place_question_when_first_in_row_then_no_leading_gap(self):
        grid = GridAllocator(LayoutConfig(name="t"), SETTINGS)
        row = grid.add_row()
        state = PlacementState(cursor_row=row)

        state, placement = place_question(grid, Question(id="q", width_ratio=10), state)

        assert placement.col == 5
        assert placement.label == "1"
        assert state.cursor_col == 18
        assert state.question_counter == 2

    def test_place_question_when_label_override_then_counter_unchanged(self):
        grid = GridAllocator(LayoutConfig(name="t"), SETTINGS)
        state = PlacementState(cursor_row=grid.add_row(), question_counter=7)

        state, placement = place_question(
            grid, Question(id="q", label_override="問A"), state
        )

        assert placement.label == "問A"
        assert grid.cell(0, 5).text == "問A"
        assert state.question_counter == 7

    def test_place_question_when_style_none_then_blank_label_and_counter_advances(self):
        grid = GridAllocator(LayoutConfig(name="t"), SETTINGS)
        state = PlacementState(cursor_row=grid.add_row())

        state, placement = place_question(grid, Question(id="q"), state, "none")

        assert placement.label == ""
        assert state.question_counter == 2

    def test_place_question_when_height_ratio_then_tracks_row_max(self):
        grid = GridAllocator(LayoutConfig(name="t"), SETTINGS)
        state = PlacementState(cursor_row=grid.add_row())

        state, _ = place_question(grid, Question(id="a", width_ratio=5, height_ratio=2.5), state)
        state, _ = place_question(grid, Question(id="b", width_ratio=5, height_ratio=1.5), state)

        assert state.row_max_height_ratio == 2.5


class TestScenarios:
    """End-to-end placement scenarios."""

    def test_generate_when_full_width_short_text_then_answer_spans_content(
        self, config_factory, question_factory
    ):
        result = _build(config_factory, question_factory(width_ratio=40))
        layout = result.layout

        number = layout.cell(1, 5)
        answer = layout.cell(1, 9)
        assert number.text == "1"
        assert number.col_span == 4
        assert number.background_color == "#f3f4f6"
        assert answer.col_span == 70
        assert number.col_span + answer.col_span == SETTINGS.content_width
        # Spacer, one content row, section gap row
        assert layout.rows == 3

    def test_generate_when_marksheet_four_choices_then_circled_sub_cells(
        self, config_factory, question_factory
    ):
        layout = _build(
            config_factory, question_factory(QuestionType.MARKSHEET, choices=4)
        ).layout

        anchors = [(c, cell) for c, cell in layout.row_cells(1) if 9 <= c < 28]
        assert [c for c, _ in anchors] == [9, 14, 19, 24]
        assert [cell.col_span for _, cell in anchors] == [5, 5, 5, 4]
        assert [cell.text for _, cell in anchors] == ["①", "②", "③", "④"]
        first, middle, last = anchors[0][1], anchors[1][1], anchors[3][1]
        assert first.borders.left and not first.borders.right
        assert not middle.borders.left and not middle.borders.right
        assert last.borders.right and not last.borders.left
        assert all(cell.borders.top and cell.borders.bottom for _, cell in anchors)

    def test_generate_when_english_grid_then_number_spans_english_rows(
        self, config_factory, question_factory
    ):
        layout = _build(
            config_factory,
            question_factory(QuestionType.ENGLISH_WORD, word_count=12, words_per_line=5),
        ).layout

        number = layout.cell(1, 5)
        answer = layout.cell(1, 9)
        assert number.row_span == 3
        assert answer.kind is CellKind.ENGLISH_GRID
        assert (answer.row_span, answer.col_span) == (3, 39)
        assert answer.grid.word_count == 12
        assert answer.grid.words_per_line == 5
        for r in (2, 3):
            assert all(layout.cell(r, c) is None for c in range(0, 48))
        assert layout.cell(1, 0).row_span == 3

    def test_generate_when_english_line_height_ratio_then_inner_rows_raised(
        self, config_factory, question_factory
    ):
        layout = _build(
            config_factory,
            question_factory(
                QuestionType.ENGLISH_WORD, word_count=12, words_per_line=5, line_height_ratio=1.5
            ),
        ).layout

        assert layout.row_heights[1] == pytest.approx(30 * MM_TO_PX)
        assert layout.row_heights[2] == pytest.approx(15 * MM_TO_PX)
        assert layout.row_heights[3] == pytest.approx(15 * MM_TO_PX)

    def test_generate_when_items_overflow_then_second_wraps_to_new_row(
        self, config_factory, question_factory
    ):
        result = _build(
            config_factory,
            question_factory(width_ratio=40, height_ratio=2),
            question_factory(width_ratio=40),
        )
        first, second = result.placements

        assert first.row == 1
        # Gap row of 2 units (2 mm) between wrapped rows
        assert second.row == 3
        assert second.col == 5
        heights = result.layout.row_heights
        assert heights[1] == pytest.approx(20 * MM_TO_PX)
        assert heights[2] == pytest.approx(2 * MM_TO_PX)
        assert heights[3] == pytest.approx(10 * MM_TO_PX)

    def test_generate_when_gap_zero_then_wraps_without_gap_row(
        self, config_factory, question_factory
    ):
        result = _build(
            config_factory,
            question_factory(width_ratio=40),
            question_factory(width_ratio=40),
            gap_between_questions=0,
        )
        assert [p.row for p in result.placements] == [1, 2]

    def test_generate_when_items_fit_then_gap_between_them(self, config_factory, question_factory):
        result = _build(
            config_factory, question_factory(width_ratio=10), question_factory(width_ratio=10)
        )
        assert [(p.row, p.col) for p in result.placements] == [(1, 5), (1, 25)]

    def test_generate_when_item_exactly_fills_row_then_no_wrap(
        self, config_factory, question_factory
    ):
        # 37 + 37 = 74 units fits with no gap
        result = _build(
            config_factory,
            question_factory(width_ratio=20),
            question_factory(width_ratio=20),
            gap_between_questions=0,
        )
        assert [(p.row, p.col) for p in result.placements] == [(1, 5), (1, 42)]

    def test_generate_when_negative_gap_then_treated_as_zero(
        self, config_factory, question_factory
    ):
        result = _build(
            config_factory,
            question_factory(width_ratio=10),
            question_factory(width_ratio=10),
            gap_between_questions=-3,
        )
        assert [(p.row, p.col) for p in result.placements] == [(1, 5), (1, 23)]
        assert validate_layout_grid(result.layout) == []

    def test_generate_when_negative_line_height_ratio_then_default_spacing(
        self, config_factory, question_factory
    ):
        layout = _build(
            config_factory,
            question_factory(
                QuestionType.ENGLISH_WORD, word_count=6, words_per_line=3, line_height_ratio=-1
            ),
        ).layout

        answer = layout.cell(1, 9)
        assert answer.grid.line_height_ratio == 1.0
        assert answer.row_span == 2
        assert layout.row_heights[2] == pytest.approx(10 * MM_TO_PX)


class TestSections:
    """Section labels, gaps and numbering across sections."""

    def test_generate_when_section_done_then_label_spans_section_rows(
        self, config_factory, question_factory
    ):
        layout = _build(
            config_factory,
            question_factory(width_ratio=40),
            question_factory(width_ratio=40),
        ).layout

        label = layout.cell(1, 0)
        assert label.text == "第1問"
        assert label.is_bold
        assert label.background_color == "#e5e7eb"
        assert (label.row_span, label.col_span) == (3, 5)
        for r in range(1, 4):
            for c in range(0, 5):
                if (r, c) != (1, 0):
                    assert layout.cell(r, c) is None

    def test_generate_when_multiple_sections_then_gap_row_between(
        self, config_factory, question_factory
    ):
        config = config_factory(
            [question_factory()], [question_factory()], header_elements=()
        )
        result = build_layout(config, layout_id="test")

        first, second = result.placements
        assert first.row == 1
        assert result.layout.row_heights[2] == pytest.approx(4 * MM_TO_PX)
        assert second.row == 3
        assert result.layout.cell(3, 0).text == "第2問"

    def test_generate_when_multiple_sections_then_numbering_is_global(self):
        config = LayoutConfig(
            name="t",
            header_elements=(),
            sections=(
                Section(id="a", title="A", questions=(Question(id="1"), Question(id="2"))),
                Section(
                    id="b",
                    title="B",
                    numbering_style="(1)",
                    questions=(Question(id="3", label_override="*"), Question(id="4")),
                ),
            ),
        )
        result = build_layout(config, layout_id="t")
        assert [p.label for p in result.placements] == ["1", "2", "*", "(3)"]

    def test_generate_when_empty_section_then_label_still_placed(self):
        config = LayoutConfig(
            name="t",
            header_elements=(),
            sections=(Section(id="a", title="Empty"),),
        )
        layout = build_layout(config, layout_id="t").layout
        assert layout.cell(1, 0).text == "Empty"
        assert layout.rows == 3
