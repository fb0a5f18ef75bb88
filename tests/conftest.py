import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import sheet_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from sheet_toolkit.core.models import (  # noqa: E402
    HeaderElement,
    LayoutConfig,
    Question,
    QuestionType,
    Section,
)


# Common test fixtures
@pytest.fixture
def question_factory():
    """Factory to create questions with sequential ids."""
    counter = {"n": 0}

    def _create(q_type: QuestionType = QuestionType.SHORT_TEXT, **kwargs) -> Question:
        counter["n"] += 1
        kwargs.setdefault("id", f"q{counter['n']}")
        return Question(type=q_type, **kwargs)

    return _create


@pytest.fixture
def config_factory():
    """Factory to create a config from sections given as question lists."""
    def _create(*question_lists, **kwargs) -> LayoutConfig:
        sections = tuple(
            Section(id=f"s{i + 1}", title=f"第{i + 1}問", questions=tuple(questions))
            for i, questions in enumerate(question_lists)
        )
        kwargs.setdefault("name", "Quiz 1")
        return LayoutConfig(sections=sections, **kwargs)

    return _create


@pytest.fixture
def simple_config() -> LayoutConfig:
    """One section with two short text questions."""
    return LayoutConfig(
        name="Quiz 1",
        sections=(
            Section(
                id="s1",
                title="I",
                questions=(
                    Question(id="q1", width_ratio=10),
                    Question(id="q2", width_ratio=10),
                ),
            ),
        ),
    )


def _mixed_config(**kwargs) -> LayoutConfig:
    return LayoutConfig(
        name="Mixed",
        sections=(
            Section(
                id="s1",
                title="Vocabulary",
                questions=(
                    Question(id="a1", type=QuestionType.MARKSHEET, choices=4),
                    Question(id="a2", type=QuestionType.MARKSHEET, choices=5),
                    Question(id="a3", width_ratio=12, label_override="Q*"),
                    Question(id="a4", type=QuestionType.LONG_TEXT, height_ratio=3),
                ),
            ),
            Section(
                id="s2",
                title="Writing",
                numbering_style="(1)",
                questions=(
                    Question(id="b1", type=QuestionType.ENGLISH_WORD, word_count=12, words_per_line=5),
                    Question(id="b2", type=QuestionType.ENGLISH_WORD, word_count=3),
                    Question(id="b3", type=QuestionType.ENGLISH_WORD, word_count=20, line_height_ratio=1.5),
                    Question(id="b4", width_ratio=40),
                ),
            ),
        ),
        **kwargs,
    )


SAMPLE_CONFIGS = {
    "mixed": _mixed_config(),
    "mixed_bottom_header": _mixed_config(header_position="bottom"),
    "mixed_no_gap_b5": _mixed_config(gap_between_questions=0, paper_size="B5"),
    "extreme_values": LayoutConfig(
        name="Extreme",
        header_elements=(
            HeaderElement(id="name", height=3),
            HeaderElement(id="score", height=0),
            HeaderElement(id="title", visible=False),
        ),
        sections=(
            Section(
                id="s1",
                title="X",
                questions=(
                    Question(id="x1", type=QuestionType.MARKSHEET, choices=0),
                    Question(id="x2", type=QuestionType.MARKSHEET, choices=99),
                    Question(id="x3", width_ratio=0),
                    Question(id="x4", width_ratio=400),
                    Question(id="x5", type=QuestionType.ENGLISH_WORD, word_count=40, words_per_line=50),
                    Question(id="x6", type=QuestionType.ENGLISH_WORD, word_count=0),
                ),
            ),
        ),
    ),
    "many_small": LayoutConfig(
        name="Drill",
        gap_between_questions=1,
        sections=tuple(
            Section(
                id=f"s{s}",
                title=f"S{s}",
                questions=tuple(Question(id=f"s{s}q{i}", width_ratio=5) for i in range(15)),
            )
            for s in range(3)
        ),
    ),
}


@pytest.fixture(params=sorted(SAMPLE_CONFIGS))
def sample_config(request) -> LayoutConfig:
    """Each config of the property suite."""
    return SAMPLE_CONFIGS[request.param]


@pytest.fixture
def mixed_config() -> LayoutConfig:
    """Two sections covering every question type."""
    return SAMPLE_CONFIGS["mixed"]
