"""
Module: config

Purpose:
    Provides the declarative description of a test's answer sheet -
    LayoutConfig and its parts - as authored by the sheet wizard and
    persisted alongside generated layouts. The layout engine only ever
    reads these models.

Key Classes:
    - PaperSize: Paper tag with physical dimensions in millimetres
    - HeaderElement: One header block (title, name box, score box)
    - QuestionType: Answer-box kind of a question
    - Question: One answer item with sizing hints
    - Section: Ordered group of questions with a title
    - LayoutConfig: Complete sheet description

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - core.models.sheet.SheetLayout (retained config)
    - core.utils.serialization
    - builder.layout.generator
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Optional


HeaderPosition = Literal["top", "bottom"]
HEADER_POSITIONS = ("top", "bottom")

NUMBERING_STYLES = ("1", "(1)", "[1]", "①", "A", "a", "I", "i", "ア", "none")

DEFAULT_GAP_UNITS = 2
DEFAULT_ROW_HEIGHT_MM = 10.0
DEFAULT_BORDER_COLOR = "#000000"
DEFAULT_BORDER_WIDTH = 1.0


class PaperSize(str, Enum):
    """Supported paper sizes; dimensions are portrait millimetres."""

    A4 = "A4"
    B5 = "B5"
    A3 = "A3"

    @property
    def width_mm(self) -> float:
        return PAPER_DIMENSIONS[self][0]

    @property
    def height_mm(self) -> float:
        return PAPER_DIMENSIONS[self][1]


PAPER_DIMENSIONS: dict[PaperSize, tuple[float, float]] = {
    PaperSize.A4: (210.0, 297.0),
    PaperSize.B5: (182.0, 257.0),
    PaperSize.A3: (297.0, 420.0),
}


class QuestionType(str, Enum):
    """Answer-box kind; each kind has its own width policy."""

    SHORT_TEXT = "short_text"
    MARKSHEET = "marksheet"
    LONG_TEXT = "long_text"
    ENGLISH_WORD = "english_word"

    @classmethod
    def parse(cls, value: str) -> QuestionType:
        """Parse a type tag, accepting the older ``text`` alias."""
        if value == "text":
            return cls.SHORT_TEXT
        return cls(value)


@dataclass(frozen=True)
class HeaderElement:
    """
    One header block.

    Attributes:
        id: "title", "name" or "score"
        label: Display label used by the wizard
        height: Number of grid rows the block spans
        visible: Hidden elements are skipped by the header composer
    """

    id: Literal["title", "name", "score"]
    label: str = ""
    height: int = 1
    visible: bool = True

    def __post_init__(self) -> None:
        if self.id not in ("title", "name", "score"):
            raise ValueError(f"Invalid header element id: {self.id!r}")

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "label": self.label, "height": self.height, "visible": self.visible}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HeaderElement:
        return cls(
            id=data["id"],
            label=data.get("label", ""),
            height=int(data.get("height", 1)),
            visible=bool(data.get("visible", True)),
        )


DEFAULT_HEADER_ELEMENTS: tuple[HeaderElement, ...] = (
    HeaderElement(id="title", label="タイトル", height=2),
    HeaderElement(id="score", label="点数欄", height=2),
    HeaderElement(id="name", label="氏名欄", height=1),
)


@dataclass(frozen=True)
class Question:
    """
    One answer item.

    Sizing hints are taken as authored; out-of-range values are clamped
    by the layout engine rather than rejected here.

    Attributes:
        id: Stable identifier
        type: Answer-box kind
        width_ratio: Width on a 1-40 scale (40 = full content width), text types
        height_ratio: Row height multiplier (>= 1)
        line_height_ratio: Per-line spacing multiplier for English grids
        choices: Option count for marksheets (default 4)
        word_count: Word slots for English grids (default 5)
        words_per_line: Explicit English wrap width
        label_override: Replaces the auto number and leaves the counter untouched
    """

    id: str
    type: QuestionType = QuestionType.SHORT_TEXT
    width_ratio: float = 20
    height_ratio: float = 1.0
    line_height_ratio: Optional[float] = None
    choices: Optional[int] = None
    word_count: Optional[int] = None
    words_per_line: Optional[int] = None
    label_override: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, QuestionType):
            object.__setattr__(self, "type", QuestionType.parse(self.type))

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "widthRatio": self.width_ratio,
            "heightRatio": self.height_ratio,
        }
        optional = {
            "lineHeightRatio": self.line_height_ratio,
            "choices": self.choices,
            "wordCount": self.word_count,
            "wordsPerLine": self.words_per_line,
            "labelOverride": self.label_override,
        }
        d.update({k: v for k, v in optional.items() if v is not None})
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Question:
        width_ratio = data.get("widthRatio")
        return cls(
            id=str(data.get("id", "")),
            type=QuestionType.parse(data.get("type", QuestionType.SHORT_TEXT.value)),
            width_ratio=width_ratio if width_ratio is not None else 20,
            height_ratio=data.get("heightRatio") or 1.0,
            line_height_ratio=data.get("lineHeightRatio"),
            choices=data.get("choices"),
            word_count=data.get("wordCount"),
            words_per_line=data.get("wordsPerLine"),
            label_override=data.get("labelOverride") or None,
        )


@dataclass(frozen=True)
class Section:
    """Ordered group of questions sharing a vertical title label."""

    id: str
    title: str
    questions: tuple[Question, ...] = ()
    numbering_style: str = "1"

    def __post_init__(self) -> None:
        if self.numbering_style not in NUMBERING_STYLES:
            raise ValueError(f"Invalid numbering style: {self.numbering_style!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "numberingStyle": self.numbering_style,
            "questions": [q.to_dict() for q in self.questions],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Section:
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title", "")),
            questions=tuple(Question.from_dict(q) for q in data.get("questions", [])),
            numbering_style=data.get("numberingStyle") or "1",
        )


@dataclass(frozen=True)
class LayoutConfig:
    """
    Complete answer sheet description (immutable).

    Attributes:
        name: Title text
        paper_size: Paper tag
        border_width: Default border width (px) for cells that do not set one
        border_color: Default border colour for cells that do not set one
        default_row_height: Base row height in millimetres
        gap_between_questions: Gap in grid units; 0 disables gaps
        sections: Ordered sections
        header_elements: Ordered header blocks, None for the canonical list
        header_position: "top" or "bottom"

    Example:
        >>> config = LayoutConfig(name="Quiz 1", sections=(Section("s1", "I"),))
        >>> config.resolved_header_elements[0].id
        'title'
    """

    name: str
    paper_size: PaperSize = PaperSize.A4
    border_width: float = DEFAULT_BORDER_WIDTH
    border_color: str = DEFAULT_BORDER_COLOR
    default_row_height: float = DEFAULT_ROW_HEIGHT_MM
    gap_between_questions: int = DEFAULT_GAP_UNITS
    sections: tuple[Section, ...] = ()
    header_elements: Optional[tuple[HeaderElement, ...]] = None
    header_position: HeaderPosition = "top"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not isinstance(self.paper_size, PaperSize):
            object.__setattr__(self, "paper_size", PaperSize(self.paper_size))
        if self.header_position not in HEADER_POSITIONS:
            raise ValueError(f"Invalid header_position: {self.header_position!r}")

    @property
    def resolved_header_elements(self) -> tuple[HeaderElement, ...]:
        """Header blocks, falling back to the canonical title/score/name list."""
        if self.header_elements is None:
            return DEFAULT_HEADER_ELEMENTS
        return self.header_elements

    @property
    def question_count(self) -> int:
        return sum(len(s.questions) for s in self.sections)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "name": self.name,
            "paperSize": self.paper_size.value,
            "borderWidth": self.border_width,
            "borderColor": self.border_color,
            "defaultRowHeight": self.default_row_height,
            "gapBetweenQuestions": self.gap_between_questions,
            "headerPosition": self.header_position,
            "sections": [s.to_dict() for s in self.sections],
        }
        if self.header_elements is not None:
            d["headerElements"] = [e.to_dict() for e in self.header_elements]
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LayoutConfig:
        header_elements = data.get("headerElements")
        return cls(
            name=str(data.get("name", "")),
            paper_size=PaperSize(data.get("paperSize", PaperSize.A4.value)),
            border_width=data.get("borderWidth", DEFAULT_BORDER_WIDTH),
            border_color=data.get("borderColor") or DEFAULT_BORDER_COLOR,
            default_row_height=data.get("defaultRowHeight") or DEFAULT_ROW_HEIGHT_MM,
            gap_between_questions=_parse_gap(data.get("gapBetweenQuestions")),
            sections=tuple(Section.from_dict(s) for s in data.get("sections", [])),
            header_elements=(
                tuple(HeaderElement.from_dict(e) for e in header_elements)
                if header_elements is not None else None
            ),
            header_position=data.get("headerPosition") or "top",
        )


def _parse_gap(value: Any) -> int:
    """Read gapBetweenQuestions, accepting the older boolean form."""
    if value is None or value is True:
        return DEFAULT_GAP_UNITS
    if value is False:
        return 0
    return max(0, int(value))
