"""
Module: cells

Purpose:
    Provides SheetCell - the unit of content in a generated answer sheet grid -
    together with its border flags and the deferred-render payloads a renderer
    expands late (currently the English word grid).

Key Classes:
    - Borders: Four independent border-presence flags
    - EnglishGrid: Deferred word-grid payload (word count, wrap width, spacing)
    - SheetCell: Styled grid cell with row/column spans
    - CellKind: Tag used by renderers to switch over cell kinds

Key Functions:
    - make_cell(**overrides): Bordered default cell with overrides applied
    - blank_cell(): Borderless filler cell written by the grid allocator

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - core.models.sheet.SheetLayout
    - builder.layout (grid, header, body)
    - builder.output renderers
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Literal, Optional


HAlign = Literal["left", "center", "right"]
VAlign = Literal["top", "middle", "bottom"]
BorderStyle = Literal["solid", "dashed", "dotted", "double", "none"]

H_ALIGNS = ("left", "center", "right")
V_ALIGNS = ("top", "middle", "bottom")
BORDER_STYLES = ("solid", "dashed", "dotted", "double", "none")

DEFAULT_FONT_SIZE = 11


class CellKind(str, Enum):
    """Render kind of a cell."""

    PLAIN = "plain"
    ENGLISH_GRID = "english-grid"


@dataclass(frozen=True, slots=True)
class Borders:
    """
    Border presence per side.

    Style, colour and width are shared by all four sides and live on
    the owning SheetCell.
    """

    top: bool = True
    bottom: bool = True
    left: bool = True
    right: bool = True

    @classmethod
    def all(cls) -> Borders:
        return cls(True, True, True, True)

    @classmethod
    def none(cls) -> Borders:
        return cls(False, False, False, False)

    @property
    def any(self) -> bool:
        """True if at least one side is drawn."""
        return self.top or self.bottom or self.left or self.right

    def to_dict(self) -> dict:
        return {"top": self.top, "bottom": self.bottom, "left": self.left, "right": self.right}

    @classmethod
    def from_dict(cls, data: dict) -> Borders:
        return cls(
            top=bool(data.get("top", False)),
            bottom=bool(data.get("bottom", False)),
            left=bool(data.get("left", False)),
            right=bool(data.get("right", False)),
        )


@dataclass(frozen=True, slots=True)
class EnglishGrid:
    """
    Deferred English word grid.

    The layout engine emits one merged cell carrying this payload; the
    renderer subdivides it into one underlined slot per word.

    Attributes:
        word_count: Number of word slots to draw
        words_per_line: Slots per physical line (wrap width)
        line_height_ratio: Multiplier applied to the base row height per line

    Example:
        >>> EnglishGrid(word_count=12, words_per_line=5).rows
        3
    """

    kind: ClassVar[CellKind] = CellKind.ENGLISH_GRID

    word_count: int
    words_per_line: int
    line_height_ratio: float = 1.0

    def __post_init__(self) -> None:
        if self.word_count < 1:
            raise ValueError(f"word_count must be >= 1: {self.word_count}")
        if self.words_per_line < 1:
            raise ValueError(f"words_per_line must be >= 1: {self.words_per_line}")
        if self.line_height_ratio <= 0:
            raise ValueError(f"line_height_ratio must be positive: {self.line_height_ratio}")

    @property
    def rows(self) -> int:
        """Number of physical lines the words wrap onto."""
        return math.ceil(self.word_count / self.words_per_line)

    def to_dict(self) -> dict:
        return {
            "wordCount": self.word_count,
            "wordsPerLine": self.words_per_line,
            "lineHeightRatio": self.line_height_ratio,
        }

    @classmethod
    def from_dict(cls, data: dict) -> EnglishGrid:
        word_count = int(data.get("wordCount") or 1)
        return cls(
            word_count=word_count,
            words_per_line=int(data.get("wordsPerLine") or word_count),
            line_height_ratio=float(data.get("lineHeightRatio") or 1.0),
        )


@dataclass(frozen=True, slots=True)
class SheetCell:
    """
    One occupied position of the sheet grid (immutable).

    A cell at (r, c) with row_span=R and col_span=C claims the rectangle
    [r, r+R) x [c, c+C); every other position in it is None in the grid.

    Attributes:
        text: Cell text (may contain newlines)
        row_span: Rows covered (>= 1)
        col_span: Grid units covered (>= 1)
        h_align / v_align: Text alignment
        font_weight / font_style / text_decoration: Text styling
        font_size: Point size
        background_color: Fill colour as "#rrggbb", or None for transparent
        borders: Which sides are drawn
        border_style: Shared style of drawn sides
        border_color: Shared colour, None until the allocator applies defaults
        border_width: Shared width in px, None until the allocator applies defaults
        grid: Deferred English grid payload, None for plain cells
    """

    text: str = ""
    row_span: int = 1
    col_span: int = 1
    h_align: HAlign = "left"
    v_align: VAlign = "middle"
    font_weight: Literal["normal", "bold"] = "normal"
    font_style: Literal["normal", "italic"] = "normal"
    text_decoration: Literal["none", "underline"] = "none"
    font_size: float = DEFAULT_FONT_SIZE
    background_color: Optional[str] = None
    borders: Borders = field(default_factory=Borders.all)
    border_style: BorderStyle = "solid"
    border_color: Optional[str] = None
    border_width: Optional[float] = None
    grid: Optional[EnglishGrid] = None

    def __post_init__(self) -> None:
        """Validate cell on construction."""
        if self.row_span < 1:
            raise ValueError(f"row_span must be >= 1: {self.row_span}")
        if self.col_span < 1:
            raise ValueError(f"col_span must be >= 1: {self.col_span}")
        if self.h_align not in H_ALIGNS:
            raise ValueError(f"Invalid h_align: {self.h_align!r}")
        if self.v_align not in V_ALIGNS:
            raise ValueError(f"Invalid v_align: {self.v_align!r}")
        if self.border_style not in BORDER_STYLES:
            raise ValueError(f"Invalid border_style: {self.border_style!r}")

    @property
    def kind(self) -> CellKind:
        """Render kind; renderers switch on this."""
        if self.grid is not None:
            return self.grid.kind
        return CellKind.PLAIN

    @property
    def is_bold(self) -> bool:
        return self.font_weight == "bold"

    @property
    def is_italic(self) -> bool:
        return self.font_style == "italic"

    @property
    def is_underlined(self) -> bool:
        return self.text_decoration == "underline"

    def with_defaults(self, border_width: float, border_color: str) -> SheetCell:
        """Fill border width/colour the caller left unspecified."""
        if self.border_width is not None and self.border_color is not None:
            return self
        return replace(
            self,
            border_width=self.border_width if self.border_width is not None else border_width,
            border_color=self.border_color if self.border_color is not None else border_color,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the persisted layout's camelCase keys."""
        d: dict[str, Any] = {
            "text": self.text,
            "rowSpan": self.row_span,
            "colSpan": self.col_span,
            "hAlign": self.h_align,
            "vAlign": self.v_align,
            "fontWeight": self.font_weight,
            "fontStyle": self.font_style,
            "textDecoration": self.text_decoration,
            "fontSize": self.font_size,
            "borders": self.borders.to_dict(),
            "borderStyle": self.border_style,
        }
        if self.background_color is not None:
            d["backgroundColor"] = self.background_color
        if self.border_color is not None:
            d["borderColor"] = self.border_color
        if self.border_width is not None:
            d["borderWidth"] = self.border_width
        if self.grid is not None:
            d["type"] = self.kind.value
            d["metadata"] = self.grid.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SheetCell:
        grid = None
        if data.get("type") == CellKind.ENGLISH_GRID.value:
            grid = EnglishGrid.from_dict(data.get("metadata") or {})
        borders = data.get("borders")
        return cls(
            text=str(data.get("text", "")),
            row_span=int(data.get("rowSpan", 1)),
            col_span=int(data.get("colSpan", 1)),
            h_align=data.get("hAlign", "left"),
            v_align=data.get("vAlign", "middle"),
            font_weight=data.get("fontWeight", "normal"),
            font_style=data.get("fontStyle", "normal"),
            text_decoration=data.get("textDecoration", "none"),
            font_size=data.get("fontSize", DEFAULT_FONT_SIZE),
            background_color=data.get("backgroundColor"),
            borders=Borders.from_dict(borders) if isinstance(borders, dict) else Borders.all(),
            border_style=data.get("borderStyle") or "solid",
            border_color=data.get("borderColor"),
            border_width=data.get("borderWidth"),
            grid=grid,
        )


def make_cell(**overrides: Any) -> SheetCell:
    """
    Bordered default cell with overrides applied.

    Example:
        >>> make_cell(text="1", h_align="center").borders.left
        True
    """
    return SheetCell(**overrides)


def blank_cell() -> SheetCell:
    """Borderless empty cell used to fill freshly added rows."""
    return SheetCell(borders=Borders.none())
