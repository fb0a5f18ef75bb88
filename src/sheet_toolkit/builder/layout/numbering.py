"""
Module: builder.layout.numbering

Purpose:
    Format question numbers and marksheet choice labels.

Key Functions:
    - format_number(): Render a counter value in a section's numbering style
    - circled(): Circled-numeral glyph (①②③...) with decimal fallback

Used By:
    - builder.layout.body
"""

from __future__ import annotations


_KATAKANA = (
    "アイウエオカキクケコサシスセソタチツテトナニヌネノ"
    "ハヒフヘホマミムメモヤユヨラリルレロワヲン"
)

_ROMAN = (
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
)


def circled(n: int) -> str:
    """
    Circled numeral for 1-50, decimal text otherwise.

    Example:
        >>> circled(3)
        '③'
    """
    if 1 <= n <= 20:
        return chr(0x2460 + n - 1)
    if 21 <= n <= 35:
        return chr(0x3251 + n - 21)
    if 36 <= n <= 50:
        return chr(0x32B1 + n - 36)
    return str(n)


def _roman(n: int) -> str:
    out = []
    for value, symbol in _ROMAN:
        while n >= value:
            out.append(symbol)
            n -= value
    return "".join(out)


def format_number(n: int, style: str = "1") -> str:
    """
    Format question number ``n`` (1-based) in a numbering style.

    Finite alphabets (letters, katakana) fall back to decimal once exhausted.

    Example:
        >>> format_number(3, "(1)")
        '(3)'
        >>> format_number(4, "i")
        'iv'
    """
    if style == "none":
        return ""
    if style == "(1)":
        return f"({n})"
    if style == "[1]":
        return f"[{n}]"
    if style == "①":
        return circled(n)
    if style in ("A", "a") and 1 <= n <= 26:
        letter = chr(ord("A") + n - 1)
        return letter if style == "A" else letter.lower()
    if style in ("I", "i") and 1 <= n < 4000:
        numeral = _roman(n)
        return numeral if style == "I" else numeral.lower()
    if style == "ア" and 1 <= n <= len(_KATAKANA):
        return _KATAKANA[n - 1]
    return str(n)
