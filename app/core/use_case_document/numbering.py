"""Multi-level list markers: 1 / a / i, with a fixed indent per level."""

from dataclasses import dataclass, field

from docx.shared import Twips

INDENT_STEP_TWIPS = 288  # 0.2 inch

_ROMAN_VALUES = (
    (1000, "m"),
    (900, "cm"),
    (500, "d"),
    (400, "cd"),
    (100, "c"),
    (90, "xc"),
    (50, "l"),
    (40, "xl"),
    (10, "x"),
    (9, "ix"),
    (5, "v"),
    (4, "iv"),
    (1, "i"),
)


def to_letters(n: int) -> str:
    """1 -> a ... 26 -> z, then doubled letters: 27 -> aa ... 52 -> zz, 53 -> aaa."""
    if n < 1:
        raise ValueError(f"List position must be positive, got {n}")
    repeat = (n - 1) // 26 + 1
    return chr(ord("a") + (n - 1) % 26) * repeat


def to_roman(n: int) -> str:
    """Lower-case roman numeral for any positive n."""
    if n < 1:
        raise ValueError(f"List position must be positive, got {n}")
    parts = []
    for value, symbol in _ROMAN_VALUES:
        count, n = divmod(n, value)
        parts.append(symbol * count)
    return "".join(parts)


_MARKERS = {1: str, 2: to_letters, 3: to_roman}


def marker(level: int, n: int) -> str:
    """Marker text for the n-th item at a level, e.g. marker(2, 3) == "c."."""
    if level not in _MARKERS:
        raise ValueError(f"Unsupported list level: {level}")
    return f"{_MARKERS[level](n)}."


def indent_for(level: int) -> Twips:
    return Twips(INDENT_STEP_TWIPS * level)


@dataclass
class ListItem:
    """One list entry and its children (the next level down)."""

    text: str
    children: list["ListItem"] = field(default_factory=list)
    bold: bool = False


def flatten(items: list[ListItem], level: int = 1) -> list[tuple[int, str, ListItem]]:
    """Depth-first (level, marker, item) triples, numbering each level from 1."""
    rows = []
    for n, item in enumerate(items, start=1):
        rows.append((level, marker(level, n), item))
        if item.children:
            rows += flatten(item.children, level + 1)
    return rows
