"""Offset / line-column conversion and cursor helpers."""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional

from .symbols import SymbolRange
from .formats import LINE_BREAK, WORD_BEFORE_CURSOR, CALL_BEFORE_CURSOR

# Signature help only looks this far back from the cursor
CALL_LOOKBEHIND = 256


@dataclass(frozen=True)
class Position:
    """Zero-based line and character."""
    line: int
    character: int

    def to_dict(self) -> dict:
        return {"line": self.line, "character": self.character}


def offset_to_position(text: str, offset: int) -> Position:
    """Convert a character offset into a line/character position.

    The text up to the offset is split on line breaks: the line is the number
    of breaks, the character is the length of the final segment.
    """
    offset = max(0, min(offset, len(text)))
    segments = LINE_BREAK.split(text[:offset])
    return Position(line=len(segments) - 1, character=len(segments[-1]))


def position_to_offset(text: str, line: int, character: int) -> int:
    """Convert a line/character position into a character offset."""
    line_start = 0
    for _ in range(max(line, 0)):
        m = LINE_BREAK.search(text, line_start)
        if not m:
            return len(text)
        line_start = m.end()

    m = LINE_BREAK.search(text, line_start)
    line_end = m.start() if m else len(text)
    return line_start + max(0, min(character, line_end - line_start))


class LineIndex:
    """Line start offsets of a text, for converting many offsets of one document."""

    def __init__(self, text: str):
        self.text = text
        self.starts = [0] + [m.end() for m in LINE_BREAK.finditer(text)]

    def position(self, offset: int) -> Position:
        """Same result as offset_to_position, without rescanning the text."""
        offset = max(0, min(offset, len(self.text)))
        line = bisect_right(self.starts, offset) - 1
        return Position(line=line, character=offset - self.starts[line])


def range_to_positions(text: str, rng: Optional[SymbolRange], lines: Optional[LineIndex] = None) -> dict:
    """LSP-shaped range for a symbol range; the whole text when it has none.

    Pass a LineIndex built for `text` when converting many ranges.
    """
    if lines is None:
        lines = LineIndex(text)

    if rng is None:
        start, end = 0, len(text)
    else:
        start, end = rng.start, rng.end

    return {
        "start": lines.position(start).to_dict(),
        "end": lines.position(end).to_dict(),
    }


def line_at(text: str, line: int) -> str:
    """Text of a zero-based line, empty when out of range."""
    lines = LINE_BREAK.split(text)
    if 0 <= line < len(lines):
        return lines[line]
    return ""


def word_at_position(text: str, line: int, character: int) -> Optional[str]:
    """Identifier that ends at the cursor, if any."""
    before = line_at(text, line)[:max(character, 0)]
    m = WORD_BEFORE_CURSOR.search(before)
    return m.group(1) if m else None


def call_name_before(text: str, offset: int) -> Optional[str]:
    """Name of the call whose '(' sits directly before the offset."""
    offset = max(0, min(offset, len(text)))
    window = text[max(0, offset - CALL_LOOKBEHIND):offset]
    m = CALL_BEFORE_CURSOR.search(window)
    return m.group(1) if m else None
