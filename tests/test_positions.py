"""Tests for offset and cursor helpers."""

from cerberusdoc_mcp.parser import (
    LineIndex,
    Position,
    SymbolRange,
    offset_to_position,
    position_to_offset,
    range_to_positions,
    word_at_position,
    call_name_before,
)


def test_offset_to_position():
    """Test line = break count, character = last segment length."""
    text = "ab\ncd\nef"
    assert offset_to_position(text, 0) == Position(0, 0)
    assert offset_to_position(text, 4) == Position(1, 1)
    assert offset_to_position(text, len(text)) == Position(2, 2)


def test_offset_to_position_crlf():
    """Test that CRLF counts as one line break."""
    text = "ab\r\ncd"
    assert offset_to_position(text, 5) == Position(1, 1)
    assert position_to_offset(text, 1, 1) == 5


def test_offsets_roundtrip():
    """Test that every offset converts back to itself."""
    text = "line one\nline two\n\nthird"
    for offset in range(len(text) + 1):
        pos = offset_to_position(text, offset)
        assert position_to_offset(text, pos.line, pos.character) == offset


def test_out_of_range_values_are_clamped():
    """Test clamping of offsets and positions."""
    assert offset_to_position("abc", 99) == Position(0, 3)
    assert offset_to_position("abc", -5) == Position(0, 0)
    assert position_to_offset("abc\n", 5, 0) == 4
    assert position_to_offset("abc\nde", 0, 50) == 3


def test_range_to_positions():
    """Test LSP-shaped ranges, whole text when there is no range."""
    text = "first\nsecond"
    assert range_to_positions(text, SymbolRange(6, 12)) == {
        "start": {"line": 1, "character": 0},
        "end": {"line": 1, "character": 6},
    }
    assert range_to_positions(text, None)["end"] == {"line": 1, "character": 6}


def test_word_at_position():
    """Test the identifier ending at the cursor."""
    text = "Local x\n  DrawImage(x)"
    assert word_at_position(text, 1, 11) == "DrawImage"
    assert word_at_position(text, 1, 2) is None
    assert word_at_position(text, 7, 0) is None


def test_call_name_before():
    """Test the call name right before an open parenthesis."""
    assert call_name_before("Local x := DrawRect(", 20) == "DrawRect"
    assert call_name_before("DrawRect (", 10) == "DrawRect"
    assert call_name_before("DrawRect(x", 10) is None


def test_line_index_matches_offset_to_position():
    """Test that the cached line starts give the same positions as a rescan."""
    for text in ("ab\ncd\n\nef", "ab\r\ncd\r\n\r\nef\r\n", ""):
        lines = LineIndex(text)
        for offset in range(-1, len(text) + 2):
            assert lines.position(offset) == offset_to_position(text, offset)


def test_range_to_positions_with_line_index():
    text = "one\ntwo\nthree"
    lines = LineIndex(text)

    assert range_to_positions(text, SymbolRange(4, 7), lines) == range_to_positions(text, SymbolRange(4, 7))
