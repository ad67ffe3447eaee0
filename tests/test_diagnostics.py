"""Tests for For / Next balance diagnostics."""

from cerberusdoc_mcp.diagnostics import validate_document


def test_balanced_loop_has_no_diagnostics():
    """Test that a closed For loop is fine."""
    text = "```cerberusx\nFor i = 1 To 10\n  Print i\nNext\n```"
    assert validate_document(text) == []


def test_next_without_for():
    """Test a closing keyword with no open loop."""
    diagnostics = validate_document("Print 1\nNext\n")

    assert len(diagnostics) == 1
    diag = diagnostics[0]
    assert diag.line == 1
    assert diag.start_character == 0
    assert diag.end_character == 4
    assert diag.message == "Closing 'Next' found without matching 'For'"
    assert diag.severity == "warning"
    assert diag.source == "cerberusx"


def test_unclosed_for_uses_document_lines():
    """Test that an unclosed loop inside a fence reports its document line."""
    text = "Intro\n\n```cerberusx\nFor i = 1 To 3\nPrint i\n```\n"
    diagnostics = validate_document(text)

    assert len(diagnostics) == 1
    assert diagnostics[0].line == 3
    assert diagnostics[0].message.startswith("Missing closing 'Next'")


def test_end_for_and_end_close_loops():
    """Test that 'End For' and 'End' also close loops."""
    text = "For a = 1 To 2\nFor b = 1 To 2\nEnd For\nEnd\n"
    assert validate_document(text) == []


def test_words_starting_with_for_are_not_loops():
    """Test that 'Format' or 'Forward' are not For statements."""
    assert validate_document("Format x\nForward y\n") == []


def test_fences_are_checked_separately():
    """Test that a loop cannot be closed from another fence."""
    text = "```\nFor i = 1 To 3\n```\ntext\n```\nNext\n```\n"
    messages = [d.message for d in validate_document(text)]

    assert len(messages) == 2
    assert any(m.startswith("Closing 'Next'") for m in messages)
    assert any(m.startswith("Missing closing") for m in messages)


def test_empty_document():
    """Test that empty text has no diagnostics."""
    assert validate_document("") == []


def test_diagnostic_to_dict():
    """Test the LSP-shaped dict form."""
    data = validate_document("Next")[0].to_dict()

    assert data["range"]["start"] == {"line": 0, "character": 0}
    assert data["range"]["end"] == {"line": 0, "character": 4}
    assert data["severity"] == "warning"
