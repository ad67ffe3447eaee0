"""Tests for the format cascade as a whole."""

import time

import pytest
from cerberusdoc_mcp.diagnostics import validate_document
from cerberusdoc_mcp.parser import (
    parse_doc_symbols,
    DocSymbol,
    SymbolRange,
    FORMAT_CASCADE,
    MAX_DOCUMENT_CHARS,
    make_symbol_id,
    display_signature,
    TokenExtractor,
)


def test_plain_prose_returns_empty():
    """Test that unstructured text yields no symbols."""
    text = "This is plain prose.\nIt has two sentences and no structure at all.\n"
    assert parse_doc_symbols(text, "prose.cerberusdoc") == []


def test_empty_text_returns_empty():
    """Test that empty input yields no symbols."""
    assert parse_doc_symbols("", "empty.cerberusdoc") == []


def test_single_markdown_header():
    """Test one header block yields exactly one symbol."""
    symbols = parse_doc_symbols("# Function Foo(x, y)\nAdds two numbers.\n", "doc")

    assert len(symbols) == 1
    assert symbols[0].name == "Foo"
    assert symbols[0].signature == "Foo(x, y)"
    assert symbols[0].description.startswith("**Function**")


def test_parse_is_idempotent():
    """Test that parsing the same text twice gives equal results."""
    text = "---\nname: Draw\n---\n```\nPlot(x,y) - plots\n```\nLine(a,b) : draws a line\n"
    assert parse_doc_symbols(text, "doc") == parse_doc_symbols(text, "doc")


def test_duplicate_headers_first_wins():
    """Test that a name repeated in another casing is skipped."""
    text = "# Function Foo(x)\nFirst.\n\n# Method FOO(y)\nSecond.\n"
    symbols = parse_doc_symbols(text, "doc")

    assert len(symbols) == 1
    assert symbols[0].signature == "Foo(x)"


def test_markdown_preempts_front_matter():
    """Test that Markdown headers stop the cascade."""
    text = "---\nname: Bar\n---\n\n# Function Foo(x)\nDoes foo.\n"
    symbols = parse_doc_symbols(text, "doc")

    assert [s.name for s in symbols] == ["Foo"]


def test_keyword_doc_preempts_front_matter():
    """Test that a keyword doc stops the cascade."""
    text = "> Keyword Local\n\n---\nname: Bar\n---\n"
    symbols = parse_doc_symbols(text, "doc")

    assert [s.name for s in symbols] == ["Local"]
    assert symbols[0].description == "**Keyword**"


ADDITIVE_DOC = '''---
name: Draw
description: from front matter
---

```
Draw(x) - from fence
Plot(x,y) - plots
```

Plot - inline duplicate
Line(a,b) : draws a line
'''


def test_additive_formats_accumulate_without_duplicates():
    """Test that front matter, fences and inline lines share one name set."""
    symbols = parse_doc_symbols(ADDITIVE_DOC, "doc")

    assert [s.name for s in symbols] == ["Draw", "Plot", "Line"]
    assert symbols[0].description == "from front matter"
    assert symbols[1].description == "plots"
    assert symbols[2].signature == "(a,b)"
    assert all(s.range is not None for s in symbols)


def test_front_matter_keys_are_not_inline_commands():
    """Test that 'key: value' lines inside front matter are not symbols."""
    text = "---\nname: Draw\nsignature: (x,y)\n---\n"
    names = [s.name for s in parse_doc_symbols(text, "doc")]

    assert names == ["Draw"]


@pytest.mark.parametrize("text", [
    "```\n```\n```",
    "---",
    "---\nname: Unterminated",
    "\x00\xff� binary \x1b[0m",
    "#" * 1000,
    "> \n>>\n>> Syntax",
    "```cerberusx\n" * 50,
    "(((((((((((((((((((((",
])
def test_malformed_input_never_raises(text):
    """Test that malformed input yields a list, never an exception."""
    symbols = parse_doc_symbols(text, "broken.cerberusdoc")
    assert isinstance(symbols, list)


def test_text_past_scan_window_is_ignored():
    """Test that only the first MAX_DOCUMENT_CHARS characters are scanned."""
    text = "Early - first\n" + "x" * MAX_DOCUMENT_CHARS + "\nLate - second\n"
    names = [s.name for s in parse_doc_symbols(text, "big.cerberusdoc")]

    assert names == ["Early"]


def test_uri_is_copied_to_symbols():
    """Test that every symbol carries the caller's uri."""
    symbols = parse_doc_symbols("Flip - swaps buffers\n", "file:///docs/flip.cerberusdoc")
    assert symbols[0].uri == "file:///docs/flip.cerberusdoc"


def test_cascade_order():
    """Test the fixed stage order and which stages are exclusive."""
    assert [f.name for f in FORMAT_CASCADE] == [
        "markdown_header", "keyword_block", "front_matter", "fenced_commands", "inline_lines",
    ]
    assert [f.exclusive for f in FORMAT_CASCADE] == [True, True, False, False, False]


def test_symbol_to_dict_roundtrip():
    """Test DocSymbol serialization keeps every field."""
    sym = DocSymbol(
        name="Foo",
        uri="doc",
        signature="(x)",
        description="does foo",
        range=SymbolRange(3, 9),
        kind="function",
        summary="Does foo.",
    )
    data = sym.to_dict()

    assert data["range"] == {"start": 3, "end": 9}
    assert DocSymbol.from_dict(data) == sym


def test_symbol_id_format():
    """Test symbol ID generation."""
    assert make_symbol_id("docs/graphics.cerberusdoc", "DrawImage") == "docs-graphics-cerberusdoc::DrawImage"
    assert make_symbol_id("flip.cerberusdoc", "Flip") == "flip-cerberusdoc::Flip"


def test_display_signature():
    """Test that the name is not repeated for header signatures."""
    assert display_signature("Foo", "Foo(x)") == "Foo(x)"
    assert display_signature("Foo", "(x)") == "Foo(x)"
    assert display_signature("Foo", None) == "Foo"


@pytest.mark.parametrize("text", [
    "---" + " " * 100_000 + "x",
    "```" + " " * 100_000 + "x",
    "---\n" + " " * 100_000 + "x",
    "# Function Foo" + " " * 100_000 + "x",
    "Foo" + " " * 100_000 + "x",
    "Foo - a" + " " * 100_000 + "b\r",
    "Language:" + "\n" * 100_000 + "x",
    "---\nname: A\n---\nname: B - inline\n" * 3_000,
    "```\nFor i = 1 To 3\n```\n" * 5_000,
])
def test_large_input_is_processed_in_bounded_time(text):
    """Test that long whitespace runs and many blocks do not blow up matching."""
    start = time.perf_counter()

    parse_doc_symbols(text, "big.cerberusdoc")
    validate_document(text)
    TokenExtractor().extract_from_text(text)

    assert time.perf_counter() - start < 5.0


def test_many_front_matter_blocks_keep_inline_exclusion():
    """Test that key lines of every front-matter block stay out of the inline stage."""
    text = "".join(f"---\nname: Cmd{i}\nsignature: (x)\n---\n" for i in range(200))
    names = [s.name for s in parse_doc_symbols(text, "doc")]

    assert names == [f"Cmd{i}" for i in range(200)]
