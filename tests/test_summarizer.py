"""Tests for summarizer module."""

from cerberusdoc_mcp.parser import DocSymbol
from cerberusdoc_mcp.summarizer import (
    BatchSummarizer,
    extract_summary_from_description,
    signature_fallback,
    summarize_symbols_simple,
    summarize_symbols,
)


def test_extract_summary_from_description_simple():
    """Test extracting first sentence from a description."""
    desc = "Clears the screen. Uses the current color.\nMore details here."
    assert extract_summary_from_description(desc) == "Clears the screen."


def test_extract_summary_drops_keyword_label():
    """Test that the bold keyword label is not part of the summary."""
    desc = "**Function**\n\nDraws an image at the given position.\nSecond line."
    assert extract_summary_from_description(desc) == "Draws an image at the given position."


def test_extract_summary_label_only():
    """Test that a bare label gives no summary."""
    assert extract_summary_from_description("**Keyword**") == ""


def test_extract_summary_from_description_empty():
    """Test extracting from empty descriptions."""
    assert extract_summary_from_description("") == ""
    assert extract_summary_from_description("   ") == ""


def test_extract_summary_is_capped():
    """Test that long first lines are truncated."""
    assert len(extract_summary_from_description("x" * 300)) == 120


def test_signature_fallback_with_signature():
    """Test signature fallback joins name and argument list."""
    sym = DocSymbol(name="MoveTo", uri="doc", signature="(x,y)")
    assert signature_fallback(sym) == "MoveTo(x,y)"

    header = DocSymbol(name="Width", uri="doc", signature="Width:Int()", kind="method")
    assert signature_fallback(header) == "Width:Int()"


def test_signature_fallback_by_kind():
    """Test signature fallback without a signature."""
    assert signature_fallback(DocSymbol(name="Image", uri="doc", kind="class")) == "Class Image"
    assert signature_fallback(DocSymbol(name="Local", uri="doc", kind="keyword")) == "Keyword Local"
    assert signature_fallback(DocSymbol(name="PI", uri="doc", kind="const")) == "Const PI"
    assert signature_fallback(DocSymbol(name="Cls", uri="doc")) == "command Cls"


def test_simple_summarize():
    """Test the deterministic tiers."""
    symbols = [
        DocSymbol(name="Cls", uri="doc", description="clears the screen"),
        DocSymbol(name="Flip", uri="doc", signature="()"),
        DocSymbol(name="Local", uri="doc", description="**Keyword**", kind="keyword"),
        DocSymbol(name="Keep", uri="doc", summary="Already set."),
    ]

    summarize_symbols_simple(symbols)

    assert [s.summary for s in symbols] == ["clears the screen", "Flip()", "Keyword Local", "Already set."]


def test_summarize_without_api_key(monkeypatch):
    """Test that AI summarization falls back cleanly without a key."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    symbols = [DocSymbol(name="Flip", uri="doc"), DocSymbol(name="Cls", uri="doc", description="Clears.")]

    summarize_symbols(symbols, use_ai=True)

    assert symbols[0].summary == "command Flip"
    assert symbols[1].summary == "Clears."


class _FakeContent:
    def __init__(self, text):
        self.text = text


class _FakeResponse:
    def __init__(self, text):
        self.content = [_FakeContent(text)]


class _FakeMessages:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def create(self, **kwargs):
        self.prompts.append(kwargs["messages"][0]["content"])
        if self.error:
            raise self.error
        return _FakeResponse(self.text)


class _FakeClient:
    def __init__(self, messages):
        self.messages = messages


def test_batch_summarizer_uses_ai_for_undescribed(monkeypatch):
    """Test that only symbols without a description are sent to the model."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    summarizer = BatchSummarizer()
    messages = _FakeMessages(text="1. Swaps the back and front buffers.\n2.\n")
    summarizer.client = _FakeClient(messages)

    symbols = [
        DocSymbol(name="Flip", uri="doc", signature="()"),
        DocSymbol(name="Cls", uri="doc", description="Clears."),
        DocSymbol(name="Plot", uri="doc", signature="(x,y)"),
    ]
    summarizer.summarize_batch(symbols)

    assert len(messages.prompts) == 1
    assert "1. command: Flip()" in messages.prompts[0]
    assert "Cls" not in messages.prompts[0]
    assert symbols[0].summary == "Swaps the back and front buffers."
    assert symbols[1].summary == ""
    assert symbols[2].summary == "Plot(x,y)"


def test_batch_summarizer_failure_falls_back(monkeypatch, caplog):
    """Test that an API error logs a warning and uses the fallback."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    summarizer = BatchSummarizer()
    summarizer.client = _FakeClient(_FakeMessages(error=RuntimeError("boom")))

    symbols = [DocSymbol(name="Flip", uri="doc", signature="()")]
    summarizer.summarize_batch(symbols)

    assert symbols[0].summary == "Flip()"
    assert "AI summarization failed" in caplog.text


def test_parse_response_ignores_noise():
    """Test parsing of numbered model output."""
    summarizer = BatchSummarizer.__new__(BatchSummarizer)
    text = "Here you go:\n1. First.\n3. Out of range.\nnot numbered. text\n2. Second."

    assert summarizer._parse_response(text, 2) == ["First.", "Second."]
