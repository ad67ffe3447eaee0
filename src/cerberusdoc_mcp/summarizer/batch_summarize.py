"""Three-tier summarization: description > AI (Haiku) > signature fallback."""

import logging
import os
import re
from dataclasses import dataclass

from ..parser.symbols import DocSymbol, display_signature

logger = logging.getLogger(__name__)

# "**Function**" label the parser puts in front of keyword descriptions
KEYWORD_LABEL = re.compile(r"^\*\*[^*\n]+\*\*\s*")


def extract_summary_from_description(description: str) -> str:
    """Extract first sentence from a description (Tier 1).

    Drops the bold keyword label, takes the first line and truncates at
    the first period. Costs zero tokens.
    """
    if not description:
        return ""

    text = KEYWORD_LABEL.sub("", description.strip())
    if not text:
        return ""

    first_line = text.split("\n")[0].strip()

    # Truncate at first period if present
    if "." in first_line:
        first_line = first_line[:first_line.index(".") + 1]

    return first_line[:120]


def signature_fallback(symbol: DocSymbol) -> str:
    """Generate summary from signature when all else fails (Tier 3).

    Always produces something, even without API keys.
    """
    if symbol.signature:
        return display_signature(symbol.name, symbol.signature)[:120]

    kind = symbol.kind
    name = symbol.name

    if kind == "class":
        return f"Class {name}"
    elif kind == "keyword":
        return f"Keyword {name}"
    elif kind in ("const", "global", "field", "property"):
        return f"{kind.capitalize()} {name}"
    else:
        return f"{kind} {name}"


@dataclass
class BatchSummarizer:
    """AI-based batch summarization using Claude Haiku (Tier 2)."""

    model: str = "claude-haiku-4-5-20251001"
    max_tokens_per_batch: int = 500

    def __post_init__(self):
        self.client = None
        self._init_client()

    def _init_client(self):
        """Initialize Anthropic client if API key is available."""
        try:
            from anthropic import Anthropic
            api_key = os.environ.get("ANTHROPIC_API_KEY")
            if api_key:
                self.client = Anthropic(api_key=api_key)
        except ImportError:
            self.client = None

    def summarize_batch(self, symbols: list[DocSymbol], batch_size: int = 10) -> list[DocSymbol]:
        """Summarize a batch of symbols using AI.

        Only processes symbols that have neither a summary nor a description.
        Returns updated symbols.
        """
        if not self.client:
            # Fall back to signature fallback for all
            for sym in symbols:
                if not sym.summary:
                    sym.summary = signature_fallback(sym)
            return symbols

        to_summarize = [s for s in symbols if not s.summary and not s.description]

        if not to_summarize:
            return symbols

        for i in range(0, len(to_summarize), batch_size):
            batch = to_summarize[i:i + batch_size]
            self._summarize_one_batch(batch)

        return symbols

    def _summarize_one_batch(self, batch: list[DocSymbol]):
        """Summarize one batch of symbols."""
        prompt = self._build_prompt(batch)

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens_per_batch,
                temperature=0.0,
                messages=[{"role": "user", "content": prompt}]
            )

            summaries = self._parse_response(response.content[0].text, len(batch))

            for sym, summary in zip(batch, summaries):
                sym.summary = summary or signature_fallback(sym)

        except Exception as e:
            logger.warning("AI summarization failed for %d symbols: %s", len(batch), e)
            for sym in batch:
                if not sym.summary:
                    sym.summary = signature_fallback(sym)

    def _build_prompt(self, symbols: list[DocSymbol]) -> str:
        """Build summarization prompt for a batch."""
        lines = [
            "Summarize each CerberusX command or keyword in ONE short sentence (max 15 words).",
            "Focus on what it does, not how.",
            "",
            "Input:",
        ]

        for i, sym in enumerate(symbols, 1):
            lines.append(f"{i}. {sym.kind}: {display_signature(sym.name, sym.signature)}")

        lines.extend([
            "",
            "Output format: NUMBER. SUMMARY",
            "Example: 1. Draws an image at the given screen position.",
            "",
            "Summaries:",
        ])

        return "\n".join(lines)

    def _parse_response(self, text: str, expected_count: int) -> list[str]:
        """Parse numbered summaries from response."""
        summaries = [""] * expected_count

        for line in text.split("\n"):
            line = line.strip()
            if not line:
                continue

            # Look for "N. summary" format
            if "." in line:
                parts = line.split(".", 1)
                try:
                    num = int(parts[0].strip())
                    if 1 <= num <= expected_count:
                        summaries[num - 1] = parts[1].strip()
                except ValueError:
                    continue

        return summaries


def summarize_symbols_simple(symbols: list[DocSymbol]) -> list[DocSymbol]:
    """Tier 1 + Tier 3: Description extraction + signature fallback.

    No AI required. Fast and deterministic.
    """
    for sym in symbols:
        if sym.summary:
            continue

        if sym.description:
            sym.summary = extract_summary_from_description(sym.description)

        if not sym.summary:
            sym.summary = signature_fallback(sym)

    return symbols


def summarize_symbols(symbols: list[DocSymbol], use_ai: bool = True) -> list[DocSymbol]:
    """Full three-tier summarization.

    Tier 1: Description extraction (free)
    Tier 2: AI batch summarization (Haiku)
    Tier 3: Signature fallback (always works)
    """
    for sym in symbols:
        if sym.description and not sym.summary:
            sym.summary = extract_summary_from_description(sym.description)

    if use_ai:
        summarizer = BatchSummarizer()
        symbols = summarizer.summarize_batch(symbols)

    for sym in symbols:
        if not sym.summary:
            sym.summary = signature_fallback(sym)

    return symbols
