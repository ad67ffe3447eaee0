"""Summarizer package for generating symbol summaries."""

from .batch_summarize import (
    BatchSummarizer,
    extract_summary_from_description,
    signature_fallback,
    summarize_symbols_simple,
    summarize_symbols,
)

__all__ = [
    "BatchSummarizer",
    "extract_summary_from_description",
    "signature_fallback",
    "summarize_symbols_simple",
    "summarize_symbols",
]
