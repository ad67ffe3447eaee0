"""Stateless document tools: parse symbols and check structure of raw text."""

from ..parser import parse_doc_symbols, range_to_positions, LineIndex
from ..diagnostics import validate_document


def parse_document(text: str, uri: str = "untitled") -> dict:
    """Extract symbols from raw .cerberusdoc text without indexing it.

    Returns:
        Dict with each symbol's fields plus its line/character range
    """
    symbols = parse_doc_symbols(text, uri)
    lines = LineIndex(text)

    results = []
    for symbol in symbols:
        data = symbol.to_dict()
        data["position"] = range_to_positions(text, symbol.range, lines) if symbol.range else None
        results.append(data)

    return {
        "uri": uri,
        "symbol_count": len(results),
        "symbols": results,
    }


def get_diagnostics(text: str) -> dict:
    """Check For / Next balance of raw .cerberusdoc text.

    Returns:
        Dict with LSP-shaped diagnostics
    """
    diagnostics = validate_document(text)
    return {
        "diagnostic_count": len(diagnostics),
        "diagnostics": [d.to_dict() for d in diagnostics],
    }
