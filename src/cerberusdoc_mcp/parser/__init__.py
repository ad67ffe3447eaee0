"""Parser package for extracting symbols from CerberusX documentation."""

from .symbols import DocSymbol, SymbolRange, display_signature, slugify, make_symbol_id
from .formats import DocFormat, DOC_EXTENSIONS, MAX_DOCUMENT_CHARS
from .extractor import parse_doc_symbols, parse_command_line, FORMAT_CASCADE
from .tokens import TokenExtractor, extract_tokens, DEFAULT_TOKEN_REGEX
from .positions import (
    Position,
    LineIndex,
    offset_to_position,
    position_to_offset,
    range_to_positions,
    word_at_position,
    call_name_before,
)

__all__ = [
    "DocSymbol",
    "SymbolRange",
    "display_signature",
    "slugify",
    "make_symbol_id",
    "DocFormat",
    "DOC_EXTENSIONS",
    "MAX_DOCUMENT_CHARS",
    "parse_doc_symbols",
    "parse_command_line",
    "FORMAT_CASCADE",
    "TokenExtractor",
    "extract_tokens",
    "DEFAULT_TOKEN_REGEX",
    "Position",
    "LineIndex",
    "offset_to_position",
    "position_to_offset",
    "range_to_positions",
    "word_at_position",
    "call_name_before",
]
