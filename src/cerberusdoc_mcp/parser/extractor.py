"""Documentation symbol extractor: a priority-ordered cascade of text formats."""

import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .symbols import DocSymbol, SymbolRange
from .formats import (
    DocFormat,
    MAX_DOCUMENT_CHARS,
    CODE_FENCE,
    MARKDOWN_HEADER,
    HEADER_LINE,
    LANGUAGE_KEYWORD,
    LEADING_KEYWORD,
    SYNTAX_SECTION,
    DESCRIPTION_SECTION,
    ITALIC_MARKER,
    FRONT_MATTER,
    FRONT_MATTER_NAME,
    FRONT_MATTER_SIGNATURE,
    FRONT_MATTER_DESCRIPTION,
    INLINE_LINE,
    COMMAND_LINE,
    LINE_BREAK,
)

logger = logging.getLogger(__name__)

# Descriptions keep at most this many non-empty lines
DESCRIPTION_LINES = 3


@dataclass
class ParseContext:
    """State shared by the cascade stages during one parse call."""
    text: str
    uri: str
    seen: set[str] = field(default_factory=set)                     # Lower-cased names already emitted
    excluded: list[tuple[int, int]] = field(default_factory=list)   # Front-matter spans, in text order

    def claim(self, name: str) -> bool:
        """Reserve a name. False if an earlier match already emitted it."""
        key = name.lower()
        if key in self.seen:
            return False
        self.seen.add(key)
        return True

    def is_excluded(self, start: int, end: int) -> bool:
        # Spans do not overlap, so only the last one starting at or before `start` can contain it
        i = bisect_right(self.excluded, (start, len(self.text) + 1)) - 1
        return i >= 0 and end <= self.excluded[i][1]


def parse_doc_symbols(text: str, uri: str) -> list[DocSymbol]:
    """Extract documented symbols from .cerberusdoc text.

    Formats are tried in FORMAT_CASCADE order. The first exclusive format
    that yields a symbol ends the cascade; additive formats accumulate.
    Names are unique case-insensitively within the result (first wins).

    Args:
        text: Full document text
        uri: Document identifier, copied onto every symbol

    Returns:
        List of DocSymbol objects, empty when nothing is recognized
    """
    if not text:
        return []

    if len(text) > MAX_DOCUMENT_CHARS:
        logger.debug("Scanning first %d of %d characters of %s", MAX_DOCUMENT_CHARS, len(text), uri)
        text = text[:MAX_DOCUMENT_CHARS]

    ctx = ParseContext(text=text, uri=uri)
    symbols = []

    for doc_format in FORMAT_CASCADE:
        try:
            found = doc_format.extract(ctx)
        except Exception:
            logger.exception("Format %s failed on %s", doc_format.name, uri)
            continue

        if found:
            logger.debug("Matched %s format in %s: %d symbol(s)", doc_format.name, uri, len(found))
            if doc_format.exclusive:
                return found
            symbols.extend(found)

    return symbols


def parse_command_line(line: str) -> Optional[tuple[str, Optional[str], Optional[str]]]:
    """Parse one line of the command grammar.

    Accepts "Name(sig) - description", "Name : description", "Name description"
    and a bare "Name".

    Returns:
        (name, signature, description) or None when the line has no leading identifier
    """
    m = COMMAND_LINE.fullmatch(line.strip())
    if not m:
        return None

    name = m.group(1)
    signature = m.group(2).strip() if m.group(2) else None
    description = m.group(3).strip() if m.group(3) else None
    return name, signature, description or None


def _extract_markdown_headers(ctx: ParseContext) -> list[DocSymbol]:
    """'# Function Name(args)' headers followed by a description paragraph."""
    symbols = []

    for m in MARKDOWN_HEADER.finditer(ctx.text):
        keyword_type, name, tail = m.group(1), m.group(2), m.group(3)
        if not ctx.claim(name):
            continue

        paragraph = _paragraph_after(ctx.text, m.end())
        symbols.append(DocSymbol(
            name=name,
            uri=ctx.uri,
            signature=name + tail.rstrip() if tail else None,
            description=_labelled(keyword_type, paragraph),
            range=SymbolRange(m.start(), m.end()),
            kind=keyword_type.lower(),
        ))

    return symbols


def _extract_keyword_block(ctx: ParseContext) -> list[DocSymbol]:
    """Single keyword per document: '> Type Name' plus '>> Syntax' / '>> Description'."""
    text = ctx.text

    m = LANGUAGE_KEYWORD.search(text) or LEADING_KEYWORD.match(text)
    if not m:
        return []

    keyword_type, name = m.group(1), m.group(2)
    ctx.claim(name)

    signature = None
    syntax = SYNTAX_SECTION.search(text)
    if syntax:
        cleaned = ITALIC_MARKER.sub(r"\1", syntax.group(1).strip()).replace("~n", "\n")
        signature = _first_lines(cleaned, 1) or None

    description = None
    section = DESCRIPTION_SECTION.search(text)
    if section:
        description = _first_lines(section.group(1).strip(), DESCRIPTION_LINES) or None

    line_start = text.rfind("\n", 0, m.start(1)) + 1
    return [DocSymbol(
        name=name,
        uri=ctx.uri,
        signature=signature,
        description=_labelled(keyword_type, description),
        range=SymbolRange(line_start, m.end()),
        kind=keyword_type.lower(),
    )]


def _extract_front_matter(ctx: ParseContext) -> list[DocSymbol]:
    """'---' fenced blocks with name / signature / description keys."""
    symbols = []

    for m in FRONT_MATTER.finditer(ctx.text):
        block = m.group(1)
        name_match = FRONT_MATTER_NAME.search(block)
        if not name_match:
            continue

        ctx.excluded.append((m.start(), m.end()))

        name = name_match.group(1).strip()
        if not ctx.claim(name):
            continue

        signature_match = FRONT_MATTER_SIGNATURE.search(block)
        description_match = FRONT_MATTER_DESCRIPTION.search(block)

        symbols.append(DocSymbol(
            name=name,
            uri=ctx.uri,
            signature=signature_match.group(1).strip() if signature_match else None,
            description=description_match.group(1).strip() if description_match else None,
            range=SymbolRange(m.start(), m.end()),
        ))

    return symbols


def _extract_fenced_commands(ctx: ParseContext) -> list[DocSymbol]:
    """Every line inside a code fence, read with the command grammar."""
    symbols = []

    for fence in CODE_FENCE.finditer(ctx.text):
        offset = fence.start(1)

        for raw_line in fence.group(1).split("\n"):
            line = raw_line.rstrip("\r")
            parsed = parse_command_line(line)

            if parsed and ctx.claim(parsed[0]):
                name, signature, description = parsed
                symbols.append(DocSymbol(
                    name=name,
                    uri=ctx.uri,
                    signature=signature,
                    description=description,
                    range=SymbolRange(offset, offset + len(line)),
                ))

            offset += len(raw_line) + 1

    return symbols


def _extract_inline_lines(ctx: ParseContext) -> list[DocSymbol]:
    """'command: Name(sig) - description' lines anywhere outside front matter."""
    symbols = []

    for m in INLINE_LINE.finditer(ctx.text):
        if ctx.is_excluded(m.start(), m.end()):
            continue

        name, description = m.group(1), m.group(3).strip()
        if not description or not ctx.claim(name):
            continue

        symbols.append(DocSymbol(
            name=name,
            uri=ctx.uri,
            signature=m.group(2).strip() if m.group(2) else None,
            description=description,
            range=SymbolRange(m.start(), m.end()),
        ))

    return symbols


def _labelled(keyword_type: str, description: Optional[str]) -> str:
    """Prefix a description with its bold keyword-type label."""
    if description:
        return f"**{keyword_type}**\n\n{description}"
    return f"**{keyword_type}**"


def _first_lines(block: str, count: int) -> str:
    """Join the first `count` non-empty lines of a block."""
    lines = [line for line in LINE_BREAK.split(block) if line.strip()]
    return "\n".join(lines[:count]).strip()


def _paragraph_after(text: str, pos: int) -> Optional[str]:
    """Leading lines of the paragraph after a header.

    Skips blank lines directly below the header, then stops at the next
    blank line or header line.
    """
    lines = []
    for line in _iter_lines(text, pos):
        if not line.strip():
            if lines:
                break
            continue
        if HEADER_LINE.match(line):
            break
        lines.append(line.strip())
        if len(lines) == DESCRIPTION_LINES:
            break

    return "\n".join(lines) or None


def _iter_lines(text: str, pos: int) -> Iterator[str]:
    """Yield lines from `pos` onward without splitting the whole text."""
    while True:
        end = text.find("\n", pos)
        if end == -1:
            yield text[pos:]
            return
        yield text[pos:end]
        pos = end + 1


FORMAT_CASCADE = [
    DocFormat(name="markdown_header", extract=_extract_markdown_headers, exclusive=True),
    DocFormat(name="keyword_block", extract=_extract_keyword_block, exclusive=True),
    DocFormat(name="front_matter", extract=_extract_front_matter, exclusive=False),
    DocFormat(name="fenced_commands", extract=_extract_fenced_commands, exclusive=False),
    DocFormat(name="inline_lines", extract=_extract_inline_lines, exclusive=False),
]
