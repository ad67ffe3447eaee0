"""Structural checks for CerberusX snippets in documentation files."""

import logging
from dataclasses import dataclass

from .parser.formats import CODE_FENCE, FOR_OPEN, FOR_CLOSE, MAX_DOCUMENT_CHARS

logger = logging.getLogger(__name__)

# Diagnostic ranges never run past this column
MAX_DIAGNOSTIC_WIDTH = 200
UNCLOSED_WIDTH = 80


@dataclass
class Diagnostic:
    """A problem found in a document, in zero-based document coordinates."""
    line: int
    start_character: int
    end_character: int
    message: str
    severity: str = "warning"
    source: str = "cerberusx"

    def to_dict(self) -> dict:
        return {
            "range": {
                "start": {"line": self.line, "character": self.start_character},
                "end": {"line": self.line, "character": self.end_character},
            },
            "severity": self.severity,
            "message": self.message,
            "source": self.source,
        }


def validate_document(text: str) -> list[Diagnostic]:
    """Check For / Next balance in a document's code.

    Code fences are checked when the document has any, otherwise the whole
    text is treated as code. Every closing 'Next' / 'End For' / 'End' without
    an open 'For' is reported, and so is every 'For' left open at the end of
    its block.
    """
    if not text:
        return []
    text = text[:MAX_DOCUMENT_CHARS]

    blocks = [(m.group(1), m.start(1)) for m in CODE_FENCE.finditer(text)]
    if not blocks:
        blocks = [(text, 0)]

    diagnostics = []
    line, counted_to = 0, 0
    for content, start_offset in blocks:
        line += text.count("\n", counted_to, start_offset)
        counted_to = start_offset
        diagnostics.extend(_check_block(content, line))

    return diagnostics


def _check_block(content: str, first_line: int) -> list[Diagnostic]:
    """Balance check of one block whose first line sits at `first_line`."""
    diagnostics = []
    open_loops: list[int] = []

    for i, raw_line in enumerate(content.split("\n")):
        line = raw_line.rstrip("\r")
        trimmed = line.strip()
        doc_line = first_line + i

        if FOR_OPEN.match(trimmed):
            open_loops.append(doc_line)
        elif FOR_CLOSE.match(trimmed):
            if open_loops:
                open_loops.pop()
                continue
            keyword = trimmed.split()[0]
            diagnostics.append(Diagnostic(
                line=doc_line,
                start_character=0,
                end_character=min(len(line), MAX_DIAGNOSTIC_WIDTH),
                message=f"Closing '{keyword}' found without matching 'For'",
            ))

    for doc_line in open_loops:
        diagnostics.append(Diagnostic(
            line=doc_line,
            start_character=0,
            end_character=UNCLOSED_WIDTH,
            message="Missing closing 'Next' (or 'End' / 'End For') for 'For' started here",
        ))

    if diagnostics:
        logger.debug("Found %d For/Next problem(s) starting at line %d", len(diagnostics), first_line)

    return diagnostics
