"""Symbol dataclass and utility functions."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SymbolRange:
    """Half-open character offsets into the original document text."""
    start: int
    end: int


@dataclass
class DocSymbol:
    """A documented symbol extracted from a .cerberusdoc file."""
    name: str                               # Symbol name, original casing (e.g., "DrawImage")
    uri: str                                # Source document identifier (opaque to the parser)
    signature: Optional[str] = None         # Raw call signature (e.g., "(x, y)")
    description: Optional[str] = None       # Free text, may start with a "**Function**" label
    range: Optional[SymbolRange] = None     # Offsets into the source text
    kind: str = "command"                   # "function" | "method" | "class" | "keyword" | "command" ...
    summary: str = ""                       # One-line summary (filled by the summarizer)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "uri": self.uri,
            "signature": self.signature,
            "description": self.description,
            "range": {"start": self.range.start, "end": self.range.end} if self.range else None,
            "kind": self.kind,
            "summary": self.summary,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "DocSymbol":
        rng = d.get("range")
        return cls(
            name=d["name"],
            uri=d["uri"],
            signature=d.get("signature"),
            description=d.get("description"),
            range=SymbolRange(rng["start"], rng["end"]) if rng else None,
            kind=d.get("kind", "command"),
            summary=d.get("summary", ""),
        )


def display_signature(name: str, signature: Optional[str]) -> str:
    """Name plus signature, without repeating the name.

    Markdown-header signatures already start with the name ("Foo(x)"),
    the other formats carry only the argument list ("(x)").
    """
    if not signature:
        return name
    if signature.lower().startswith(name.lower()):
        return signature
    return f"{name}{signature}"


def slugify(text: str) -> str:
    """Convert file path to slug format.

    Replace / with - and . with - for use in symbol IDs.
    Example: docs/graphics.cerberusdoc -> docs-graphics-cerberusdoc
    """
    return text.replace("\\", "/").replace("/", "-").replace(".", "-")


def make_symbol_id(uri: str, name: str) -> str:
    """Generate unique symbol ID.

    Format: {file_slug}::{name}
    Example: docs-graphics-cerberusdoc::DrawImage
    """
    return f"{slugify(uri)}::{name}"
