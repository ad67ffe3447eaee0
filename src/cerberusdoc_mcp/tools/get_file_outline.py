"""Get file outline - symbols and diagnostics of one document."""

from typing import Optional

from ..storage import IndexStore
from ..parser import parse_doc_symbols, range_to_positions, LineIndex
from ..diagnostics import validate_document
from ..summarizer import summarize_symbols_simple


def get_file_outline(
    repo: str,
    file_path: str,
    storage_path: Optional[str] = None
) -> dict:
    """Get the symbols of a document with line/character ranges.

    The document's current text is parsed, so ranges match the file as it
    is now even if it changed since indexing.

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        file_path: Path to the document within the index
        storage_path: Custom storage path

    Returns:
        Dict with symbols outline and diagnostics
    """
    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    if file_path not in index.source_files:
        return {"error": f"File not indexed: {file_path}"}

    text = store.get_document_text(owner, name, file_path)
    if text is None:
        return {
            "repo": f"{owner}/{name}",
            "file": file_path,
            "symbols": [],
            "diagnostics": [],
        }

    symbols = summarize_symbols_simple(parse_doc_symbols(text, file_path))
    lines = LineIndex(text)

    return {
        "repo": f"{owner}/{name}",
        "file": file_path,
        "symbols": [
            {
                "name": s.name,
                "kind": s.kind,
                "signature": s.signature,
                "summary": s.summary,
                "range": range_to_positions(text, s.range, lines),
            }
            for s in symbols
        ],
        "diagnostics": [d.to_dict() for d in validate_document(text)],
    }
