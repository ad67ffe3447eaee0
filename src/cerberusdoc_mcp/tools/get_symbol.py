"""Hover and go-to-definition for documented symbols."""

from typing import Optional

from ..parser import LineIndex, SymbolRange, display_signature, range_to_positions, word_at_position
from ..storage import IndexStore


def get_symbol(
    repo: str,
    name: Optional[str] = None,
    text: Optional[str] = None,
    line: int = 0,
    character: int = 0,
    storage_path: Optional[str] = None
) -> dict:
    """Get hover information for a symbol.

    The symbol is given by name, or by a cursor position inside `text`
    (the identifier ending at the cursor).

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        name: Symbol name, any casing
        text: Document text the cursor is in
        line: Zero-based cursor line in `text`
        character: Zero-based cursor character in `text`
        storage_path: Custom storage path

    Returns:
        Dict with signature, description, Markdown hover text and all definitions
    """
    if not name and text is not None:
        name = word_at_position(text, line, character)
    if not name:
        return {"error": "No symbol name at the given position"}

    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, repo_name = resolved

    index = store.load_index(owner, repo_name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{repo_name}"}

    matches = index.lookup(name)
    if not matches:
        return {"error": f"Symbol not found: {name}"}

    symbol = matches[0]
    texts: dict[str, Optional[LineIndex]] = {}

    return {
        "id": symbol["id"],
        "name": symbol["name"],
        "kind": symbol.get("kind", ""),
        "signature": symbol.get("signature"),
        "description": symbol.get("description"),
        "summary": symbol.get("summary", ""),
        "hover": hover_markdown(symbol),
        "definitions": [symbol_location(store, owner, repo_name, s, texts) for s in matches],
    }


def get_definition(
    repo: str,
    name: Optional[str] = None,
    text: Optional[str] = None,
    line: int = 0,
    character: int = 0,
    storage_path: Optional[str] = None
) -> dict:
    """Get the locations where a symbol is documented.

    Args are the same as get_symbol.

    Returns:
        Dict with a list of locations; symbols without a range are skipped
    """
    if not name and text is not None:
        name = word_at_position(text, line, character)
    if not name:
        return {"error": "No symbol name at the given position"}

    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, repo_name = resolved

    index = store.load_index(owner, repo_name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{repo_name}"}

    texts: dict[str, Optional[LineIndex]] = {}
    locations = []
    for symbol in index.lookup(name):
        if not symbol.get("range"):
            continue
        location = symbol_location(store, owner, repo_name, symbol, texts)
        if location.get("range"):
            locations.append(location)

    return {
        "repo": f"{owner}/{repo_name}",
        "name": name,
        "locations": locations,
    }


def hover_markdown(symbol: dict) -> str:
    """Markdown hover: signature in a cerberusx code block, then the description."""
    parts = []
    if symbol.get("signature"):
        parts.append(f"```cerberusx\n{display_signature(symbol['name'], symbol['signature'])}\n```")
    if symbol.get("description"):
        parts.append(symbol["description"])
    if not parts:
        parts.append(f"`{symbol['name']}`")
    return "\n\n".join(parts)


def symbol_location(
    store: IndexStore,
    owner: str,
    repo_name: str,
    symbol: dict,
    texts: dict[str, Optional[LineIndex]],
) -> dict:
    """File and line/character range of a stored symbol.

    Positions are computed from the document's current text; `texts` caches
    the line index of documents already read during one call.
    """
    file_path = symbol["file"]
    if file_path not in texts:
        text = store.get_document_text(owner, repo_name, file_path)
        texts[file_path] = LineIndex(text) if text is not None else None
    lines = texts[file_path]

    rng = symbol.get("range")
    if lines is None or not rng:
        return {"file": file_path, "range": None}

    return {
        "file": file_path,
        "range": range_to_positions(lines.text, SymbolRange(rng["start"], rng["end"]), lines),
    }
