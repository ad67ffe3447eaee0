"""Completion candidates: documented symbols first, then plain identifiers."""

from typing import Optional

from ..parser import TokenExtractor, display_signature
from ..storage import IndexStore


def get_completions(
    repo: str,
    prefix: str = "",
    text: Optional[str] = None,
    token_regex: Optional[str] = None,
    max_results: int = 50,
    storage_path: Optional[str] = None
) -> dict:
    """Get completion items for a prefix.

    Documented symbols from the index come first. When `text` is given,
    identifiers found in it (code fences preferred) that the index does not
    know are added as plain-text fallbacks.

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        prefix: Case-insensitive name prefix; empty returns everything
        text: Optional document text for fallback identifiers
        token_regex: Pattern for fallback identifiers (default: 3+ char identifiers)
        max_results: Maximum items to return
        storage_path: Custom storage path

    Returns:
        Dict with completion items
    """
    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    symbol_index = index.to_symbol_index()
    items = []
    warnings = []

    for symbol in symbol_index.complete(prefix):
        items.append({
            "label": symbol.name,
            "kind": symbol.kind,
            "detail": display_signature(symbol.name, symbol.signature) if symbol.signature else "",
            "documentation": symbol.description or "",
            "source": "index",
        })

    if text:
        extractor = TokenExtractor()
        if token_regex and not extractor.update_regex(token_regex):
            warnings.append(f"Invalid token_regex ignored: {token_regex}")

        prefix_lower = prefix.lower()
        tokens = sorted(
            t for t in extractor.extract_from_text(text)
            if t.lower().startswith(prefix_lower) and t not in symbol_index
        )
        for token in tokens:
            items.append({
                "label": token,
                "kind": "text",
                "detail": "",
                "documentation": "",
                "source": "document",
            })

    result = {
        "repo": f"{owner}/{name}",
        "prefix": prefix,
        "item_count": min(len(items), max_results),
        "items": items[:max_results],
    }

    if warnings:
        result["warnings"] = warnings

    return result
