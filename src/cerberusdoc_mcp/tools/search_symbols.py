"""Search symbols across an indexed documentation set."""

from typing import Optional

from ..parser import LineIndex
from ..storage import IndexStore
from ..storage.index_store import score_symbol
from .get_symbol import symbol_location


def search_symbols(
    repo: str,
    query: str,
    kind: Optional[str] = None,
    file_pattern: Optional[str] = None,
    max_results: int = 10,
    storage_path: Optional[str] = None
) -> dict:
    """Search for symbols matching a query.

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        query: Search query; empty matches every symbol
        kind: Optional filter by symbol kind
        file_pattern: Optional glob pattern to filter files
        max_results: Maximum results to return
        storage_path: Custom storage path

    Returns:
        Dict with search results
    """
    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    results = index.search(query, kind=kind, file_pattern=file_pattern)

    query_lower = query.lower()
    query_words = set(query_lower.split())
    texts: dict[str, Optional[LineIndex]] = {}

    scored_results = []
    for sym in results[:max_results]:
        location = symbol_location(store, owner, name, sym, texts)
        scored_results.append({
            "id": sym["id"],
            "kind": sym.get("kind", ""),
            "name": sym["name"],
            "file": sym["file"],
            "range": location["range"],
            "signature": sym.get("signature"),
            "summary": sym.get("summary", ""),
            "score": score_symbol(sym, query_lower, query_words),
        })

    return {
        "repo": f"{owner}/{name}",
        "query": query,
        "result_count": len(scored_results),
        "results": scored_results
    }
