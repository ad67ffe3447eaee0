"""Signature help for the call being typed."""

from typing import Optional

from ..parser import display_signature, position_to_offset, call_name_before
from ..storage import IndexStore


def get_signature_help(
    repo: str,
    text: str,
    line: int,
    character: int,
    storage_path: Optional[str] = None
) -> dict:
    """Get the signature of the call whose '(' is right before the cursor.

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        text: Document text
        line: Zero-based cursor line
        character: Zero-based cursor character
        storage_path: Custom storage path

    Returns:
        Dict with signatures (empty when the cursor is not after a call)
    """
    name = call_name_before(text, position_to_offset(text, line, character))
    if not name:
        return {"signatures": []}

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
        return {"name": name, "signatures": []}

    symbol = matches[0]
    return {
        "name": name,
        "signatures": [{
            "label": display_signature(name, symbol.get("signature")),
            "documentation": symbol.get("description") or "",
        }],
        "active_signature": 0,
        "active_parameter": 0,
    }
