"""Index local folder tool - walk, parse, validate, summarize, save."""

import logging
from pathlib import Path, PurePosixPath
from typing import Optional

from ..parser import parse_doc_symbols, DOC_EXTENSIONS
from ..diagnostics import validate_document
from ..storage import IndexStore
from ..storage.index_store import resolve_within
from ..summarizer import summarize_symbols

logger = logging.getLogger(__name__)


# File patterns to skip (sync with index_repo.py)
SKIP_PATTERNS = [
    "node_modules/", "venv/", ".venv/", "__pycache__/",
    ".git/", ".tox/", ".mypy_cache/",
    ".buildv", ".build/",
    "dist/", "out/",
]


def should_skip_file(path: str) -> bool:
    """Check if file should be skipped based on path patterns."""
    # Normalize path separators for matching
    normalized = path.replace("\\", "/")
    for pattern in SKIP_PATTERNS:
        if pattern in normalized:
            return True
    return False


def is_doc_path(file_path: str) -> bool:
    """Check that a caller-supplied path is a relative documentation file path."""
    if not file_path or "\\" in file_path:
        return False
    path = PurePosixPath(file_path)
    if path.is_absolute() or ".." in path.parts:
        return False
    return path.suffix.lower() in DOC_EXTENSIONS


def discover_local_files(
    folder_path: Path,
    max_files: int = 2000,
    max_size: int = 500 * 1024,  # 500KB
) -> list[Path]:
    """Discover documentation files in a local folder.

    Args:
        folder_path: Root folder to scan
        max_files: Maximum number of files to index
        max_size: Maximum file size in bytes

    Returns:
        List of Path objects, shallowest first when the limit applies
    """
    files = []

    for file_path in folder_path.rglob("*"):
        if not file_path.is_file():
            continue

        try:
            rel_path = file_path.relative_to(folder_path).as_posix()
        except ValueError:
            continue

        if should_skip_file(rel_path):
            continue

        if file_path.suffix.lower() not in DOC_EXTENSIONS:
            continue

        try:
            if file_path.stat().st_size > max_size:
                continue
        except OSError:
            continue

        files.append(file_path)

    if len(files) > max_files:
        def depth_key(file_path: Path) -> tuple:
            rel_path = file_path.relative_to(folder_path).as_posix()
            return (rel_path.count("/"), rel_path)

        files.sort(key=depth_key)
        files = files[:max_files]

    return files


def index_folder(
    path: str,
    use_ai_summaries: bool = True,
    storage_path: Optional[str] = None
) -> dict:
    """Index a local folder containing .cerberusdoc files.

    Args:
        path: Path to local folder (absolute or relative)
        use_ai_summaries: Whether to use AI for symbols without a description
        storage_path: Custom storage path (default: ~/.cerberusdoc-index/)

    Returns:
        Dict with indexing results
    """
    folder_path = Path(path).expanduser().resolve()

    if not folder_path.exists():
        return {"success": False, "error": f"Folder not found: {path}"}

    if not folder_path.is_dir():
        return {"success": False, "error": f"Path is not a directory: {path}"}

    warnings = []

    try:
        doc_files = discover_local_files(folder_path)

        if not doc_files:
            return {"success": False, "error": "No documentation files found"}

        all_symbols = []
        raw_files = {}
        parsed_files = []
        diagnostics = {}

        for file_path in doc_files:
            try:
                content = file_path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                warnings.append(f"Failed to read {file_path}: {e}")
                continue

            rel_path = file_path.relative_to(folder_path).as_posix()

            # The relative path is the symbol uri inside the index
            symbols = parse_doc_symbols(content, rel_path)
            problems = validate_document(content)

            raw_files[rel_path] = content
            parsed_files.append(rel_path)
            all_symbols.extend(symbols)
            if problems:
                diagnostics[rel_path] = len(problems)

        if not all_symbols:
            return {"success": False, "error": "No symbols extracted from files"}

        all_symbols = summarize_symbols(all_symbols, use_ai=use_ai_summaries)

        # Folder name is the repo name, "local" is the owner
        repo_name = folder_path.name
        owner = "local"

        store = IndexStore(base_path=storage_path)
        index = store.save_index(
            owner=owner,
            name=repo_name,
            source_files=parsed_files,
            symbols=all_symbols,
            raw_files=raw_files,
            diagnostics=diagnostics,
            root=str(folder_path),
        )

        logger.info("Indexed %d symbols from %d files in %s", len(all_symbols), len(parsed_files), folder_path)

        result = {
            "success": True,
            "repo": index.repo,
            "folder_path": str(folder_path),
            "indexed_at": index.indexed_at,
            "file_count": len(parsed_files),
            "symbol_count": len(all_symbols),
            "diagnostic_count": sum(diagnostics.values()),
            "files": parsed_files[:20],  # Limit files in response
        }

        if warnings:
            result["warnings"] = warnings

        return result

    except Exception as e:
        logger.exception("Indexing %s failed", folder_path)
        return {"success": False, "error": f"Indexing failed: {str(e)}"}


def reindex_file(
    repo: str,
    file_path: str,
    content: Optional[str] = None,
    storage_path: Optional[str] = None
) -> dict:
    """Re-parse one document and replace its symbols in an existing index.

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        file_path: Path of the document inside the index
        content: New document text; read from the indexed folder when omitted
        storage_path: Custom storage path

    Returns:
        Dict with the document's new symbol count
    """
    if not is_doc_path(file_path):
        return {"error": f"Invalid document path: {file_path}"}

    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    if content is None:
        if not index.root:
            return {"error": "content is required for repositories not indexed from a local folder"}
        live_path = resolve_within(Path(index.root), file_path)
        if live_path is None:
            return {"error": f"Invalid document path: {file_path}"}
        try:
            content = live_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            return {"error": f"Failed to read {live_path}: {e}"}

    symbols = summarize_symbols(parse_doc_symbols(content, file_path), use_ai=False)
    problems = validate_document(content)

    store.update_document(owner, name, file_path, content, symbols, len(problems))

    return {
        "repo": f"{owner}/{name}",
        "file": file_path,
        "symbol_count": len(symbols),
        "diagnostic_count": len(problems),
    }
