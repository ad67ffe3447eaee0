"""Index repository tool - fetch, parse, validate, summarize, save."""

import asyncio
import logging
import os
from typing import Optional
from urllib.parse import urlparse

import httpx

from ..parser import parse_doc_symbols, DOC_EXTENSIONS
from ..diagnostics import validate_document
from ..storage import IndexStore
from ..summarizer import summarize_symbols
from .index_folder import should_skip_file

logger = logging.getLogger(__name__)


def parse_github_url(url: str) -> tuple[str, str]:
    """Extract owner/repo from GitHub URL or owner/repo string.

    Supports:
    - https://github.com/owner/repo
    - https://github.com/owner/repo.git
    - owner/repo
    """
    url = url.removesuffix(".git")

    # If it contains a / but not ://, treat as owner/repo
    if "/" in url and "://" not in url:
        parts = url.split("/")
        return parts[0], parts[1]

    parsed = urlparse(url)
    path = parsed.path.strip("/")

    parts = path.split("/")
    if len(parts) >= 2:
        return parts[0], parts[1]

    raise ValueError(f"Could not parse GitHub URL: {url}")


async def fetch_repo_tree(owner: str, repo: str, token: Optional[str] = None) -> list[dict]:
    """Fetch full repository tree via git/trees API.

    Uses recursive=1 to get all paths in a single API call.
    """
    url = f"https://api.github.com/repos/{owner}/{repo}/git/trees/HEAD"
    params = {"recursive": "1"}
    headers = {"Accept": "application/vnd.github.v3+json"}

    if token:
        headers["Authorization"] = f"token {token}"

    async with httpx.AsyncClient() as client:
        response = await client.get(url, params=params, headers=headers)
        response.raise_for_status()
        data = response.json()

    return data.get("tree", [])


def discover_doc_files(
    tree_entries: list[dict],
    gitignore_content: Optional[str] = None,
    max_files: int = 2000,
    max_size: int = 500 * 1024  # 500KB
) -> list[str]:
    """Discover documentation files from tree entries.

    Applies filtering pipeline:
    1. Type filter (blobs only)
    2. Extension filter (.cerberusdoc)
    3. Skip list patterns
    4. Size limit
    5. .gitignore matching
    6. File count limit (shallowest first)
    """
    import pathspec

    gitignore_spec = None
    if gitignore_content:
        try:
            gitignore_spec = pathspec.PathSpec.from_lines(
                "gitwildmatch",
                gitignore_content.split("\n")
            )
        except ValueError as e:
            logger.warning("Ignoring unparsable .gitignore: %s", e)

    files = []

    for entry in tree_entries:
        if entry.get("type") != "blob":
            continue

        path = entry.get("path", "")
        size = entry.get("size", 0)

        _, ext = os.path.splitext(path)
        if ext.lower() not in DOC_EXTENSIONS:
            continue

        if should_skip_file(path):
            continue

        if size > max_size:
            continue

        if gitignore_spec and gitignore_spec.match_file(path):
            continue

        files.append(path)

    if len(files) > max_files:
        files.sort(key=lambda path: (path.count("/"), path))
        files = files[:max_files]

    return files


async def fetch_file_content(
    owner: str,
    repo: str,
    path: str,
    token: Optional[str] = None
) -> str:
    """Fetch raw file content from GitHub."""
    url = f"https://api.github.com/repos/{owner}/{repo}/contents/{path}"
    headers = {"Accept": "application/vnd.github.v3.raw"}

    if token:
        headers["Authorization"] = f"token {token}"

    async with httpx.AsyncClient() as client:
        response = await client.get(url, headers=headers)
        response.raise_for_status()
        return response.text


async def fetch_gitignore(
    owner: str,
    repo: str,
    token: Optional[str] = None
) -> Optional[str]:
    """Fetch .gitignore file if it exists."""
    try:
        return await fetch_file_content(owner, repo, ".gitignore", token)
    except httpx.HTTPError:
        return None


async def index_repo(
    url: str,
    use_ai_summaries: bool = True,
    github_token: Optional[str] = None,
    storage_path: Optional[str] = None
) -> dict:
    """Index the .cerberusdoc files of a GitHub repository.

    Args:
        url: GitHub repository URL or owner/repo string
        use_ai_summaries: Whether to use AI for symbols without a description
        github_token: GitHub API token (optional, for private repos/higher rate limits)
        storage_path: Custom storage path (default: ~/.cerberusdoc-index/)

    Returns:
        Dict with indexing results
    """
    try:
        owner, repo = parse_github_url(url)
    except ValueError as e:
        return {"success": False, "error": str(e)}

    if not github_token:
        github_token = os.environ.get("GITHUB_TOKEN")

    warnings = []

    try:
        try:
            tree_entries = await fetch_repo_tree(owner, repo, github_token)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return {"success": False, "error": f"Repository not found: {owner}/{repo}"}
            elif e.response.status_code == 403:
                return {"success": False, "error": "GitHub API rate limit exceeded. Set GITHUB_TOKEN."}
            raise

        gitignore_content = await fetch_gitignore(owner, repo, github_token)

        doc_files = discover_doc_files(tree_entries, gitignore_content)

        if not doc_files:
            return {"success": False, "error": "No documentation files found"}

        # Fetch all file contents concurrently
        semaphore = asyncio.Semaphore(10)  # Limit concurrent requests

        async def fetch_with_limit(path: str) -> tuple[str, str]:
            async with semaphore:
                try:
                    content = await fetch_file_content(owner, repo, path, github_token)
                    return path, content
                except httpx.HTTPError as e:
                    warnings.append(f"Failed to fetch {path}: {e}")
                    return path, ""

        tasks = [fetch_with_limit(path) for path in doc_files]
        file_contents = await asyncio.gather(*tasks)

        all_symbols = []
        raw_files = {}
        parsed_files = []
        diagnostics = {}

        for path, content in file_contents:
            if not content:
                continue

            symbols = parse_doc_symbols(content, path)
            problems = validate_document(content)

            raw_files[path] = content
            parsed_files.append(path)
            all_symbols.extend(symbols)
            if problems:
                diagnostics[path] = len(problems)

        if not all_symbols:
            return {"success": False, "error": "No symbols extracted"}

        all_symbols = summarize_symbols(all_symbols, use_ai=use_ai_summaries)

        store = IndexStore(base_path=storage_path)
        index = store.save_index(
            owner=owner,
            name=repo,
            source_files=parsed_files,
            symbols=all_symbols,
            raw_files=raw_files,
            diagnostics=diagnostics,
        )

        logger.info("Indexed %d symbols from %d files in %s/%s", len(all_symbols), len(parsed_files), owner, repo)

        result = {
            "success": True,
            "repo": index.repo,
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
        logger.exception("Indexing %s/%s failed", owner, repo)
        return {"success": False, "error": f"Indexing failed: {str(e)}"}
