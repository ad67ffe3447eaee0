"""Index storage with save/load and range-based content retrieval."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..parser.symbols import DocSymbol, make_symbol_id
from .symbol_index import SymbolIndex

logger = logging.getLogger(__name__)


@dataclass
class DocIndex:
    """Index for a set of documentation files."""
    repo: str                    # "owner/name"
    owner: str
    name: str
    indexed_at: str              # ISO timestamp
    source_files: list[str]      # All indexed file paths
    symbols: list[dict]          # Serialized DocSymbol dicts with "id" and "file"
    diagnostics: dict[str, int] = field(default_factory=dict)  # File -> problem count
    root: Optional[str] = None   # Local folder the files were read from, if any

    def get_symbol(self, symbol_id: str) -> Optional[dict]:
        """Find a symbol by ID."""
        for sym in self.symbols:
            if sym.get("id") == symbol_id:
                return sym
        return None

    def lookup(self, name: str) -> list[dict]:
        """All symbols with this name, any casing, in index order."""
        name_lower = name.lower()
        return [s for s in self.symbols if s.get("name", "").lower() == name_lower]

    def to_symbol_index(self) -> SymbolIndex:
        return SymbolIndex(DocSymbol.from_dict(s) for s in self.symbols)

    def search(self, query: str, kind: Optional[str] = None, file_pattern: Optional[str] = None) -> list[dict]:
        """Search symbols with weighted scoring."""
        query_lower = query.lower()
        query_words = set(query_lower.split())

        scored = []
        for sym in self.symbols:
            # Apply filters
            if kind and sym.get("kind") != kind:
                continue
            if file_pattern and not self._match_pattern(sym.get("file", ""), file_pattern):
                continue

            score = score_symbol(sym, query_lower, query_words)
            if score > 0 or not query_lower:
                scored.append((score, sym))

        # Sort by score descending, stable for ties
        scored.sort(key=lambda x: x[0], reverse=True)
        return [sym for _, sym in scored]

    def _match_pattern(self, file_path: str, pattern: str) -> bool:
        """Match file path against glob pattern."""
        import fnmatch
        return fnmatch.fnmatch(file_path, pattern) or fnmatch.fnmatch(file_path, f"*/{pattern}")


def score_symbol(sym: dict, query_lower: str, query_words: set) -> int:
    """Calculate search score for a symbol."""
    score = 0

    # 1. Exact name match (highest weight)
    name_lower = sym.get("name", "").lower()
    if query_lower == name_lower:
        score += 20
    elif query_lower and query_lower in name_lower:
        score += 10

    # 2. Name word overlap
    for word in query_words:
        if word in name_lower:
            score += 5

    # 3. Signature match
    sig_lower = (sym.get("signature") or "").lower()
    if query_lower and query_lower in sig_lower:
        score += 8
    for word in query_words:
        if word in sig_lower:
            score += 2

    # 4. Summary match
    summary_lower = (sym.get("summary") or "").lower()
    if query_lower and query_lower in summary_lower:
        score += 5
    for word in query_words:
        if word in summary_lower:
            score += 1

    # 5. Description match
    desc_lower = (sym.get("description") or "").lower()
    for word in query_words:
        if word in desc_lower:
            score += 1

    return score


def resolve_within(base: Path, file_path: str) -> Optional[Path]:
    """Resolve a relative document path under `base`.

    Returns None for absolute paths and for paths that end up outside
    `base` once '..' parts and symlinks are resolved.
    """
    if not file_path or Path(file_path).is_absolute():
        return None

    base = base.resolve()
    candidate = (base / file_path).resolve()
    if candidate == base or not candidate.is_relative_to(base):
        return None
    return candidate


class IndexStore:
    """Storage for documentation indexes with raw document copies."""

    def __init__(self, base_path: Optional[str] = None):
        """Initialize store.

        Args:
            base_path: Base directory for storage. Defaults to ~/.cerberusdoc-index/
        """
        if base_path:
            self.base_path = Path(base_path)
        else:
            self.base_path = Path.home() / ".cerberusdoc-index"

        self.base_path.mkdir(parents=True, exist_ok=True)

    def _index_path(self, owner: str, name: str) -> Path:
        """Path to index JSON file."""
        return self.base_path / f"{owner}-{name}.json"

    def _content_dir(self, owner: str, name: str) -> Path:
        """Path to raw content directory."""
        return self.base_path / f"{owner}-{name}"

    def save_index(
        self,
        owner: str,
        name: str,
        source_files: list[str],
        symbols: list[DocSymbol],
        raw_files: dict[str, str],
        diagnostics: Optional[dict[str, int]] = None,
        root: Optional[str] = None,
    ) -> DocIndex:
        """Save index and raw files to storage.

        Args:
            owner: Repository owner ("local" for folders)
            name: Repository or folder name
            source_files: List of indexed file paths
            symbols: Parsed symbols; each symbol's uri is its file path
            raw_files: Dict mapping file path to raw content
            diagnostics: Dict mapping file path to problem count
            root: Local folder the files came from

        Returns:
            DocIndex object
        """
        from datetime import datetime

        index = DocIndex(
            repo=f"{owner}/{name}",
            owner=owner,
            name=name,
            indexed_at=datetime.now().isoformat(),
            source_files=source_files,
            symbols=[self._symbol_to_dict(s) for s in symbols],
            diagnostics=diagnostics or {},
            root=root,
        )
        self._write_index(index)

        content_dir = self._content_dir(owner, name)
        content_dir.mkdir(parents=True, exist_ok=True)
        for file_path, content in raw_files.items():
            self._write_raw(content_dir, file_path, content)

        return index

    def update_document(
        self,
        owner: str,
        name: str,
        file_path: str,
        content: str,
        symbols: list[DocSymbol],
        diagnostic_count: int = 0,
    ) -> Optional[DocIndex]:
        """Replace one document's symbols and raw copy in an existing index.

        Symbols contributed by other files keep their order; the document's
        new symbols are appended.
        """
        index = self.load_index(owner, name)
        if not index:
            return None

        content_dir = self._content_dir(owner, name)
        if resolve_within(content_dir, file_path) is None:
            raise ValueError(f"Document path escapes the index: {file_path}")

        index.symbols = [s for s in index.symbols if s.get("file") != file_path]
        index.symbols.extend(self._symbol_to_dict(s) for s in symbols)

        if file_path not in index.source_files:
            index.source_files.append(file_path)
        index.diagnostics[file_path] = diagnostic_count

        from datetime import datetime
        index.indexed_at = datetime.now().isoformat()

        self._write_index(index)
        self._write_raw(content_dir, file_path, content)
        return index

    def load_index(self, owner: str, name: str) -> Optional[DocIndex]:
        """Load index from storage."""
        index_path = self._index_path(owner, name)

        if not index_path.exists():
            return None

        with open(index_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return DocIndex(
            repo=data["repo"],
            owner=data["owner"],
            name=data["name"],
            indexed_at=data["indexed_at"],
            source_files=data["source_files"],
            symbols=data["symbols"],
            diagnostics=data.get("diagnostics", {}),
            root=data.get("root"),
        )

    def resolve_repo(self, repo: str) -> Optional[tuple[str, str]]:
        """Turn "owner/name" or a bare name into (owner, name)."""
        if "/" in repo:
            owner, name = repo.split("/", 1)
            return owner, name

        matching = [r for r in self.list_repos() if r["repo"].endswith(f"/{repo}")]
        if not matching:
            return None
        owner, name = matching[0]["repo"].split("/", 1)
        return owner, name

    def get_document_text(self, owner: str, name: str, file_path: str) -> Optional[str]:
        """Current text of an indexed document.

        Local folders are read live so positions match the file on disk;
        the stored copy is used when the file is gone or came from GitHub.
        Only files listed in the index are read.
        """
        index = self.load_index(owner, name)
        if not index or file_path not in index.source_files:
            return None

        if index.root:
            live_path = resolve_within(Path(index.root), file_path)
            if live_path and live_path.is_file():
                try:
                    return live_path.read_text(encoding="utf-8", errors="replace")
                except OSError as e:
                    logger.warning("Could not read %s, using stored copy: %s", live_path, e)

        stored = resolve_within(self._content_dir(owner, name), file_path)
        if stored is None or not stored.is_file():
            return None

        with open(stored, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def get_symbol_content(self, owner: str, name: str, symbol_id: str) -> Optional[str]:
        """Read the documentation text a symbol's range covers."""
        index = self.load_index(owner, name)
        if not index:
            return None

        symbol = index.get_symbol(symbol_id)
        if not symbol or not symbol.get("range"):
            return None

        text = self.get_document_text(owner, name, symbol["file"])
        if text is None:
            return None

        return text[symbol["range"]["start"]:symbol["range"]["end"]]

    def list_repos(self) -> list[dict]:
        """List all indexed repositories."""
        repos = []

        for index_file in self.base_path.glob("*.json"):
            try:
                with open(index_file, "r", encoding="utf-8") as f:
                    data = json.load(f)

                repos.append({
                    "repo": data["repo"],
                    "indexed_at": data["indexed_at"],
                    "symbol_count": len(data["symbols"]),
                    "file_count": len(data["source_files"]),
                    "diagnostic_count": sum(data.get("diagnostics", {}).values()),
                })
            except (OSError, ValueError, KeyError) as e:
                logger.warning("Skipping unreadable index %s: %s", index_file, e)
                continue

        return repos

    def delete_index(self, owner: str, name: str) -> bool:
        """Delete an index and its raw files."""
        index_path = self._index_path(owner, name)
        content_dir = self._content_dir(owner, name)

        deleted = False

        if index_path.exists():
            index_path.unlink()
            deleted = True

        if content_dir.exists():
            import shutil
            shutil.rmtree(content_dir)
            deleted = True

        return deleted

    def _write_index(self, index: DocIndex):
        with open(self._index_path(index.owner, index.name), "w", encoding="utf-8") as f:
            json.dump(self._index_to_dict(index), f, indent=2)

    def _write_raw(self, content_dir: Path, file_path: str, content: str):
        file_dest = resolve_within(content_dir, file_path)
        if file_dest is None:
            raise ValueError(f"Document path escapes the index: {file_path}")
        file_dest.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps offsets valid for CRLF documents
        with open(file_dest, "w", encoding="utf-8", newline="") as f:
            f.write(content)

    def _symbol_to_dict(self, symbol: DocSymbol) -> dict:
        """Convert DocSymbol to dict with its storage ID."""
        data = symbol.to_dict()
        data["id"] = make_symbol_id(symbol.uri, symbol.name)
        data["file"] = symbol.uri
        return data

    def _index_to_dict(self, index: DocIndex) -> dict:
        """Convert DocIndex to dict."""
        return {
            "repo": index.repo,
            "owner": index.owner,
            "name": index.name,
            "indexed_at": index.indexed_at,
            "source_files": index.source_files,
            "symbols": index.symbols,
            "diagnostics": index.diagnostics,
            "root": index.root,
        }
