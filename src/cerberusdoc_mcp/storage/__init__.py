"""Storage package for symbol maps and index save/load operations."""

from .symbol_index import SymbolIndex
from .index_store import DocIndex, IndexStore

__all__ = ["SymbolIndex", "DocIndex", "IndexStore"]
