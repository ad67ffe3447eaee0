"""In-memory name -> symbols map accumulated across documents."""

from typing import Iterable, Optional

from ..parser.symbols import DocSymbol


class SymbolIndex:
    """Symbols keyed by lower-cased name, in insertion order.

    Each document's contributions can be replaced as a unit when the
    document changes.
    """

    def __init__(self, symbols: Iterable[DocSymbol] = ()):
        self._by_name: dict[str, list[DocSymbol]] = {}
        for symbol in symbols:
            self._add(symbol)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._by_name.values())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._by_name

    def _add(self, symbol: DocSymbol):
        self._by_name.setdefault(symbol.name.lower(), []).append(symbol)

    def replace_document(self, uri: str, symbols: Iterable[DocSymbol]):
        """Drop everything `uri` contributed, then add its new symbols."""
        symbols = list(symbols)
        self.remove_document(uri)
        for symbol in symbols:
            self._add(symbol)

    def remove_document(self, uri: str) -> int:
        """Remove a document's symbols. Returns how many were removed."""
        removed = 0
        for key in list(self._by_name):
            kept = [s for s in self._by_name[key] if s.uri != uri]
            removed += len(self._by_name[key]) - len(kept)
            if kept:
                self._by_name[key] = kept
            else:
                del self._by_name[key]
        return removed

    def lookup(self, name: str) -> list[DocSymbol]:
        """All symbols with this name, any casing."""
        return list(self._by_name.get(name.lower(), []))

    def first(self, name: str) -> Optional[DocSymbol]:
        entries = self._by_name.get(name.lower())
        return entries[0] if entries else None

    def names(self) -> list[str]:
        """Display names, one per key, taken from the first symbol."""
        return [entries[0].name for entries in self._by_name.values()]

    def documents(self) -> list[str]:
        uris: dict[str, None] = {}
        for entries in self._by_name.values():
            for symbol in entries:
                uris.setdefault(symbol.uri, None)
        return list(uris)

    def symbols_for(self, uri: str) -> list[DocSymbol]:
        return [s for entries in self._by_name.values() for s in entries if s.uri == uri]

    def search(self, query: str) -> list[DocSymbol]:
        """First symbol of every name containing the query (case-insensitive)."""
        query = query.lower()
        return [entries[0] for key, entries in self._by_name.items() if query in key]

    def complete(self, prefix: str) -> list[DocSymbol]:
        """First symbol of every name starting with the prefix (case-insensitive)."""
        prefix = prefix.lower()
        return [entries[0] for key, entries in self._by_name.items() if key.startswith(prefix)]
