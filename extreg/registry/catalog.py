"""Read access to the public registry collection.

Entries are only ever written by the approval transition; this module
covers browsing and search.
"""

from __future__ import annotations

from extreg.registry.models import RegistryEntry, SearchQuery, SearchResult
from extreg.store import DocumentStore

COLLECTION = "registry"


class RegistryCatalog:
    """Browse and search approved extensions."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def get(self, entry_id: str) -> RegistryEntry | None:
        data = self._store.get(COLLECTION, entry_id)
        return RegistryEntry.from_dict(data) if data else None

    def list_all(self) -> list[RegistryEntry]:
        entries = [RegistryEntry.from_dict(d) for d in self._store.list(COLLECTION)]
        entries.sort(key=lambda e: e.name.lower())
        return entries

    def search(self, query: SearchQuery) -> SearchResult:
        results = []

        for entry in self.list_all():
            if query.text and query.text.lower() not in (
                entry.name + " " + entry.description
            ).lower():
                continue

            if query.tags and not any(t in entry.tags for t in query.tags):
                continue

            if query.category and entry.category != query.category.lower():
                continue

            results.append(entry)

        return SearchResult(entries=results, total_count=len(results), query=query)
