"""File-based JSON document store.

Each collection is a single JSON object (``{doc_id: document}``) under
``<data_dir>/store/<collection>.json``. Documents are plain dicts; ids are
assigned on ``create`` and kept inside the document under ``id``.
"""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any, Optional


class DocumentStore:
    """Per-document create/read/update and collection-scoped queries."""

    def __init__(self, base_dir: Optional[str | Path] = None) -> None:
        if base_dir is None:
            self._base = Path.home() / ".extreg" / "store"
        else:
            self._base = Path(base_dir)
        self._base.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _path(self, collection: str) -> Path:
        return self._base / f"{collection}.json"

    def _read(self, collection: str) -> dict[str, dict]:
        path = self._path(collection)
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text())
            return data if isinstance(data, dict) else {}
        except (json.JSONDecodeError, OSError):
            return {}

    def _write(self, collection: str, docs: dict[str, dict]) -> None:
        path = self._path(collection)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(docs, indent=2, default=str))
        tmp.replace(path)

    # ------------------------------------------------------------------
    # Document operations
    # ------------------------------------------------------------------

    def create(self, collection: str, data: dict[str, Any], doc_id: Optional[str] = None) -> dict:
        """Insert a new document. Returns the stored document."""
        docs = self._read(collection)
        doc_id = doc_id or uuid.uuid4().hex
        if doc_id in docs:
            raise KeyError(f"{collection}/{doc_id} already exists")
        doc = {**data, "id": doc_id}
        docs[doc_id] = doc
        self._write(collection, docs)
        return doc

    def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> dict:
        """Create or fully replace a document."""
        docs = self._read(collection)
        doc = {**data, "id": doc_id}
        docs[doc_id] = doc
        self._write(collection, docs)
        return doc

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        return self._read(collection).get(doc_id)

    def exists(self, collection: str, doc_id: str) -> bool:
        return doc_id in self._read(collection)

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> dict:
        """Merge ``fields`` into an existing document.

        Raises ``KeyError`` if the document does not exist.
        """
        docs = self._read(collection)
        if doc_id not in docs:
            raise KeyError(f"{collection}/{doc_id} not found")
        doc = docs[doc_id]
        doc.update(fields)
        doc["id"] = doc_id
        self._write(collection, docs)
        return doc

    def query(
        self,
        collection: str,
        order_by: Optional[str] = None,
        descending: bool = False,
        **equals: Any,
    ) -> list[dict]:
        """Return documents whose fields equal every ``equals`` value."""
        results = [
            d
            for d in self._read(collection).values()
            if all(d.get(k) == v for k, v in equals.items())
        ]
        if order_by:
            results.sort(key=lambda d: str(d.get(order_by) or ""), reverse=descending)
        return results

    def list(self, collection: str) -> list[dict]:
        return list(self._read(collection).values())
