"""Document storage backing submissions and the public registry."""

from extreg.store.document_store import DocumentStore

__all__ = ["DocumentStore"]
