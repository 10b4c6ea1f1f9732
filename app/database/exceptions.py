class DocumentStoreError(Exception):
    """Base exception for document store failures (connection, query, write)."""


class StoredDocumentNotFoundError(DocumentStoreError):
    """Raised when an update targets a document that does not exist."""
