from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from app.database.models import StoredDocument

Filter = tuple[str, Any]


class BaseDocumentStore(ABC):
    """Contract for the document store the compliance layer reads and writes."""

    @abstractmethod
    def query_documents(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
    ) -> list[StoredDocument]:
        """Return every document in `collection` whose top-level fields equal the filters.

        Raises:
            DocumentStoreError: on any store failure.
        """

    @abstractmethod
    def get_document(self, collection: str, document_id: str) -> StoredDocument | None:
        """Return one document by ID, or None when it does not exist.

        Raises:
            DocumentStoreError: on any store failure.
        """

    @abstractmethod
    def update_document(
        self,
        collection: str,
        document_id: str,
        fields: Mapping[str, Any],
    ) -> None:
        """Overwrite the given top-level fields of one document.

        Each field is replaced wholesale; nested arrays are never patched element-wise.

        Raises:
            StoredDocumentNotFoundError: if the document does not exist.
            DocumentStoreError: on any other store failure.
        """
