from app.database.models import ParticipantRecord, StoredDocument
from app.database.repositories.base import BaseDocumentStore

PARTICIPANTS_COLLECTION = "participants"


class ParticipantsRepository:
    """Reads `participants` records used to enrich compliance summaries."""

    def __init__(self, store: BaseDocumentStore) -> None:
        self._store = store

    def find_all(self) -> dict[str, ParticipantRecord]:
        """Return every participant keyed by ID.

        Participants carry no tenant code, so the whole collection is loaded and
        joined in memory against the tenant's applications.
        """
        documents = self._store.query_documents(PARTICIPANTS_COLLECTION)
        return {doc.id: self._to_record(doc) for doc in documents}

    @staticmethod
    def _to_record(document: StoredDocument) -> ParticipantRecord:
        data = document.data
        return ParticipantRecord(
            id=document.id,
            beneficiary_name=data.get("beneficiaryName") or None,
            email=data.get("email") or None,
            phone=data.get("phone") or data.get("contactNumber") or None,
        )
