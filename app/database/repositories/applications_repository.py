from collections.abc import Sequence
from typing import Any

from app.database.models import ApplicationRecord, StoredDocument
from app.database.repositories.base import BaseDocumentStore

APPLICATIONS_COLLECTION = "applications"


class ApplicationsRepository:
    """Reads and writes `applications` records and their embedded compliance documents."""

    def __init__(self, store: BaseDocumentStore) -> None:
        self._store = store

    def list_by_status(self, tenant_code: str, application_status: str) -> list[ApplicationRecord]:
        """Return the tenant's applications in the given status (e.g. "accepted")."""
        documents = self._store.query_documents(
            APPLICATIONS_COLLECTION,
            [("companyCode", tenant_code), ("applicationStatus", application_status)],
        )
        return [self._to_record(doc) for doc in documents]

    def list_for_participant(self, tenant_code: str, participant_id: str) -> list[ApplicationRecord]:
        """Return every application of one participant within a tenant, any status."""
        documents = self._store.query_documents(
            APPLICATIONS_COLLECTION,
            [("companyCode", tenant_code), ("participantId", participant_id)],
        )
        return [self._to_record(doc) for doc in documents]

    def replace_compliance_documents(
        self,
        application_id: str,
        compliance_documents: Sequence[Any],
    ) -> None:
        """Overwrite the embedded compliance document array of one application.

        Raises:
            StoredDocumentNotFoundError: if the application does not exist.
        """
        self._store.update_document(
            APPLICATIONS_COLLECTION,
            application_id,
            {"complianceDocuments": list(compliance_documents)},
        )

    @staticmethod
    def _to_record(document: StoredDocument) -> ApplicationRecord:
        data = document.data
        raw_documents = data.get("complianceDocuments")
        return ApplicationRecord(
            id=document.id,
            participant_id=str(data.get("participantId") or ""),
            tenant_code=str(data.get("companyCode") or ""),
            application_status=str(data.get("applicationStatus") or ""),
            beneficiary_name=data.get("beneficiaryName") or None,
            compliance_documents=list(raw_documents) if isinstance(raw_documents, list) else [],
        )
